import logging

import pytest

from mob_arena.config import DEFAULT_CONFIG, CombatConfig, load_combat_config
from mob_arena.errors import ConfigError
from mob_arena.logging_config import configure_logging


def test_defaults_match_balance_sheet():
    cfg = CombatConfig.default()
    assert cfg.energy_threshold == 100.0
    assert cfg.tick_scaling == 10.0
    assert cfg.minor_ally_rate == pytest.approx(0.4)
    assert cfg.swarm_rate == pytest.approx(1.5)
    assert cfg.sabotage_rate == pytest.approx(2.0)
    assert cfg.max_cycles == 100_000
    assert cfg.predictor_max_cycles == 1000
    assert cfg == DEFAULT_CONFIG


def test_no_path_returns_defaults():
    assert load_combat_config(None) == DEFAULT_CONFIG


def test_overrides_from_yaml(tmp_path):
    path = tmp_path / "combat.yaml"
    path.write_text("tick_scaling: 1\nmax_cycles: 5000\nthrow_chance: 0\n", encoding="utf-8")

    cfg = load_combat_config(path)

    assert cfg.tick_scaling == 1.0
    assert isinstance(cfg.tick_scaling, float)
    assert cfg.max_cycles == 5000
    assert cfg.throw_chance == 0.0
    # untouched values keep their defaults
    assert cfg.draw_chance == DEFAULT_CONFIG.draw_chance


def test_empty_file_means_defaults(tmp_path):
    path = tmp_path / "combat.yaml"
    path.write_text("", encoding="utf-8")
    assert load_combat_config(path) == DEFAULT_CONFIG


def test_unknown_key_rejected(tmp_path):
    path = tmp_path / "combat.yaml"
    path.write_text("mana_regen: 3\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mana_regen"):
        load_combat_config(path)


def test_bad_value_rejected(tmp_path):
    path = tmp_path / "combat.yaml"
    path.write_text("max_cycles: lots\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_combat_config(path)


def test_non_mapping_rejected(tmp_path):
    path = tmp_path / "combat.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_combat_config(path)


def test_missing_file_rejected(tmp_path):
    with pytest.raises(ConfigError):
        load_combat_config(tmp_path / "nope.yaml")


def test_invalid_values_rejected_on_construction():
    with pytest.raises(ConfigError):
        CombatConfig(tick_scaling=0)
    with pytest.raises(ConfigError):
        CombatConfig(max_cycles=0)
    with pytest.raises(ConfigError):
        DEFAULT_CONFIG.with_overrides({"damage_spread": 0})


def test_configure_logging_honours_env(monkeypatch):
    calls = {}

    def fake_basic_config(**kwargs):
        calls.update(kwargs)

    monkeypatch.setenv("MOB_ARENA_LOG_LEVEL", "debug")
    monkeypatch.setattr(logging, "basicConfig", fake_basic_config)

    logger = configure_logging(logging.WARNING)

    assert logger.name == "mob_arena"
    assert logger.level == logging.DEBUG
    # third-party loggers stay at WARNING
    assert calls["level"] == logging.WARNING
    assert "%(name)s" in calls["format"]


def test_configure_logging_default_level(monkeypatch):
    monkeypatch.delenv("MOB_ARENA_LOG_LEVEL", raising=False)
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: None)
    assert configure_logging(logging.INFO).level == logging.INFO


def test_configure_logging_ignores_unknown_level_name(monkeypatch):
    monkeypatch.setenv("MOB_ARENA_LOG_LEVEL", "chatty")
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: None)
    assert configure_logging(logging.ERROR).level == logging.ERROR
