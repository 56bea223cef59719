from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CombatConfig:
    """
    Game-balance constants of the duel engine with sensible defaults.

    You can override any of them by providing a YAML mapping, e.g.:

      tick_scaling: 1
      sabotage_rate: 1.5
      max_cycles: 5000
    """

    # Scheduler
    energy_threshold: float = 100.0
    tick_scaling: float = 10.0
    minor_ally_rate: float = 0.4
    swarm_rate: float = 1.5
    sabotage_rate: float = 2.0
    sprint_hp_fraction: float = 0.2
    sprint_multiplier: float = 2.0

    # Health
    hp_base: int = 100
    hp_per_vitality: int = 10

    # Weapons
    draw_chance: float = 0.3
    throw_chance: float = 0.2
    throw_multiplier: float = 1.05
    default_counter_chance: float = 0.25
    drop_chance_short: float = 0.05
    drop_chance_long: float = 0.15
    drop_chance_shield: float = 0.10

    # Hit and damage
    base_dodge: float = 0.10
    dodge_per_agility: float = 0.02
    min_dodge: float = 0.05
    blind_penalty: int = 5
    damage_spread: int = 5
    crit_chance: float = 0.10
    strong_crit_chance: float = 0.33
    crit_multiplier: int = 2
    armor_reduction: float = 0.10
    block_reduction: float = 0.50

    # Rage
    rage_hits: int = 3
    rage_damage_factor: float = 0.7
    rage_swings: int = 2

    # Guardian shield
    guardian_hp_fraction: float = 0.5
    guardian_absorb_fraction: float = 0.15

    # Reactive counter
    reactive_counter_chance: float = 0.10

    # Companions
    minor_ally_base: int = 5
    minor_ally_spread: int = 5
    swarm_base: int = 2
    swarm_spread: int = 2
    swarm_blind_chance: float = 0.30
    sabotage_unequip_chance: float = 0.5
    sabotage_base: int = 2
    sabotage_spread: int = 2

    # Termination
    max_cycles: int = 100_000
    predictor_max_cycles: int = 1000
    predictor_trials: int = 200

    def __post_init__(self) -> None:
        if self.energy_threshold <= 0:
            raise ConfigError("energy_threshold must be positive")
        if self.tick_scaling <= 0:
            raise ConfigError("tick_scaling must be positive")
        if self.max_cycles <= 0 or self.predictor_max_cycles <= 0:
            raise ConfigError("cycle caps must be positive")
        if self.damage_spread <= 0 or self.minor_ally_spread <= 0 or self.swarm_spread <= 0 or self.sabotage_spread <= 0:
            raise ConfigError("damage spreads must be positive")

    @staticmethod
    def default() -> "CombatConfig":
        return CombatConfig()

    def with_overrides(self, data: Dict[str, Any]) -> "CombatConfig":
        known = {f.name: f for f in dataclasses.fields(self)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigError(f"Unknown combat config keys: {', '.join(unknown)}")
        values: Dict[str, Any] = {}
        for key, raw in data.items():
            caster = type(getattr(self, key))
            try:
                values[key] = caster(raw)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"Invalid value for {key}: {raw!r}") from exc
        return dataclasses.replace(self, **values)


def load_combat_config(path: Optional[Union[str, Path]] = None) -> CombatConfig:
    """Load combat configuration from YAML.

    If path is None, the built-in defaults are returned unchanged.
    """
    if path is None:
        return CombatConfig.default()

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read combat config {path}: {exc}") from exc
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Combat config {path} must be a mapping")

    cfg = CombatConfig.default().with_overrides(raw)
    logger.info("Loaded combat config from %s (%d overrides)", path, len(raw))
    return cfg


DEFAULT_CONFIG = CombatConfig()
