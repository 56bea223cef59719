import pytest

from mob_arena.combat.predictor import CombatPredictor, MatchupReport
from mob_arena.combat.rng import RNGManager
from mob_arena.config import CombatConfig

GIANT = {"id": "giant", "stats": {"power": 500, "vitality": 20, "agility": 0, "speed": 30}}
GRUB = {"id": "grub", "stats": {"power": 1, "vitality": 0, "agility": 0, "speed": 5}}
RAT = {
    "id": "rat",
    "stats": {"power": 8, "vitality": 3, "agility": 3, "speed": 11},
    "traits": ["critical_strike", "maggot_king"],
    "weapons": ["Cure-dent", "Capsule"],
}
TOAD = {
    "id": "toad",
    "stats": {"power": 9, "vitality": 4, "agility": 1, "speed": 9},
    "traits": ["leather_skin", "root_guardian"],
    "weapons": ["Fourchette"],
}


def test_dominant_mob_always_wins():
    predictor = CombatPredictor(seed=42)
    assert predictor.predict(GIANT, GRUB, trials=50) == pytest.approx(100.0)
    assert predictor.predict(GRUB, GIANT, trials=50) == pytest.approx(0.0)


def test_seeded_prediction_is_reproducible():
    first = CombatPredictor(seed="arena").simulate(RAT, TOAD, trials=40)
    second = CombatPredictor(seed="arena").simulate(RAT, TOAD, trials=40)
    assert first == second
    assert 0.0 <= first.win_rate <= 100.0
    assert first.wins + first.losses == 40


def test_batch_cap_counts_capped_trials():
    config = CombatConfig(predictor_max_cycles=2)
    report = CombatPredictor(config=config, seed=1).simulate(RAT, TOAD, trials=10)
    assert report.capped == 10
    assert report.mean_cycles == pytest.approx(2.0)


def test_default_trial_count_comes_from_config():
    config = CombatConfig(predictor_trials=7)
    report = CombatPredictor(config=config, seed=3).simulate(GIANT, GRUB)
    assert report.trials == 7


def test_non_positive_trials_rejected():
    with pytest.raises(ValueError):
        CombatPredictor(seed=0).simulate(RAT, TOAD, trials=0)


def test_empty_report_rates():
    report = MatchupReport(trials=0, wins=0, losses=0, capped=0, total_cycles=0)
    assert report.win_rate == 0.0
    assert report.mean_cycles == 0.0


def test_derived_streams_are_independent_of_order():
    rngm = RNGManager(2024)
    assert rngm.derive_seed("trial", "rat", "toad", 3) == RNGManager(2024).derive_seed("trial", "rat", "toad", 3)
    assert rngm.derive_seed("trial", "rat", "toad", 3) != rngm.derive_seed("trial", "rat", "toad", 4)


def test_frozen_matchup_still_yields_a_rate():
    statue = {"id": "statue", "stats": {"power": 5, "vitality": 1, "speed": 0}}
    gargoyle = {"id": "gargoyle", "stats": {"power": 5, "vitality": 1, "speed": 0}}

    report = CombatPredictor(seed=1).simulate(statue, gargoyle, trials=5)

    # equal HP on the fallback: side B takes every trial
    assert report.win_rate == pytest.approx(0.0)
    assert report.capped == 5
    assert report.mean_cycles == 0.0
