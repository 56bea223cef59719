from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..config import DEFAULT_CONFIG, CombatConfig
from ..registry.traits import DEFAULT_TRAIT_REGISTRY, TraitRegistry
from ..registry.weapons import DEFAULT_WEAPON_REGISTRY, WeaponRegistry
from .combatant import MobProfile
from .engine import Duel
from .events import NullSink
from .rng import RNGManager

logger = logging.getLogger(__name__)

ProfileInput = Union[MobProfile, Dict[str, Any]]


@dataclass(frozen=True)
class MatchupReport:
    """Aggregate of repeated independent duels between the same two profiles."""

    trials: int
    wins: int
    losses: int
    capped: int
    total_cycles: int

    @property
    def win_rate(self) -> float:
        """Side A's win percentage (0-100)."""
        if self.trials == 0:
            return 0.0
        return self.wins / self.trials * 100

    @property
    def mean_cycles(self) -> float:
        if self.trials == 0:
            return 0.0
        return self.total_cycles / self.trials


class CombatPredictor:
    """Monte-Carlo oracle estimating who wins a matchup.

    Runs N headless duels with the exact combat rules, no event collection and
    the short batch cycle cap. Trial ``i`` draws from a random stream derived
    from the master seed and ``i``, so a seeded prediction is reproducible.
    """

    def __init__(
        self,
        *,
        weapons: WeaponRegistry = DEFAULT_WEAPON_REGISTRY,
        traits: TraitRegistry = DEFAULT_TRAIT_REGISTRY,
        config: CombatConfig = DEFAULT_CONFIG,
        seed: Union[int, str, bytes, None] = None,
    ) -> None:
        self.weapons = weapons
        self.traits = traits
        self.config = config
        self.rngm = RNGManager(seed)

    def simulate(self, a: ProfileInput, b: ProfileInput, trials: Optional[int] = None) -> MatchupReport:
        trials = self.config.predictor_trials if trials is None else trials
        if trials <= 0:
            raise ValueError("trials must be positive")
        a = MobProfile.parse(a)
        b = MobProfile.parse(b)

        wins = capped = total_cycles = 0
        for i in range(trials):
            duel = Duel(
                a,
                b,
                weapons=self.weapons,
                traits=self.traits,
                config=self.config,
                rng=self.rngm.duel_random("trial", a.id, b.id, i),
                sink=NullSink(),
                batch=True,
            )
            result = duel.run()
            if result.winner.id == a.id:
                wins += 1
            if result.capped:
                capped += 1
            total_cycles += result.cycles

        report = MatchupReport(
            trials=trials,
            wins=wins,
            losses=trials - wins,
            capped=capped,
            total_cycles=total_cycles,
        )
        logger.info(
            "Prediction %s vs %s: %.1f%% over %d trials (%d capped)",
            a.display_name,
            b.display_name,
            report.win_rate,
            trials,
            capped,
        )
        return report

    def predict(self, a: ProfileInput, b: ProfileInput, trials: Optional[int] = None) -> float:
        """Side A's estimated win percentage (0-100)."""
        return self.simulate(a, b, trials).win_rate
