from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Tuple

from ..config import CombatConfig
from ..errors import StalledDuelError
from ..registry.traits import Trait
from .combatant import COMPANION_METERS, Combatant, Meter

logger = logging.getLogger(__name__)

Slot = Tuple[Combatant, Meter]


class EnergyScheduler:
    """Speed-driven action gauges for a duel.

    Features:
    - Every tick, each active meter gains ``effective_speed * multiplier / tick_scaling``.
    - Ticking stops as soon as one meter reaches the threshold; none happen if
      a meter is already full.
    - Fixed resolution priority: A primary, B primary, A companions, B companions.
      Only the first full meter is returned; others wait for later iterations.
    - Draining subtracts exactly the threshold, so overflow carries over.

    Usage:
        sched = EnergyScheduler(config)
        actor, meter = sched.advance(a, b)
        sched.drain(actor, meter)
    """

    def __init__(self, config: CombatConfig) -> None:
        self.config = config
        self.total_ticks: int = 0
        self._multipliers: Dict[Meter, float] = {
            Meter.PRIMARY: 1.0,
            Meter.MINOR_ALLY: config.minor_ally_rate,
            Meter.SWARM: config.swarm_rate,
            Meter.SABOTAGE: config.sabotage_rate,
        }

    # --------------- Public API ---------------

    def effective_speed(self, fighter: Combatant) -> float:
        speed = float(fighter.stats.speed)
        if fighter.has(Trait.FINAL_SPRINT) and fighter.hp < fighter.max_hp * self.config.sprint_hp_fraction:
            speed *= self.config.sprint_multiplier
        return speed

    def rate(self, fighter: Combatant, meter: Meter) -> float:
        """Energy gained by ``fighter``'s ``meter`` per tick."""
        return self.effective_speed(fighter) * self._multipliers[meter] / self.config.tick_scaling

    def priority(self, a: Combatant, b: Combatant) -> List[Slot]:
        order: List[Slot] = [(a, Meter.PRIMARY), (b, Meter.PRIMARY)]
        for side in (a, b):
            for _trait, meter in COMPANION_METERS:
                if meter in side.meters:
                    order.append((side, meter))
        return order

    def ready(self, a: Combatant, b: Combatant) -> Optional[Slot]:
        threshold = self.config.energy_threshold
        for fighter, meter in self.priority(a, b):
            if fighter.meters[meter] >= threshold:
                return fighter, meter
        return None

    def advance(self, a: Combatant, b: Combatant) -> Slot:
        """Tick until a meter is full and return the one to resolve next.

        Raises:
            StalledDuelError: if no meter on either side gains energy.
        """
        slot = self.ready(a, b)
        while slot is None:
            self._tick(a, b)
            slot = self.ready(a, b)
        return slot

    def drain(self, fighter: Combatant, meter: Meter) -> None:
        fighter.meters[meter] -= self.config.energy_threshold

    # --------------- Internal helpers ---------------

    def _tick(self, a: Combatant, b: Combatant) -> None:
        # HP cannot change while ticking, so every rate is constant here and
        # the ticks up to the first full meter can be applied in one batch.
        threshold = self.config.energy_threshold
        slots = self.priority(a, b)
        rates = [self.rate(fighter, meter) for fighter, meter in slots]
        needed = [
            math.ceil((threshold - fighter.meters[meter]) / r)
            for (fighter, meter), r in zip(slots, rates)
            if r > 0
        ]
        if not needed:
            raise StalledDuelError(f"No action meter can fill: {a.id} and {b.id} both have zero speed")
        ticks = max(1, min(needed))
        for (fighter, meter), r in zip(slots, rates):
            fighter.meters[meter] += r * ticks
        self.total_ticks += ticks
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Advanced %d ticks: %s", ticks, [(f.id, m.value, round(f.meters[m], 2)) for f, m in slots])
