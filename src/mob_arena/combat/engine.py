from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..config import DEFAULT_CONFIG, CombatConfig
from ..errors import CombatantValidationError, StalledDuelError
from ..registry.traits import DEFAULT_TRAIT_REGISTRY, TraitRegistry
from ..registry.weapons import DEFAULT_WEAPON_REGISTRY, WeaponRegistry
from .combatant import Combatant, MobProfile
from .context import DuelContext
from .events import DuelEvent, DuelLog, EventKind, EventSink
from .resolver import ActionResolver
from .rng import DuelRandom, RandomSource
from .scheduler import EnergyScheduler

logger = logging.getLogger(__name__)

FighterInput = Union[Combatant, MobProfile, Dict[str, Any]]


@dataclass(frozen=True)
class DuelResult:
    """Final outcome of a duel.

    Attributes:
        winner: The surviving combatant (final state snapshot).
        loser: The defeated combatant.
        cycles: Number of drained meters (loop iterations).
        capped: True when the iteration cap decided the result on HP.
        events: Ordered outcome events; empty when events were not collected.
    """

    winner: Combatant
    loser: Combatant
    cycles: int
    capped: bool = False
    events: List[DuelEvent] = field(default_factory=list)

    @property
    def winner_hp(self) -> int:
        return self.winner.reported_hp

    @property
    def loser_hp(self) -> int:
        return self.loser.reported_hp


class Duel:
    """Combat loop for one duel: scheduler -> resolver -> handlers until a death.

    Exact mode (the default) carries a generous cycle cap that should never be
    reached; reaching it is logged as an error. Batch mode uses the short
    predictor cap and treats reaching it as a normal outcome. A duel where no
    meter can ever fill (both sides at zero speed) is capped on the spot.
    Either way a capped duel goes to the side with strictly more HP, and an
    exact tie goes to side B.
    """

    def __init__(
        self,
        a: FighterInput,
        b: FighterInput,
        *,
        weapons: WeaponRegistry = DEFAULT_WEAPON_REGISTRY,
        traits: TraitRegistry = DEFAULT_TRAIT_REGISTRY,
        config: CombatConfig = DEFAULT_CONFIG,
        rng: Union[DuelRandom, RandomSource, None] = None,
        sink: Optional[EventSink] = None,
        max_cycles: Optional[int] = None,
        batch: bool = False,
        strict: bool = False,
    ) -> None:
        self.config = config
        self.a = self._build(a, weapons, traits, config, strict)
        self.b = self._build(b, weapons, traits, config, strict)
        if self.a.id == self.b.id:
            raise CombatantValidationError(f"Both combatants share the id {self.a.id!r}")

        if not isinstance(rng, DuelRandom):
            rng = DuelRandom(rng)
        self.sink: EventSink = sink if sink is not None else DuelLog()
        self.batch = batch
        if max_cycles is None:
            max_cycles = config.predictor_max_cycles if batch else config.max_cycles
        self.max_cycles = max_cycles

        self.ctx = DuelContext(a=self.a, b=self.b, weapons=weapons, config=config, rng=rng, sink=self.sink)
        self.scheduler = EnergyScheduler(config)
        self.resolver = ActionResolver(self.ctx)
        self.cycles = 0
        self._started = False
        self._result: Optional[DuelResult] = None

    @staticmethod
    def _build(
        fighter: FighterInput,
        weapons: WeaponRegistry,
        traits: TraitRegistry,
        config: CombatConfig,
        strict: bool,
    ) -> Combatant:
        if isinstance(fighter, Combatant):
            return fighter
        return Combatant.from_profile(fighter, weapons=weapons, traits=traits, config=config, strict=strict)

    @property
    def finished(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> Optional[DuelResult]:
        return self._result

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        logger.debug("Duel start: %r vs %r", self.a, self.b)
        self.ctx.emit(EventKind.DUEL_START, self.a, self.b)

    def step(self) -> bool:
        """Resolve the next full meter. Returns True once the duel is over."""
        if self._result is not None:
            return True
        self.start()
        if self.ctx.fight_over():
            self._finish()
            return True
        if self.cycles >= self.max_cycles:
            self._finish(capped=True)
            return True

        try:
            actor, meter = self.scheduler.advance(self.a, self.b)
        except StalledDuelError as exc:
            # No meter can ever fill again; decide on HP like a reached cap
            self._finish(capped=True, reason=f"stalled: {exc}")
            return True
        self.cycles += 1
        self.ctx.cycle = self.cycles
        self.scheduler.drain(actor, meter)
        self.resolver.dispatch(meter, actor)

        if self.ctx.fight_over():
            self._finish()
            return True
        return False

    def run(self) -> DuelResult:
        while not self.step():
            pass
        assert self._result is not None
        return self._result

    def _finish(self, capped: bool = False, reason: Optional[str] = None) -> None:
        a, b = self.a, self.b
        if capped:
            if reason is None:
                reason = f"exceeded {self.max_cycles} cycles"
            if self.batch:
                logger.debug("Duel %s vs %s capped after %d cycles: %s", a.id, b.id, self.cycles, reason)
            else:
                logger.error("Invariant violation: duel %s vs %s %s; deciding on HP", a.id, b.id, reason)
            winner, loser = (a, b) if a.hp > b.hp else (b, a)
            self.ctx.emit(EventKind.CAP_REACHED, winner, loser, value=self.cycles)
        else:
            if not a.alive and not b.alive:
                # Unreachable with sequential resolution; same tie rule as the cap.
                winner, loser = (a, b) if a.hp > b.hp else (b, a)
            else:
                winner, loser = (b, a) if not a.alive else (a, b)
            self.ctx.emit(EventKind.DEATH, winner, loser)

        events = self.sink.events() if isinstance(self.sink, DuelLog) else []
        self._result = DuelResult(winner=winner, loser=loser, cycles=self.cycles, capped=capped, events=events)
        logger.debug("Duel over after %d cycles: %s beats %s", self.cycles, winner.id, loser.id)


def resolve_duel(a: FighterInput, b: FighterInput, **kwargs: Any) -> DuelResult:
    """Run a whole duel synchronously and return its result (with events)."""
    duel = Duel(a, b, **kwargs)
    result = duel.run()
    logger.info(
        "%s beats %s (%d HP left) in %d cycles%s",
        result.winner.name,
        result.loser.name,
        result.winner_hp,
        result.cycles,
        " [capped]" if result.capped else "",
    )
    return result
