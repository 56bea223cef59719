from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..config import CombatConfig
from ..registry.weapons import WeaponDef, WeaponRegistry
from .combatant import Combatant
from .events import DuelEvent, EventKind, EventSink, NullSink
from .rng import DuelRandom


@dataclass
class DuelContext:
    """
    Everything one duel's rules need: both fighters, the read-only weapon
    registry and balance config, the random source and the event sink.
    """

    a: Combatant
    b: Combatant
    weapons: WeaponRegistry
    config: CombatConfig
    rng: DuelRandom
    sink: EventSink = field(default_factory=NullSink)
    cycle: int = 0
    _seq: int = 0

    def opponent(self, fighter: Combatant) -> Combatant:
        if fighter is self.a:
            return self.b
        if fighter is self.b:
            return self.a
        raise ValueError("Combatant is not part of this duel.")

    def fight_over(self) -> bool:
        return not (self.a.alive and self.b.alive)

    def weapon_of(self, fighter: Combatant) -> Optional[WeaponDef]:
        return self.weapons.get(fighter.equipped_weapon)

    def emit(
        self,
        kind: EventKind,
        actor: Combatant,
        target: Optional[Combatant] = None,
        **fields: Any,
    ) -> None:
        if not self.sink.enabled:
            return
        event = DuelEvent(
            seq=self._seq,
            cycle=self.cycle,
            kind=kind,
            actor=actor.id,
            target=target.id if target is not None else None,
            target_hp=target.reported_hp if target is not None else None,
            **fields,
        )
        self._seq += 1
        self.sink.emit(event)
