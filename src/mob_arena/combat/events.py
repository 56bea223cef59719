from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    DUEL_START = "duel_start"
    WEAPON_DRAW = "weapon_draw"
    WEAPON_THROW = "weapon_throw"
    WEAPON_DROP = "weapon_drop"
    WEAPON_STEAL = "weapon_steal"
    ATTACK = "attack"
    DODGE = "dodge"
    COUNTER_ATTACK = "counter_attack"
    STUN = "stun"
    STUN_SKIP = "stun_skip"
    RAGE = "rage"
    BLIND = "blind"
    GUARDIAN_ABSORB = "guardian_absorb"
    COMPANION_ATTACK = "companion_attack"
    SABOTAGE = "sabotage"
    DEATH = "death"
    CAP_REACHED = "cap_reached"


@dataclass(frozen=True)
class DuelEvent:
    """A single outcome of a duel, in resolution order.

    Attributes:
        seq: Position of the event in the duel, starting at 0.
        cycle: Loop iteration (one drained meter) that produced the event.
        kind: What happened.
        actor: Id of the acting combatant.
        target: Id of the affected combatant, if any.
        value: Numeric outcome (damage, absorbed points, stacks...).
        weapon: Weapon involved, if any.
        tags: Extra semantic tags, e.g. ("crit",), ("blocked",), ("maggot",).
        target_hp: Target HP right after the event, for health bars.
        message: Human-readable line; synthesized by the log when empty.
    """

    seq: int
    cycle: int
    kind: EventKind
    actor: str
    target: Optional[str] = None
    value: Optional[int] = None
    weapon: Optional[str] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)
    target_hp: Optional[int] = None
    message: str = ""


class EventSink(Protocol):
    """Anything that consumes duel events (animated UI, logs, analytics)."""

    enabled: bool

    def emit(self, event: DuelEvent) -> None:  # pragma: no cover - protocol
        ...


class NullSink:
    """Discards every event. Used by batch simulation."""

    enabled = False

    def emit(self, event: DuelEvent) -> None:
        return None


def synthesize_message(ev: DuelEvent) -> str:
    target = ev.target or "-"
    kind = ev.kind
    if kind is EventKind.DUEL_START:
        return f"The duel begins: {ev.actor} vs {target}!"
    if kind is EventKind.ATTACK:
        base = f"{ev.actor} hits {target} for {ev.value}"
        if ev.weapon:
            base += f" with {ev.weapon}"
        if "crit" in ev.tags:
            base += " (CRIT)"
        if "blocked" in ev.tags:
            base += " (blocked)"
        return base
    if kind is EventKind.DODGE:
        return f"{target} dodges {ev.actor}'s attack!"
    if kind is EventKind.WEAPON_DRAW:
        return f"{ev.actor} draws {ev.weapon}."
    if kind is EventKind.WEAPON_THROW:
        outcome = f"for {ev.value}" if "hit" in ev.tags else "and misses"
        return f"{ev.actor} throws {ev.weapon} at {target} {outcome}."
    if kind is EventKind.WEAPON_DROP:
        return f"{ev.actor} loses grip on {ev.weapon}."
    if kind is EventKind.WEAPON_STEAL:
        return f"{ev.actor} snatches {ev.weapon} from {target}!"
    if kind is EventKind.COUNTER_ATTACK:
        return f"{ev.actor} counter-attacks {target} for {ev.value}!"
    if kind is EventKind.STUN:
        return f"{target} is stunned by {ev.actor}."
    if kind is EventKind.STUN_SKIP:
        return f"{ev.actor} is stunned and loses the turn."
    if kind is EventKind.RAGE:
        return f"{ev.actor} flies into a rage!"
    if kind is EventKind.BLIND:
        return f"{target} is blinded ({ev.value} stacks)."
    if kind is EventKind.GUARDIAN_ABSORB:
        return f"{target}'s guardian roots absorb {ev.value} damage."
    if kind is EventKind.COMPANION_ATTACK:
        companion = ev.tags[0] if ev.tags else "companion"
        return f"{ev.actor}'s {companion} strikes {target} for {ev.value}."
    if kind is EventKind.SABOTAGE:
        return f"{ev.actor}'s saboteur spirit meddles with {target}'s weapons."
    if kind is EventKind.DEATH:
        return f"{target} is K.O.! {ev.actor} wins."
    if kind is EventKind.CAP_REACHED:
        return f"The duel is called after {ev.value} cycles."
    return f"{ev.actor}: {kind.value}"


class DuelLog:
    """In-memory event log for one duel; also the default event sink.

    - Keeps events in resolution order for replay at any pacing.
    - An optional capacity drops the oldest events (UI tickers only).
    """

    enabled = True

    def __init__(self, capacity: Optional[int] = None) -> None:
        if capacity is not None and capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._events: List[DuelEvent] = []

    @property
    def capacity(self) -> Optional[int]:
        return self._capacity

    def emit(self, event: DuelEvent) -> None:
        if not event.message:
            event = _with_message(event, synthesize_message(event))
        self._events.append(event)
        if self._capacity is not None and len(self._events) > self._capacity:
            dropped = len(self._events) - self._capacity
            del self._events[0:dropped]
        logger.debug("Duel event: %s", event.message)

    def __len__(self) -> int:
        return len(self._events)

    def events(self) -> List[DuelEvent]:
        return list(self._events)

    def of_kind(self, *kinds: EventKind) -> List[DuelEvent]:
        return [e for e in self._events if e.kind in kinds]

    def lines(self) -> List[str]:
        return [e.message for e in self._events]

    def get_recent(self, n: int) -> List[DuelEvent]:
        if n <= 0:
            return []
        return self._events[-n:]

    def to_dicts(self) -> List[dict]:
        out = []
        for e in self._events:
            d = asdict(e)
            d["kind"] = e.kind.value
            d["tags"] = list(e.tags)
            out.append(d)
        return out

    @classmethod
    def from_dicts(cls, items: Iterable[dict]) -> "DuelLog":
        log = cls()
        for item in items:
            log._events.append(
                DuelEvent(
                    seq=int(item["seq"]),
                    cycle=int(item["cycle"]),
                    kind=EventKind(item["kind"]),
                    actor=item["actor"],
                    target=item.get("target"),
                    value=item.get("value"),
                    weapon=item.get("weapon"),
                    tags=tuple(item.get("tags", ()) or ()),
                    target_hp=item.get("target_hp"),
                    message=item.get("message", ""),
                )
            )
        return log


def _with_message(ev: DuelEvent, msg: str) -> DuelEvent:
    return DuelEvent(
        seq=ev.seq,
        cycle=ev.cycle,
        kind=ev.kind,
        actor=ev.actor,
        target=ev.target,
        value=ev.value,
        weapon=ev.weapon,
        tags=ev.tags,
        target_hp=ev.target_hp,
        message=msg,
    )


def count_kinds(events: Sequence[DuelEvent], kind: EventKind) -> int:
    return sum(1 for e in events if e.kind is kind)
