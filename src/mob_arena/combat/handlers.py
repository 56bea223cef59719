"""Reactive rules evaluated after every resolved attack, hit or miss."""

from __future__ import annotations

import logging

from ..registry.traits import Trait
from .combatant import Combatant
from .context import DuelContext
from .damage import apply_damage, reduce_damage
from .events import EventKind

logger = logging.getLogger(__name__)


def steal_weapon(ctx: DuelContext, victim: Combatant, source: Combatant) -> bool:
    """An empty-handed victim snatches whatever the source is holding."""
    if victim.equipped_weapon is not None or source.equipped_weapon is None:
        return False
    weapon = source.release()
    victim.equipped_weapon = weapon
    ctx.emit(EventKind.WEAPON_STEAL, victim, source, weapon=weapon)
    return True


def stack_rage(ctx: DuelContext, victim: Combatant, source: Combatant) -> bool:
    """Count consecutive attacks taken; returns True when rage mode just activated."""
    source.hits_taken = 0
    if not victim.has(Trait.BERSERK):
        return False
    victim.hits_taken += 1
    if victim.raging or victim.hits_taken < ctx.config.rage_hits:
        return False
    victim.raging = True
    logger.debug("%s enters rage after %d consecutive hits", victim.id, victim.hits_taken)
    ctx.emit(EventKind.RAGE, victim)
    return True


def counter_attack(ctx: DuelContext, attacker: Combatant, target: Combatant) -> int:
    """Raw-power riposte: reduction applies, but no dodge, crit, rage penalty or handlers."""
    damage, blocked = reduce_damage(ctx, target, attacker.stats.power)
    dealt = apply_damage(ctx, attacker, target, damage)
    ctx.emit(
        EventKind.COUNTER_ATTACK,
        attacker,
        target,
        value=dealt,
        tags=("blocked",) if blocked else (),
    )
    return dealt


def on_attack_resolved(ctx: DuelContext, victim: Combatant, source: Combatant) -> None:
    if ctx.fight_over():
        return
    steal_weapon(ctx, victim, source)
    stack_rage(ctx, victim, source)
    if victim.has(Trait.COUNTER_ATTACK) and ctx.rng.chance(ctx.config.reactive_counter_chance):
        counter_attack(ctx, victim, source)
