from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from ..config import CombatConfig
from ..registry.traits import Trait
from .combatant import Combatant
from .context import DuelContext
from .events import EventKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HitRoll:
    """Outcome of one attack roll.

    Attributes:
        hit: False when the defender dodged.
        damage: Damage after crit, reduction and rage penalty (0 on a dodge).
        critical: Whether the critical check succeeded.
        blocked: Whether the defender's shield block succeeded.
        dodge_chance: The dodge probability the roll was checked against.
    """

    hit: bool
    damage: int = 0
    critical: bool = False
    blocked: bool = False
    dodge_chance: float = 0.0

    @property
    def tags(self) -> Tuple[str, ...]:
        out = []
        if self.critical:
            out.append("crit")
        if self.blocked:
            out.append("blocked")
        return tuple(out)


def dodge_chance(attacker: Combatant, defender: Combatant, config: CombatConfig, blinded: bool = False) -> float:
    """Probability that ``defender`` dodges ``attacker``; never below ``config.min_dodge``."""
    penalty = config.blind_penalty if blinded else 0
    chance = config.base_dodge + (defender.stats.agility - (attacker.stats.agility - penalty)) * config.dodge_per_agility
    return max(config.min_dodge, chance)


def roll_dodge(ctx: DuelContext, attacker: Combatant, defender: Combatant) -> Tuple[bool, float]:
    """Roll the dodge check, consuming one of the attacker's blind stacks."""
    blinded = attacker.blind_stacks > 0
    chance = dodge_chance(attacker, defender, ctx.config, blinded)
    if blinded:
        attacker.blind_stacks -= 1
    return ctx.rng.chance(chance), chance


def reduce_damage(ctx: DuelContext, defender: Combatant, damage: int) -> Tuple[int, bool]:
    """Apply armor and shield block to incoming damage.

    Returns the reduced damage and whether the shield blocked.
    """
    reduction = ctx.config.armor_reduction if defender.has(Trait.LEATHER_SKIN) else 0.0
    blocked = False
    weapon = ctx.weapon_of(defender)
    if weapon is not None and weapon.is_shield:
        blocked = ctx.rng.chance(weapon.effects.block_chance)
        if blocked:
            reduction += ctx.config.block_reduction
    return int(max(0, damage) * (1 - reduction)), blocked


def roll_hit(ctx: DuelContext, attacker: Combatant, defender: Combatant) -> HitRoll:
    cfg = ctx.config
    dodged, chance = roll_dodge(ctx, attacker, defender)
    if dodged:
        return HitRoll(hit=False, dodge_chance=chance)

    damage = attacker.stats.power + ctx.rng.below(cfg.damage_spread)
    weapon = ctx.weapon_of(attacker)
    if weapon is not None:
        damage += weapon.damage_bonus

    crit_chance = cfg.strong_crit_chance if attacker.has(Trait.CRITICAL_STRIKE) else cfg.crit_chance
    critical = ctx.rng.chance(crit_chance)
    if critical:
        damage *= cfg.crit_multiplier

    damage, blocked = reduce_damage(ctx, defender, damage)
    if attacker.raging:
        damage = int(damage * cfg.rage_damage_factor)

    return HitRoll(hit=True, damage=damage, critical=critical, blocked=blocked, dodge_chance=chance)


def apply_damage(ctx: DuelContext, source: Combatant, target: Combatant, damage: int) -> int:
    """Deal damage to ``target``, letting its guardian shield absorb a share first.

    Returns the damage that reached HP.
    """
    damage = max(0, int(damage))
    if target.guardian_hp > 0 and damage > 0:
        absorbed = min(int(damage * ctx.config.guardian_absorb_fraction), target.guardian_hp)
        if absorbed > 0:
            target.guardian_hp -= absorbed
            damage -= absorbed
            ctx.emit(EventKind.GUARDIAN_ABSORB, source, target, value=absorbed)
    dealt = target.take_damage(damage)
    logger.debug("%s deals %d to %s (hp %d)", source.id, dealt, target.id, target.hp)
    return dealt
