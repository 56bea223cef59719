from __future__ import annotations

import logging
from typing import Optional

from ..registry.weapons import RangeClass, WeaponDef
from .combatant import Combatant, Meter
from .context import DuelContext
from .damage import apply_damage, reduce_damage, roll_dodge, roll_hit
from .events import EventKind
from .handlers import counter_attack, on_attack_resolved

logger = logging.getLogger(__name__)


class ActionResolver:
    """Decides and executes the action behind a full meter.

    The primary meter drives :meth:`perform_action` (draw, throw, range
    counter-check, melee). Companion meters drive the companion actions.
    """

    def __init__(self, ctx: DuelContext) -> None:
        self.ctx = ctx

    def dispatch(self, meter: Meter, actor: Combatant) -> None:
        target = self.ctx.opponent(actor)
        if meter is Meter.PRIMARY:
            if actor.stunned:
                actor.stunned = False
                self.ctx.emit(EventKind.STUN_SKIP, actor)
                return
            self.perform_action(actor, target)
        elif meter is Meter.MINOR_ALLY:
            self.minor_ally_action(actor, target)
        elif meter is Meter.SWARM:
            self.swarm_action(actor, target)
        elif meter is Meter.SABOTAGE:
            self.sabotage_action(actor, target)
        else:  # pragma: no cover - exhaustive over Meter
            raise ValueError(f"Unhandled meter {meter!r}")

    # --------------- Primary action ---------------

    def perform_action(self, attacker: Combatant, defender: Combatant) -> None:
        ctx = self.ctx
        cfg = ctx.config

        if attacker.equipped_weapon is None and attacker.inventory and ctx.rng.chance(cfg.draw_chance):
            weapon = attacker.draw(ctx.rng.pick_index(attacker.inventory))
            ctx.emit(EventKind.WEAPON_DRAW, attacker, weapon=weapon)

        if attacker.equipped_weapon is not None and ctx.rng.chance(cfg.throw_chance):
            self.throw_weapon(attacker, defender)
            return

        att_weapon = ctx.weapon_of(attacker)
        def_weapon = ctx.weapon_of(defender)
        if self._range_disadvantage(att_weapon, def_weapon):
            counter = def_weapon.effects.counter_chance
            if counter is None:
                counter = cfg.default_counter_chance
            if ctx.rng.chance(counter):
                logger.debug("%s keeps %s at bay with %s", defender.id, attacker.id, def_weapon.name)
                counter_attack(ctx, defender, attacker)
                return

        swings = cfg.rage_swings if attacker.raging else 1
        for _ in range(swings):
            if ctx.fight_over():
                break
            self.swing(attacker, defender)

    @staticmethod
    def _range_disadvantage(att_weapon: Optional[WeaponDef], def_weapon: Optional[WeaponDef]) -> bool:
        return (
            att_weapon is not None
            and def_weapon is not None
            and att_weapon.range_class is RangeClass.SHORT
            and def_weapon.range_class is RangeClass.LONG
        )

    def swing(self, attacker: Combatant, defender: Combatant) -> None:
        ctx = self.ctx
        striking = ctx.weapon_of(attacker)
        roll = roll_hit(ctx, attacker, defender)
        if not roll.hit:
            ctx.emit(EventKind.DODGE, attacker, defender)
            on_attack_resolved(ctx, defender, attacker)
            return

        dealt = apply_damage(ctx, attacker, defender, roll.damage)
        ctx.emit(
            EventKind.ATTACK,
            attacker,
            defender,
            value=dealt,
            weapon=striking.name if striking else None,
            tags=roll.tags,
        )
        on_attack_resolved(ctx, defender, attacker)
        if ctx.fight_over():
            return

        held = ctx.weapon_of(attacker)
        if held is not None and ctx.rng.chance(self._drop_chance(held)):
            attacker.sheathe()
            ctx.emit(EventKind.WEAPON_DROP, attacker, weapon=held.name)

        if (
            not attacker.raging
            and striking is not None
            and striking.effects.stun_chance > 0
            and ctx.rng.chance(striking.effects.stun_chance)
        ):
            defender.stunned = True
            ctx.emit(EventKind.STUN, attacker, defender, weapon=striking.name)

    def _drop_chance(self, weapon: WeaponDef) -> float:
        cfg = self.ctx.config
        if weapon.range_class is RangeClass.SHORT:
            return cfg.drop_chance_short
        if weapon.range_class is RangeClass.LONG:
            return cfg.drop_chance_long
        return cfg.drop_chance_shield

    def throw_weapon(self, attacker: Combatant, defender: Combatant) -> None:
        """Hurl the held weapon. It leaves play whether it lands or not."""
        ctx = self.ctx
        weapon_def = ctx.weapon_of(attacker)
        weapon = attacker.release()
        damage = attacker.stats.power + (weapon_def.damage_bonus if weapon_def else 0)
        damage = int(damage * ctx.config.throw_multiplier)

        dodged, _ = roll_dodge(ctx, attacker, defender)
        if dodged:
            ctx.emit(EventKind.WEAPON_THROW, attacker, defender, weapon=weapon, value=0, tags=("miss",))
            return
        dealt = apply_damage(ctx, attacker, defender, damage)
        ctx.emit(EventKind.WEAPON_THROW, attacker, defender, weapon=weapon, value=dealt, tags=("hit",))
        on_attack_resolved(ctx, defender, attacker)

    # --------------- Companion actions ---------------

    def minor_ally_action(self, owner: Combatant, target: Combatant) -> None:
        ctx = self.ctx
        cfg = ctx.config
        damage, _ = reduce_damage(ctx, target, cfg.minor_ally_base + ctx.rng.below(cfg.minor_ally_spread))
        dealt = apply_damage(ctx, owner, target, damage)
        ctx.emit(EventKind.COMPANION_ATTACK, owner, target, value=dealt, tags=("maggot",))
        on_attack_resolved(ctx, target, owner)

    def swarm_action(self, owner: Combatant, target: Combatant) -> None:
        ctx = self.ctx
        cfg = ctx.config
        damage, _ = reduce_damage(ctx, target, cfg.swarm_base + ctx.rng.below(cfg.swarm_spread))
        dealt = apply_damage(ctx, owner, target, damage)
        ctx.emit(EventKind.COMPANION_ATTACK, owner, target, value=dealt, tags=("gnats",))
        if ctx.rng.chance(cfg.swarm_blind_chance):
            target.blind_stacks += 1
            ctx.emit(EventKind.BLIND, owner, target, value=target.blind_stacks)
        on_attack_resolved(ctx, target, owner)

    def sabotage_action(self, owner: Combatant, target: Combatant) -> None:
        ctx = self.ctx
        cfg = ctx.config
        if ctx.rng.chance(cfg.sabotage_unequip_chance) and target.equipped_weapon is not None:
            weapon = target.sheathe()
            ctx.emit(EventKind.SABOTAGE, owner, target, weapon=weapon, tags=("unequip",))
        elif target.inventory:
            index = ctx.rng.pick_index(target.inventory)
            old = target.release()
            target.equipped_weapon = target.inventory.pop(index)
            if old is not None:
                target.inventory.append(old)
            ctx.emit(EventKind.SABOTAGE, owner, target, weapon=target.equipped_weapon, tags=("swap",))
        else:
            dealt = apply_damage(ctx, owner, target, cfg.sabotage_base + ctx.rng.below(cfg.sabotage_spread))
            ctx.emit(EventKind.SABOTAGE, owner, target, value=dealt, tags=("strike",))
        on_attack_resolved(ctx, target, owner)
