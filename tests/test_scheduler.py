import pytest

from mob_arena.combat.combatant import Meter
from mob_arena.combat.scheduler import EnergyScheduler
from mob_arena.config import DEFAULT_CONFIG, CombatConfig
from mob_arena.errors import StalledDuelError


def test_rate_scales_speed_by_tick_factor(fighter):
    sched = EnergyScheduler(DEFAULT_CONFIG)
    mob = fighter("a", speed=20, traits=["maggot_king"])
    assert sched.rate(mob, Meter.PRIMARY) == pytest.approx(2.0)
    assert sched.rate(mob, Meter.MINOR_ALLY) == pytest.approx(0.8)


def test_companion_meters_follow_traits(fighter):
    mob = fighter("a", traits=["gnat_swarm", "saboteur_spirit"])
    assert set(mob.meters) == {Meter.PRIMARY, Meter.SWARM, Meter.SABOTAGE}


def test_faster_fighter_acts_first(fighter):
    sched = EnergyScheduler(DEFAULT_CONFIG)
    a = fighter("a", speed=10)
    b = fighter("b", speed=20)
    actor, meter = sched.advance(a, b)
    assert actor is b
    assert meter is Meter.PRIMARY
    # 50 ticks at 2.0/tick for b, a got 50 * 1.0
    assert sched.total_ticks == 50
    assert a.meters[Meter.PRIMARY] == pytest.approx(50.0)


def test_simultaneous_full_meters_resolve_a_first(fighter):
    sched = EnergyScheduler(DEFAULT_CONFIG)
    a = fighter("a", speed=10)
    b = fighter("b", speed=10)
    actor, _ = sched.advance(a, b)
    assert actor is a
    sched.drain(a, Meter.PRIMARY)
    # b is already full; no further ticks happen
    ticks = sched.total_ticks
    actor, _ = sched.advance(a, b)
    assert actor is b
    assert sched.total_ticks == ticks


def test_primary_meters_outrank_companions(fighter):
    sched = EnergyScheduler(DEFAULT_CONFIG)
    a = fighter("a", traits=["maggot_king", "gnat_swarm"])
    b = fighter("b")
    for side in (a, b):
        for meter in side.meters:
            side.meters[meter] = 100.0
    order = [(f.id, m) for f, m in sched.priority(a, b)]
    assert order == [
        ("a", Meter.PRIMARY),
        ("b", Meter.PRIMARY),
        ("a", Meter.MINOR_ALLY),
        ("a", Meter.SWARM),
    ]
    actor, meter = sched.advance(a, b)
    assert (actor.id, meter) == ("a", Meter.PRIMARY)


def test_drain_keeps_overflow(fighter):
    sched = EnergyScheduler(DEFAULT_CONFIG)
    a = fighter("a")
    a.meters[Meter.PRIMARY] = 130.0
    sched.drain(a, Meter.PRIMARY)
    assert a.meters[Meter.PRIMARY] == pytest.approx(30.0)


def test_final_sprint_doubles_speed_at_low_hp(fighter):
    sched = EnergyScheduler(DEFAULT_CONFIG)
    mob = fighter("a", speed=10, traits=["final_sprint"])
    assert sched.effective_speed(mob) == 10
    mob.hp = 19
    assert sched.effective_speed(mob) == 20
    mob.hp = 20
    assert sched.effective_speed(mob) == 10


def test_swarm_meter_outpaces_primary(fighter):
    sched = EnergyScheduler(DEFAULT_CONFIG)
    a = fighter("a", speed=10, traits=["gnat_swarm"])
    b = fighter("b", speed=1)
    actor, meter = sched.advance(a, b)
    assert (actor, meter) == (a, Meter.SWARM)


def test_zero_speed_on_both_sides_stalls(fighter):
    sched = EnergyScheduler(DEFAULT_CONFIG)
    with pytest.raises(StalledDuelError):
        sched.advance(fighter("a", speed=0), fighter("b", speed=0))


def test_tick_scaling_from_config(fighter):
    sched = EnergyScheduler(CombatConfig(tick_scaling=1.0))
    a = fighter("a", speed=10)
    b = fighter("b", speed=1)
    sched.advance(a, b)
    assert sched.total_ticks == 10
