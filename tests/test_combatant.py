import logging

import pytest

from mob_arena.combat.combatant import Combatant, Meter, MobProfile, Stats
from mob_arena.errors import CombatantValidationError, UnknownReferenceError


def test_profile_builds_fresh_combatant():
    mob = Combatant.from_profile(
        {
            "id": "rat",
            "name": "Raton",
            "stats": {"power": 8, "vitality": 3, "agility": 2, "speed": 11},
            "traits": ["Coup Critique", "maggot_king"],
            "weapons": ["Cutter", "Capsule"],
        }
    )
    assert mob.name == "Raton"
    assert mob.max_hp == 130
    assert mob.hp == 130
    assert mob.equipped_weapon is None
    assert mob.inventory == ["Cutter", "Capsule"]
    assert set(mob.meters) == {Meter.PRIMARY, Meter.MINOR_ALLY}
    assert all(v == 0.0 for v in mob.meters.values())
    assert not mob.stunned and not mob.raging
    assert mob.guardian_hp == 0


def test_display_name_defaults_to_id():
    assert MobProfile.parse({"id": "toad"}).display_name == "toad"


def test_negative_stats_rejected():
    with pytest.raises(CombatantValidationError):
        MobProfile.parse({"id": "x", "stats": {"power": -3}})


def test_empty_id_rejected():
    with pytest.raises(CombatantValidationError):
        MobProfile.parse({"id": ""})


def test_duplicate_traits_rejected():
    with pytest.raises(CombatantValidationError):
        MobProfile.parse({"id": "x", "traits": ["berserk", "berserk"]})


def test_trait_aliases_resolving_to_same_trait_rejected():
    with pytest.raises(CombatantValidationError):
        Combatant.from_profile({"id": "x", "traits": ["berserk", "Berzerk"]})


def test_unknown_references_skipped_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="mob_arena.combat.combatant"):
        mob = Combatant.from_profile({"id": "x", "traits": ["flying"], "weapons": ["Excalibur", "Cutter"]})
    assert mob.traits == frozenset()
    assert mob.inventory == ["Cutter"]
    assert len(caplog.records) == 2


def test_unknown_references_rejected_in_strict_mode():
    with pytest.raises(UnknownReferenceError):
        Combatant.from_profile({"id": "x", "weapons": ["Excalibur"]}, strict=True)
    with pytest.raises(UnknownReferenceError):
        Combatant.from_profile({"id": "x", "traits": ["flying"]}, strict=True)


def test_weapon_cannot_be_held_and_stored():
    with pytest.raises(CombatantValidationError):
        Combatant(id="x", name="x", stats=Stats(), max_hp=100, hp=100, inventory=["Cutter"], equipped_weapon="Cutter")


def test_draw_sheathe_release(fighter):
    mob = fighter("x", weapons=["Cutter", "Capsule"])
    assert mob.draw(1) == "Capsule"
    assert mob.inventory == ["Cutter"]
    with pytest.raises(CombatantValidationError):
        mob.draw(0)

    assert mob.sheathe() == "Capsule"
    assert mob.inventory == ["Cutter", "Capsule"]
    assert mob.sheathe() is None

    mob.draw(0)
    assert mob.release() == "Cutter"
    assert mob.weapon_count() == 1


def test_hp_may_go_negative_but_reports_zero(fighter):
    mob = fighter("x")
    assert mob.take_damage(250) == 250
    assert mob.hp == -150
    assert mob.reported_hp == 0
    assert not mob.alive


def test_profile_from_yaml(tmp_path):
    path = tmp_path / "mob.yaml"
    path.write_text(
        "id: slug\nname: Limace\nstats: {power: 4, vitality: 9, agility: 0, speed: 3}\ntraits: [leather_skin]\n",
        encoding="utf-8",
    )
    profile = MobProfile.from_yaml(path)
    assert profile.name == "Limace"
    assert profile.stats.vitality == 9


def test_profile_from_malformed_yaml(tmp_path):
    path = tmp_path / "mob.yaml"
    path.write_text("id: [unclosed\n", encoding="utf-8")
    with pytest.raises(CombatantValidationError):
        MobProfile.from_yaml(path)
