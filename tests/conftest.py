import logging
import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from mob_arena.combat.combatant import Combatant  # noqa: E402
from mob_arena.combat.context import DuelContext  # noqa: E402
from mob_arena.combat.events import DuelLog  # noqa: E402
from mob_arena.combat.rng import DuelRandom  # noqa: E402
from mob_arena.config import DEFAULT_CONFIG  # noqa: E402
from mob_arena.registry.weapons import DEFAULT_WEAPON_REGISTRY  # noqa: E402


class ScriptedRandom:
    """Uniform source replaying fixed values, then a constant fallback.

    The default fallback (0.99) fails every engine check below 99%, i.e. no
    dodge, no crit, no draw/throw/block/stun/drop/counter.
    """

    def __init__(self, values=(), fallback=0.99):
        self.values = list(values)
        self.fallback = fallback
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.fallback


def make_fighter(id, power=0, vitality=0, agility=0, speed=10, traits=(), weapons=(), equip=None):
    fighter = Combatant.from_profile(
        {
            "id": id,
            "stats": {"power": power, "vitality": vitality, "agility": agility, "speed": speed},
            "traits": list(traits),
            "weapons": list(weapons),
        }
    )
    if equip is not None:
        fighter.draw(fighter.inventory.index(equip))
    return fighter


def make_ctx(a, b, values=(), fallback=0.99, config=DEFAULT_CONFIG):
    return DuelContext(
        a=a,
        b=b,
        weapons=DEFAULT_WEAPON_REGISTRY,
        config=config,
        rng=DuelRandom(ScriptedRandom(values, fallback)),
        sink=DuelLog(),
    )


@pytest.fixture(autouse=True)
def restore_package_log_level():
    # the CLI and logging tests set the level of the package logger
    package_logger = logging.getLogger("mob_arena")
    level = package_logger.level
    yield
    package_logger.setLevel(level)


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def fighter():
    return make_fighter


@pytest.fixture
def duel_ctx():
    return make_ctx
