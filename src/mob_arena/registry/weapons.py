from __future__ import annotations

import logging
from enum import Enum
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import RegistryError

logger = logging.getLogger(__name__)


class RangeClass(str, Enum):
    """Weapon range categories driving the range counter and block mechanics."""

    SHORT = "short"
    LONG = "long"
    SHIELD = "shield"


class StatBonus(BaseModel):
    """Permanent stat granted when the weapon is first acquired (never applied during a duel)."""

    model_config = ConfigDict(frozen=True)

    stat: str = Field(..., pattern="^(power|vitality|agility|speed)$")
    amount: int


class WeaponEffects(BaseModel):
    model_config = ConfigDict(frozen=True)

    stun_chance: float = Field(0.0, ge=0.0, le=1.0)
    block_chance: float = Field(0.0, ge=0.0, le=1.0)
    # None means "use the engine default" for long weapons
    counter_chance: Optional[float] = Field(None, ge=0.0, le=1.0)


class WeaponDef(BaseModel):
    """Static definition of a weapon, keyed by ``name`` in the registry."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    id: str = Field(..., min_length=1)
    range_class: RangeClass
    animation: str = "impact"
    damage_bonus: int = 0
    stat_bonus: Optional[StatBonus] = None
    effects: WeaponEffects = Field(default_factory=WeaponEffects)
    description: str = ""

    @property
    def is_shield(self) -> bool:
        return self.range_class is RangeClass.SHIELD


def _parse_catalog(raw: Any, source: str) -> List[WeaponDef]:
    if not isinstance(raw, dict) or not isinstance(raw.get("weapons"), dict):
        raise RegistryError(f"{source}: expected a 'weapons' mapping")
    defs: List[WeaponDef] = []
    for name, fields in raw["weapons"].items():
        data = dict(fields or {})
        data.setdefault("name", name)
        try:
            defs.append(WeaponDef(**data))
        except ValidationError as exc:
            logger.error("Invalid weapon %r in %s: %s", name, source, exc)
            raise RegistryError(f"{source}: invalid weapon {name!r}") from exc
    return defs


def load_default_weapons() -> List[WeaponDef]:
    data = resource_files("mob_arena.data").joinpath("weapons.yaml").read_text(encoding="utf-8")
    logger.debug("Loaded embedded weapon catalog resource")
    return _parse_catalog(yaml.safe_load(data), "weapons.yaml")


class WeaponRegistry:
    """
    In-memory registry of weapon definitions.

    Without explicit definitions the embedded catalog is loaded. Lookups are
    lenient: ``get`` returns None for unknown names so callers can treat a
    missing entry as "no weapon".
    """

    def __init__(self, definitions: Optional[Iterable[WeaponDef]] = None) -> None:
        self._defs: Dict[str, WeaponDef] = {}
        for definition in load_default_weapons() if definitions is None else definitions:
            self.register(definition)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "WeaponRegistry":
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
        registry = cls(_parse_catalog(raw, str(path)))
        logger.info("Loaded %d weapons from %s", len(registry), path)
        return registry

    def register(self, definition: WeaponDef) -> None:
        if definition.name in self._defs:
            logger.warning("Weapon %r registered twice; keeping the latest definition", definition.name)
        self._defs[definition.name] = definition

    def get(self, name: Optional[str]) -> Optional[WeaponDef]:
        if not name:
            return None
        return self._defs.get(name)

    def require(self, name: str) -> WeaponDef:
        try:
            return self._defs[name]
        except KeyError as exc:
            raise KeyError(f"Unknown weapon: {name}") from exc

    def names(self) -> List[str]:
        return list(self._defs)

    def __contains__(self, name: object) -> bool:
        return name in self._defs

    def __iter__(self) -> Iterator[WeaponDef]:
        return iter(self._defs.values())

    def __len__(self) -> int:
        return len(self._defs)


# A default, module-level registry for convenience
DEFAULT_WEAPON_REGISTRY = WeaponRegistry()
