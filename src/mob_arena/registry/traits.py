from __future__ import annotations

import logging
from enum import Enum
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import RegistryError

logger = logging.getLogger(__name__)


class Trait(str, Enum):
    """Closed vocabulary of combat traits. Every member has a fixed engine hook."""

    CRITICAL_STRIKE = "critical_strike"
    LEATHER_SKIN = "leather_skin"
    COUNTER_ATTACK = "counter_attack"
    BERSERK = "berserk"
    FINAL_SPRINT = "final_sprint"
    MAGGOT_KING = "maggot_king"
    GNAT_SWARM = "gnat_swarm"
    SABOTEUR_SPIRIT = "saboteur_spirit"
    ROOT_GUARDIAN = "root_guardian"
    LACE_HAND = "lace_hand"


class TraitDef(BaseModel):
    """Display metadata for a trait plus the engine hook it maps to."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    kind: Trait
    name: str = Field(..., min_length=1)
    description: str = ""
    effect: str = ""

    @field_validator("kind", mode="before")
    @classmethod
    def accept_member_names(cls, v: Any) -> Any:
        # YAML catalogs use the enum member name (MAGGOT_KING), code uses the value
        if isinstance(v, str) and v in Trait.__members__:
            return Trait[v]
        return v


def _parse_catalog(raw: Any, source: str) -> List[TraitDef]:
    if not isinstance(raw, dict) or not isinstance(raw.get("traits"), dict):
        raise RegistryError(f"{source}: expected a 'traits' mapping")
    defs: List[TraitDef] = []
    for trait_id, fields in raw["traits"].items():
        data = dict(fields or {})
        data.setdefault("id", trait_id)
        try:
            defs.append(TraitDef(**data))
        except ValidationError as exc:
            logger.error("Invalid trait %r in %s: %s", trait_id, source, exc)
            raise RegistryError(f"{source}: invalid trait {trait_id!r}") from exc
    return defs


def load_default_traits() -> List[TraitDef]:
    data = resource_files("mob_arena.data").joinpath("traits.yaml").read_text(encoding="utf-8")
    logger.debug("Loaded embedded trait catalog resource")
    return _parse_catalog(yaml.safe_load(data), "traits.yaml")


class TraitRegistry:
    """
    Resolves trait identifiers found in mob profiles to :class:`Trait` members.

    A trait can be referenced by its id ("berserk") or by its display name
    ("Berzerk"), so profiles saved by the game resolve unchanged.
    """

    def __init__(self, definitions: Optional[Iterable[TraitDef]] = None) -> None:
        self._defs: Dict[Trait, TraitDef] = {}
        self._lookup: Dict[str, Trait] = {}
        for definition in load_default_traits() if definitions is None else definitions:
            self.register(definition)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "TraitRegistry":
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
        registry = cls(_parse_catalog(raw, str(path)))
        logger.info("Loaded %d traits from %s", len(registry), path)
        return registry

    def register(self, definition: TraitDef) -> None:
        self._defs[definition.kind] = definition
        self._lookup[definition.id] = definition.kind
        self._lookup[definition.name] = definition.kind
        self._lookup[definition.kind.value] = definition.kind

    def resolve(self, identifier: str) -> Optional[Trait]:
        return self._lookup.get(identifier)

    def get(self, trait: Trait) -> Optional[TraitDef]:
        return self._defs.get(trait)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._lookup

    def __iter__(self) -> Iterator[TraitDef]:
        return iter(self._defs.values())

    def __len__(self) -> int:
        return len(self._defs)


DEFAULT_TRAIT_REGISTRY = TraitRegistry()
