from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..config import DEFAULT_CONFIG, CombatConfig
from ..errors import CombatantValidationError, UnknownReferenceError
from ..registry.traits import DEFAULT_TRAIT_REGISTRY, Trait, TraitRegistry
from ..registry.weapons import DEFAULT_WEAPON_REGISTRY, WeaponRegistry

logger = logging.getLogger(__name__)


class Meter(str, Enum):
    """Independent action gauges. PRIMARY is the mob itself, the rest are companions."""

    PRIMARY = "primary"
    MINOR_ALLY = "minor_ally"
    SWARM = "swarm"
    SABOTAGE = "sabotage"


# Fixed resolution order of companion meters within one side
COMPANION_METERS: Tuple[Tuple[Trait, Meter], ...] = (
    (Trait.MAGGOT_KING, Meter.MINOR_ALLY),
    (Trait.GNAT_SWARM, Meter.SWARM),
    (Trait.SABOTEUR_SPIRIT, Meter.SABOTAGE),
)


class Stats(BaseModel):
    model_config = ConfigDict(frozen=True)

    power: int = Field(0, ge=0)
    vitality: int = Field(0, ge=0)
    agility: int = Field(0, ge=0)
    speed: int = Field(0, ge=0)


class MobProfile(BaseModel):
    """Persistent snapshot of a mob as handed over by the game before a duel."""

    id: str = Field(..., min_length=1)
    name: str = ""
    stats: Stats = Field(default_factory=Stats)
    traits: List[str] = Field(default_factory=list)
    weapons: List[str] = Field(default_factory=list)

    @field_validator("traits")
    @classmethod
    def traits_unique(cls, v: List[str]) -> List[str]:
        seen = set()
        for t in v:
            if t in seen:
                raise ValueError(f"duplicate trait {t!r}")
            seen.add(t)
        return v

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @classmethod
    def parse(cls, data: Any) -> "MobProfile":
        """Validate raw data, raising :class:`CombatantValidationError` on failure."""
        if isinstance(data, cls):
            return data
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise CombatantValidationError(f"Invalid mob profile: {exc}") from exc

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "MobProfile":
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            try:
                raw = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise CombatantValidationError(f"Malformed YAML in {path}: {exc}") from exc
        logger.debug("Loaded mob profile from %s", path)
        return cls.parse(raw)


@dataclass
class Combatant:
    """Per-duel mutable state of one fighter.

    Built from a :class:`MobProfile` at duel start: full heal, every owned
    weapon sheathed into the inventory, transient counters cleared.
    ``hp`` may dip below zero transiently; reporting clamps it.
    """

    id: str
    name: str
    stats: Stats
    max_hp: int
    hp: int
    traits: FrozenSet[Trait] = frozenset()
    inventory: List[str] = field(default_factory=list)
    equipped_weapon: Optional[str] = None
    stunned: bool = False
    raging: bool = False
    hits_taken: int = 0
    blind_stacks: int = 0
    guardian_hp: int = 0
    meters: Dict[Meter, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.meters:
            self.meters = {Meter.PRIMARY: 0.0}
            for trait, meter in COMPANION_METERS:
                if trait in self.traits:
                    self.meters[meter] = 0.0
        if self.equipped_weapon is not None and self.equipped_weapon in self.inventory:
            raise CombatantValidationError(
                f"{self.id}: weapon {self.equipped_weapon!r} is both equipped and stored"
            )

    @classmethod
    def from_profile(
        cls,
        profile: Union[MobProfile, Dict[str, Any]],
        *,
        weapons: WeaponRegistry = DEFAULT_WEAPON_REGISTRY,
        traits: TraitRegistry = DEFAULT_TRAIT_REGISTRY,
        config: CombatConfig = DEFAULT_CONFIG,
        strict: bool = False,
    ) -> "Combatant":
        profile = MobProfile.parse(profile)

        resolved: List[Trait] = []
        for identifier in profile.traits:
            trait = traits.resolve(identifier)
            if trait is None:
                if strict:
                    raise UnknownReferenceError(f"{profile.id}: unknown trait {identifier!r}")
                logger.warning("%s: ignoring unknown trait %r", profile.id, identifier)
                continue
            if trait in resolved:
                raise CombatantValidationError(f"{profile.id}: trait {identifier!r} listed twice")
            resolved.append(trait)

        inventory: List[str] = []
        for name in profile.weapons:
            if name not in weapons:
                if strict:
                    raise UnknownReferenceError(f"{profile.id}: unknown weapon {name!r}")
                logger.warning("%s: ignoring unknown weapon %r", profile.id, name)
                continue
            inventory.append(name)

        max_hp = config.hp_base + profile.stats.vitality * config.hp_per_vitality
        combatant = cls(
            id=profile.id,
            name=profile.display_name,
            stats=profile.stats,
            max_hp=max_hp,
            hp=max_hp,
            traits=frozenset(resolved),
            inventory=inventory,
        )
        if combatant.has(Trait.ROOT_GUARDIAN):
            combatant.guardian_hp = int(max_hp * config.guardian_hp_fraction)
        return combatant

    @property
    def alive(self) -> bool:
        return self.hp > 0

    @property
    def reported_hp(self) -> int:
        return max(0, self.hp)

    def has(self, trait: Trait) -> bool:
        return trait in self.traits

    def weapon_count(self) -> int:
        return len(self.inventory) + (1 if self.equipped_weapon else 0)

    def draw(self, index: int) -> str:
        """Move inventory[index] into the hand."""
        if self.equipped_weapon is not None:
            raise CombatantValidationError(f"{self.id} already holds {self.equipped_weapon!r}")
        self.equipped_weapon = self.inventory.pop(index)
        return self.equipped_weapon

    def sheathe(self) -> Optional[str]:
        """Put the held weapon back into the inventory."""
        weapon = self.equipped_weapon
        if weapon is not None:
            self.inventory.append(weapon)
            self.equipped_weapon = None
        return weapon

    def release(self) -> Optional[str]:
        """Let go of the held weapon without storing it (thrown or handed over)."""
        weapon = self.equipped_weapon
        self.equipped_weapon = None
        return weapon

    def take_damage(self, amount: int) -> int:
        amount = max(0, int(amount))
        self.hp -= amount
        return amount

    def __repr__(self) -> str:
        return f"Combatant(id={self.id!r}, hp={self.hp}/{self.max_hp}, weapon={self.equipped_weapon!r})"
