"""
Static game-balance registries consumed by the duel engine.

Both registries are read-only during a duel and are passed explicitly to the
engine so tests can build synthetic catalogs.
"""

from .traits import Trait, TraitDef, TraitRegistry, DEFAULT_TRAIT_REGISTRY
from .weapons import RangeClass, WeaponDef, WeaponEffects, WeaponRegistry, DEFAULT_WEAPON_REGISTRY

__all__ = [
    "Trait",
    "TraitDef",
    "TraitRegistry",
    "DEFAULT_TRAIT_REGISTRY",
    "RangeClass",
    "WeaponDef",
    "WeaponEffects",
    "WeaponRegistry",
    "DEFAULT_WEAPON_REGISTRY",
]
