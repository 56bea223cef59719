"""
Mob Arena package root.

Headless duel engine for the virtual-pet game: mobs built from persistent
profiles fight each other through a tick-based, trait/weapon/stat-driven
combat resolution. UI, persistence and tournament layers consume the
results and events and live outside this package.
"""
from .combat import CombatPredictor, Duel, DuelResult, MobProfile, resolve_duel
from .config import CombatConfig, load_combat_config
from .errors import (
    CombatantValidationError,
    CombatError,
    ConfigError,
    MobArenaError,
    RegistryError,
    StalledDuelError,
    UnknownReferenceError,
)

__all__ = [
    "CombatPredictor",
    "Duel",
    "DuelResult",
    "MobProfile",
    "resolve_duel",
    "CombatConfig",
    "load_combat_config",
    "CombatantValidationError",
    "CombatError",
    "ConfigError",
    "MobArenaError",
    "RegistryError",
    "StalledDuelError",
    "UnknownReferenceError",
]
