class MobArenaError(Exception):
    """Base exception for the Mob Arena project."""


class CombatantValidationError(MobArenaError, ValueError):
    """Raised when a mob profile cannot be turned into a combatant (negative stats, duplicate traits...)."""


class UnknownReferenceError(CombatantValidationError):
    """Raised in strict mode when a profile names a weapon or trait missing from the registries."""


class RegistryError(MobArenaError):
    """Raised when a weapon or trait catalog is malformed."""


class ConfigError(MobArenaError):
    """Raised when a combat configuration file cannot be applied."""


class CombatError(MobArenaError):
    """Raised for combat related errors."""


class StalledDuelError(CombatError):
    """Raised when no action meter on either side can ever fill."""
