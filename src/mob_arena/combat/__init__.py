"""
Combat package for Mob Arena.

Contains:
- The per-duel combatant model built from persistent mob profiles.
- The energy scheduler, action resolver, damage pipeline and reactive handlers.
- The combat loop producing a winner and an ordered list of outcome events.
- A Monte-Carlo predictor estimating matchup win rates.
"""

from .combatant import Combatant, Meter, MobProfile, Stats
from .engine import Duel, DuelResult, resolve_duel
from .events import DuelEvent, DuelLog, EventKind, EventSink, NullSink
from .predictor import CombatPredictor, MatchupReport
from .rng import DuelRandom, RNGManager

__all__ = [
    "Combatant",
    "Meter",
    "MobProfile",
    "Stats",
    "Duel",
    "DuelResult",
    "resolve_duel",
    "DuelEvent",
    "DuelLog",
    "EventKind",
    "EventSink",
    "NullSink",
    "CombatPredictor",
    "MatchupReport",
    "DuelRandom",
    "RNGManager",
]
