"""Embedded game-balance catalogs (weapons and traits)."""
