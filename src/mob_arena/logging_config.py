import logging
import os

PACKAGE_LOGGER = "mob_arena"


def configure_logging(default_level: int = logging.INFO) -> logging.Logger:
    """Install the root handler and set the level of the ``mob_arena`` logger.

    The root logger stays at WARNING so third-party libraries keep quiet;
    only the engine's own loggers follow the requested level. Respects the
    MOB_ARENA_LOG_LEVEL env var if present (e.g. ``debug`` to trace every
    tick and roll).
    """
    level_name = os.getenv("MOB_ARENA_LOG_LEVEL")
    level = default_level
    if level_name:
        candidate = getattr(logging, level_name.upper(), None)
        if isinstance(candidate, int):
            level = candidate
    logging.basicConfig(
        level=logging.WARNING,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    return logger
