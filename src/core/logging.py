"""
Loguru configuration shared by the API, the CLI and the engine.

Engine modules import ``logger`` from loguru directly and pass structured
context as keyword arguments; this module only decides where it goes.
"""

import sys
from loguru import logger
from .config import settings

_configured = False


def setup_logging(level: str = None, json: bool = None):
    """
    Configure the global loguru logger once and return it.

    Args:
        level: Minimum level (defaults to LOG_LEVEL)
        json: Emit serialized JSON lines instead of text (defaults to LOG_JSON)

    Returns:
        The configured loguru logger
    """
    global _configured
    if _configured and level is None and json is None:
        return logger

    level = (level or settings.log_level).upper()
    serialize = settings.log_json if json is None else json

    logger.remove()
    if serialize:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(
            sys.stderr,
            level=level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
                   "<cyan>{name}</cyan> - <level>{message}</level> | {extra}",
        )

    _configured = True
    return logger
