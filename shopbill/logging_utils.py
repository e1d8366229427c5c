"""Mini README: Application-wide logging helpers for shopbill.

Structure:
    * get_logger - factory returning module loggers with baseline configuration.
    * configure_root_logger - attaches the shared handler and sets the level.
    * resolve_level - turns level names from settings or the CLI into numbers.

Usage:
    Modules import ``get_logger`` to create contextual loggers. Storage and
    backup helpers swallow some failures by contract, so those failures are
    always reported through these loggers instead of disappearing. The root
    handler is attached once; later calls only adjust the level, which lets
    the CLI switch to debug output after modules have already been imported.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False


def resolve_level(level: Union[int, str]) -> int:
    """Return a numeric logging level for an int or a name such as ``"debug"``."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown logging level: {level}")
    return resolved


def configure_root_logger(level: Union[int, str] = logging.INFO) -> None:
    """Attach the shared handler once and apply ``level`` to the root logger."""

    global _LOGGER_INITIALISED
    root_logger = logging.getLogger()
    if _LOGGER_INITIALISED:
        root_logger.setLevel(resolve_level(level))
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(resolve_level(level))
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    if not _LOGGER_INITIALISED:
        configure_root_logger()
    return logging.getLogger(name)
