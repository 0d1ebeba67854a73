"""Configuración centralizada de Loguru.

Llamar a setup_logger() al arrancar la aplicación. Las llamadas repetidas no
tienen efecto.
"""

from __future__ import annotations

import sys

from loguru import logger

from lumina.config import settings

_INITIALISED = False


def setup_logger(level: str | None = None) -> None:
    """Replace the default Loguru sink with a single stderr sink.

    If *level* is None the value of ``settings.LOG_LEVEL`` is used.
    """
    global _INITIALISED
    if _INITIALISED:
        return

    level = (level or settings.LOG_LEVEL).upper()

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - <level>{message}</level>",
        colorize=True,
    )
    logger.info("Logger initialised (level: {})", level)

    _INITIALISED = True
