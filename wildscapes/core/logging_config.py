"""Unified logging configuration.

Library modules only ever call ``logging.getLogger(__name__)``; entry points
(the simulate CLI, embedding applications) call :func:`setup_logging` once to
attach handlers.

Usage:
    from wildscapes.core.logging_config import setup_logging

    logger = setup_logging("wildscapes", level="DEBUG", format_style="compact")
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
COMPACT_FORMAT = "%(levelname)s %(name)s: %(message)s"
DETAILED_FORMAT = (
    "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
)
STRUCTURED_FORMAT = (
    '{"time":"%(asctime)s","level":"%(levelname)s",'
    '"name":"%(name)s","message":"%(message)s"}'
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_FORMATS = {
    "default": DEFAULT_FORMAT,
    "compact": COMPACT_FORMAT,
    "detailed": DETAILED_FORMAT,
    "structured": STRUCTURED_FORMAT,
}

# Packages that log every HTTP request at INFO/DEBUG.
NOISY_PACKAGES = ("urllib3", "requests", "charset_normalizer")


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def setup_logging(
    name: str,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_dir: Optional[Union[str, Path]] = None,
    console: bool = True,
    format_style: str = "default",
    propagate: bool = False,
) -> logging.Logger:
    """
    Configure and return the logger called ``name``.

    Calling it again for the same name updates the level but does not add
    duplicate handlers.

    Args:
        name: Logger name.
        level: Level as an int or a name such as ``"DEBUG"``.
        log_file: Write to this file in addition to the console.
        log_dir: Write to ``<log_dir>/<name>_<timestamp>.log``; ignored when
            ``log_file`` is given.
        console: Attach a stderr handler.
        format_style: One of ``default``, ``compact``, ``detailed``,
            ``structured``. Unknown styles fall back to ``default``.
        propagate: Whether records also reach ancestor loggers.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))
    logger.propagate = propagate

    if getattr(logger, "_wildscapes_configured", False):
        return logger

    formatter = logging.Formatter(
        _FORMATS.get(format_style, DEFAULT_FORMAT), datefmt=DATE_FORMAT
    )

    if console:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if log_file is None and log_dir is not None:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = directory / f"{name.replace('.', '_')}_{stamp}.log"

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger._wildscapes_configured = True  # type: ignore[attr-defined]
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_third_party_loggers(
    quiet: bool = True, verbose_packages: Optional[Iterable[str]] = None
) -> None:
    """Raise noisy third-party loggers to WARNING.

    Packages listed in ``verbose_packages`` are left untouched.
    """
    if not quiet:
        return
    keep = set(verbose_packages or ())
    for package in NOISY_PACKAGES:
        if package in keep:
            continue
        logging.getLogger(package).setLevel(logging.WARNING)


class LogContext:
    """Temporarily change a logger's level.

    Example:
        with LogContext(logger, logging.DEBUG):
            engine_step()
    """

    def __init__(self, logger: logging.Logger, level: Union[int, str]):
        self.logger = logger
        self.level = _resolve_level(level)
        self._previous: Optional[int] = None

    def __enter__(self) -> logging.Logger:
        self._previous = self.logger.level
        self.logger.setLevel(self.level)
        return self.logger

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._previous is not None:
            self.logger.setLevel(self._previous)


__all__ = [
    "COMPACT_FORMAT",
    "DEFAULT_FORMAT",
    "DETAILED_FORMAT",
    "STRUCTURED_FORMAT",
    "LogContext",
    "configure_third_party_loggers",
    "get_logger",
    "setup_logging",
]
