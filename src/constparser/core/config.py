"""
Runtime configuration for constparser.

Settings come from environment variables so the command line stays a
single verbosity flag:

    CONSTPARSER_VERBOSE    trace every consumed token (1/true/yes/on)
    CONSTPARSER_PRECISION  significant digits when printing values (default 15)

Usage:
    from constparser.core.config import load_settings

    settings = load_settings()
    print(settings.format_value(2 / 3))
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

VERBOSE_ENV_VAR = "CONSTPARSER_VERBOSE"
PRECISION_ENV_VAR = "CONSTPARSER_PRECISION"

_DEFAULT_PRECISION = 15

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    verbose: bool = False
    precision: int = _DEFAULT_PRECISION

    def format_value(self, value: float) -> str:
        return format(value, f".{self.precision}g")


def get_verbose() -> bool:
    """Read CONSTPARSER_VERBOSE.

    Returns:
        True for 1/true/yes/on, False for 0/false/no/off or unset.
        Unknown values log a warning and count as False.
    """
    raw = os.environ.get(VERBOSE_ENV_VAR, "").lower().strip()

    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False

    logger.warning(
        "Unknown %s value '%s'. Valid values: 1, true, yes, on, 0, false, no, off. "
        "Defaulting to off.",
        VERBOSE_ENV_VAR,
        raw,
    )
    return False


def get_precision() -> int:
    """Read CONSTPARSER_PRECISION, falling back to 15 on bad or missing values."""
    raw = os.environ.get(PRECISION_ENV_VAR, "").strip()
    if not raw:
        return _DEFAULT_PRECISION
    try:
        precision = int(raw)
    except ValueError:
        precision = 0
    if not 1 <= precision <= 17:
        logger.warning(
            "Invalid %s value '%s'. Expected an integer from 1 to 17. Defaulting to %d.",
            PRECISION_ENV_VAR,
            raw,
            _DEFAULT_PRECISION,
        )
        return _DEFAULT_PRECISION
    return precision


def load_settings() -> Settings:
    return Settings(verbose=get_verbose(), precision=get_precision())
