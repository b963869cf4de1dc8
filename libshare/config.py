"""
Startup configuration for the lending core.

Values are read once when the process starts and never change afterwards.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

# Defaults
DEFAULT_FINE_PER_DAY = 5
DEFAULT_BORROW_DAYS = 7

FINE_PER_DAY_ENV = "LIBSHARE_FINE_PER_DAY"
BORROW_DAYS_ENV = "LIBSHARE_BORROW_DAYS"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LendingConfig:
    """
    Immutable lending constants.

    Args:
        fine_per_day: currency units charged per started overdue day.
        borrow_days: loan period length in days.
    """
    fine_per_day: int = DEFAULT_FINE_PER_DAY
    borrow_days: int = DEFAULT_BORROW_DAYS

    def __post_init__(self):
        if isinstance(self.fine_per_day, bool) or not isinstance(self.fine_per_day, int) or self.fine_per_day < 0:
            raise ValueError(f"fine_per_day must be a non-negative integer, got {self.fine_per_day!r}")
        if isinstance(self.borrow_days, bool) or not isinstance(self.borrow_days, int) or self.borrow_days <= 0:
            raise ValueError(f"borrow_days must be a positive integer, got {self.borrow_days!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LendingConfig":
        """
        Build a config from environment variables.

        When ``environ`` is omitted a ``.env`` file (if any) is loaded into the
        process environment first. Missing variables fall back to the defaults.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ
        fine = _read_int(environ, FINE_PER_DAY_ENV, DEFAULT_FINE_PER_DAY)
        days = _read_int(environ, BORROW_DAYS_ENV, DEFAULT_BORROW_DAYS)
        config = cls(fine_per_day=fine, borrow_days=days)
        logger.debug("Loaded config: fine_per_day=%d borrow_days=%d", fine, days)
        return config


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = (environ.get(name) or "").strip()
    if raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
