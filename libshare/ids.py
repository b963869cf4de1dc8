"""Collision-free identifiers for ledger records."""

from __future__ import annotations

import itertools
import threading
from typing import Dict, Iterator


class IdGenerator:
    """Hands out ``<prefix>-<n>`` ids from one monotonic counter per prefix."""

    def __init__(self) -> None:
        self._counters: Dict[str, Iterator[int]] = {}
        self._lock = threading.Lock()

    def next(self, prefix: str) -> str:
        with self._lock:
            counter = self._counters.setdefault(prefix, itertools.count(1))
            return f"{prefix}-{next(counter)}"
