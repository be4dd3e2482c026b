"""Observed GitHub rate-limit quota."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Mapping, Optional

REMAINING_HEADER = "x-ratelimit-remaining"
LIMIT_HEADER = "x-ratelimit-limit"
RESET_HEADER = "x-ratelimit-reset"


@dataclass(frozen=True)
class RateLimitSnapshot:
    remaining: Optional[int] = None
    limit: Optional[int] = None
    reset: Optional[int] = None


class RateLimitTracker:
    """Holds the most recently observed remaining/limit/reset values.

    A single tracker may be shared by several fetchers running on different
    threads; reads and updates are serialised by one lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._remaining: Optional[int] = None
        self._limit: Optional[int] = None
        self._reset: Optional[int] = None

    def observe(self, headers: Mapping[str, str]) -> None:
        """Update from response headers; absent or unparsable values keep the last one."""
        lowered = {str(key).lower(): value for key, value in headers.items()}
        remaining = _parse_int(lowered.get(REMAINING_HEADER))
        limit = _parse_int(lowered.get(LIMIT_HEADER))
        reset = _parse_int(lowered.get(RESET_HEADER))
        with self._lock:
            if remaining is not None:
                self._remaining = remaining
            if limit is not None:
                self._limit = limit
            if reset is not None:
                self._reset = reset

    def snapshot(self) -> RateLimitSnapshot:
        with self._lock:
            return RateLimitSnapshot(
                remaining=self._remaining, limit=self._limit, reset=self._reset
            )

    @property
    def remaining(self) -> Optional[int]:
        with self._lock:
            return self._remaining


def _parse_int(value: object) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


__all__ = ["RateLimitSnapshot", "RateLimitTracker"]
