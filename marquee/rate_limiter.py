"""
Per-caller quota for AI features.

Sliding-window counter kept in process memory; suitable for a single
instance. Each key (a client address) may consume max_requests
within window_seconds.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class QuotaStatus:
    allowed: bool
    remaining: int
    retry_after_ms: int = 0


class InMemoryQuota:
    def __init__(self, max_requests: int, window_seconds: int) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._hits: Dict[str, List[float]] = {}
        self._last_cleanup = 0.0

    async def consume(self, key: str) -> QuotaStatus:
        """
        Record one use for key unless its window is already full.
        """
        # No await between read and write, so this is atomic on the loop.
        now = time.time()
        if now - self._last_cleanup >= self.window_seconds:
            self.cleanup(now)

        cutoff = now - self.window_seconds
        hits = [ts for ts in self._hits.get(key, []) if ts > cutoff]

        if len(hits) >= self.max_requests:
            if hits:
                self._hits[key] = hits
            oldest = min(hits, default=now)
            retry_after = max(0.0, oldest + self.window_seconds - now)
            return QuotaStatus(
                allowed=False, remaining=0, retry_after_ms=int(retry_after * 1000)
            )

        hits.append(now)
        self._hits[key] = hits
        return QuotaStatus(allowed=True, remaining=self.max_requests - len(hits))

    def cleanup(self, now: float | None = None) -> None:
        """
        Drop expired timestamps and forget keys with nothing left in the window.
        """
        now = time.time() if now is None else now
        cutoff = now - self.window_seconds
        stale = []
        for key, hits in self._hits.items():
            live = [ts for ts in hits if ts > cutoff]
            if live:
                self._hits[key] = live
            else:
                stale.append(key)
        for key in stale:
            del self._hits[key]
        self._last_cleanup = now

    def __len__(self) -> int:
        return len(self._hits)

    def reset(self, key: str | None = None) -> None:
        if key is None:
            self._hits.clear()
        else:
            self._hits.pop(key, None)


__all__ = ["InMemoryQuota", "QuotaStatus"]
