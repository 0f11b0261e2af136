"""Simple in-memory rate limiting for the credential endpoints."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Deque, Dict

from starlette.requests import Request

from spark_rentals.core.exceptions import RateLimitExceededError


class InMemoryRateLimiter:
    """Sliding-window limiter suitable for single-node deployments."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = 0.0

    def allow(self, key: str, limit: int, window_seconds: int) -> bool:
        if limit <= 0:
            return True
        now = time.monotonic()
        cutoff = now - window_seconds

        with self._lock:
            if now - self._last_sweep >= window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now

            hits = self._hits.get(key)
            if hits is not None:
                self._trim(hits, cutoff)
                if len(hits) >= limit:
                    return False

            self._hits.setdefault(key, deque()).append(now)
            return True

    @staticmethod
    def _trim(hits: Deque[float], cutoff: float) -> None:
        while hits and hits[0] <= cutoff:
            hits.popleft()

    def _sweep(self, cutoff: float) -> None:
        # Keys are caller-influenced (login includes the email); drop idle ones.
        for key in list(self._hits):
            hits = self._hits[key]
            self._trim(hits, cutoff)
            if not hits:
                del self._hits[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._hits)

    def enforce(self, key: str, limit: int, window_seconds: int, message: str) -> None:
        if not self.allow(key, limit, window_seconds):
            raise RateLimitExceededError(message)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._last_sweep = 0.0


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


rate_limiter = InMemoryRateLimiter()
