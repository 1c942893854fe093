from __future__ import annotations

import logging
import math
import threading
import time
from typing import Dict, Tuple

from fastapi import Request

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


class RateLimitExceeded(Exception):
    """Raised when a client exhausts its window."""

    def __init__(self, key: str, retry_after: float) -> None:
        super().__init__(RATE_LIMIT_MESSAGE)
        self.key = key
        self.retry_after = max(0, math.ceil(retry_after))


class RateLimiter:
    """Fixed-window counter keyed by scope and client address."""

    def __init__(self) -> None:
        self._hits: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def check(self, key: str, limit: int, window_seconds: int) -> None:
        now = time.time()
        with self._lock:
            self._prune(now)
            count, reset = self._hits.get(key, (0, now + window_seconds))
            if now > reset:
                count = 0
                reset = now + window_seconds
            count += 1
            self._hits[key] = (count, reset)
            if count > limit:
                logger.warning("Rate limit exceeded for %s (%d hits)", key, count)
                raise RateLimitExceeded(key, reset - now)

    def _prune(self, now: float) -> None:
        expired = [key for key, (_, reset) in self._hits.items() if reset < now]
        for key in expired:
            del self._hits[key]

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def _client_ip(request: Request, *, trust_proxy: bool = False) -> str:
    # X-Forwarded-For is client-controlled unless a trusted proxy sets it
    if trust_proxy:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def _get_limiter(request: Request) -> RateLimiter:
    limiter = getattr(getattr(request.app, "state", None), "rate_limiter", None)
    if not limiter:
        raise RuntimeError("RateLimiter nao configurado")
    return limiter


def rate_limit_ip(
    request: Request, scope: str, *, limit: int, window_seconds: int, trust_proxy: bool = False
) -> None:
    key = f"{scope}:{_client_ip(request, trust_proxy=trust_proxy)}"
    _get_limiter(request).check(key, limit, window_seconds)


def api_rate_limit(request: Request) -> None:
    """Router dependency guarding every /api/* route."""
    settings = request.app.state.settings
    rate_limit_ip(
        request,
        "api",
        limit=settings.rate_limit_max,
        window_seconds=settings.rate_limit_window_seconds,
        trust_proxy=settings.trust_proxy,
    )
