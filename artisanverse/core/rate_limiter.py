from __future__ import annotations

import threading
import time
from typing import Dict, Tuple

from fastapi import HTTPException, Request


class RateLimiter:
    def __init__(self) -> None:
        self._hits: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._hits)

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, (_, reset) in self._hits.items() if now > reset]
        for key in expired:
            del self._hits[key]

    def check(self, key: str, limit: int, window_seconds: int, *, now: float | None = None) -> None:
        now = time.time() if now is None else now
        with self._lock:
            self._evict_expired(now)
            count, reset = self._hits.get(key, (0, now + window_seconds))
            count += 1
            self._hits[key] = (count, reset)
            if count > limit:
                raise HTTPException(429, "Too many requests from this IP, please try again later.")


def client_ip(request: Request, *, trust_proxy: bool = False) -> str:
    forwarded = request.headers.get("x-forwarded-for") if trust_proxy else None
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_ip(request: Request, scope: str, *, limit: int, window_seconds: int) -> None:
    """Count one hit for the caller's IP on `scope`, raising 429 over the limit."""
    limiter = getattr(request.app.state, "rate_limiter", None)
    if limiter is None or limit <= 0:
        return
    settings = getattr(request.app.state, "settings", None)
    ip = client_ip(request, trust_proxy=bool(getattr(settings, "trust_proxy", False)))
    limiter.check(f"{scope}:{ip}", limit, window_seconds)


def api_rate_limit(request: Request) -> None:
    """Router dependency applying the global /api request quota from Settings."""
    settings = request.app.state.settings
    rate_limit_ip(
        request,
        "api",
        limit=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
