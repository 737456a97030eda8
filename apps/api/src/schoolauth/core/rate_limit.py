"""
Rate Limiting

Sliding-window request limits for the public authentication endpoints:
signup (licence email spam), activation (licence guessing) and sign-in
(password guessing).

Counts live in Redis when the shared client is connected. Otherwise, or
when a Redis call fails, they fall back to a per-process dictionary.
"""

import logging
import time
import uuid
from collections.abc import Callable
from functools import wraps
from typing import Any

from fastapi import HTTPException, Request, status
from redis.asyncio import Redis
from redis.exceptions import RedisError

from schoolauth.core.config import get_settings
from schoolauth.core.redis import get_redis

logger = logging.getLogger(__name__)

KEY_PREFIX = "rate_limit"

# key -> request timestamps inside the current window
_memory_store: dict[str, list[float]] = {}

# Past this many keys, keys with no request inside the window are dropped
MEMORY_STORE_PRUNE_THRESHOLD = 10_000


class RateLimitExceeded(HTTPException):
    """429 with a Retry-After header covering one full window."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": (
                    f"Too many requests. At most {limit} are allowed every "
                    f"{window_seconds} seconds."
                ),
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _allow_redis(client: Redis, key: str, limit: int, window_seconds: int) -> bool:
    # One sorted set per key, scored by arrival time. Only allowed requests
    # stay in the set, matching the in-memory path.
    now = time.time()
    member = f"{now}:{uuid.uuid4().hex}"

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, now - window_seconds)
    pipe.zadd(key, {member: now})
    pipe.zcard(key)
    pipe.expire(key, window_seconds)
    _, _, in_window, _ = await pipe.execute()

    if in_window > limit:
        await client.zrem(key, member)
        return False
    return True


def _prune_memory_store(now: float, window_seconds: int) -> None:
    stale = [
        key
        for key, timestamps in _memory_store.items()
        if not timestamps or timestamps[-1] <= now - window_seconds
    ]
    for key in stale:
        del _memory_store[key]


def _allow_memory(key: str, limit: int, window_seconds: int) -> bool:
    now = time.time()
    if len(_memory_store) > MEMORY_STORE_PRUNE_THRESHOLD:
        _prune_memory_store(now, window_seconds)

    recent = [ts for ts in _memory_store.get(key, ()) if ts > now - window_seconds]

    allowed = len(recent) < limit
    if allowed:
        recent.append(now)
    if recent:
        _memory_store[key] = recent
    else:
        _memory_store.pop(key, None)
    return allowed


def reset_memory_store() -> None:
    """Forget all in-process counts."""
    _memory_store.clear()


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Record one request under `key` and report whether it is within the limit.

    Returns:
        True if allowed, False if `limit` requests already arrived in the
        last `window_seconds`
    """
    client = get_redis()

    if client is not None:
        try:
            return await _allow_redis(client, key, limit, window_seconds)
        except RedisError as e:
            logger.warning(f"Redis unavailable for rate limiting, counting in memory: {e}")

    return _allow_memory(key, limit, window_seconds)


def client_path_key(request: Request) -> str:
    """Default limit key: client address plus request path."""
    host = request.client.host if request.client else "unknown"
    return f"{KEY_PREFIX}:{host}:{request.url.path}"


def rate_limit(
    limit: int | None = None,
    window_seconds: int | None = None,
    key_func: Callable[[Request], str] = client_path_key,
):
    """
    Limit how often an endpoint may be called.

    The endpoint must accept a `request: Request` parameter. Limits not given
    here come from RATE_LIMIT_AUTH_REQUESTS and RATE_LIMIT_AUTH_WINDOW_SECONDS.

        @router.post("/signin")
        @rate_limit()
        async def signin(request: Request, ...):
            ...

    Raises:
        RateLimitExceeded: once the window is full
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            request = kwargs.get("request")
            if not isinstance(request, Request):
                request = next((a for a in args if isinstance(a, Request)), None)
            if request is None:
                logger.warning(f"{func.__name__} has no Request parameter; not rate limited")
                return await func(*args, **kwargs)

            settings = get_settings()
            max_requests = limit or settings.rate_limit_auth_requests
            window = window_seconds or settings.rate_limit_auth_window_seconds
            key = key_func(request)

            if not await check_rate_limit(key, max_requests, window):
                logger.warning(f"Rate limit hit for {key} ({max_requests}/{window}s)")
                raise RateLimitExceeded(max_requests, window)

            return await func(*args, **kwargs)

        return wrapper

    return decorator


__all__ = [
    "RateLimitExceeded",
    "check_rate_limit",
    "client_path_key",
    "rate_limit",
    "reset_memory_store",
]
