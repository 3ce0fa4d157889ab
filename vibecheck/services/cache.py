"""Simple Redis cache wrapper for partner dashboard counters."""

import json
import logging
from functools import wraps

import redis
from vibecheck.config import settings

log = logging.getLogger(__name__)

KEY_PREFIX = "vc"

_client = None


def _get_redis():
    global _client
    if not settings.REDIS_URL:
        return None
    if _client is None:
        try:
            _client = redis.from_url(settings.REDIS_URL, decode_responses=True, socket_timeout=2)
            _client.ping()
            log.info("Redis connected")
        except redis.RedisError:
            log.warning("Redis not available, caching disabled")
            _client = None
    return _client


def redis_available() -> bool:
    return _get_redis() is not None


def cache_key(prefix: str, suffix: str = "") -> str:
    return f"{KEY_PREFIX}:{prefix}:{suffix}" if suffix else f"{KEY_PREFIX}:{prefix}"


def cache_get(key: str):
    r = _get_redis()
    if not r:
        return None
    try:
        data = r.get(key)
        return json.loads(data) if data else None
    except redis.RedisError as e:
        log.warning("Cache read failed for %s: %s", key, e)
        return None


def cache_set(key: str, value, ttl: int = 60):
    r = _get_redis()
    if not r:
        return
    try:
        r.setex(key, ttl, json.dumps(value, default=str))
    except redis.RedisError as e:
        log.warning("Cache write failed for %s: %s", key, e)


def cached(prefix: str, ttl: int = 60):
    """Decorator: cache a function result under a fixed key per prefix."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            key = cache_key(prefix)
            hit = cache_get(key)
            if hit is not None:
                return hit
            result = func(*args, **kwargs)
            cache_set(key, result, ttl)
            return result
        return wrapper
    return decorator
