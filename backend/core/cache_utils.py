"""
Caching utilities for metadata lookups
Uses Redis when configured, local memory otherwise
"""
from django.conf import settings
from django.core.cache import cache
from functools import wraps
import hashlib
import logging

logger = logging.getLogger(__name__)


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    # Convert args and kwargs to a stable string representation
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    # Hash it to keep key length reasonable
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def cached_query(cache_ttl=60, key_prefix="query"):
    """
    Decorator to cache expensive queries

    ``key_prefix`` may be a callable receiving the call arguments, so that
    related entries share a prefix and can be invalidated together.

    Usage:
        @cached_query(cache_ttl=300, key_prefix=lambda object_code, company_id: f"field_types:{object_code}")
        def get_field_type_map(object_code, company_id):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            prefix = key_prefix(*args, **kwargs) if callable(key_prefix) else key_prefix
            cache_key = make_cache_key(prefix, *args, **kwargs)

            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug(f"Cache HIT for {prefix}: {cache_key}")
                return cached_data

            logger.debug(f"Cache MISS for {prefix}: {cache_key}")
            result = func(*args, **kwargs)
            cache.set(cache_key, result, cache_ttl)
            return result
        return wrapper
    return decorator


def uses_redis():
    return 'django_redis' in settings.CACHES['default']['BACKEND']


def invalidate_cache_pattern(pattern):
    """
    Invalidate all cache keys matching a pattern

    Redis is scanned for matching keys; other backends cannot enumerate keys
    and are cleared completely.
    """
    if not uses_redis():
        cache.clear()
        logger.info(f"Cache cleared for pattern: {pattern} (backend without key scan)")
        return

    try:
        from django_redis import get_redis_connection
        redis_conn = get_redis_connection("default")

        keys = []
        cursor = 0
        while True:
            cursor, partial_keys = redis_conn.scan(cursor, match=f"*{pattern}*", count=100)
            keys.extend(partial_keys)
            if cursor == 0:
                break

        if keys:
            redis_conn.delete(*keys)
            logger.info(f"Invalidated {len(keys)} cache keys matching pattern: {pattern}")
    except Exception as e:
        logger.warning(f"Could not invalidate cache pattern {pattern}: {str(e)}")
