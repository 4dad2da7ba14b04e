import pickle
import redis.asyncio as redis
from functools import wraps
from uuid import UUID

from src.utils.logger import get_logger
from src.utils.settings.redis import RedisSettings

logger = get_logger(__name__)

_KEY_TYPES = (str, int, float, bool, UUID)


def _redis_client(decode_responses: bool = False) -> redis.Redis:
    return redis.from_url(RedisSettings().REDIS_URL, decode_responses=decode_responses)


def _business_args(args: tuple) -> tuple:
    """Drop a leading service instance so only call parameters are considered."""
    if args and not isinstance(args[0], _KEY_TYPES):
        return args[1:]
    return args


def _generate_cache_key(func, args: tuple, kwargs: dict) -> str:
    """Generate cache key from function name and business parameters only."""
    key_parts = [func.__module__.replace(".", ":"), func.__qualname__.replace(".", ":")]

    for arg in _business_args(args):
        if isinstance(arg, _KEY_TYPES):
            safe_arg = str(arg).replace(":", "_").replace("*", "_")
            key_parts.append(safe_arg)

    for k, v in sorted(kwargs.items()):
        if isinstance(v, _KEY_TYPES):
            safe_val = str(v).replace(":", "_").replace("*", "_")
            key_parts.append(f"{k}={safe_val}")

    return "cache:" + ":".join(key_parts)


async def _get_cache(key: str):
    """Get value from Redis cache."""
    try:
        redis_client = _redis_client()
        value = await redis_client.get(key)
        await redis_client.aclose()

        if value is not None:
            return pickle.loads(value)
        return None
    except Exception as e:
        logger.error(f"Failed to get cache key '{key}': {e}")
        return None


async def _set_cache(key: str, value, ttl: int, tags: list[str] | None = None) -> bool:
    """Set value in Redis cache with TTL and optional tags."""
    try:
        redis_client = _redis_client()
        await redis_client.setex(key, ttl, pickle.dumps(value))

        # Track cache key by tags for easy invalidation
        for tag in set(tags or []):
            tag_key = f"cache:tag:{tag}"
            await redis_client.sadd(tag_key, key)
            await redis_client.expire(tag_key, ttl)

        await redis_client.aclose()
        return True
    except Exception as e:
        logger.error(f"Failed to set cache key '{key}': {e}")
        return False


def _extract_tags(args: tuple, kwargs: dict) -> list[str]:
    """Extract user ids from args/kwargs for cache tagging."""
    tags = []

    for arg in _business_args(args):
        if isinstance(arg, UUID):
            tags.append(f"user:{arg}")

    for k, v in kwargs.items():
        if isinstance(v, UUID) and ("user" in k.lower() or "owner" in k.lower()):
            tags.append(f"user:{v}")

    return tags


async def _get_generation(tag: str) -> int | None:
    """Current generation of a tag; None when Redis cannot say."""
    try:
        redis_client = _redis_client(decode_responses=True)
        value = await redis_client.get(f"cache:gen:{tag}")
        await redis_client.aclose()
        return int(value or 0)
    except Exception as e:
        logger.error(f"Failed to read cache generation for '{tag}': {e}")
        return None


async def _bump_generation(tag: str) -> int | None:
    """Move a tag to a new generation so keys built under the old one go dead."""
    try:
        redis_client = _redis_client(decode_responses=True)
        generation = await redis_client.incr(f"cache:gen:{tag}")
        await redis_client.aclose()
        return generation
    except Exception as e:
        logger.error(f"Failed to bump cache generation for '{tag}': {e}")
        return None


def cached(ttl: int = 300, versioned: bool = False):
    """Cache decorator with Redis backend.

    Exceptions are never cached; only returned values are.

    With ``versioned=True`` the key also carries the generation of every tag,
    read before the call runs. Bumping a tag's generation then retires all
    keys built under the old one, including writes that land after the bump.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            cache_key = _generate_cache_key(func, args, kwargs)

            if versioned:
                generations = []
                for tag in sorted(set(_extract_tags(args, kwargs))):
                    generation = await _get_generation(tag)
                    if generation is None:
                        # Without a generation a stale write could not be told apart
                        return await func(*args, **kwargs)
                    generations.append(str(generation))
                if generations:
                    cache_key = f"{cache_key}:gen={'.'.join(generations)}"

            cached_value = await _get_cache(cache_key)
            if cached_value is not None:
                logger.debug(f"Cache hit: {cache_key}")
                return cached_value

            result = await func(*args, **kwargs)

            tags = _extract_tags(args, kwargs)
            await _set_cache(cache_key, result, ttl, tags)

            logger.debug(f"Cached: {cache_key}")
            return result

        return wrapper

    return decorator


async def invalidate_cache(func, *args, **kwargs) -> bool:
    """Invalidate cache entry for a specific function call."""
    try:
        cache_key = _generate_cache_key(func, args, kwargs)
        redis_client = _redis_client()

        result = await redis_client.delete(cache_key)

        for tag in _extract_tags(args, kwargs):
            await redis_client.srem(f"cache:tag:{tag}", cache_key)

        await redis_client.aclose()

        if result:
            logger.info(f"Invalidated cache: {cache_key}")
        return result > 0
    except Exception as e:
        logger.error(f"Failed to invalidate cache for {func.__name__}: {e}")
        return False


async def _invalidate_by_tag(tag: str) -> int:
    """Invalidate all cache entries with a specific tag."""
    try:
        redis_client = _redis_client(decode_responses=True)

        tag_key = f"cache:tag:{tag}"
        cache_keys = await redis_client.smembers(tag_key)

        if not cache_keys:
            await redis_client.aclose()
            return 0

        deleted = await redis_client.delete(*cache_keys, tag_key)
        await redis_client.aclose()

        logger.info(f"Invalidated {len(cache_keys)} entries for {tag}")
        return deleted

    except Exception as e:
        logger.error(f"Failed to invalidate tag '{tag}': {e}")
        return 0


async def invalidate_user_cache(user_id: UUID) -> int:
    """Invalidate all cache entries for a specific user."""
    count = await _invalidate_by_tag(f"user:{user_id}")
    logger.debug(f"Invalidated {count} cache entries for user {user_id}")
    return count


async def invalidate_user_role_cache(user_id: UUID) -> int:
    """Invalidate cached role lookups after a successful role change.

    The generation bump comes first so a lookup that read the store before
    the change can only write to a key nobody reads any more.
    """
    await _bump_generation(f"user:{user_id}")
    return await invalidate_user_cache(user_id)
