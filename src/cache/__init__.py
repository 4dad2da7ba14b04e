from .decorator import (
    cached,
    invalidate_cache,
    invalidate_user_cache,
    invalidate_user_role_cache,
)

__all__ = [
    "cached",
    "invalidate_cache",
    "invalidate_user_cache",
    "invalidate_user_role_cache",
]
