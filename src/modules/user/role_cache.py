"""Session-scoped resolution of a user's current role.

Dependent views ask ``RoleResolver.resolve_role`` instead of querying the
profile themselves. Concurrent callers for the same user share one lookup,
results are kept for a short TTL, and a successful role change drops the
entry immediately.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable
from uuid import UUID

from cachetools import TTLCache
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.api.core.exceptions.base import UwezoException
from src.api.core.exceptions.domain import to_domain_error
from src.cache import cached
from src.core.base import BaseService
from src.database.models import UserProfile, UserRole
from src.modules.user.navigation import decide_redirect
from src.utils.logger import get_logger
from src.utils.settings.roles import RoleSettings

logger = get_logger(__name__)


class RoleStatus(str, Enum):
    UNKNOWN = "unknown"
    FETCHING = "fetching"
    KNOWN = "known"
    ERROR = "error"


@dataclass(frozen=True)
class RoleState:
    status: RoleStatus
    role: UserRole | None = None
    confirmed: bool = False
    error: UwezoException | None = field(default=None, compare=False)

    @classmethod
    def known(cls, role: UserRole | None, confirmed: bool) -> "RoleState":
        # A role only counts once the user has confirmed it
        if role is None or not confirmed:
            return cls(RoleStatus.KNOWN, role=None, confirmed=False)
        return cls(RoleStatus.KNOWN, role=role, confirmed=True)

    @property
    def is_known(self) -> bool:
        return self.status == RoleStatus.KNOWN

    def redirect_for(self, path: str) -> str | None:
        """Redirect decision for a navigation to ``path``; only known states redirect."""
        if not self.is_known:
            return None
        return decide_redirect(path, self.role, self.confirmed)


UNKNOWN = RoleState(RoleStatus.UNKNOWN)
FETCHING = RoleState(RoleStatus.FETCHING)

RoleLookup = Callable[[UUID], Awaitable[RoleState]]


class RoleQueryService(BaseService):
    """Reads the role columns of a profile, cached in Redis per user."""

    @cached(ttl=RoleSettings().ROLE_QUERY_CACHE_TTL_SECONDS, versioned=True)
    async def get_role_state(self, user_id: UUID) -> RoleState:
        async with self.store_errors():
            stmt = select(UserProfile.role, UserProfile.role_confirmed).where(
                UserProfile.user_id == user_id
            )
            row = (await self.db.execute(stmt)).one_or_none()

        if row is None:
            return RoleState.known(None, False)
        role, confirmed = row
        return RoleState.known(UserRole(role) if role else None, bool(confirmed))


class RoleResolver:
    """Per-session role cache with request coalescing.

    A failed lookup is handed back as an ERROR state and is not cached, so
    the next call performs a fresh lookup. Nothing is retried automatically.
    """

    def __init__(
        self,
        lookup: RoleLookup,
        ttl: int | None = None,
        maxsize: int | None = None,
        timer: Callable[[], float] | None = None,
    ):
        settings = RoleSettings()
        self._lookup = lookup
        cache_kwargs = {"timer": timer} if timer is not None else {}
        self._cache: TTLCache[UUID, RoleState] = TTLCache(
            maxsize=maxsize or settings.ROLE_CACHE_MAXSIZE,
            ttl=ttl or settings.ROLE_CACHE_TTL_SECONDS,
            **cache_kwargs,
        )
        self._in_flight: dict[UUID, asyncio.Future] = {}
        self._generations: dict[UUID, int] = {}

    @classmethod
    def from_session_factory(
        cls, session_factory: async_sessionmaker[AsyncSession], **kwargs
    ) -> "RoleResolver":
        async def lookup(user_id: UUID) -> RoleState:
            async with session_factory() as db:
                return await RoleQueryService(db).get_role_state(user_id)

        return cls(lookup, **kwargs)

    def peek(self, user_id: UUID) -> RoleState:
        """Current state without triggering a lookup."""
        cached_state = self._cache.get(user_id)
        if cached_state is not None:
            return cached_state
        if user_id in self._in_flight:
            return FETCHING
        return UNKNOWN

    async def resolve_role(self, user_id: UUID) -> RoleState:
        cached_state = self._cache.get(user_id)
        if cached_state is not None:
            return cached_state

        in_flight = self._in_flight.get(user_id)
        if in_flight is None:
            generation = self._generations.get(user_id, 0)
            in_flight = asyncio.ensure_future(self._fetch(user_id, generation))
            self._in_flight[user_id] = in_flight
        else:
            logger.debug("Joining in-flight role lookup", user_id=str(user_id))

        # Shielded so a cancelled caller does not cancel the shared lookup
        return await asyncio.shield(in_flight)

    async def redirect_for(self, user_id: UUID, path: str) -> str | None:
        state = await self.resolve_role(user_id)
        return state.redirect_for(path)

    def invalidate(self, user_id: UUID) -> None:
        """Drop the cached entry; an in-flight lookup will not repopulate it."""
        self._cache.pop(user_id, None)
        self._in_flight.pop(user_id, None)
        self._generations[user_id] = self._generations.get(user_id, 0) + 1
        logger.debug("Invalidated role cache", user_id=str(user_id))

    async def _fetch(self, user_id: UUID, generation: int) -> RoleState:
        this_lookup = asyncio.current_task()
        try:
            state = await self._lookup(user_id)
        except Exception as exc:
            # Anything the lookup raises settles the shared future as an ERROR state
            error = to_domain_error(exc)
            logger.warning(
                "Role lookup failed",
                user_id=str(user_id),
                message_code=error.message_code.value,
            )
            return RoleState(RoleStatus.ERROR, error=error)
        finally:
            if self._in_flight.get(user_id) is this_lookup:
                del self._in_flight[user_id]

        if self._generations.get(user_id, 0) == generation:
            self._cache[user_id] = state
        return state
