from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.exceptions.base import UwezoException
from src.api.core.messages import MessageCode
from src.core.context import AuthenticatedUserContext
from src.modules.user.role_cache import RoleResolver


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session from app state."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session


async def get_role_resolver(request: Request) -> RoleResolver:
    """Get the role resolver shared by this process."""
    return request.app.state.role_resolver


async def get_current_user_authenticated(request: Request) -> AuthenticatedUserContext:
    """Dependency to get the authenticated caller.

    Assumes auth middleware has set request.state.user when credentials were valid.
    """
    user = getattr(request.state, "user", None)
    if not user:
        raise UwezoException(MessageCode.AUTH_REQUIRED, status.HTTP_401_UNAUTHORIZED)
    return user


AsyncSessionDep = Annotated[AsyncSession, Depends(get_db_session)]
RoleResolverDep = Annotated[RoleResolver, Depends(get_role_resolver)]
CurrentUserAuthDep = Annotated[
    AuthenticatedUserContext, Depends(get_current_user_authenticated)
]
