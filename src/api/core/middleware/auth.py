import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

from src.api.core.constants import SKIP_AUTH_PATHS
from src.api.core.exceptions.base import UwezoException
from src.api.core.messages import MessageCode
from src.modules.user.auth_handlers import handle_jwt_auth
from src.utils.path_helpers import path_matches

logger = structlog.get_logger(__name__)


async def auth_middleware(request: Request, call_next):
    """Attach the caller's identity to ``request.state.user``.

    Requests without credentials pass through with no user; endpoints that
    need one reject them through ``get_current_user_authenticated``.
    """
    request.state.user = None

    if path_matches(request.url.path, SKIP_AUTH_PATHS):
        return await call_next(request)

    authorization = request.headers.get("Authorization", "")
    if not authorization:
        return await call_next(request)

    try:
        auth_parts = authorization.split(" ")
        if len(auth_parts) != 2 or auth_parts[0].lower() != "bearer":
            raise UwezoException(
                MessageCode.INVALID_TOKEN,
                status.HTTP_401_UNAUTHORIZED,
                {"description": "Authorization header must be 'Bearer <token>'"},
            )
        request.state.user = handle_jwt_auth(auth_parts[1])
    except UwezoException as e:
        # Middleware errors bypass the app's exception handlers
        logger.debug("Authentication rejected", message_code=e.message_code.value)
        return JSONResponse(status_code=e.status_code, content=e.to_response_dict())

    structlog.contextvars.bind_contextvars(user_id=str(request.state.user.user_id))
    return await call_next(request)
