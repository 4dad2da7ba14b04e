"""JWT authentication handler."""

from fastapi import status
from jose import JWTError, jwt

from src.api.core.constants import JWT_ALGORITHM
from src.api.core.exceptions.base import UwezoException
from src.api.core.messages import MessageCode
from src.core.context import AuthenticatedUserContext
from src.modules.user.jwt_claims import extract_user_data_from_jwt
from src.utils.logger import get_logger
from src.utils.settings.auth import AuthSettings

logger = get_logger(__name__)


def handle_jwt_auth(token: str) -> AuthenticatedUserContext:
    settings = AuthSettings()
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
    except JWTError as e:
        logger.warning(f"JWT decoding failed: {e}")
        raise UwezoException(
            MessageCode.INVALID_TOKEN,
            status.HTTP_401_UNAUTHORIZED,
            {"description": "Invalid or expired authentication token"},
        )

    if payload.get("role") == "anon":
        raise UwezoException(
            MessageCode.FORBIDDEN,
            status.HTTP_403_FORBIDDEN,
            {"description": "Anonymous access not permitted"},
        )

    user_data = extract_user_data_from_jwt(payload)
    if not user_data["user_id"]:
        raise UwezoException(
            MessageCode.INVALID_TOKEN,
            status.HTTP_401_UNAUTHORIZED,
            {"description": "JWT token missing a valid user id"},
        )

    return AuthenticatedUserContext(
        user_id=user_data["user_id"], email=user_data["email"]
    )
