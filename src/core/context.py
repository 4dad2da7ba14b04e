"""Authentication context model for typed user authentication."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class AuthenticatedUserContext:
    """Identity of the caller as established by the auth middleware."""

    user_id: UUID
    email: str | None = None

    def __post_init__(self):
        if not self.user_id:
            raise ValueError("User ID is required in authentication context")
