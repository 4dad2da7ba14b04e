"""Factory for UserProfile models."""

from src.database.models import UserProfile, UserRole
from .base import AsyncSQLAlchemyModelFactory, UUIDFactory


class UserProfileFactory(AsyncSQLAlchemyModelFactory[UserProfile]):
    """Factory for creating UserProfile instances."""

    class Meta:
        model = UserProfile

    user_id = UUIDFactory()
    role = UserRole.JOB_SEEKER.value
    role_confirmed = True
    org_name_hint = None
    org_size_hint = None
    org_industry_hint = None
