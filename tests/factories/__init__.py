"""Test factories for Uwezo API models."""

from .base import AsyncSQLAlchemyModelFactory
from .profiles import UserProfileFactory
from .organizations import OrganizationFactory

__all__ = [
    "AsyncSQLAlchemyModelFactory",
    "UserProfileFactory",
    "OrganizationFactory",
]
