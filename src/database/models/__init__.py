"""Database models for the Uwezo career API."""

from .base import Base
from .organizations import Industry, Organization, OrganizationSize
from .profiles import UserProfile, UserRole

__all__ = [
    # Base
    "Base",
    # Enums
    "UserRole",
    "OrganizationSize",
    "Industry",
    # Models
    "UserProfile",
    "Organization",
]
