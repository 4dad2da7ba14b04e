"""User profile model and the platform role enum."""

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, in_values
from .organizations import Industry, OrganizationSize


class UserRole(str, Enum):
    JOB_SEEKER = "job_seeker"
    ORGANIZATION_OWNER = "organization_owner"
    INDEPENDENT_CONTRACTOR = "independent_contractor"


class UserProfile(Base):
    __tablename__ = "user_profiles"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, comment="Supabase Auth User ID"
    )
    role: Mapped[str] = mapped_column(
        String, default=UserRole.JOB_SEEKER.value, nullable=False
    )
    role_confirmed: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    # Denormalized copies of the owned organization, null unless organization_owner
    org_name_hint: Mapped[str | None] = mapped_column(String, nullable=True)
    org_size_hint: Mapped[str | None] = mapped_column(String, nullable=True)
    org_industry_hint: Mapped[str | None] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    organization = relationship(
        "Organization",
        back_populates="owner",
        uselist=False,
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(in_values("role", UserRole), name="role"),
        CheckConstraint(in_values("org_size_hint", OrganizationSize), name="org_size"),
        CheckConstraint(
            in_values("org_industry_hint", Industry), name="org_industry"
        ),
    )

    @property
    def user_role(self) -> UserRole:
        return UserRole(self.role)
