"""Role selection: moves a user to a new platform role and reconciles what depends on it."""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.api.core.exceptions.base import UwezoException
from src.api.core.exceptions.domain import ConflictError, RoleValidationError
from src.cache import invalidate_user_role_cache
from src.core.base import BaseService
from src.database.models import Organization, UserProfile, UserRole
from src.modules.organization.tenant import OrganizationInput, OrganizationReconciler

if TYPE_CHECKING:
    from src.modules.user.role_cache import RoleResolver


class AssignmentStage(str, Enum):
    VALIDATING = "validating"
    CLEANING_UP = "cleaning_up"
    WRITING_PROFILE = "writing_profile"
    RECONCILING_TENANT = "reconciling_tenant"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class AssignedRole:
    user_id: UUID
    role: UserRole
    role_confirmed: bool = True
    organization_id: UUID | None = None
    organization_slug: str | None = None


class RoleAssignmentService(BaseService):
    """Runs one role-selection request: validate, clean up, write profile, reconcile.

    Steps run strictly in order and each one commits on its own. The first
    failure aborts the request; committed steps are left in place because
    every step is idempotent and the whole request can be replayed.
    """

    def __init__(self, db: AsyncSession, resolver: "RoleResolver | None" = None):
        super().__init__(db)
        self.resolver = resolver
        self.reconciler = OrganizationReconciler(db)
        self.stage: AssignmentStage | None = None

    async def assign_role(
        self,
        user_id: UUID,
        desired_role: UserRole | str,
        org_input: OrganizationInput | None = None,
    ) -> AssignedRole:
        self.stage = AssignmentStage.VALIDATING
        log = self.logger.bind(user_id=str(user_id))
        try:
            role, org_input = self._validate(desired_role, org_input)
            log = log.bind(role=role.value)

            self._enter(AssignmentStage.CLEANING_UP, log)
            await self.reconciler.remove(user_id)

            self._enter(AssignmentStage.WRITING_PROFILE, log)
            await self._write_profile(user_id, role, org_input)

            organization: Organization | None = None
            if role == UserRole.ORGANIZATION_OWNER:
                self._enter(AssignmentStage.RECONCILING_TENANT, log)
                organization = await self.reconciler.ensure(user_id, org_input)
        except UwezoException as exc:
            failed_stage, self.stage = self.stage, AssignmentStage.FAILED
            log.warning(
                "Role assignment failed",
                stage=self.stage.value,
                failed_stage=failed_stage.value,
                message_code=exc.message_code.value,
                details=exc.details,
            )
            raise

        await self._invalidate(user_id)
        self.stage = AssignmentStage.DONE
        log.info("Role assigned", stage=self.stage.value)

        return AssignedRole(
            user_id=user_id,
            role=role,
            role_confirmed=True,
            organization_id=organization.id if organization else None,
            organization_slug=organization.slug if organization else None,
        )

    def _enter(self, stage: AssignmentStage, log) -> None:
        self.stage = stage
        log.debug("Role assignment stage", stage=stage.value)

    def _validate(
        self, desired_role: UserRole | str, org_input: OrganizationInput | None
    ) -> tuple[UserRole, OrganizationInput | None]:
        try:
            role = UserRole(desired_role)
        except ValueError:
            raise RoleValidationError(f"Unknown role: {desired_role}", ["role"])

        if role != UserRole.ORGANIZATION_OWNER:
            return role, None

        if org_input is None:
            raise RoleValidationError(
                "Please fill in all organization details",
                ["name", "industry", "size_range"],
            )
        missing = org_input.missing_fields()
        if missing:
            raise RoleValidationError("Please fill in all organization details", missing)
        return role, org_input.normalized()

    async def _write_profile(
        self,
        user_id: UUID,
        role: UserRole,
        org_input: OrganizationInput | None,
        retry_as_update: bool = True,
    ) -> None:
        # Explicit lookup on the one unique key instead of an upsert with an inferred target
        async with self.store_errors():
            profile = await self.db.get(UserProfile, user_id, populate_existing=True)

        shadow = {
            "org_name_hint": org_input.name if org_input else None,
            "org_size_hint": org_input.size_range if org_input else None,
            "org_industry_hint": org_input.industry if org_input else None,
        }

        if profile:
            profile.role = role.value
            profile.role_confirmed = True
            for field, value in shadow.items():
                setattr(profile, field, value)
            await self.commit()
            return

        self.db.add(
            UserProfile(
                user_id=user_id,
                role=role.value,
                role_confirmed=True,
                **shadow,
            )
        )
        try:
            await self.commit()
        except ConflictError:
            # Another request created the profile between lookup and insert
            if not retry_as_update:
                raise
            self.logger.info(
                "Profile created concurrently, applying as update",
                user_id=str(user_id),
            )
            await self._write_profile(user_id, role, org_input, retry_as_update=False)

    async def _invalidate(self, user_id: UUID) -> None:
        await invalidate_user_role_cache(user_id)
        if self.resolver is not None:
            self.resolver.invalidate(user_id)


async def assign_role_detached(
    session_factory: async_sessionmaker[AsyncSession],
    resolver: "RoleResolver | None",
    user_id: UUID,
    desired_role: UserRole | str,
    org_input: OrganizationInput | None = None,
) -> AssignedRole:
    """Run ``assign_role`` on its own session, shielded from caller cancellation.

    A disconnecting client cancels the request handler but not the assignment,
    which always runs through to the end (success or failure).
    """

    async def run() -> AssignedRole:
        async with session_factory() as db:
            service = RoleAssignmentService(db, resolver)
            return await service.assign_role(user_id, desired_role, org_input)

    return await asyncio.shield(asyncio.ensure_future(run()))
