"""Reconciliation of the organization record owned by a user."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import delete, select

from src.api.core.exceptions.domain import (
    ConflictError,
    RoleValidationError,
    SlugTakenError,
)
from src.core.base import BaseService
from src.database.models import Organization, UserRole
from src.modules.organization.slug import allocate_slug


@dataclass(frozen=True)
class OrganizationInput:
    name: str | None = None
    industry: str | None = None
    size_range: str | None = None

    def missing_fields(self) -> list[str]:
        return [
            field
            for field in ("name", "industry", "size_range")
            if not (getattr(self, field) or "").strip()
        ]

    def normalized(self) -> "OrganizationInput":
        return OrganizationInput(
            name=(self.name or "").strip(),
            industry=(self.industry or "").strip(),
            size_range=(self.size_range or "").strip(),
        )


class OrganizationReconciler(BaseService):
    """Creates, updates or removes the single organization a user may own.

    Every call touches at most one row for the owner and is safe to repeat.
    """

    async def get_for_owner(self, owner_id: UUID) -> Organization | None:
        async with self.store_errors():
            stmt = (
                select(Organization)
                .where(Organization.owner_id == owner_id)
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none()

    async def reconcile(
        self,
        owner_id: UUID,
        desired_role: UserRole,
        org_input: OrganizationInput | None = None,
    ) -> Organization | None:
        if desired_role != UserRole.ORGANIZATION_OWNER:
            await self.remove(owner_id)
            return None

        if org_input is None or org_input.missing_fields():
            raise RoleValidationError(
                "Please fill in all organization details",
                org_input.missing_fields() if org_input else ["organization"],
            )
        return await self.ensure(owner_id, org_input.normalized())

    async def remove(self, owner_id: UUID) -> bool:
        """Delete the owner's organization. A missing record is not an error."""
        async with self.store_errors():
            stmt = delete(Organization).where(Organization.owner_id == owner_id)
            result = await self.db.execute(stmt)
        await self.commit()

        removed = bool(result.rowcount)
        if removed:
            self.logger.info("Removed organization", owner_id=str(owner_id))
        else:
            self.logger.debug("No organization to remove", owner_id=str(owner_id))
        return removed

    async def ensure(self, owner_id: UUID, org_input: OrganizationInput) -> Organization:
        """Update the owner's organization in place, or create it."""
        existing = await self.get_for_owner(owner_id)
        if existing:
            return await self._apply(existing, org_input)

        organization = Organization(
            owner_id=owner_id,
            slug=allocate_slug(org_input.name, str(owner_id)),
            name=org_input.name,
            industry=org_input.industry,
            size_range=org_input.size_range,
        )
        self.db.add(organization)
        try:
            await self.commit()
        except ConflictError as exc:
            current = await self.get_for_owner(owner_id)
            if current is None:
                # Another owner already holds this slug
                raise SlugTakenError(exc.store_error) from exc
            # A concurrent call for this owner inserted first; apply these details on top
            self.logger.info(
                "Organization already exists, updating it instead",
                owner_id=str(owner_id),
                constraint=exc.store_error.constraint,
            )
            return await self._apply(current, org_input)

        self.logger.info(
            "Created organization",
            owner_id=str(owner_id),
            slug=organization.slug,
        )
        return organization

    async def _apply(
        self, organization: Organization, org_input: OrganizationInput
    ) -> Organization:
        # The slug survives renames so external links keep working
        organization.name = org_input.name
        organization.industry = org_input.industry
        organization.size_range = org_input.size_range
        await self.commit()
        self.logger.info(
            "Updated organization",
            owner_id=str(organization.owner_id),
            slug=organization.slug,
        )
        return organization
