"""Role API schemas."""

from uuid import UUID

from pydantic import BaseModel, Field

from src.api.core.messages import APIResponse
from src.database.models import Industry, OrganizationSize, UserRole
from src.modules.organization.tenant import OrganizationInput


class OrganizationDetails(BaseModel):
    name: str = Field(..., max_length=255)
    industry: Industry
    size_range: OrganizationSize

    def to_input(self) -> OrganizationInput:
        return OrganizationInput(
            name=self.name,
            industry=self.industry.value,
            size_range=self.size_range.value,
        )


class AssignRoleRequest(BaseModel):
    role: UserRole
    organization: OrganizationDetails | None = None


class AssignedRoleModel(BaseModel):
    user_id: UUID
    role: UserRole
    role_confirmed: bool
    organization_id: UUID | None = None
    organization_slug: str | None = None

    model_config = {"from_attributes": True}


class RoleStateModel(BaseModel):
    role: UserRole | None
    role_confirmed: bool


class RedirectData(BaseModel):
    path: str
    redirect_to: str | None


AssignRoleResponse = APIResponse[AssignedRoleModel]
RoleStateResponse = APIResponse[RoleStateModel]
RedirectResponse = APIResponse[RedirectData]
