"""Organization API schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.api.core.messages import APIResponse


class OrganizationModel(BaseModel):
    id: UUID
    owner_id: UUID
    slug: str
    name: str
    industry: str | None
    size_range: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


OrganizationResponse = APIResponse[OrganizationModel]
