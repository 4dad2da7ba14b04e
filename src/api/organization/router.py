"""Organization domain router."""

from fastapi import APIRouter, status

from src.api.core.dependencies import AsyncSessionDep, CurrentUserAuthDep
from src.api.core.exceptions.base import UwezoException
from src.api.core.messages import APIResponse, MessageCode
from src.api.organization.schemas import OrganizationModel, OrganizationResponse
from src.modules.organization.tenant import OrganizationReconciler

router = APIRouter(
    prefix="/organizations",
    tags=["organizations"],
)


@router.get("/me", response_model=OrganizationResponse)
async def get_my_organization(
    db: AsyncSessionDep,
    current_user: CurrentUserAuthDep,
) -> OrganizationResponse:
    """Get the organization owned by the current user."""
    organization = await OrganizationReconciler(db).get_for_owner(current_user.user_id)
    if organization is None:
        raise UwezoException(
            MessageCode.ORGANIZATION_NOT_FOUND,
            status.HTTP_404_NOT_FOUND,
        )

    return APIResponse.success(
        message_code=MessageCode.SUCCESS,
        data=OrganizationModel.model_validate(organization),
    )
