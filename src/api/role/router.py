"""Role selection router."""

from fastapi import APIRouter, Query, Request

from src.api.core.dependencies import CurrentUserAuthDep, RoleResolverDep
from src.api.core.messages import APIResponse, MessageCode
from src.api.role.schemas import (
    AssignedRoleModel,
    AssignRoleRequest,
    AssignRoleResponse,
    RedirectData,
    RedirectResponse,
    RoleStateModel,
    RoleStateResponse,
)
from src.modules.user.role_assignment import assign_role_detached
from src.modules.user.role_cache import RoleStatus

router = APIRouter(prefix="/roles", tags=["roles"])


@router.post("/assign", response_model=AssignRoleResponse)
async def assign_role(
    request: Request,
    payload: AssignRoleRequest,
    current_user: CurrentUserAuthDep,
    resolver: RoleResolverDep,
) -> AssignRoleResponse:
    """Select a platform role for the current user.

    Becoming an organization owner fails with 409 `ORGANIZATION_SLUG_TAKEN` when
    another owner already holds the slug the organization name produces. The
    profile keeps the new role and hints; resubmitting with a different name
    completes the change.
    """
    assigned = await assign_role_detached(
        request.app.state.session_factory,
        resolver,
        current_user.user_id,
        payload.role,
        payload.organization.to_input() if payload.organization else None,
    )

    return APIResponse.success(
        message_code=MessageCode.ROLE_ASSIGNED,
        data=AssignedRoleModel.model_validate(assigned),
    )


@router.get("/me", response_model=RoleStateResponse)
async def get_my_role(
    current_user: CurrentUserAuthDep,
    resolver: RoleResolverDep,
) -> RoleStateResponse:
    """Current role of the caller, as seen by the role cache."""
    state = await resolver.resolve_role(current_user.user_id)
    if state.status == RoleStatus.ERROR:
        raise state.error

    message_code = MessageCode.SUCCESS if state.role else MessageCode.ROLE_NOT_SELECTED
    return APIResponse.success(
        message_code=message_code,
        data=RoleStateModel(role=state.role, role_confirmed=state.confirmed),
    )


@router.get("/me/redirect", response_model=RedirectResponse)
async def get_redirect(
    current_user: CurrentUserAuthDep,
    resolver: RoleResolverDep,
    path: str = Query(..., min_length=1),
) -> RedirectResponse:
    """Where the caller should be sent when navigating to ``path``."""
    state = await resolver.resolve_role(current_user.user_id)
    if state.status == RoleStatus.ERROR:
        raise state.error

    return APIResponse.success(
        message_code=MessageCode.SUCCESS,
        data=RedirectData(path=path, redirect_to=state.redirect_for(path)),
    )
