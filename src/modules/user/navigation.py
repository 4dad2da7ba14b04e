"""Where a user belongs inside the protected area, given what we know about their role."""

from enum import Enum

from src.database.models import UserRole

PROTECTED_PREFIX = "/protected"


class View(str, Enum):
    # The landing page doubles as role selection until a role is confirmed
    LANDING = "/protected"
    JOB_SEEKER = "/protected/employee"
    ORGANIZATION_OWNER = "/protected/employer"
    INDEPENDENT_CONTRACTOR = "/protected/independent"
    PROFILE = "/protected/profile"


SELECTION_VIEW = View.LANDING

ROLE_VIEWS: dict[UserRole, View] = {
    UserRole.JOB_SEEKER: View.JOB_SEEKER,
    UserRole.ORGANIZATION_OWNER: View.ORGANIZATION_OWNER,
    UserRole.INDEPENDENT_CONTRACTOR: View.INDEPENDENT_CONTRACTOR,
}

_ROLE_SPECIFIC = frozenset(ROLE_VIEWS.values())


def normalize_path(path: str) -> str:
    path = path.split("?", 1)[0].split("#", 1)[0]
    if len(path) > 1:
        path = path.rstrip("/")
    return path or "/"


def view_for_path(path: str) -> View | None:
    """Resolve a path (or any sub-path) to the view that owns it."""
    path = normalize_path(path)
    if path == View.LANDING.value:
        return View.LANDING
    for view in View:
        if view is View.LANDING:
            continue
        if path == view.value or path.startswith(view.value + "/"):
            return view
    return None


def decide_redirect(
    path: str, role: UserRole | None, confirmed: bool
) -> str | None:
    """Return the path to redirect to, or None when the current view is right.

    No role      -> role-specific and profile views go to selection.
    Landing      -> the view for the confirmed role.
    Wrong role   -> the view for the actual role.
    """
    view = view_for_path(path)
    if view is None:
        return None

    if role is None or not confirmed:
        target = None if view is SELECTION_VIEW else SELECTION_VIEW
    else:
        role_view = ROLE_VIEWS[role]
        if view is View.LANDING:
            target = role_view
        elif view in _ROLE_SPECIFIC and view is not role_view:
            target = role_view
        else:
            target = None

    if target is None or target.value == normalize_path(path):
        return None
    return target.value
