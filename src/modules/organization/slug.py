"""Human-readable, globally unique organization identifiers."""

import re
from uuid import UUID

OWNER_SUFFIX_LENGTH = 8
EMPTY_NAME_PLACEHOLDER = "organization"

_NON_ALPHANUMERIC_RUN = re.compile(r"[^a-z0-9]+")


def slugify(name: str | None) -> str:
    """Lower-case a display name and collapse everything else to single hyphens."""
    return _NON_ALPHANUMERIC_RUN.sub("-", (name or "").lower()).strip("-")


def allocate_slug(name: str | None, owner_id: str | UUID) -> str:
    """Build the slug for an organization owned by ``owner_id``.

    Owners are unique and own at most one organization, so suffixing the
    normalized name with the owner's id prefix yields a slug that is unique
    across the store without querying it first.

    >>> allocate_slug("ABC Consulting", "a1b2c3d4-e5f6-7890-abcd-ef0123456789")
    'abc-consulting-a1b2c3d4'
    """
    base = slugify(name) or EMPTY_NAME_PLACEHOLDER
    return f"{base}-{str(owner_id)[:OWNER_SUFFIX_LENGTH]}"
