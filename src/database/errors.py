"""Classification of store errors into the classes the services reason about."""

from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import DBAPIError, IntegrityError, NoResultFound
from sqlalchemy.orm.exc import StaleDataError


class StoreErrorKind(str, Enum):
    UNIQUE_VIOLATION = "unique_violation"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    CHECK_VIOLATION = "check_violation"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


# PostgreSQL SQLSTATE codes
_SQLSTATE_KINDS = {
    "23505": StoreErrorKind.UNIQUE_VIOLATION,
    "23503": StoreErrorKind.FOREIGN_KEY_VIOLATION,
    "23514": StoreErrorKind.CHECK_VIOLATION,
}

# Driver wording, used when no SQLSTATE is exposed (SQLite)
_MESSAGE_KINDS = (
    ("unique constraint", StoreErrorKind.UNIQUE_VIOLATION),
    ("duplicate key", StoreErrorKind.UNIQUE_VIOLATION),
    ("foreign key constraint", StoreErrorKind.FOREIGN_KEY_VIOLATION),
    ("check constraint", StoreErrorKind.CHECK_VIOLATION),
)


@dataclass(frozen=True)
class StoreError:
    kind: StoreErrorKind
    detail: str
    constraint: str | None = None

    def involves(self, column: str) -> bool:
        """Whether the violated constraint mentions the given column."""
        haystack = f"{self.constraint or ''} {self.detail}".lower()
        return column.lower() in haystack


def _sqlstate(orig: BaseException | None) -> str | None:
    if orig is None:
        return None
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    cause = getattr(orig, "__cause__", None)
    if cause is not None and cause is not orig:
        code = getattr(cause, "sqlstate", None)
        if code:
            return str(code)
    return None


def _constraint_name(orig: BaseException | None) -> str | None:
    if orig is None:
        return None
    name = getattr(orig, "constraint_name", None)
    if name:
        return name
    cause = getattr(orig, "__cause__", None)
    return getattr(cause, "constraint_name", None) if cause is not None else None


def classify_store_error(exc: BaseException) -> StoreError:
    """Map a SQLAlchemy/DBAPI exception onto a StoreErrorKind."""
    if isinstance(exc, (NoResultFound, StaleDataError)):
        return StoreError(StoreErrorKind.NOT_FOUND, str(exc))

    if not isinstance(exc, DBAPIError):
        return StoreError(StoreErrorKind.UNKNOWN, str(exc))

    orig = exc.orig
    detail = str(orig) if orig is not None else str(exc)
    constraint = _constraint_name(orig)

    code = _sqlstate(orig)
    if code in _SQLSTATE_KINDS:
        return StoreError(_SQLSTATE_KINDS[code], detail, constraint)

    if isinstance(exc, IntegrityError):
        lowered = detail.lower()
        for needle, kind in _MESSAGE_KINDS:
            if needle in lowered:
                return StoreError(kind, detail, constraint)

    return StoreError(StoreErrorKind.UNKNOWN, detail, constraint)
