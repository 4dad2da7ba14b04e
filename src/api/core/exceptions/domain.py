"""Domain errors raised by role assignment and organization reconciliation."""

from fastapi import status

from src.api.core.exceptions.base import UwezoException
from src.api.core.messages import MessageCode
from src.database.errors import StoreError, StoreErrorKind, classify_store_error


class RoleValidationError(UwezoException):
    """Caller-supplied input is incomplete; safe to show to the user verbatim."""

    def __init__(self, description: str, fields: list[str] | None = None):
        details: dict = {"description": description}
        if fields:
            details["missing_fields"] = fields
        super().__init__(
            MessageCode.VALIDATION_ERROR,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            details,
            message=description,
        )


class ConflictError(UwezoException):
    """A record with an equivalent identity already exists."""

    def __init__(self, store_error: StoreError):
        self.store_error = store_error
        super().__init__(
            MessageCode.CONFLICT,
            status.HTTP_409_CONFLICT,
            {"constraint": store_error.constraint},
        )


class SlugTakenError(ConflictError):
    """Another owner already holds the slug this organization name produces."""

    def __init__(self, store_error: StoreError):
        self.store_error = store_error
        UwezoException.__init__(
            self,
            MessageCode.ORGANIZATION_SLUG_TAKEN,
            status.HTTP_409_CONFLICT,
            {"constraint": store_error.constraint},
        )


class OwnerReferenceError(UwezoException):
    """The owning user is missing from the store. Not recoverable by the user."""

    def __init__(self, store_error: StoreError):
        self.store_error = store_error
        super().__init__(
            MessageCode.OWNER_NOT_FOUND,
            status.HTTP_409_CONFLICT,
            {"constraint": store_error.constraint},
        )


class ConstraintError(UwezoException):
    """An enumerated field holds a value outside its allowed set."""

    def __init__(self, store_error: StoreError):
        self.store_error = store_error
        super().__init__(
            MessageCode.CONSTRAINT_VIOLATION,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            {"constraint": store_error.constraint},
        )


class TransientError(UwezoException):
    """Any other store or network failure. The whole request may be retried."""

    def __init__(self, store_error: StoreError):
        self.store_error = store_error
        super().__init__(
            MessageCode.SERVICE_UNAVAILABLE,
            status.HTTP_503_SERVICE_UNAVAILABLE,
            {"kind": store_error.kind.value},
        )


_KIND_TO_ERROR: dict[StoreErrorKind, type[UwezoException]] = {
    StoreErrorKind.UNIQUE_VIOLATION: ConflictError,
    StoreErrorKind.FOREIGN_KEY_VIOLATION: OwnerReferenceError,
    StoreErrorKind.CHECK_VIOLATION: ConstraintError,
}


def to_domain_error(exc: BaseException) -> UwezoException:
    """Translate a store exception into the matching domain error."""
    if isinstance(exc, UwezoException):
        return exc
    store_error = classify_store_error(exc)
    error_cls = _KIND_TO_ERROR.get(store_error.kind, TransientError)
    return error_cls(store_error)
