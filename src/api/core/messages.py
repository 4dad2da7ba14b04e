"""Centralized message codes and default messages for API responses."""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel


class MessageCode(str, Enum):
    """Centralized message codes for API responses."""

    # Success codes
    SUCCESS = "SUCCESS"
    CREATED = "CREATED"
    UPDATED = "UPDATED"

    # Authentication & Authorization
    AUTH_REQUIRED = "AUTH_REQUIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    FORBIDDEN = "FORBIDDEN"

    # Role assignment
    ROLE_ASSIGNED = "ROLE_ASSIGNED"
    ROLE_NOT_SELECTED = "ROLE_NOT_SELECTED"

    # Organization records
    ORGANIZATION_NOT_FOUND = "ORGANIZATION_NOT_FOUND"
    OWNER_NOT_FOUND = "OWNER_NOT_FOUND"
    ORGANIZATION_SLUG_TAKEN = "ORGANIZATION_SLUG_TAKEN"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    CONFLICT = "CONFLICT"

    # Service Errors
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"


# Default messages for each message code
DEFAULT_MESSAGES = {
    # Success messages
    MessageCode.SUCCESS: "Operation completed successfully",
    MessageCode.CREATED: "Resource created successfully",
    MessageCode.UPDATED: "Resource updated successfully",
    # Authentication & Authorization
    MessageCode.AUTH_REQUIRED: "Authentication required",
    MessageCode.INVALID_TOKEN: "Invalid authentication token",
    MessageCode.FORBIDDEN: "Access denied",
    # Role assignment
    MessageCode.ROLE_ASSIGNED: "Role assigned successfully",
    MessageCode.ROLE_NOT_SELECTED: "No role has been selected yet",
    # Organization records
    MessageCode.ORGANIZATION_NOT_FOUND: "Organization not found",
    MessageCode.OWNER_NOT_FOUND: "Your account could not be found. Please contact support.",
    MessageCode.ORGANIZATION_SLUG_TAKEN: (
        "An organization with this name already exists. Please choose a different name."
    ),
    # Validation errors
    MessageCode.VALIDATION_ERROR: "Validation failed",
    MessageCode.INVALID_INPUT: "Invalid input provided",
    MessageCode.CONSTRAINT_VIOLATION: "One of the provided values is not allowed",
    MessageCode.CONFLICT: "The resource already exists",
    # Service Errors
    MessageCode.SERVICE_UNAVAILABLE: "Something went wrong on our side. Please try again.",
    # Generic errors
    MessageCode.INTERNAL_ERROR: "Internal server error",
    MessageCode.RESOURCE_NOT_FOUND: "Resource not found",
    MessageCode.BAD_REQUEST: "Bad request",
}

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Base API response model with consistent structure and proper typing."""

    message_code: MessageCode
    message: str
    data: T | None = None

    @classmethod
    def success(
        cls,
        message_code: MessageCode = MessageCode.SUCCESS,
        message: str | None = None,
        data: T | None = None,
    ) -> "APIResponse[T]":
        """Create a success response."""
        return cls(
            message_code=message_code,
            message=message or DEFAULT_MESSAGES.get(message_code, "Success"),
            data=data,
        )

    @classmethod
    def error(
        cls,
        message_code: MessageCode,
        message: str | None = None,
        data: T | None = None,
    ) -> "APIResponse[T]":
        """Create an error response."""
        return cls(
            message_code=message_code,
            message=message or DEFAULT_MESSAGES.get(message_code, "Error occurred"),
            data=data,
        )


def get_default_message(message_code: MessageCode) -> str:
    """Get default message for a message code."""
    return DEFAULT_MESSAGES.get(message_code, "Operation completed")
