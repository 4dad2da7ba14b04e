"""Test utilities for asserting API responses and message codes."""

from typing import Any
from httpx import Response
from src.api.core.messages import MessageCode


def assert_success_response(
    response: Response,
    expected_message_code: MessageCode = MessageCode.SUCCESS,
    expected_status: int = 200,
    data_assertions: dict[str, Any] | None = None,
) -> Any:
    """Assert that response is successful with expected message code.

    Args:
        response: HTTP response to check
        expected_message_code: Expected message code
        expected_status: Expected HTTP status code
        data_assertions: Optional dict of field -> expected value on response data

    Returns:
        Response data for further assertions
    """
    assert response.status_code == expected_status, (
        f"Expected status {expected_status}, got {response.status_code}. "
        f"Response: {response.text}"
    )

    json_data = response.json()
    assert json_data.get("message_code") == expected_message_code.value, (
        f"Expected message_code {expected_message_code.value}, "
        f"got {json_data.get('message_code')}"
    )
    assert "message" in json_data, "Success response should have message"

    data = json_data.get("data")
    for field, expected_value in (data_assertions or {}).items():
        assert (
            data[field] == expected_value
        ), f"Expected {field} to be {expected_value}, got {data[field]}"

    return data


def assert_error_response(
    response: Response,
    expected_message_code: MessageCode,
    expected_status: int,
) -> dict[str, Any]:
    """Assert that response is an error envelope and return its details."""
    assert response.status_code == expected_status, (
        f"Expected status {expected_status}, got {response.status_code}. "
        f"Response: {response.text}"
    )

    json_data = response.json()
    assert json_data.get("message_code") == expected_message_code.value, (
        f"Expected message_code {expected_message_code.value}, "
        f"got {json_data.get('message_code')}"
    )
    return json_data.get("details") or {}
