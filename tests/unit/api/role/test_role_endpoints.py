"""Role selection endpoint tests."""

import pytest
from uuid import UUID, uuid4
from fastapi import status
from sqlalchemy.exc import OperationalError

from src.api.core.messages import MessageCode
from src.modules.organization.slug import allocate_slug
from tests.utils.assertions import assert_error_response, assert_success_response

ACME = {"name": "Acme", "industry": "Consulting", "size_range": "1-10"}


@pytest.mark.asyncio
async def test_assign_job_seeker(client_factory):
    user_id = uuid4()
    async with client_factory(user_id) as client:
        response = await client.post("/v1/roles/assign", json={"role": "job_seeker"})

    assert_success_response(
        response,
        MessageCode.ROLE_ASSIGNED,
        data_assertions={
            "user_id": str(user_id),
            "role": "job_seeker",
            "role_confirmed": True,
            "organization_slug": None,
        },
    )


@pytest.mark.asyncio
async def test_assign_owner_creates_organization(client_factory):
    user_id = uuid4()
    async with client_factory(user_id) as client:
        response = await client.post(
            "/v1/roles/assign",
            json={"role": "organization_owner", "organization": ACME},
        )
        org_response = await client.get("/v1/organizations/me")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["organization_slug"] == allocate_slug("Acme", user_id)

    assert org_response.status_code == status.HTTP_200_OK
    organization = org_response.json()["data"]
    assert organization["name"] == "Acme"
    assert organization["owner_id"] == str(user_id)
    assert organization["industry"] == "Consulting"


@pytest.mark.asyncio
async def test_assign_owner_with_blank_name_reports_missing_fields(client_factory):
    async with client_factory() as client:
        response = await client.post(
            "/v1/roles/assign",
            json={
                "role": "organization_owner",
                "organization": {**ACME, "name": "   "},
            },
        )

    details = assert_error_response(
        response, MessageCode.VALIDATION_ERROR, status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    assert response.json()["message"] == "Please fill in all organization details"
    assert details["missing_fields"] == ["name"]


@pytest.mark.asyncio
async def test_assign_owner_without_organization(client_factory):
    async with client_factory() as client:
        response = await client.post(
            "/v1/roles/assign", json={"role": "organization_owner"}
        )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["message_code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_assign_rejects_unknown_industry(client_factory):
    async with client_factory() as client:
        response = await client.post(
            "/v1/roles/assign",
            json={
                "role": "organization_owner",
                "organization": {**ACME, "industry": "Piracy"},
            },
        )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["message_code"] == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_assign_requires_authentication(public_client):
    response = await public_client.post("/v1/roles/assign", json={"role": "job_seeker"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message_code"] == "AUTH_REQUIRED"


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(public_client):
    response = await public_client.get(
        "/v1/roles/me", headers={"Authorization": "Bearer garbage"}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message_code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_malformed_authorization_header_is_rejected(public_client):
    response = await public_client.get(
        "/v1/roles/me", headers={"Authorization": "Token abc"}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message_code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_role_me_before_selection(client_factory):
    async with client_factory() as client:
        response = await client.get("/v1/roles/me")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["message_code"] == "ROLE_NOT_SELECTED"
    assert body["data"] == {"role": None, "role_confirmed": False}


@pytest.mark.asyncio
async def test_role_me_reflects_assignment_immediately(client_factory):
    """The resolver entry is invalidated as soon as the assignment succeeds."""
    async with client_factory() as client:
        before = await client.get("/v1/roles/me")
        await client.post("/v1/roles/assign", json={"role": "independent_contractor"})
        after = await client.get("/v1/roles/me")
        await client.post("/v1/roles/assign", json={"role": "job_seeker"})
        switched = await client.get("/v1/roles/me")

    assert before.json()["data"]["role"] is None
    assert after.json()["data"] == {
        "role": "independent_contractor",
        "role_confirmed": True,
    }
    assert switched.json()["data"]["role"] == "job_seeker"


@pytest.mark.asyncio
async def test_redirect_endpoint(client_factory):
    async with client_factory() as client:
        unselected = await client.get(
            "/v1/roles/me/redirect", params={"path": "/protected/employer"}
        )
        await client.post(
            "/v1/roles/assign",
            json={"role": "organization_owner", "organization": ACME},
        )
        landing = await client.get("/v1/roles/me/redirect", params={"path": "/protected"})
        settled = await client.get(
            "/v1/roles/me/redirect", params={"path": "/protected/employer"}
        )
        wrong_view = await client.get(
            "/v1/roles/me/redirect", params={"path": "/protected/employee"}
        )

    assert unselected.json()["data"]["redirect_to"] == "/protected"
    assert landing.json()["data"] == {
        "path": "/protected",
        "redirect_to": "/protected/employer",
    }
    assert settled.json()["data"]["redirect_to"] is None
    assert wrong_view.json()["data"]["redirect_to"] == "/protected/employer"


@pytest.mark.asyncio
async def test_redirect_requires_path(client_factory):
    async with client_factory() as client:
        response = await client.get("/v1/roles/me/redirect")

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_role_me_surfaces_lookup_failure(client_factory, role_resolver):
    async def unavailable_lookup(user_id):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    role_resolver._lookup = unavailable_lookup

    async with client_factory() as client:
        response = await client.get("/v1/roles/me")

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["message_code"] == "SERVICE_UNAVAILABLE"


@pytest.mark.asyncio
async def test_role_me_reports_unexpected_lookup_failure_as_unavailable(
    client_factory, role_resolver
):
    async def broken_lookup(user_id):
        raise RuntimeError("connection pool exhausted")

    role_resolver._lookup = broken_lookup

    async with client_factory() as client:
        response = await client.get("/v1/roles/me")

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["message_code"] == "SERVICE_UNAVAILABLE"


@pytest.mark.asyncio
async def test_assign_owner_with_taken_slug_reports_distinct_code(client_factory):
    """Owners sharing an id prefix cannot both register the same name."""
    first_id = UUID("22222222-0000-0000-0000-000000000001")
    second_id = UUID("22222222-0000-0000-0000-000000000002")
    body = {"role": "organization_owner", "organization": ACME}

    async with client_factory(first_id) as client:
        first = await client.post("/v1/roles/assign", json=body)
    async with client_factory(second_id) as client:
        second = await client.post("/v1/roles/assign", json=body)

    assert first.status_code == status.HTTP_200_OK
    assert_error_response(
        second, MessageCode.ORGANIZATION_SLUG_TAKEN, status.HTTP_409_CONFLICT
    )
