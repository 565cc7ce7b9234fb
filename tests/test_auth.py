"""Tests for registration, login and the current-user endpoints."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from app.core.security import decode_session_token, issue_session_token
from tests.factories import TEST_PASSWORD, create_profile, make_auth_headers


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    """Test health check endpoint."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_register_patient_returns_token(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/register",
        json={
            "email": "New.Patient@Example.com",
            "password": "s3cure-password",
            "full_name": "New Patient",
            "role": "patient",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["user"]["email"] == "new.patient@example.com"
    assert data["user"]["role"] == "patient"
    assert "password_hash" not in data["user"]

    payload = decode_session_token(data["token"])
    assert payload is not None
    assert payload["sub"] == data["user"]["id"]
    assert payload["role"] == "patient"


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient) -> None:
    """Registering twice with the same email is rejected."""
    body = {
        "email": "dup@example.com",
        "password": "s3cure-password",
        "full_name": "First",
        "role": "patient",
    }
    first = await client.post("/api/auth/register", json=body)
    assert first.status_code == 201

    second = await client.post("/api/auth/register", json={**body, "full_name": "Second"})
    assert second.status_code == 400
    data = second.json()
    assert data["success"] is False
    assert data["message"] == "Email already registered"


@pytest.mark.asyncio
async def test_register_admin_role_rejected(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/register",
        json={
            "email": "sneaky@example.com",
            "password": "s3cure-password",
            "full_name": "Sneaky",
            "role": "admin",
        },
    )
    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"


@pytest.mark.asyncio
async def test_register_short_password_rejected(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/register",
        json={"email": "x@example.com", "password": "short", "full_name": "X", "role": "doctor"},
    )
    assert response.status_code == 400
    assert response.json()["details"]


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, patient: dict) -> None:
    response = await client.post(
        "/api/auth/login",
        json={"email": "PATIENT@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == str(patient["id"])
    assert data["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, patient: dict) -> None:
    response = await client.post(
        "/api/auth/login",
        json={"email": patient["email"], "password": "not-the-password"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_unknown_email(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/login",
        json={"email": "nobody@example.com", "password": "whatever-it-is"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient) -> None:
    response = await client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_me_rejects_garbage_token(client: AsyncClient) -> None:
    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_rejects_expired_token(client: AsyncClient, patient: dict) -> None:
    token = issue_session_token(str(patient["id"]), expires_in=timedelta(minutes=-5))
    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_profile(
    client: AsyncClient, patient: dict, patient_headers: dict
) -> None:
    response = await client.get("/api/auth/me", headers=patient_headers)
    assert response.status_code == 200
    assert response.json()["user"]["email"] == patient["email"]


@pytest.mark.asyncio
async def test_inactive_user_forbidden(client: AsyncClient, db_session) -> None:
    user = await create_profile(db_session, "patient", "Gone Away", is_active=False)
    response = await client.get("/api/auth/me", headers=make_auth_headers(user))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_me(client: AsyncClient, patient_headers: dict) -> None:
    response = await client.patch(
        "/api/users/me",
        json={"full_name": "Patricia Patient", "phone": "+15550100"},
        headers=patient_headers,
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["full_name"] == "Patricia Patient"
    assert user["phone"] == "+15550100"


@pytest.mark.asyncio
@pytest.mark.parametrize("full_name", [None, "   "])
async def test_update_me_cannot_clear_full_name(
    client: AsyncClient, patient_headers: dict, full_name: str | None
) -> None:
    response = await client.patch(
        "/api/users/me", json={"full_name": full_name}, headers=patient_headers
    )
    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"

    me = await client.get("/api/auth/me", headers=patient_headers)
    assert me.json()["user"]["full_name"] == "Pat Patient"


@pytest.mark.asyncio
async def test_update_me_clears_optional_fields(
    client: AsyncClient, patient_headers: dict
) -> None:
    await client.patch("/api/users/me", json={"phone": "+15550100"}, headers=patient_headers)
    response = await client.patch("/api/users/me", json={"phone": None}, headers=patient_headers)
    assert response.status_code == 200
    assert response.json()["user"]["phone"] is None


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient) -> None:
    response = await client.get("/api/ping", headers={"X-Request-ID": "abc123"})
    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "abc123"
    assert "X-Process-Time" in response.headers
