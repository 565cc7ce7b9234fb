"""Tests for reviews and doctor rating aggregation."""

from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.models import doctor_profiles
from app.services.rating_service import mean_rating
from tests.factories import create_profile, make_auth_headers, set_status


async def _completed_appointment_for_new_patient(
    client: AsyncClient,
    db_session,
    appointment_payload: dict,
    doctor_headers: dict,
) -> tuple[str, dict]:
    """Book, confirm and complete an appointment for a fresh patient."""
    patient = await create_profile(db_session, "patient", "Reviewing Patient")
    headers = make_auth_headers(patient)

    response = await client.post("/api/appointments", json=appointment_payload, headers=headers)
    assert response.status_code == 201, response.text
    appointment_id = response.json()["appointment"]["id"]

    for status in ("confirmed", "completed"):
        response = await set_status(client, appointment_id, status, doctor_headers)
        assert response.status_code == 200, response.text

    return appointment_id, headers


async def _review(client: AsyncClient, appointment_id: str, rating: int, headers: dict):
    return await client.post(
        f"/api/appointments/{appointment_id}/review",
        json={"rating": rating, "comment": "Thorough and kind"},
        headers=headers,
    )


@pytest.mark.parametrize(
    ("ratings", "expected"),
    [
        ([5], Decimal("5.00")),
        ([4, 5, 3], Decimal("4.00")),
        ([4, 5, 3, 5], Decimal("4.25")),
        ([5, 4, 4], Decimal("4.33")),
        ([1, 2], Decimal("1.50")),
        ([5, 5, 4], Decimal("4.67")),
    ],
)
def test_mean_rating(ratings: list[int], expected: Decimal) -> None:
    assert mean_rating(ratings) == expected


@pytest.mark.asyncio
async def test_review_completed_appointment(
    client: AsyncClient,
    db_session,
    completed_appointment: dict,
    doctor: dict,
    patient: dict,
    patient_headers: dict,
) -> None:
    response = await _review(client, completed_appointment["id"], 4, patient_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["review"]["rating"] == 4
    assert data["review"]["patient_id"] == str(patient["id"])
    assert data["review"]["doctor_id"] == str(doctor["id"])
    assert data["doctor_rating"] == 4.0

    row = (
        await db_session.execute(
            select(doctor_profiles.c.rating, doctor_profiles.c.rating_count).where(
                doctor_profiles.c.id == doctor["id"]
            )
        )
    ).one()
    assert Decimal(str(row.rating)) == Decimal("4.00")
    assert row.rating_count == 1


@pytest.mark.asyncio
async def test_rating_is_mean_of_all_reviews(
    client: AsyncClient,
    db_session,
    doctor: dict,
    doctor_headers: dict,
    appointment_payload: dict,
) -> None:
    """Reviews 4, 5, 3 give 4.00; a further 5 gives 4.25."""
    for rating, expected in ((4, 4.0), (5, 4.5), (3, 4.0), (5, 4.25)):
        appointment_id, headers = await _completed_appointment_for_new_patient(
            client, db_session, appointment_payload, doctor_headers
        )
        response = await _review(client, appointment_id, rating, headers)
        assert response.status_code == 201, response.text
        assert response.json()["doctor_rating"] == expected

    doctor_view = await client.get(f"/api/doctors/{doctor['id']}", headers=doctor_headers)
    assert doctor_view.json()["doctor"]["rating"] == 4.25
    assert doctor_view.json()["doctor"]["rating_count"] == 4


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [None, "confirmed", "cancelled"])
async def test_review_requires_completed_appointment(
    client: AsyncClient,
    appointment: dict,
    patient_headers: dict,
    doctor_headers: dict,
    status: str | None,
) -> None:
    if status:
        await set_status(client, appointment["id"], status, doctor_headers)

    response = await _review(client, appointment["id"], 5, patient_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Reviews can only be submitted for completed appointments"


@pytest.mark.asyncio
async def test_duplicate_review_conflict(
    client: AsyncClient, completed_appointment: dict, patient_headers: dict
) -> None:
    first = await _review(client, completed_appointment["id"], 5, patient_headers)
    assert first.status_code == 201

    second = await _review(client, completed_appointment["id"], 1, patient_headers)
    assert second.status_code == 409


@pytest.mark.asyncio
async def test_only_the_patient_can_review(
    client: AsyncClient, completed_appointment: dict, other_patient_headers: dict
) -> None:
    response = await _review(client, completed_appointment["id"], 5, other_patient_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_doctor_cannot_review(
    client: AsyncClient, completed_appointment: dict, doctor_headers: dict
) -> None:
    response = await _review(client, completed_appointment["id"], 5, doctor_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_rating_out_of_range(
    client: AsyncClient, completed_appointment: dict, patient_headers: dict
) -> None:
    response = await _review(client, completed_appointment["id"], 6, patient_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_reviews_scoped(
    client: AsyncClient,
    completed_appointment: dict,
    patient_headers: dict,
    other_patient_headers: dict,
    doctor_headers: dict,
    admin_headers: dict,
) -> None:
    await _review(client, completed_appointment["id"], 5, patient_headers)

    assert (await client.get("/api/reviews", headers=patient_headers)).json()["count"] == 1
    assert (await client.get("/api/reviews", headers=doctor_headers)).json()["count"] == 1
    assert (await client.get("/api/reviews", headers=admin_headers)).json()["count"] == 1
    assert (await client.get("/api/reviews", headers=other_patient_headers)).json()["count"] == 0
