"""Tests for appointment booking and the status lifecycle."""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.models import doctor_profiles, notifications
from tests.factories import create_doctor_profile, create_profile, make_auth_headers, set_status


@pytest.mark.asyncio
async def test_create_appointment(
    client: AsyncClient,
    db_session,
    patient: dict,
    doctor: dict,
    doctor_user: dict,
    patient_headers: dict,
    appointment_payload: dict,
) -> None:
    """Booking creates a pending appointment and notifies the doctor."""
    response = await client.post(
        "/api/appointments", json=appointment_payload, headers=patient_headers
    )
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    appointment = data["appointment"]
    assert appointment["status"] == "pending"
    assert appointment["patient_id"] == str(patient["id"])
    assert appointment["doctor_id"] == str(doctor["id"])
    assert appointment["appointment_time"] == "10:30"

    result = await db_session.execute(
        select(notifications).where(notifications.c.user_id == doctor_user["id"])
    )
    rows = result.mappings().all()
    assert len(rows) == 1
    assert rows[0]["type"] == "appointment"
    assert rows[0]["title"] == "New Appointment Request"
    assert "Pat Patient" in rows[0]["message"]


@pytest.mark.asyncio
async def test_create_appointment_requires_patient(
    client: AsyncClient, doctor_headers: dict, appointment_payload: dict
) -> None:
    response = await client.post(
        "/api/appointments", json=appointment_payload, headers=doctor_headers
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_appointment_in_the_past_rejected(
    client: AsyncClient, patient_headers: dict, appointment_payload: dict
) -> None:
    payload = {
        **appointment_payload,
        "appointment_date": (date.today() - timedelta(days=1)).isoformat(),
    }
    response = await client.post("/api/appointments", json=payload, headers=patient_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_appointment_bad_time_rejected(
    client: AsyncClient, patient_headers: dict, appointment_payload: dict
) -> None:
    payload = {**appointment_payload, "appointment_time": "25:99"}
    response = await client.post("/api/appointments", json=payload, headers=patient_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_appointment_with_unverified_doctor(
    client: AsyncClient, db_session, patient_headers: dict, appointment_payload: dict
) -> None:
    """Unverified doctors are invisible to patients."""
    user = await create_profile(db_session, "doctor", "Dr. New")
    hidden = await create_doctor_profile(db_session, user["id"], is_verified=False)

    payload = {**appointment_payload, "doctor_id": str(hidden["id"])}
    response = await client.post("/api/appointments", json=payload, headers=patient_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Doctor not found"


@pytest.mark.asyncio
async def test_list_appointments_is_role_scoped(
    client: AsyncClient,
    appointment: dict,
    patient_headers: dict,
    other_patient_headers: dict,
    doctor_headers: dict,
    other_doctor: dict,
    other_doctor_headers: dict,
    admin_headers: dict,
) -> None:
    mine = await client.get("/api/appointments", headers=patient_headers)
    assert mine.status_code == 200
    assert mine.json()["count"] == 1
    assert mine.json()["appointments"][0]["id"] == appointment["id"]

    theirs = await client.get("/api/appointments", headers=other_patient_headers)
    assert theirs.json()["count"] == 0

    doctors_view = await client.get("/api/appointments", headers=doctor_headers)
    assert doctors_view.json()["count"] == 1

    other_doctors_view = await client.get("/api/appointments", headers=other_doctor_headers)
    assert other_doctors_view.json()["count"] == 0

    admin_view = await client.get("/api/appointments", headers=admin_headers)
    assert admin_view.json()["count"] == 1


@pytest.mark.asyncio
async def test_list_appointments_filter_by_status(
    client: AsyncClient, appointment: dict, patient_headers: dict
) -> None:
    pending = await client.get(
        "/api/appointments", params={"status": "pending"}, headers=patient_headers
    )
    assert pending.json()["count"] == 1

    completed = await client.get(
        "/api/appointments", params={"status": "completed"}, headers=patient_headers
    )
    assert completed.json()["count"] == 0


@pytest.mark.asyncio
async def test_doctor_without_profile_cannot_list(client: AsyncClient, db_session) -> None:
    user = await create_profile(db_session, "doctor", "Dr. Nobody")
    response = await client.get("/api/appointments", headers=make_auth_headers(user))
    assert response.status_code == 404
    assert response.json()["message"] == "Doctor profile not found"


@pytest.mark.asyncio
async def test_get_appointment_access(
    client: AsyncClient,
    appointment: dict,
    patient_headers: dict,
    other_patient_headers: dict,
    doctor_headers: dict,
    other_doctor: dict,
    other_doctor_headers: dict,
) -> None:
    url = f"/api/appointments/{appointment['id']}"

    assert (await client.get(url, headers=patient_headers)).status_code == 200
    assert (await client.get(url, headers=doctor_headers)).status_code == 200
    assert (await client.get(url, headers=other_patient_headers)).status_code == 403
    assert (await client.get(url, headers=other_doctor_headers)).status_code == 403


@pytest.mark.asyncio
async def test_get_missing_appointment(client: AsyncClient, patient_headers: dict) -> None:
    response = await client.get(
        "/api/appointments/00000000-0000-0000-0000-000000000000", headers=patient_headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reschedule_appointment(
    client: AsyncClient, appointment: dict, patient_headers: dict
) -> None:
    new_date = (date.today() + timedelta(days=3)).isoformat()
    response = await client.patch(
        f"/api/appointments/{appointment['id']}",
        json={"appointment_date": new_date, "appointment_time": "9:00"},
        headers=patient_headers,
    )
    assert response.status_code == 200
    updated = response.json()["appointment"]
    assert updated["appointment_date"] == new_date
    assert updated["appointment_time"] == "09:00"


@pytest.mark.asyncio
@pytest.mark.parametrize("reason", ["   ", None])
async def test_edit_rejects_blank_reason(
    client: AsyncClient, appointment: dict, patient_headers: dict, reason: str | None
) -> None:
    response = await client.patch(
        f"/api/appointments/{appointment['id']}",
        json={"reason": reason},
        headers=patient_headers,
    )
    assert response.status_code == 400

    stored = await client.get(f"/api/appointments/{appointment['id']}", headers=patient_headers)
    assert stored.json()["appointment"]["reason"] == "Chest pain during exercise"


@pytest.mark.asyncio
async def test_edit_trims_reason(
    client: AsyncClient, appointment: dict, patient_headers: dict
) -> None:
    response = await client.patch(
        f"/api/appointments/{appointment['id']}",
        json={"reason": "  Follow-up on ECG  "},
        headers=patient_headers,
    )
    assert response.status_code == 200
    assert response.json()["appointment"]["reason"] == "Follow-up on ECG"


@pytest.mark.asyncio
async def test_cannot_edit_cancelled_appointment(
    client: AsyncClient, appointment: dict, patient_headers: dict
) -> None:
    cancelled = await set_status(client, appointment["id"], "cancelled", patient_headers)
    assert cancelled.status_code == 200

    response = await client.patch(
        f"/api/appointments/{appointment['id']}",
        json={"reason": "Changed my mind"},
        headers=patient_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_full_lifecycle(
    client: AsyncClient,
    db_session,
    appointment: dict,
    patient: dict,
    doctor: dict,
    patient_headers: dict,
    doctor_headers: dict,
) -> None:
    """pending -> confirmed -> completed, with the patient barred from completing."""
    confirmed = await set_status(client, appointment["id"], "confirmed", doctor_headers)
    assert confirmed.status_code == 200
    assert confirmed.json()["appointment"]["status"] == "confirmed"
    assert confirmed.json()["appointment"]["video_room_id"]

    rejected = await set_status(client, appointment["id"], "completed", patient_headers)
    assert rejected.status_code == 403

    completed = await set_status(client, appointment["id"], "completed", doctor_headers)
    assert completed.status_code == 200
    assert completed.json()["appointment"]["status"] == "completed"

    consultations = await db_session.scalar(
        select(doctor_profiles.c.total_consultations).where(doctor_profiles.c.id == doctor["id"])
    )
    assert consultations == 1

    result = await db_session.execute(
        select(notifications.c.message).where(notifications.c.user_id == patient["id"])
    )
    messages = set(result.scalars().all())
    assert messages == {
        "Your appointment status is now: confirmed",
        "Your appointment status is now: completed",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("current", ["pending", "cancelled"])
async def test_complete_requires_confirmed(
    client: AsyncClient,
    db_session,
    appointment: dict,
    doctor: dict,
    doctor_headers: dict,
    current: str,
) -> None:
    if current != "pending":
        await set_status(client, appointment["id"], current, doctor_headers)

    response = await set_status(client, appointment["id"], "completed", doctor_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidTransitionException"

    consultations = await db_session.scalar(
        select(doctor_profiles.c.total_consultations).where(doctor_profiles.c.id == doctor["id"])
    )
    assert consultations == 0


@pytest.mark.asyncio
async def test_other_doctor_cannot_change_status(
    client: AsyncClient, appointment: dict, other_doctor: dict, other_doctor_headers: dict
) -> None:
    response = await set_status(client, appointment["id"], "confirmed", other_doctor_headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Not authorized"


@pytest.mark.asyncio
async def test_other_patient_cannot_change_status(
    client: AsyncClient, appointment: dict, other_patient_headers: dict
) -> None:
    response = await set_status(client, appointment["id"], "cancelled", other_patient_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_patient_can_cancel(
    client: AsyncClient, appointment: dict, patient_headers: dict
) -> None:
    response = await set_status(client, appointment["id"], "cancelled", patient_headers)
    assert response.status_code == 200
    assert response.json()["appointment"]["status"] == "cancelled"


@pytest.mark.asyncio
async def test_unknown_status_rejected(
    client: AsyncClient, appointment: dict, doctor_headers: dict
) -> None:
    response = await set_status(client, appointment["id"], "archived", doctor_headers)
    assert response.status_code == 400
