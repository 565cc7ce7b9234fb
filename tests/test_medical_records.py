"""Tests for medical record endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_patient_uploads_own_record(
    client: AsyncClient, patient: dict, patient_headers: dict
) -> None:
    response = await client.post(
        "/api/medical-records",
        json={
            "record_type": "lab_report",
            "title": "  Blood panel  ",
            "file_url": "https://files.example.com/blood-panel.pdf",
        },
        headers=patient_headers,
    )
    assert response.status_code == 201
    record = response.json()["record"]
    assert record["patient_id"] == str(patient["id"])
    assert record["uploaded_by"] == str(patient["id"])
    assert record["title"] == "Blood panel"

    listed = await client.get("/api/medical-records", headers=patient_headers)
    assert listed.json()["count"] == 1


@pytest.mark.asyncio
async def test_patient_cannot_upload_for_someone_else(
    client: AsyncClient, other_patient: dict, patient_headers: dict
) -> None:
    response = await client.post(
        "/api/medical-records",
        json={"patient_id": str(other_patient["id"]), "record_type": "other", "title": "Note"},
        headers=patient_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_treating_doctor_uploads_for_patient(
    client: AsyncClient,
    patient: dict,
    appointment: dict,
    doctor_headers: dict,
    patient_headers: dict,
    other_patient_headers: dict,
) -> None:
    response = await client.post(
        "/api/medical-records",
        json={
            "patient_id": str(patient["id"]),
            "record_type": "imaging",
            "title": "Chest X-ray",
            "description": "No abnormalities",
        },
        headers=doctor_headers,
    )
    assert response.status_code == 201
    record_id = response.json()["record"]["id"]

    # Visible to the patient and the uploader only
    assert (await client.get("/api/medical-records", headers=patient_headers)).json()["count"] == 1
    assert (await client.get("/api/medical-records", headers=doctor_headers)).json()["count"] == 1
    assert (
        await client.get("/api/medical-records", headers=other_patient_headers)
    ).json()["count"] == 0

    fetched = await client.get(f"/api/medical-records/{record_id}", headers=patient_headers)
    assert fetched.status_code == 200
    assert fetched.json()["record"]["title"] == "Chest X-ray"

    denied = await client.get(f"/api/medical-records/{record_id}", headers=other_patient_headers)
    assert denied.status_code == 403


@pytest.mark.asyncio
async def test_doctor_without_appointment_cannot_upload(
    client: AsyncClient,
    patient: dict,
    appointment: dict,
    other_doctor: dict,
    other_doctor_headers: dict,
) -> None:
    response = await client.post(
        "/api/medical-records",
        json={"patient_id": str(patient["id"]), "record_type": "diagnosis", "title": "Fracture"},
        headers=other_doctor_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_doctor_must_name_the_patient(
    client: AsyncClient, doctor: dict, doctor_headers: dict
) -> None:
    response = await client.post(
        "/api/medical-records",
        json={"record_type": "diagnosis", "title": "Hypertension"},
        headers=doctor_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_upload_for_unknown_patient(
    client: AsyncClient, doctor_user: dict, admin_headers: dict
) -> None:
    missing = await client.post(
        "/api/medical-records",
        json={
            "patient_id": "00000000-0000-0000-0000-000000000000",
            "record_type": "other",
            "title": "Scan",
        },
        headers=admin_headers,
    )
    assert missing.status_code == 404

    not_a_patient = await client.post(
        "/api/medical-records",
        json={"patient_id": str(doctor_user["id"]), "record_type": "other", "title": "Scan"},
        headers=admin_headers,
    )
    assert not_a_patient.status_code == 404


@pytest.mark.asyncio
async def test_invalid_record_type(client: AsyncClient, patient_headers: dict) -> None:
    response = await client.post(
        "/api/medical-records",
        json={"record_type": "x-ray", "title": "Scan"},
        headers=patient_headers,
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_filter_by_record_type_and_admin_sees_all(
    client: AsyncClient, patient_headers: dict, admin_headers: dict
) -> None:
    for record_type, title in (("lab_report", "Lipids"), ("imaging", "MRI")):
        response = await client.post(
            "/api/medical-records",
            json={"record_type": record_type, "title": title},
            headers=patient_headers,
        )
        assert response.status_code == 201

    imaging = await client.get(
        "/api/medical-records", params={"record_type": "imaging"}, headers=patient_headers
    )
    assert [r["title"] for r in imaging.json()["records"]] == ["MRI"]

    everything = await client.get("/api/medical-records", headers=admin_headers)
    assert everything.json()["count"] == 2


@pytest.mark.asyncio
async def test_missing_record(client: AsyncClient, patient_headers: dict) -> None:
    response = await client.get(
        "/api/medical-records/00000000-0000-0000-0000-000000000000", headers=patient_headers
    )
    assert response.status_code == 404
