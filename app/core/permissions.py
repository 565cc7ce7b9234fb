"""
Row visibility rules.

Patients see rows where they are the patient, doctors see rows that reference
their doctor profile, admins see everything. These rules apply to the
appointments, reviews and prescriptions tables, which all carry ``patient_id``
and ``doctor_id`` columns. Medical records follow the patient and the uploader
instead. Notifications are always restricted to their recipient and are
filtered in the notification service.
"""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, Table, false, or_

from app.schemas.users import UserRole


def _same(left: Any, right: Any) -> bool:
    # Cached rows carry ids as strings
    return left is not None and right is not None and str(left) == str(right)


def row_scope(
    table: Table,
    user: Mapping[str, Any],
    doctor_id: UUID | None = None,
) -> list[ColumnElement[bool]]:
    """
    Build WHERE conditions restricting ``table`` to rows the caller may see.

    Args:
        table: Table with ``patient_id`` and ``doctor_id`` columns
        user: Authenticated profile
        doctor_id: Caller's doctor profile id when the caller is a doctor

    Returns:
        Conditions to AND into the query (empty for admins)
    """
    role = user["role"]

    if role == UserRole.ADMIN:
        return []
    if role == UserRole.PATIENT:
        return [table.c.patient_id == user["id"]]
    if role == UserRole.DOCTOR and doctor_id is not None:
        return [table.c.doctor_id == doctor_id]
    return [false()]


def can_access_row(
    user: Mapping[str, Any],
    row: Mapping[str, Any],
    doctor_id: UUID | None = None,
) -> bool:
    """Check a single appointment, review or prescription row against the caller."""
    role = user["role"]

    if role == UserRole.ADMIN:
        return True
    if role == UserRole.PATIENT:
        return _same(row["patient_id"], user["id"])
    if role == UserRole.DOCTOR:
        return _same(row["doctor_id"], doctor_id)
    return False


def can_view_doctor_profile(user: Mapping[str, Any], doctor: Mapping[str, Any]) -> bool:
    """Verified profiles are public to callers; unverified ones only to owner and admins."""
    if doctor["is_verified"]:
        return True
    return user["role"] == UserRole.ADMIN or _same(doctor["user_id"], user["id"])


def record_scope(table: Table, user: Mapping[str, Any]) -> list[ColumnElement[bool]]:
    """Medical records are visible to their patient and to whoever uploaded them."""
    if user["role"] == UserRole.ADMIN:
        return []
    return [or_(table.c.patient_id == user["id"], table.c.uploaded_by == user["id"])]


def can_access_record(user: Mapping[str, Any], record: Mapping[str, Any]) -> bool:
    if user["role"] == UserRole.ADMIN:
        return True
    return _same(record["patient_id"], user["id"]) or _same(record["uploaded_by"], user["id"])
