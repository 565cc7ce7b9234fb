"""Database models."""

from app.models.appointments import appointments
from app.models.doctors import doctor_availability, doctor_profiles
from app.models.medical_records import medical_records
from app.models.metadata import metadata
from app.models.notifications import notifications
from app.models.prescriptions import prescriptions
from app.models.reviews import reviews
from app.models.users import profiles

__all__ = [
    "appointments",
    "doctor_availability",
    "doctor_profiles",
    "medical_records",
    "metadata",
    "notifications",
    "prescriptions",
    "profiles",
    "reviews",
]
