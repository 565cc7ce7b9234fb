"""create medireach schema

Revision ID: 001
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _timestamp_column(name: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.TIMESTAMP(timezone=True),
        server_default=sa.text("NOW()"),
        nullable=False,
    )


def upgrade() -> None:
    """Create profiles, doctor profiles, appointments and their dependents."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    op.create_table(
        "profiles",
        _id_column(),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default=sa.text("'patient'")),
        sa.Column("full_name", sa.Text(), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(20), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        _timestamp_column("created_at"),
        _timestamp_column("updated_at"),
        sa.Column("last_login_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="profiles_pkey"),
        sa.UniqueConstraint("email", name="profiles_email_key"),
        sa.CheckConstraint(
            "role IN ('patient', 'doctor', 'admin')",
            name="profiles_role_check",
        ),
        sa.CheckConstraint(
            "gender IN ('male', 'female', 'other', 'prefer_not_to_say')",
            name="profiles_gender_check",
        ),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"])

    op.create_table(
        "doctor_profiles",
        _id_column(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("specialization", sa.String(200), nullable=False),
        sa.Column("license_number", sa.String(100), nullable=False),
        sa.Column("qualification", sa.Text(), nullable=False),
        sa.Column("experience_years", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "consultation_fee", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")
        ),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("verified_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("verified_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("rating", sa.Numeric(3, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "total_consultations", sa.Integer(), nullable=False, server_default=sa.text("0")
        ),
        _timestamp_column("created_at"),
        _timestamp_column("updated_at"),
        sa.PrimaryKeyConstraint("id", name="doctor_profiles_pkey"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["profiles.id"],
            name="doctor_profiles_user_id_fkey",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("user_id", name="doctor_profiles_user_id_key"),
        sa.UniqueConstraint("license_number", name="doctor_profiles_license_number_key"),
        sa.CheckConstraint("experience_years >= 0", name="doctor_profiles_experience_years_check"),
        sa.CheckConstraint("consultation_fee >= 0", name="doctor_profiles_consultation_fee_check"),
        sa.CheckConstraint("rating >= 0 AND rating <= 5", name="doctor_profiles_rating_check"),
    )
    op.create_index("ix_doctor_profiles_user_id", "doctor_profiles", ["user_id"])
    op.create_index("ix_doctor_profiles_specialization", "doctor_profiles", ["specialization"])
    op.create_index("ix_doctor_profiles_is_verified", "doctor_profiles", ["is_verified"])

    op.create_table(
        "doctor_availability",
        _id_column(),
        sa.Column("doctor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        _timestamp_column("created_at"),
        sa.PrimaryKeyConstraint("id", name="doctor_availability_pkey"),
        sa.ForeignKeyConstraint(
            ["doctor_id"],
            ["doctor_profiles.id"],
            name="doctor_availability_doctor_id_fkey",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "doctor_id", "day_of_week", "start_time", name="doctor_availability_slot_key"
        ),
        sa.CheckConstraint(
            "day_of_week BETWEEN 0 AND 6", name="doctor_availability_day_of_week_check"
        ),
    )
    op.create_index(
        "ix_doctor_availability_doctor_id", "doctor_availability", ["doctor_id"]
    )

    op.create_table(
        "appointments",
        _id_column(),
        sa.Column("patient_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("doctor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("appointment_time", sa.String(5), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("video_room_id", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        _timestamp_column("created_at"),
        _timestamp_column("updated_at"),
        sa.PrimaryKeyConstraint("id", name="appointments_pkey"),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["profiles.id"],
            name="appointments_patient_id_fkey",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["doctor_id"],
            ["doctor_profiles.id"],
            name="appointments_doctor_id_fkey",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled', 'rescheduled')",
            name="appointments_status_check",
        ),
    )
    op.create_index("ix_appointments_patient_id", "appointments", ["patient_id"])
    op.create_index("ix_appointments_doctor_id", "appointments", ["doctor_id"])
    op.create_index("ix_appointments_appointment_date", "appointments", ["appointment_date"])
    op.create_index("ix_appointments_status", "appointments", ["status"])
    op.create_index(
        "idx_appointments_patient_date", "appointments", ["patient_id", "appointment_date"]
    )
    op.create_index(
        "idx_appointments_doctor_date", "appointments", ["doctor_id", "appointment_date"]
    )

    op.create_table(
        "reviews",
        _id_column(),
        sa.Column("appointment_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("patient_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("doctor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        _timestamp_column("created_at"),
        sa.PrimaryKeyConstraint("id", name="reviews_pkey"),
        sa.ForeignKeyConstraint(
            ["appointment_id"],
            ["appointments.id"],
            name="reviews_appointment_id_fkey",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["profiles.id"],
            name="reviews_patient_id_fkey",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["doctor_id"],
            ["doctor_profiles.id"],
            name="reviews_doctor_id_fkey",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("appointment_id", name="reviews_appointment_id_key"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="reviews_rating_check"),
    )
    op.create_index("ix_reviews_doctor_id", "reviews", ["doctor_id"])

    op.create_table(
        "notifications",
        _id_column(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("related_id", postgresql.UUID(as_uuid=True), nullable=True),
        _timestamp_column("created_at"),
        sa.PrimaryKeyConstraint("id", name="notifications_pkey"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["profiles.id"],
            name="notifications_user_id_fkey",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint(
            "type IN ('appointment', 'prescription', 'system', 'reminder')",
            name="notifications_type_check",
        ),
    )
    op.create_index("idx_notifications_user_id", "notifications", ["user_id"])
    op.create_index("idx_notifications_unread", "notifications", ["user_id", "is_read"])

    op.create_table(
        "prescriptions",
        _id_column(),
        sa.Column("appointment_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("patient_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("doctor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("diagnosis", sa.Text(), nullable=False),
        sa.Column("medications", sa.JSON(), nullable=False),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.Column("file_url", sa.Text(), nullable=True),
        _timestamp_column("created_at"),
        sa.PrimaryKeyConstraint("id", name="prescriptions_pkey"),
        sa.ForeignKeyConstraint(
            ["appointment_id"],
            ["appointments.id"],
            name="prescriptions_appointment_id_fkey",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["profiles.id"],
            name="prescriptions_patient_id_fkey",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["doctor_id"],
            ["doctor_profiles.id"],
            name="prescriptions_doctor_id_fkey",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_prescriptions_appointment_id", "prescriptions", ["appointment_id"])
    op.create_index("ix_prescriptions_patient_id", "prescriptions", ["patient_id"])
    op.create_index("ix_prescriptions_doctor_id", "prescriptions", ["doctor_id"])

    op.create_table(
        "medical_records",
        _id_column(),
        sa.Column("patient_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("record_type", sa.String(20), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("file_url", sa.Text(), nullable=True),
        sa.Column("uploaded_by", postgresql.UUID(as_uuid=True), nullable=False),
        _timestamp_column("created_at"),
        sa.PrimaryKeyConstraint("id", name="medical_records_pkey"),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["profiles.id"],
            name="medical_records_patient_id_fkey",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["uploaded_by"],
            ["profiles.id"],
            name="medical_records_uploaded_by_fkey",
        ),
        sa.CheckConstraint(
            "record_type IN ('lab_report', 'imaging', 'prescription', 'diagnosis', 'other')",
            name="medical_records_record_type_check",
        ),
    )
    op.create_index("ix_medical_records_patient_id", "medical_records", ["patient_id"])
    op.create_index("ix_medical_records_uploaded_by", "medical_records", ["uploaded_by"])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("medical_records")
    op.drop_table("prescriptions")
    op.drop_table("notifications")
    op.drop_table("reviews")
    op.drop_table("appointments")
    op.drop_table("doctor_availability")
    op.drop_table("doctor_profiles")
    op.drop_table("profiles")
