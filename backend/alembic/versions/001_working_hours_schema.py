"""Initial migration: entity hierarchy, working hours, appointments, notifications, audit log

Revision ID: 001_working_hours
Revises:
Create Date: 2026-10-16 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_working_hours"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Entity hierarchy: organization -> complex -> clinic -> user
    op.create_table(
        "organization",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "complex",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("organization_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["organization_id"], ["organization.id"]),
    )
    op.create_index("ix_complex_organization_id", "complex", ["organization_id"])

    op.create_table(
        "clinic",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("complex_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["complex_id"], ["complex.id"]),
    )
    op.create_index("ix_clinic_complex_id", "clinic", ["complex_id"])

    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False, server_default="doctor"),
        sa.Column("clinic_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["clinic_id"], ["clinic.id"]),
    )
    op.create_index("ix_user_clinic_id", "user", ["clinic_id"])

    op.create_table(
        "patient",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("preferred_language", sa.String(), nullable=False, server_default="ar"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Working hours: one row per entity and weekday
    op.create_table(
        "working_hours",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("entity_type", sa.String(), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("day_of_week", sa.String(), nullable=False),
        sa.Column("is_working_day", sa.Boolean(), nullable=False),
        sa.Column("opening_time", sa.String(), nullable=True),
        sa.Column("closing_time", sa.String(), nullable=True),
        sa.Column("break_start_time", sa.String(), nullable=True),
        sa.Column("break_end_time", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("entity_type", "entity_id", "day_of_week", name="uq_working_hours_entity_day"),
    )
    op.create_index("ix_working_hours_entity_type", "working_hours", ["entity_type"])
    op.create_index("ix_working_hours_entity_id", "working_hours", ["entity_id"])

    op.create_table(
        "appointment",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("doctor_id", sa.Integer(), nullable=False),
        sa.Column("clinic_id", sa.Integer(), nullable=True),
        sa.Column("service_name", sa.String(), nullable=True),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("appointment_time", sa.String(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("status", sa.String(), nullable=False, server_default="scheduled"),
        sa.Column("cancellation_reason", sa.String(), nullable=True),
        sa.Column("rescheduling_reason", sa.String(), nullable=True),
        sa.Column("marked_for_rescheduling_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["patient_id"], ["patient.id"]),
        sa.ForeignKeyConstraint(["doctor_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["clinic_id"], ["clinic.id"]),
    )
    op.create_index("ix_appointment_patient_id", "appointment", ["patient_id"])
    op.create_index("ix_appointment_doctor_id", "appointment", ["doctor_id"])
    op.create_index("ix_appointment_clinic_id", "appointment", ["clinic_id"])
    op.create_index("ix_appointment_appointment_date", "appointment", ["appointment_date"])
    op.create_index("ix_appointment_status", "appointment", ["status"])

    op.create_table(
        "notification",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("recipient_patient_id", sa.Integer(), nullable=False),
        sa.Column("appointment_id", sa.Integer(), nullable=True),
        sa.Column("kind", sa.String(), nullable=False),
        sa.Column("language", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column("delivery_method", sa.String(), nullable=False, server_default="in_app"),
        sa.Column("delivery_status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("error_message", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["recipient_patient_id"], ["patient.id"]),
        sa.ForeignKeyConstraint(["appointment_id"], ["appointment.id"]),
    )
    op.create_index("ix_notification_recipient_patient_id", "notification", ["recipient_patient_id"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_type", sa.String(), nullable=False),
        sa.Column("entity_type", sa.String(), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_event_type", "audit_log", ["event_type"])


def downgrade() -> None:
    op.drop_index("ix_audit_log_event_type", table_name="audit_log")
    op.drop_table("audit_log")
    op.drop_index("ix_notification_recipient_patient_id", table_name="notification")
    op.drop_table("notification")
    op.drop_index("ix_appointment_status", table_name="appointment")
    op.drop_index("ix_appointment_appointment_date", table_name="appointment")
    op.drop_index("ix_appointment_clinic_id", table_name="appointment")
    op.drop_index("ix_appointment_doctor_id", table_name="appointment")
    op.drop_index("ix_appointment_patient_id", table_name="appointment")
    op.drop_table("appointment")
    op.drop_index("ix_working_hours_entity_id", table_name="working_hours")
    op.drop_index("ix_working_hours_entity_type", table_name="working_hours")
    op.drop_table("working_hours")
    op.drop_table("patient")
    op.drop_index("ix_user_clinic_id", table_name="user")
    op.drop_table("user")
    op.drop_index("ix_clinic_complex_id", table_name="clinic")
    op.drop_table("clinic")
    op.drop_index("ix_complex_organization_id", table_name="complex")
    op.drop_table("complex")
    op.drop_table("organization")
