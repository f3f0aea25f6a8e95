"""Create booking core tables

Revision ID: 001_booking_core
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_booking_core'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ACTIVE_PREDICATE = sa.text("status IN ('scheduled', 'confirmed')")


def upgrade() -> None:
    op.create_table('doctors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('specialty', sa.String(), nullable=False),
        sa.Column('specialties', sa.JSON(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('rating', sa.Float(), nullable=True),
        sa.Column('total_reviews', sa.Integer(), nullable=True),
        sa.Column('consultation_price', sa.Float(), nullable=True),
        sa.Column('teleconsultation_price', sa.Float(), nullable=True),
        sa.Column('accepts_teleconsultation', sa.Boolean(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_doctors_id', 'doctors', ['id'])
    op.create_index('ix_doctors_specialty', 'doctors', ['specialty'])
    op.create_index('ix_doctors_city', 'doctors', ['city'])

    op.create_table('appointments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('doctor_id', sa.Integer(), sa.ForeignKey('doctors.id'), nullable=False),
        sa.Column('pre_analysis_id', sa.String(), nullable=True),
        sa.Column('ai_report_id', sa.String(), nullable=True),
        sa.Column('appointment_type', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('scheduled_date', sa.Date(), nullable=False),
        sa.Column('scheduled_time', sa.String(length=5), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('location_type', sa.String(), nullable=True),
        sa.Column('location_address', sa.String(), nullable=True),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('payment_status', sa.String(), nullable=False),
        sa.Column('payment_method', sa.String(), nullable=True),
        sa.Column('report_shared', sa.Boolean(), nullable=False),
        sa.Column('report_shared_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_appointments_id', 'appointments', ['id'])
    op.create_index('ix_appointments_patient_id', 'appointments', ['patient_id'])
    op.create_index('ix_appointments_doctor_id', 'appointments', ['doctor_id'])
    op.create_index('idx_appointments_doctor_date', 'appointments', ['doctor_id', 'scheduled_date'])
    # Closes the double-booking race between availability check and insert
    op.create_index(
        'uq_appointments_doctor_slot_active',
        'appointments',
        ['doctor_id', 'scheduled_date', 'scheduled_time'],
        unique=True,
        postgresql_where=ACTIVE_PREDICATE,
        sqlite_where=ACTIVE_PREDICATE,
    )

    op.create_table('patient_doctor_assignments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('doctor_id', sa.Integer(), sa.ForeignKey('doctors.id'), nullable=False),
        sa.Column('assignment_type', sa.String(), nullable=False),
        sa.Column('ai_report_id', sa.String(), nullable=True),
        sa.Column('assigned_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('patient_id', 'doctor_id', 'assignment_type', 'ai_report_id',
                            name='uq_patient_doctor_assignment')
    )
    op.create_index('ix_patient_doctor_assignments_id', 'patient_doctor_assignments', ['id'])
    op.create_index('ix_patient_doctor_assignments_patient_id', 'patient_doctor_assignments', ['patient_id'])
    op.create_index('ix_patient_doctor_assignments_doctor_id', 'patient_doctor_assignments', ['doctor_id'])

    op.create_table('timeline_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('event_type', sa.String(), nullable=False),
        sa.Column('event_title', sa.String(), nullable=False),
        sa.Column('event_description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('related_appointment_id', sa.Integer(), sa.ForeignKey('appointments.id'), nullable=True),
        sa.Column('related_ai_report_id', sa.String(), nullable=True),
        sa.Column('event_date', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_timeline_events_id', 'timeline_events', ['id'])
    op.create_index('ix_timeline_events_patient_id', 'timeline_events', ['patient_id'])
    op.create_index('ix_timeline_events_related_appointment_id', 'timeline_events', ['related_appointment_id'])

    op.create_table('booking_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('event_type', sa.String(), nullable=False),
        sa.Column('appointment_id', sa.Integer(), sa.ForeignKey('appointments.id'), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.Column('last_error', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_booking_events_id', 'booking_events', ['id'])
    op.create_index('ix_booking_events_appointment_id', 'booking_events', ['appointment_id'])
    op.create_index('idx_booking_events_status_created', 'booking_events', ['status', 'created_at'])


def downgrade() -> None:
    op.drop_table('booking_events')
    op.drop_table('timeline_events')
    op.drop_table('patient_doctor_assignments')
    op.drop_index('uq_appointments_doctor_slot_active', table_name='appointments')
    op.drop_table('appointments')
    op.drop_table('doctors')
