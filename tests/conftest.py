from datetime import date
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from telecare.db.base import Base
from telecare.db.init_db import init_db
from telecare.models import Appointment, Doctor
from telecare.scheduling.locks import LocalBookingLock

BOOKING_DAY = date(2026, 11, 2)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def booking_lock():
    return LocalBookingLock(timeout=0.5)


@pytest.fixture
def doctor_profile():
    """Build an in-memory doctor exposing the catalog attributes."""

    def _make(**overrides):
        values = dict(
            id=1,
            full_name="Dr. Amira Ben Salah",
            specialty="General Medicine",
            specialties=[],
            city="Tunis",
            rating=None,
            total_reviews=0,
            consultation_price=None,
            teleconsultation_price=None,
            accepts_teleconsultation=False,
            is_verified=False,
            is_active=True,
        )
        values.update(overrides)
        return SimpleNamespace(**values)

    return _make


@pytest.fixture
def add_doctor(db):
    """Insert a doctor into the catalog."""

    def _add(**overrides):
        values = dict(
            full_name="Dr. Karim Haddad",
            specialty="Pneumology",
            specialties=["General Medicine"],
            city="Tunis",
            rating=4.8,
            total_reviews=60,
            consultation_price=60.0,
            accepts_teleconsultation=True,
            is_verified=True,
            is_active=True,
        )
        values.update(overrides)
        doctor = Doctor(**values)
        db.add(doctor)
        db.commit()
        db.refresh(doctor)
        return doctor

    return _add


@pytest.fixture
def add_appointment(db):
    """Insert an appointment directly, bypassing the orchestrator."""

    def _add(doctor_id, scheduled_time, duration_minutes=30, status="scheduled", day=BOOKING_DAY, patient_id=99):
        appointment = Appointment(
            patient_id=patient_id,
            doctor_id=doctor_id,
            appointment_type="in_person",
            status=status,
            scheduled_date=day,
            scheduled_time=scheduled_time,
            duration_minutes=duration_minutes,
            payment_status="pending",
            report_shared=False,
        )
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    return _add
