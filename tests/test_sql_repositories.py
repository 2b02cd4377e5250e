from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from carepulse.db import models  # noqa: F401
from carepulse.application.ports.appointments_repo import AppointmentPatch, NewAppointment
from carepulse.application.ports.patient_repo import NewPatient
from carepulse.application.services.appointments_service import AppointmentsService
from carepulse.infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from carepulse.infrastructure.persistence.sqlalchemy.repositories.patient_repository_sql import SqlPatientRepository


@pytest.fixture
def session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        yield s


def test_patient_round_trip(session):
    repo = SqlPatientRepository(session)
    p = repo.create_patient(NewPatient(name="Jane Doe", email="jane@carepulse.com", phone="+15551234567"))
    assert p.id
    assert p.user_id == p.id
    assert repo.get_patient(p.id).email == "jane@carepulse.com"
    assert repo.get_patient_by_user(p.user_id).id == p.id
    assert repo.get_patient("missing") is None


def test_appointment_insert_update_get(session):
    patient = SqlPatientRepository(session).create_patient(
        NewPatient(name="Jane Doe", email="jane@carepulse.com", phone="+15551234567")
    )
    repo = SqlAppointmentsRepository(session)
    created = repo.insert_appointment(NewAppointment(
        patient=patient.id,
        user_id=patient.user_id,
        primary_physician="John Green",
        schedule=datetime(2024, 6, 1, 10, 0),
        status="pending",
        reason="check-up",
    ))
    assert created.status == "pending"

    updated = repo.update_appointment(created.id, AppointmentPatch(status="cancelled", cancellation_reason="conflict"))
    assert updated.status == "cancelled"
    assert updated.cancellation_reason == "conflict"
    assert updated.primary_physician == "John Green"
    assert updated.patient == patient.id

    fetched = repo.get_appointment(created.id)
    assert fetched.status == "cancelled"
    assert repo.update_appointment("missing", AppointmentPatch(status="scheduled")) is None
    assert [a.id for a in repo.list_recent(10)] == [created.id]


def _patient(session):
    return SqlPatientRepository(session).create_patient(
        NewPatient(name="Jane Doe", email="jane@carepulse.com", phone="+15551234567")
    )


def test_timestamps_are_aware_utc(session):
    patient = _patient(session)
    assert patient.created_at.utcoffset() == timedelta(0)
    created = SqlAppointmentsRepository(session).insert_appointment(NewAppointment(
        patient=patient.id,
        user_id=patient.user_id,
        primary_physician="John Green",
        schedule=datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc),
        status="pending",
        reason="check-up",
    ))
    assert created.schedule == datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)
    assert created.created_at.utcoffset() == timedelta(0)
    assert created.updated_at.utcoffset() == timedelta(0)


def test_offset_schedule_keeps_the_same_instant(session):
    patient = _patient(session)
    repo = SqlAppointmentsRepository(session)
    plus_five = timezone(timedelta(hours=5))
    created = repo.insert_appointment(NewAppointment(
        patient=patient.id,
        user_id=patient.user_id,
        primary_physician="John Green",
        schedule=datetime(2024, 6, 1, 10, 0, tzinfo=plus_five),
        status="pending",
        reason="check-up",
    ))
    fetched = repo.get_appointment(created.id)
    assert fetched.schedule == datetime(2024, 6, 1, 5, 0, tzinfo=timezone.utc)
    assert fetched.schedule.utcoffset() == timedelta(0)
    assert fetched.schedule.hour == 5

    minus_three = timezone(timedelta(hours=-3))
    repo.update_appointment(created.id, AppointmentPatch(
        status="scheduled", schedule=datetime(2024, 6, 2, 9, 0, tzinfo=minus_three),
    ))
    fetched = repo.get_appointment(created.id)
    assert fetched.schedule == datetime(2024, 6, 2, 12, 0, tzinfo=timezone.utc)
    assert fetched.schedule.hour == 12
    assert fetched.updated_at.utcoffset() == timedelta(0)


def test_service_create_through_sql_keeps_offset_instant(session):
    patient = _patient(session)
    svc = AppointmentsService(repo=SqlAppointmentsRepository(session))
    result = svc.submit("create", {
        "primaryPhysician": "John Green",
        "schedule": "2024-06-01T10:00:00+05:00",
        "reason": "check-up",
    }, user_id=patient.user_id, patient_id=patient.id)
    assert result.ok
    stored = svc.get_appointment(result.record.id)
    assert stored.schedule == datetime(2024, 6, 1, 5, 0, tzinfo=timezone.utc)
    assert stored.schedule.hour == 5
