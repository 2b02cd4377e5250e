from datetime import datetime

import pytest

from carepulse.application.state_machine import (
    AppointmentAction,
    AppointmentStatus,
    CancelRequest,
    CreateRequest,
    InsertAppointment,
    Operation,
    ScheduleRequest,
    TRANSITIONS,
    UpdateAppointment,
    build_request,
    plan_mutation,
    status_for,
)
from carepulse.application.validation import validate_appointment_fields
from carepulse.exceptions import FieldValidationError


def test_transition_table():
    assert status_for("create") is AppointmentStatus.PENDING
    assert status_for("schedule") is AppointmentStatus.SCHEDULED
    assert status_for("cancel") is AppointmentStatus.CANCELLED
    assert TRANSITIONS[AppointmentAction.CREATE].operation is Operation.INSERT
    assert TRANSITIONS[AppointmentAction.SCHEDULE].operation is Operation.UPDATE
    assert TRANSITIONS[AppointmentAction.CANCEL].status is AppointmentStatus.CANCELLED


def test_no_transition_back_to_pending_from_updates():
    update_statuses = {t.status for t in TRANSITIONS.values() if t.operation is Operation.UPDATE}
    assert AppointmentStatus.PENDING not in update_statuses


def test_create_plans_insert_with_pending_status():
    req = CreateRequest(
        user_id="u1",
        patient_id="p1",
        primary_physician="John Green",
        schedule=datetime(2024, 6, 1, 10, 0),
        reason="check-up",
    )
    mutation = plan_mutation(req)
    assert isinstance(mutation, InsertAppointment)
    assert mutation.payload.status == "pending"
    assert mutation.payload.patient == "p1"
    assert mutation.payload.user_id == "u1"


def test_schedule_plans_update_by_id():
    req = ScheduleRequest(user_id="u1", appointment_id="A1", primary_physician="John Green",
                          schedule=datetime(2024, 6, 2, 9, 0))
    mutation = plan_mutation(req)
    assert isinstance(mutation, UpdateAppointment)
    assert mutation.appointment_id == "A1"
    assert mutation.patch.status == "scheduled"
    assert mutation.patch.cancellation_reason is None


def test_cancel_plans_update_with_reason_only():
    mutation = plan_mutation(CancelRequest(user_id="u1", appointment_id="A1", cancellation_reason="conflict"))
    assert isinstance(mutation, UpdateAppointment)
    assert mutation.patch.status == "cancelled"
    assert mutation.patch.cancellation_reason == "conflict"
    assert mutation.patch.primary_physician is None
    assert mutation.patch.schedule is None


def test_build_request_picks_variant():
    fields = validate_appointment_fields("cancel", {"cancellationReason": "conflict"})
    req = build_request("cancel", fields, "u1", appointment_id="A1")
    assert isinstance(req, CancelRequest)
    assert req.action is AppointmentAction.CANCEL


def test_build_request_requires_appointment_id_for_updates():
    fields = validate_appointment_fields("schedule", {"primaryPhysician": "John Green", "schedule": "2024-06-02T09:00:00Z"})
    with pytest.raises(FieldValidationError) as exc_info:
        build_request("schedule", fields, "u1")
    assert "appointmentId" in exc_info.value.errors


def test_build_request_requires_patient_for_create():
    fields = validate_appointment_fields("create", {
        "primaryPhysician": "John Green", "schedule": "2024-06-01T10:00:00Z", "reason": "pain",
    })
    with pytest.raises(FieldValidationError) as exc_info:
        build_request("create", fields, "u1")
    assert "patient" in exc_info.value.errors
