from dataclasses import replace
from datetime import datetime, timezone

import pytest

from carepulse.application.commands import CloseDialogAndRefresh, NavigateTo
from carepulse.application.ports.appointments_repo import AppointmentDto
from carepulse.application.services.appointments_service import AppointmentsService
from carepulse.application.state_machine import CancelRequest
from carepulse.exceptions import FieldValidationError, PersistenceFailure, RecordNotFound


class FakeApptRepo:
    def __init__(self, fail=False):
        self._id = 1
        self.appts = {}
        self.calls = []
        self.fail = fail

    def _now(self):
        return datetime(2024, 5, 1, 8, 0)

    def insert_appointment(self, payload):
        self.calls.append(("insert", payload))
        if self.fail:
            raise PersistenceFailure("backend down")
        appt_id = f"A{self._id}"
        self._id += 1
        a = AppointmentDto(
            id=appt_id,
            patient=payload.patient,
            user_id=payload.user_id,
            primary_physician=payload.primary_physician,
            schedule=payload.schedule,
            status=payload.status,
            reason=payload.reason,
            note=payload.note,
            cancellation_reason=None,
            created_at=self._now(),
            updated_at=self._now(),
        )
        self.appts[appt_id] = a
        return a

    def update_appointment(self, appointment_id, patch):
        self.calls.append(("update", appointment_id, patch))
        if self.fail:
            raise PersistenceFailure("backend down")
        a = self.appts.get(appointment_id)
        if not a:
            return None
        changes = {"status": patch.status}
        if patch.primary_physician is not None:
            changes["primary_physician"] = patch.primary_physician
        if patch.schedule is not None:
            changes["schedule"] = patch.schedule
        if patch.cancellation_reason is not None:
            changes["cancellation_reason"] = patch.cancellation_reason
        a = replace(a, **changes)
        self.appts[appointment_id] = a
        return a

    def get_appointment(self, appointment_id):
        return self.appts.get(appointment_id)

    def list_recent(self, limit):
        return list(self.appts.values())[::-1][:limit]


def _seed(repo, status="pending", physician="John Green"):
    a = AppointmentDto(
        id="A1", patient="p1", user_id="u1", primary_physician=physician,
        schedule=datetime(2024, 6, 1, 10, 0), status=status, reason="check-up", note=None,
        cancellation_reason=None, created_at=datetime(2024, 5, 1), updated_at=datetime(2024, 5, 1),
    )
    repo.appts["A1"] = a
    return a


def test_create_inserts_pending_and_navigates_to_success():
    repo = FakeApptRepo()
    svc = AppointmentsService(repo=repo)
    result = svc.submit("create", {
        "primaryPhysician": "Dr. Green",
        "schedule": "2024-06-01T10:00:00Z",
        "reason": "check-up",
    }, user_id="u1", patient_id="p1")
    assert result.ok
    assert len(repo.calls) == 1
    kind, payload = repo.calls[0]
    assert kind == "insert"
    assert payload.status == "pending"
    assert payload.schedule == datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)
    assert result.command == NavigateTo("/patients/u1/new-appointment/success?appointmentId=A1")
    assert result.record.id == "A1"


def test_create_ignores_caller_status():
    repo = FakeApptRepo()
    svc = AppointmentsService(repo=repo)
    result = svc.submit("create", {
        "primaryPhysician": "John Green",
        "schedule": "2024-06-01T10:00:00Z",
        "reason": "check-up",
        "status": "scheduled",
    }, user_id="u1", patient_id="p1")
    assert result.record.status == "pending"


def test_create_missing_reason_makes_no_call():
    repo = FakeApptRepo()
    svc = AppointmentsService(repo=repo)
    with pytest.raises(FieldValidationError) as exc_info:
        svc.submit("create", {"primaryPhysician": "John Green", "schedule": "2024-06-01T10:00:00Z"},
                   user_id="u1", patient_id="p1")
    assert "reason" in exc_info.value.errors
    assert repo.calls == []


def test_schedule_updates_by_id_and_closes_dialog():
    repo = FakeApptRepo()
    _seed(repo)
    svc = AppointmentsService(repo=repo)
    result = svc.submit("schedule", {
        "primaryPhysician": "Dr. Green",
        "schedule": "2024-06-02T09:00:00Z",
        "status": "pending",
    }, user_id="u1", appointment_id="A1")
    assert result.ok
    assert len(repo.calls) == 1
    kind, appt_id, patch = repo.calls[0]
    assert (kind, appt_id, patch.status) == ("update", "A1", "scheduled")
    assert result.command == CloseDialogAndRefresh()
    assert result.record.status == "scheduled"
    assert result.record.patient == "p1"
    assert result.record.user_id == "u1"


def test_cancel_keeps_reason_verbatim():
    repo = FakeApptRepo()
    _seed(repo)
    svc = AppointmentsService(repo=repo)
    result = svc.submit("cancel", {"cancellationReason": "conflict"}, user_id="u1", appointment_id="A1")
    assert result.ok
    _, appt_id, patch = repo.calls[0]
    assert appt_id == "A1"
    assert patch.status == "cancelled"
    assert patch.cancellation_reason == "conflict"
    assert result.record.cancellation_reason == "conflict"
    assert result.record.primary_physician == "John Green"
    assert result.command == CloseDialogAndRefresh()


def test_create_persistence_failure_returns_error_without_command():
    repo = FakeApptRepo(fail=True)
    svc = AppointmentsService(repo=repo)
    raw = {"primaryPhysician": "John Green", "schedule": "2024-06-01T10:00:00Z", "reason": "check-up"}
    snapshot = dict(raw)
    result = svc.submit("create", raw, user_id="u1", patient_id="p1")
    assert not result.ok
    assert result.command is None
    assert result.error == "Failed to submit appointment"
    assert raw == snapshot
    # no retry
    assert len(repo.calls) == 1


def test_update_of_unknown_appointment_is_a_failure():
    repo = FakeApptRepo()
    svc = AppointmentsService(repo=repo)
    result = svc.dispatch(CancelRequest(user_id="u1", appointment_id="missing", cancellation_reason="x"))
    assert not result.ok
    assert result.command is None
    assert result.error == "Failed to update appointment"


def test_get_appointment_not_found():
    svc = AppointmentsService(repo=FakeApptRepo())
    with pytest.raises(RecordNotFound):
        svc.get_appointment("nope")


def test_success_details_resolves_physician():
    repo = FakeApptRepo()
    _seed(repo)
    view = AppointmentsService(repo=repo).success_details("A1")
    assert view.physician.name == "John Green"
    assert view.physician.image == "/assets/images/dr-green.png"
    assert view.schedule.date_time == "Jun 1, 2024, 10:00 AM"


def test_success_details_unknown_physician_is_none():
    repo = FakeApptRepo()
    _seed(repo, physician="Dr. Nobody")
    view = AppointmentsService(repo=repo).success_details("A1")
    assert view.physician is None


def test_recent_appointments_counts_by_status():
    repo = FakeApptRepo()
    svc = AppointmentsService(repo=repo)
    raw = {"primaryPhysician": "John Green", "schedule": "2024-06-01T10:00:00Z", "reason": "check-up"}
    for _ in range(3):
        svc.submit("create", raw, user_id="u1", patient_id="p1")
    svc.submit("schedule", {"primaryPhysician": "John Green", "schedule": "2024-06-02T09:00:00Z"},
               user_id="u1", appointment_id="A1")
    svc.submit("cancel", {"cancellationReason": "conflict"}, user_id="u1", appointment_id="A2")
    recent = svc.recent_appointments()
    assert recent.total_count == 3
    assert recent.scheduled_count == 1
    assert recent.cancelled_count == 1
    assert recent.pending_count == 1
