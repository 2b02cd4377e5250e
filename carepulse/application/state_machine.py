"""Appointment lifecycle.

An appointment is created ``pending`` and is then either ``scheduled`` or
``cancelled`` by an administrator. Each submission carries exactly one
action; the action alone decides the resulting status and which persistence
operation runs. Any status sent by the caller is ignored.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Union

from ..exceptions import FieldValidationError
from .ports.appointments_repo import AppointmentPatch, NewAppointment


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"


class AppointmentAction(str, Enum):
    CREATE = "create"
    SCHEDULE = "schedule"
    CANCEL = "cancel"


class Operation(str, Enum):
    INSERT = "insert"
    UPDATE = "update"


@dataclass(frozen=True)
class Transition:
    action: AppointmentAction
    status: AppointmentStatus
    operation: Operation


TRANSITIONS: Dict[AppointmentAction, Transition] = {
    AppointmentAction.CREATE: Transition(
        AppointmentAction.CREATE, AppointmentStatus.PENDING, Operation.INSERT),
    AppointmentAction.SCHEDULE: Transition(
        AppointmentAction.SCHEDULE, AppointmentStatus.SCHEDULED, Operation.UPDATE),
    AppointmentAction.CANCEL: Transition(
        AppointmentAction.CANCEL, AppointmentStatus.CANCELLED, Operation.UPDATE),
}


def status_for(action: Any) -> AppointmentStatus:
    return TRANSITIONS[AppointmentAction(action)].status


@dataclass(frozen=True)
class InsertAppointment:
    payload: NewAppointment


@dataclass(frozen=True)
class UpdateAppointment:
    appointment_id: str
    patch: AppointmentPatch


Mutation = Union[InsertAppointment, UpdateAppointment]


@dataclass(frozen=True)
class CreateRequest:
    action: ClassVar[AppointmentAction] = AppointmentAction.CREATE

    user_id: str
    patient_id: str
    primary_physician: str
    schedule: datetime
    reason: str
    note: Optional[str] = None

    def plan(self) -> Mutation:
        return InsertAppointment(
            payload=NewAppointment(
                patient=self.patient_id,
                user_id=self.user_id,
                primary_physician=self.primary_physician,
                schedule=self.schedule,
                status=status_for(self.action).value,
                reason=self.reason,
                note=self.note,
            )
        )


@dataclass(frozen=True)
class ScheduleRequest:
    action: ClassVar[AppointmentAction] = AppointmentAction.SCHEDULE

    user_id: str
    appointment_id: str
    primary_physician: str
    schedule: datetime

    def plan(self) -> Mutation:
        return UpdateAppointment(
            appointment_id=self.appointment_id,
            patch=AppointmentPatch(
                status=status_for(self.action).value,
                primary_physician=self.primary_physician,
                schedule=self.schedule,
            ),
        )


@dataclass(frozen=True)
class CancelRequest:
    action: ClassVar[AppointmentAction] = AppointmentAction.CANCEL

    user_id: str
    appointment_id: str
    cancellation_reason: str

    def plan(self) -> Mutation:
        return UpdateAppointment(
            appointment_id=self.appointment_id,
            patch=AppointmentPatch(
                status=status_for(self.action).value,
                cancellation_reason=self.cancellation_reason,
            ),
        )


AppointmentRequest = Union[CreateRequest, ScheduleRequest, CancelRequest]


def plan_mutation(request: AppointmentRequest) -> Mutation:
    """Resolve a request into the single persistence operation it needs."""
    return request.plan()


def build_request(action: Any, fields: Any, user_id: str, patient_id: Optional[str] = None,
                  appointment_id: Optional[str] = None) -> AppointmentRequest:
    """Turn validated form fields into the request variant for ``action``.

    ``fields`` is the result of ``validate_appointment_fields`` for the same action.
    """
    action = AppointmentAction(action)
    if action is AppointmentAction.CREATE:
        if not patient_id:
            raise FieldValidationError({"patient": "Patient is required to request an appointment"})
        return CreateRequest(
            user_id=user_id,
            patient_id=patient_id,
            primary_physician=fields.primary_physician,
            schedule=fields.schedule,
            reason=fields.reason,
            note=fields.note,
        )

    if not appointment_id:
        raise FieldValidationError({"appointmentId": "Appointment id is required"})
    if action is AppointmentAction.SCHEDULE:
        return ScheduleRequest(
            user_id=user_id,
            appointment_id=appointment_id,
            primary_physician=fields.primary_physician,
            schedule=fields.schedule,
        )
    return CancelRequest(
        user_id=user_id,
        appointment_id=appointment_id,
        cancellation_reason=fields.cancellation_reason,
    )
