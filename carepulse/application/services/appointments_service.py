import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from ...constants import PHYSICIANS, Physician, find_physician
from ...exceptions import PersistenceFailure, RecordNotFound
from ...utils import FormattedDateTime, format_date_time
from ..commands import CloseDialogAndRefresh, MutationResult, NavigateTo, success_path
from ..ports.appointments_repo import AppointmentDto, AppointmentsRepository
from ..state_machine import (
    AppointmentRequest,
    AppointmentStatus,
    InsertAppointment,
    build_request,
    plan_mutation,
)
from ..validation import validate_appointment_fields

logger = logging.getLogger(__name__)


@dataclass
class AppointmentSuccessView:
    appointment: AppointmentDto
    physician: Optional[Physician]
    schedule: FormattedDateTime


@dataclass
class RecentAppointments:
    total_count: int
    scheduled_count: int
    pending_count: int
    cancelled_count: int
    documents: List[AppointmentDto]


@dataclass
class AppointmentsService:
    repo: AppointmentsRepository
    roster: List[Physician] = field(default_factory=lambda: list(PHYSICIANS))

    def submit(self, action: Any, raw_fields: Mapping[str, Any], user_id: str,
               patient_id: Optional[str] = None, appointment_id: Optional[str] = None) -> MutationResult:
        """Validate a form submission and apply it.

        Raises ``FieldValidationError`` before any persistence call when the
        fields or identifiers are not acceptable for ``action``.
        """
        fields = validate_appointment_fields(action, raw_fields)
        request = build_request(action, fields, user_id, patient_id=patient_id, appointment_id=appointment_id)
        return self.dispatch(request)

    def dispatch(self, request: AppointmentRequest) -> MutationResult:
        """Issue the single persistence call for ``request``; never retries."""
        mutation = plan_mutation(request)
        is_insert = isinstance(mutation, InsertAppointment)
        try:
            if is_insert:
                record = self.repo.insert_appointment(mutation.payload)
            else:
                record = self.repo.update_appointment(mutation.appointment_id, mutation.patch)
        except PersistenceFailure as e:
            logger.error(f"Appointment {request.action.value} failed for user {request.user_id}: {e.message}")
            return MutationResult.failure(self._failure_message(is_insert))

        if record is None:
            target = "new appointment" if is_insert else f"appointment {mutation.appointment_id}"
            logger.error(f"Appointment {request.action.value} returned no record for {target}")
            return MutationResult.failure(self._failure_message(is_insert))

        logger.info(f"Appointment {record.id} {request.action.value}: status={record.status}")
        if is_insert:
            return MutationResult.success(record, NavigateTo(success_path(request.user_id, record.id)))
        return MutationResult.success(record, CloseDialogAndRefresh())

    @staticmethod
    def _failure_message(is_insert: bool) -> str:
        return "Failed to submit appointment" if is_insert else "Failed to update appointment"

    def get_appointment(self, appointment_id: str) -> AppointmentDto:
        appt = self.repo.get_appointment(appointment_id)
        if not appt:
            raise RecordNotFound(f"Appointment {appointment_id} not found")
        return appt

    def success_details(self, appointment_id: str) -> AppointmentSuccessView:
        appt = self.get_appointment(appointment_id)
        # The roster is only consulted for display; unknown names resolve to None
        physician = find_physician(appt.primary_physician, self.roster)
        return AppointmentSuccessView(
            appointment=appt,
            physician=physician,
            schedule=format_date_time(appt.schedule),
        )

    def recent_appointments(self, limit: int = 100) -> RecentAppointments:
        docs = self.repo.list_recent(limit)
        counts = {status: 0 for status in AppointmentStatus}
        for appt in docs:
            try:
                counts[AppointmentStatus(appt.status)] += 1
            except ValueError:
                logger.warning(f"Appointment {appt.id} has unknown status {appt.status!r}")
        return RecentAppointments(
            total_count=len(docs),
            scheduled_count=counts[AppointmentStatus.SCHEDULED],
            pending_count=counts[AppointmentStatus.PENDING],
            cancelled_count=counts[AppointmentStatus.CANCELLED],
            documents=docs,
        )
