from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
import logging

from ..database import get_session
from ..exceptions import RecordNotFound
from ..application.commands import MutationResult
from ..application.ports.appointments_repo import AppointmentDto
from ..application.services.appointments_service import AppointmentsService
from ..application.services.patient_service import PatientService
from ..application.state_machine import AppointmentAction
from ..infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from ..schemas.appointments.appointment import (
    AppointmentFormRequest,
    AppointmentResponse,
    AppointmentSubmissionResponse,
    AppointmentSuccessResponse,
    PhysicianResponse,
)
from ..schemas.common.common import UICommandResponse
from .admin_router import require_admin
from .patients_router import get_patient_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Appointments"])


def get_appointments_service(session: Session = Depends(get_session)) -> AppointmentsService:
    return AppointmentsService(repo=SqlAppointmentsRepository(session))


def to_appointment_response(a: AppointmentDto) -> AppointmentResponse:
    return AppointmentResponse(**asdict(a))


def to_submission_response(result: MutationResult, message: str) -> AppointmentSubmissionResponse:
    if not result.ok:
        # Local form/dialog state is left alone so the user can retry the same input
        raise HTTPException(status_code=500, detail=result.error)
    return AppointmentSubmissionResponse(
        success=True,
        message=message,
        appointment=to_appointment_response(result.record),
        command=UICommandResponse(**result.command.to_dict()),
    )


@router.post("/patients/{user_id}/appointments", response_model=AppointmentSubmissionResponse, status_code=201)
def request_appointment(
    user_id: str,
    form: AppointmentFormRequest,
    patient_service: PatientService = Depends(get_patient_service),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        patient = patient_service.get_by_user(user_id)
    except RecordNotFound:
        raise HTTPException(status_code=404, detail="Patient not found")
    result = appt_service.submit(
        AppointmentAction.CREATE,
        form.to_form_values(),
        user_id=user_id,
        patient_id=patient.id,
    )
    return to_submission_response(result, "Appointment requested successfully")


@router.get("/patients/{user_id}/appointments/{appointment_id}/success", response_model=AppointmentSuccessResponse)
def appointment_success(
    user_id: str,
    appointment_id: str,
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    view = appt_service.success_details(appointment_id)
    if view.appointment.user_id != user_id:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return AppointmentSuccessResponse(
        appointment=to_appointment_response(view.appointment),
        physician=PhysicianResponse(**asdict(view.physician)) if view.physician else None,
        date_time=view.schedule.date_time,
        date_day=view.schedule.date_day,
        date_only=view.schedule.date_only,
        time_only=view.schedule.time_only,
    )


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: str,
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return to_appointment_response(appt_service.get_appointment(appointment_id))


@router.put("/appointments/{appointment_id}/schedule", response_model=AppointmentSubmissionResponse,
            dependencies=[Depends(require_admin)])
def schedule_appointment(
    appointment_id: str,
    form: AppointmentFormRequest,
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    result = appt_service.submit(
        AppointmentAction.SCHEDULE,
        form.to_form_values(),
        user_id=form.userId or "",
        appointment_id=appointment_id,
    )
    return to_submission_response(result, "Appointment scheduled successfully")


@router.put("/appointments/{appointment_id}/cancel", response_model=AppointmentSubmissionResponse,
            dependencies=[Depends(require_admin)])
def cancel_appointment(
    appointment_id: str,
    form: AppointmentFormRequest,
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    result = appt_service.submit(
        AppointmentAction.CANCEL,
        form.to_form_values(),
        user_id=form.userId or "",
        appointment_id=appointment_id,
    )
    return to_submission_response(result, "Appointment cancelled successfully")
