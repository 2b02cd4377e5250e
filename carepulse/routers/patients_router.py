from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
import logging

from ..database import get_session
from ..exceptions import RecordNotFound
from ..application.ports.patient_repo import PatientDto
from ..application.services.patient_service import PatientService
from ..infrastructure.persistence.sqlalchemy.repositories.patient_repository_sql import SqlPatientRepository
from ..schemas.common.common import UICommandResponse
from ..schemas.patients.patient import PatientRegisterRequest, PatientRegisterResponse, PatientResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["Patients"])


def get_patient_service(session: Session = Depends(get_session)) -> PatientService:
    return PatientService(repo=SqlPatientRepository(session))


def to_patient_response(p: PatientDto) -> PatientResponse:
    return PatientResponse(**asdict(p))


@router.post("/", response_model=PatientRegisterResponse, status_code=201)
def register_patient(
    form: PatientRegisterRequest,
    patient_service: PatientService = Depends(get_patient_service),
):
    result = patient_service.register(form.to_form_values())
    if not result.ok:
        raise HTTPException(status_code=500, detail=result.error)
    return PatientRegisterResponse(
        success=True,
        message="Patient registered successfully",
        patient=to_patient_response(result.record),
        command=UICommandResponse(**result.command.to_dict()),
    )


@router.get("/{user_id}", response_model=PatientResponse)
def get_patient(
    user_id: str,
    patient_service: PatientService = Depends(get_patient_service),
):
    try:
        return to_patient_response(patient_service.get_by_user(user_id))
    except RecordNotFound as e:
        logger.info(f"Patient lookup failed: {e.message}")
        raise HTTPException(status_code=404, detail="Patient not found")
