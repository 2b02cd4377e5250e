import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ...exceptions import PersistenceFailure, RecordNotFound
from ..commands import MutationResult, NavigateTo, registration_path
from ..ports.patient_repo import NewPatient, PatientDto, PatientRepository
from ..validation import validate_patient_fields

logger = logging.getLogger(__name__)


@dataclass
class PatientService:
    repo: PatientRepository

    def register(self, raw_fields: Mapping[str, Any], user_id: Optional[str] = None) -> MutationResult:
        fields = validate_patient_fields(raw_fields)
        try:
            patient = self.repo.create_patient(
                NewPatient(name=fields.name, email=str(fields.email), phone=fields.phone, user_id=user_id)
            )
        except PersistenceFailure as e:
            logger.error(f"Patient registration failed: {e.message}")
            return MutationResult.failure("Failed to register patient")
        if patient is None:
            logger.error("Patient registration returned no record")
            return MutationResult.failure("Failed to register patient")
        logger.info(f"Registered patient {patient.id}")
        return MutationResult.success(patient, NavigateTo(registration_path(patient.id)))

    def get(self, patient_id: str) -> PatientDto:
        patient = self.repo.get_patient(patient_id)
        if not patient:
            raise RecordNotFound(f"Patient {patient_id} not found")
        return patient

    def get_by_user(self, user_id: str) -> PatientDto:
        patient = self.repo.get_patient_by_user(user_id)
        if not patient:
            raise RecordNotFound(f"No patient registered for user {user_id}")
        return patient
