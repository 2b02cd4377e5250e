import uuid
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .....db.models import Patient
from .....exceptions import PersistenceFailure
from .....utils import as_utc
from .....application.ports.patient_repo import NewPatient, PatientDto, PatientRepository

class SqlPatientRepository(PatientRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, patient: Patient) -> PatientDto:
        return PatientDto(
            id=patient.id,
            user_id=patient.user_id,
            name=patient.name,
            email=patient.email,
            phone=patient.phone,
            created_at=as_utc(patient.created_at),
        )

    def create_patient(self, data: NewPatient) -> PatientDto:
        patient_id = uuid.uuid4().hex
        # A self-registered patient owns their own bookings
        patient = Patient(
            id=patient_id,
            user_id=data.user_id or patient_id,
            name=data.name,
            email=data.email,
            phone=data.phone,
        )
        try:
            self.session.add(patient)
            self.session.commit()
            self.session.refresh(patient)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceFailure("Could not create patient", cause=e)
        return self._to_dto(patient)

    def get_patient(self, patient_id: str) -> Optional[PatientDto]:
        try:
            patient = self.session.exec(select(Patient).where(Patient.id == patient_id)).first()
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Could not load patient {patient_id}", cause=e)
        return self._to_dto(patient) if patient else None

    def get_patient_by_user(self, user_id: str) -> Optional[PatientDto]:
        try:
            patient = self.session.exec(
                select(Patient)
                .where(Patient.user_id == user_id)
                .order_by(Patient.created_at.desc())
            ).first()
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Could not load patient for user {user_id}", cause=e)
        return self._to_dto(patient) if patient else None
