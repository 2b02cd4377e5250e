from dataclasses import dataclass
from typing import Optional, Protocol
from datetime import datetime


@dataclass
class PatientDto:
    id: str
    user_id: str
    name: str
    email: str
    phone: str
    created_at: datetime


@dataclass
class NewPatient:
    name: str
    email: str
    phone: str
    user_id: Optional[str] = None


class PatientRepository(Protocol):
    def create_patient(self, data: NewPatient) -> PatientDto:
        ...

    def get_patient(self, patient_id: str) -> Optional[PatientDto]:
        ...

    def get_patient_by_user(self, user_id: str) -> Optional[PatientDto]:
        ...
