from dataclasses import dataclass
from typing import List, Optional, Protocol
from datetime import datetime


@dataclass
class AppointmentDto:
    id: str
    patient: str
    user_id: str
    primary_physician: str
    schedule: datetime
    status: str
    reason: Optional[str]
    note: Optional[str]
    cancellation_reason: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass
class NewAppointment:
    patient: str
    user_id: str
    primary_physician: str
    schedule: datetime
    status: str
    reason: str
    note: Optional[str] = None


@dataclass
class AppointmentPatch:
    """Fields to overwrite on an existing appointment; ``None`` leaves a field untouched."""
    status: str
    primary_physician: Optional[str] = None
    schedule: Optional[datetime] = None
    cancellation_reason: Optional[str] = None


class AppointmentsRepository(Protocol):
    """Persistence service contract for appointments.

    Implementations raise ``PersistenceFailure`` when the backing store fails.
    """

    def insert_appointment(self, payload: NewAppointment) -> AppointmentDto:
        ...

    def update_appointment(self, appointment_id: str, patch: AppointmentPatch) -> Optional[AppointmentDto]:
        ...

    def get_appointment(self, appointment_id: str) -> Optional[AppointmentDto]:
        ...

    def list_recent(self, limit: int) -> List[AppointmentDto]:
        ...
