from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .....db.models import Appointment
from .....exceptions import PersistenceFailure
from .....utils import as_utc, utc_now
from .....application.ports.appointments_repo import (
    AppointmentsRepository,
    AppointmentDto,
    AppointmentPatch,
    NewAppointment,
)


class SqlAppointmentsRepository(AppointmentsRepository):
    def __init__(self, session: Session):
        self.session = session

    def _appt_to_dto(self, a: Appointment) -> AppointmentDto:
        return AppointmentDto(
            id=a.id,
            patient=a.patient,
            user_id=a.user_id,
            primary_physician=a.primary_physician,
            schedule=as_utc(a.schedule),
            status=a.status,
            reason=a.reason,
            note=a.note,
            cancellation_reason=a.cancellation_reason,
            created_at=as_utc(a.created_at),
            updated_at=as_utc(a.updated_at),
        )

    def insert_appointment(self, payload: NewAppointment) -> AppointmentDto:
        appt = Appointment(
            patient=payload.patient,
            user_id=payload.user_id,
            primary_physician=payload.primary_physician,
            schedule=as_utc(payload.schedule),
            status=payload.status,
            reason=payload.reason,
            note=payload.note,
        )
        try:
            self.session.add(appt)
            self.session.commit()
            self.session.refresh(appt)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceFailure("Could not insert appointment", cause=e)
        return self._appt_to_dto(appt)

    def update_appointment(self, appointment_id: str, patch: AppointmentPatch) -> Optional[AppointmentDto]:
        try:
            a = self.session.exec(select(Appointment).where(Appointment.id == appointment_id)).first()
            if not a:
                return None
            a.status = patch.status
            if patch.primary_physician is not None:
                a.primary_physician = patch.primary_physician
            if patch.schedule is not None:
                a.schedule = as_utc(patch.schedule)
            if patch.cancellation_reason is not None:
                a.cancellation_reason = patch.cancellation_reason
            a.updated_at = utc_now()
            self.session.add(a)
            self.session.commit()
            self.session.refresh(a)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceFailure(f"Could not update appointment {appointment_id}", cause=e)
        return self._appt_to_dto(a)

    def get_appointment(self, appointment_id: str) -> Optional[AppointmentDto]:
        try:
            a = self.session.exec(select(Appointment).where(Appointment.id == appointment_id)).first()
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Could not load appointment {appointment_id}", cause=e)
        return self._appt_to_dto(a) if a else None

    def list_recent(self, limit: int) -> List[AppointmentDto]:
        try:
            rows = self.session.exec(
                select(Appointment)
                .order_by(Appointment.created_at.desc())
                .limit(limit)
            ).all()
        except SQLAlchemyError as e:
            raise PersistenceFailure("Could not list appointments", cause=e)
        return [self._appt_to_dto(r) for r in rows]
