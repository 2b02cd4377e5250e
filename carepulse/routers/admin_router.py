from dataclasses import asdict
from fastapi import APIRouter, Depends, Request, Response
from sqlmodel import Session
import logging

from ..config import Settings, get_settings
from ..database import get_session
from ..exceptions import PasskeyRejected
from ..application.commands import ADMIN_PATH, NavigateTo
from ..application.services.appointments_service import AppointmentsService
from ..application.services.passkey_gate import PasskeyGate, PasskeyVerdict
from ..infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from ..infrastructure.storage.cookie_store import CookieKeyValueStore
from ..schemas.admin.admin import PasskeyRequest, PasskeyResponse
from ..schemas.appointments.appointment import AppointmentResponse, RecentAppointmentsResponse
from ..schemas.common.common import UICommandResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def get_passkey_gate(request: Request, response: Response, settings: Settings = Depends(get_settings)) -> PasskeyGate:
    return PasskeyGate(
        expected=settings.ADMIN_PASSKEY,
        storage=CookieKeyValueStore(request, response),
        storage_key=settings.PASSKEY_STORAGE_KEY,
    )


def require_admin(gate: PasskeyGate = Depends(get_passkey_gate)) -> None:
    gate.require_access()


@router.post("/passkey", response_model=PasskeyResponse)
def submit_passkey(
    body: PasskeyRequest,
    gate: PasskeyGate = Depends(get_passkey_gate),
):
    if gate.submit(body.passkey) is not PasskeyVerdict.ACCEPTED:
        raise PasskeyRejected()
    return PasskeyResponse(
        success=True,
        message="Passkey accepted",
        command=UICommandResponse(**NavigateTo(ADMIN_PATH).to_dict()),
    )


@router.get("/access", response_model=UICommandResponse)
def check_access(gate: PasskeyGate = Depends(get_passkey_gate)):
    return UICommandResponse(**gate.check_access().to_dict())


@router.get("/appointments", response_model=RecentAppointmentsResponse, dependencies=[Depends(require_admin)])
def recent_appointments(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    service = AppointmentsService(repo=SqlAppointmentsRepository(session))
    recent = service.recent_appointments(settings.RECENT_APPOINTMENTS_LIMIT)
    return RecentAppointmentsResponse(
        total_count=recent.total_count,
        scheduled_count=recent.scheduled_count,
        pending_count=recent.pending_count,
        cancelled_count=recent.cancelled_count,
        documents=[AppointmentResponse(**asdict(a)) for a in recent.documents],
    )
