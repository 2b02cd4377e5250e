# carepulse/schemas/appointments/appointment.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from ..common.common import UICommandResponse

class AppointmentFormRequest(BaseModel):
    """Raw appointment form values; the per-action rules are applied by the service."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    primaryPhysician: Optional[str] = None
    schedule: Optional[Any] = Field(None, description="ISO-8601 date/time")
    reason: Optional[str] = None
    note: Optional[str] = None
    cancellationReason: Optional[str] = None
    userId: Optional[str] = Field(None, description="Owner of the booking, echoed back by the admin dialog")

    def to_form_values(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True, exclude={"userId"})

class AppointmentResponse(BaseModel):
    id: str
    patient: str
    user_id: str
    primary_physician: str
    schedule: datetime
    status: str
    reason: Optional[str] = None
    note: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class AppointmentSubmissionResponse(BaseModel):
    success: bool
    message: str
    appointment: AppointmentResponse
    command: UICommandResponse

class PhysicianResponse(BaseModel):
    name: str
    image: str

class AppointmentSuccessResponse(BaseModel):
    appointment: AppointmentResponse
    physician: Optional[PhysicianResponse] = None
    date_time: str
    date_day: str
    date_only: str
    time_only: str

class RecentAppointmentsResponse(BaseModel):
    total_count: int
    scheduled_count: int
    pending_count: int
    cancelled_count: int
    documents: List[AppointmentResponse]
