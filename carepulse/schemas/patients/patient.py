# carepulse/schemas/patients/patient.py
from pydantic import BaseModel
from typing import Any, Dict, Optional
from datetime import datetime

from ..common.common import UICommandResponse

class PatientRegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    def to_form_values(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

class PatientResponse(BaseModel):
    id: str
    user_id: str
    name: str
    email: str
    phone: str
    created_at: datetime

class PatientRegisterResponse(BaseModel):
    success: bool
    message: str
    patient: PatientResponse
    command: UICommandResponse
