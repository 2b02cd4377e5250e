# carepulse/schemas/admin/admin.py
from pydantic import BaseModel, Field

from ..common.common import UICommandResponse

class PasskeyRequest(BaseModel):
    passkey: str = Field(..., description="Six digit admin passkey")

class PasskeyResponse(BaseModel):
    success: bool
    message: str
    command: UICommandResponse
