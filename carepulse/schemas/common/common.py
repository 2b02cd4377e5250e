# carepulse/schemas/common/common.py
from pydantic import BaseModel
from typing import Optional

class UICommandResponse(BaseModel):
    type: str
    path: Optional[str] = None
