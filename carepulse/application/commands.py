"""UI commands returned to the caller after a successful submission.

The core never navigates or touches dialogs itself; it hands one of these
values back and the routing surface carries it out.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class NavigateTo:
    path: str
    kind: str = field(default="navigate", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "path": self.path}


@dataclass(frozen=True)
class CloseDialogAndRefresh:
    kind: str = field(default="close_dialog_and_refresh", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind}


UICommand = Union[NavigateTo, CloseDialogAndRefresh]


def success_path(user_id: str, appointment_id: str) -> str:
    return f"/patients/{user_id}/new-appointment/success?appointmentId={appointment_id}"


def registration_path(patient_id: str) -> str:
    return f"/patients/{patient_id}/register"


ADMIN_PATH = "/admin"
HOME_PATH = "/"


@dataclass
class MutationResult:
    """Outcome of one submission: a UI command on success, an error message otherwise."""
    ok: bool
    command: Optional[UICommand] = None
    record: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, record: Any, command: UICommand) -> "MutationResult":
        return cls(ok=True, command=command, record=record)

    @classmethod
    def failure(cls, error: str) -> "MutationResult":
        return cls(ok=False, error=error)
