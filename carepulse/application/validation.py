"""Field validation rules for the appointment and registration forms.

Each form action has its own pydantic model holding only the fields that
action requires. ``validate_appointment_fields`` and ``validate_patient_fields``
run the raw form values through the matching model and turn every pydantic
error into one entry of a ``FieldValidationError``, keyed by the form field
name (``primaryPhysician``, ``cancellationReason``...), so the form can show
all messages after a single submission.
"""
import re
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, validator

from ..exceptions import FieldValidationError
from .state_machine import AppointmentAction

PHONE_PATTERN = re.compile(r"^\+\d{10,15}$")

# Messages shown when a field is absent, blank or too short
REQUIRED_MESSAGES: Dict[str, str] = {
    "primaryPhysician": "Select at least one doctor",
    "schedule": "Invalid date",
    "reason": "Reason is required",
    "cancellationReason": "Cancellation reason is required",
    "name": "Name must be at least 2 characters",
    "email": "Invalid email address",
    "phone": "Invalid phone number",
}

TOO_LONG_MESSAGES: Dict[str, str] = {
    "reason": "Reason must be at most 500 characters",
    "note": "Note must be at most 500 characters",
    "cancellationReason": "Reason must be at most 500 characters",
    "name": "Name must be at most 50 characters",
}

_MISSING_TYPES = {"missing", "string_type", "string_too_short", "datetime_type", "datetime_parsing", "datetime_from_date_parsing"}


class _FormModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)

    @classmethod
    def form_names(cls) -> Dict[str, str]:
        """Map both attribute names and aliases to the form field name."""
        names = {}
        for name, info in cls.model_fields.items():
            alias = info.alias or name
            names[name] = alias
            names[alias] = alias
        return names


class AppointmentFields(_FormModel):
    """Normalized appointment form values; which ones are set depends on the action."""

    primary_physician: Optional[str] = Field(None, alias="primaryPhysician")
    schedule: Optional[datetime] = None
    reason: Optional[str] = Field(None, max_length=500)
    note: Optional[str] = Field(None, max_length=500)
    cancellation_reason: Optional[str] = Field(None, alias="cancellationReason", max_length=500)

    @validator("primary_physician", "reason", "note", "cancellation_reason", pre=True, check_fields=False)
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @validator("schedule", pre=True, check_fields=False)
    def blank_schedule_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CreateAppointmentFields(AppointmentFields):
    primary_physician: str = Field(..., alias="primaryPhysician", min_length=1)
    schedule: datetime
    reason: str = Field(..., min_length=1, max_length=500)


class ScheduleAppointmentFields(AppointmentFields):
    primary_physician: str = Field(..., alias="primaryPhysician", min_length=1)
    schedule: datetime


class CancelAppointmentFields(AppointmentFields):
    cancellation_reason: str = Field(..., alias="cancellationReason", min_length=1, max_length=500)


FIELDS_BY_ACTION: Dict[AppointmentAction, Type[AppointmentFields]] = {
    AppointmentAction.CREATE: CreateAppointmentFields,
    AppointmentAction.SCHEDULE: ScheduleAppointmentFields,
    AppointmentAction.CANCEL: CancelAppointmentFields,
}

# Cancellation only looks at the cancellation reason
_CANCEL_KEYS = ("cancellationReason", "cancellation_reason")


class PatientFields(_FormModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    phone: str

    @validator("phone")
    def validate_phone(cls, v):
        phone_clean = re.sub(r"[\s\-()]", "", v)
        if not PHONE_PATTERN.match(phone_clean):
            raise ValueError("Invalid phone number")
        return phone_clean


def _collect_errors(exc: ValidationError, model: Type[_FormModel]) -> Dict[str, str]:
    names = model.form_names()
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ("__root__",)
        field = names.get(str(loc[0]), str(loc[0]))
        if field in errors:
            continue
        err_type = err.get("type", "")
        if err_type == "string_too_long" and field in TOO_LONG_MESSAGES:
            errors[field] = TOO_LONG_MESSAGES[field]
        elif err_type in _MISSING_TYPES and field in REQUIRED_MESSAGES:
            errors[field] = REQUIRED_MESSAGES[field]
        elif field in REQUIRED_MESSAGES and err_type.startswith(("value_error", "email")):
            errors[field] = REQUIRED_MESSAGES[field]
        else:
            errors[field] = err.get("msg", "Invalid value")
    return errors


def validate_appointment_fields(action: Any, raw: Mapping[str, Any]) -> AppointmentFields:
    """Validate raw appointment form values for ``action``.

    Returns the normalized field set or raises ``FieldValidationError`` naming
    every failing field.
    """
    try:
        action = AppointmentAction(action)
    except ValueError:
        raise FieldValidationError({"action": f"Unknown action: {action!r}"})

    model = FIELDS_BY_ACTION[action]
    data = dict(raw or {})
    if action is AppointmentAction.CANCEL:
        data = {k: v for k, v in data.items() if k in _CANCEL_KEYS}
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise FieldValidationError(_collect_errors(e, model))


def validate_patient_fields(raw: Mapping[str, Any]) -> PatientFields:
    try:
        return PatientFields.model_validate(dict(raw or {}))
    except ValidationError as e:
        raise FieldValidationError(_collect_errors(e, PatientFields))
