import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INVALID_PASSKEY_MESSAGE = "Invalid passkey. Please try again."


class FieldValidationError(Exception):
    """One or more submitted fields are missing or malformed.

    ``errors`` maps each offending form field name to a human readable reason.
    All failures of a submission are collected, never just the first one.
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))


class PersistenceFailure(Exception):
    """The persistence service failed or returned no record."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)


class RecordNotFound(PersistenceFailure):
    """The persistence service returned no record for the requested id."""


class PasskeyRejected(Exception):
    def __init__(self, message: str = INVALID_PASSKEY_MESSAGE):
        self.message = message
        super().__init__(message)


class MalformedCredentialToken(ValueError):
    pass


def create_error_response(error_message: Any, status_code: int = 400) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": None,
        "error": error_message
    }

def create_success_response(data: Any) -> dict:
    """Create a standardized success response"""
    return {
        "success": True,
        "data": data,
        "error": None
    }

async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.detail, exc.status_code)
    )

async def field_validation_exception_handler(request: Request, exc: FieldValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=create_error_response(exc.errors, 422)
    )

async def passkey_rejected_handler(request: Request, exc: PasskeyRejected) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content=create_error_response(exc.message, 401)
    )

async def persistence_failure_handler(request: Request, exc: PersistenceFailure) -> JSONResponse:
    logger.error(f"Persistence failure on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=500,
        content=create_error_response(exc.message, 500)
    )

async def record_not_found_handler(request: Request, exc: RecordNotFound) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content=create_error_response(exc.message, 404)
    )
