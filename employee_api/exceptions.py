# exceptions.py
"""
Error taxonomy for the employee API.

Each error carries a stable ``error_code``, a human message and an
``error_id`` (UUID) that is logged alongside the path so a client-visible
error can be matched to the server log line.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from uuid import uuid4


@dataclass
class ErrorResponse:
    """Structured error payload returned to API clients."""

    error_code: str
    message: str
    error_id: str
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict:
        payload = {
            "message": self.message,
            "error_code": self.error_code,
            "error_id": self.error_id,
        }
        if self.errors:
            payload["errors"] = self.errors
        return payload


class EmployeeAPIError(Exception):
    """Base exception for the employee API."""

    error_code: str = "EMPLOYEE_API_ERROR"
    status_code: int = 500

    def __init__(self, message: str, error_id: Optional[str] = None):
        self.message = message
        self.error_id = error_id or str(uuid4())
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error_code=self.error_code,
            message=self.message,
            error_id=self.error_id,
        )


class ValidationError(EmployeeAPIError):
    """Required field missing, bad field type, or uniqueness violated."""

    error_code: str = "VALIDATION_ERROR"
    status_code: int = 400

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_response(self) -> ErrorResponse:
        response = super().to_response()
        response.errors = self.errors
        return response


class NotFoundError(EmployeeAPIError):
    """No employee with the given internal identifier."""

    error_code: str = "NOT_FOUND"
    status_code: int = 404


class StorageFault(EmployeeAPIError):
    """Any other persistence failure.

    Reads surface as 500 and writes as 400, matching the status codes the
    service has always returned for failed writes.
    """

    error_code: str = "STORAGE_FAULT"

    def __init__(self, message: str, write: bool):
        super().__init__(message)
        self.write = write
        self.status_code = 400 if write else 500
