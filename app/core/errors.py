# file: core/errors.py

from enum import Enum
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ErrorCode(str, Enum):
    INVALID_REQUEST = "INVALID_REQUEST"
    RECIPIENT_NOT_FOUND = "RECIPIENT_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    TOKEN_UNAVAILABLE = "TOKEN_UNAVAILABLE"
    DELIVERY_FAILED = "DELIVERY_FAILED"
    INTERNAL_FAULT = "INTERNAL_FAULT"


class ConfigurationError(RuntimeError):
    """Raised at startup when the relay cannot be configured. Fatal."""


class RelayError(Exception):
    """
    Base class for every failure a handler reports to the caller.
    Each subclass carries the HTTP status and the stable error code it renders as.
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: ErrorCode = ErrorCode.INTERNAL_FAULT
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message, "errorCode": self.code.value}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidRequest(RelayError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.INVALID_REQUEST
    default_message = "Invalid request"


class RecipientNotFound(RelayError):
    status_code = status.HTTP_404_NOT_FOUND
    code = ErrorCode.RECIPIENT_NOT_FOUND
    default_message = "User not found"


class UserNotFound(RelayError):
    status_code = status.HTTP_404_NOT_FOUND
    code = ErrorCode.USER_NOT_FOUND
    default_message = "User not found"


class TokenUnavailable(RelayError):
    # 400: the recipient exists, the request just cannot be served for it.
    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.TOKEN_UNAVAILABLE
    default_message = "User has no FCM token"


class DeliveryFailed(RelayError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = ErrorCode.DELIVERY_FAILED
    default_message = "Failed to send notification"


class InternalFault(RelayError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = ErrorCode.INTERNAL_FAULT


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Renders FastAPI body/path validation failures as InvalidRequest (400) instead of 422."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    error = InvalidRequest("Invalid request body", details="; ".join(problems) or None)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_error_handlers(app) -> None:
    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
