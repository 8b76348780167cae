import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base of every error the request boundary knows how to render."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or type(self).message
        super().__init__(self.message)

    @property
    def public_message(self) -> str:
        # server-side faults never leak their detail
        if self.status_code >= 500:
            return type(self).message
        return self.message


class ValidationError(AppError):
    status_code = 400
    message = "Invalid request"


class ConflictError(AppError):
    status_code = 409
    message = "Resource already exists"


class NotFoundError(AppError):
    status_code = 404
    message = "Not found"


class ForbiddenError(AppError):
    status_code = 403
    message = "Access denied"


class InvalidOtpError(AppError):
    status_code = 400
    message = "Invalid OTP"


class ExpiredOtpError(AppError):
    status_code = 400
    message = "OTP has expired"


class UnverifiedError(AppError):
    status_code = 400
    message = "User not verified. Please complete registration first."


class InvalidCredentialsError(AppError):
    status_code = 401
    message = "Invalid credentials"


class AIWorkerError(AppError):
    status_code = 502
    message = "AI service is unavailable"


class StoreError(AppError):
    status_code = 500
    message = "Internal server error"


def create_error_response(error_message: str) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": None,
        "error": error_message
    }


def create_success_response(data: Any, message: Optional[str] = None) -> dict:
    """Create a standardized success response"""
    return {
        "success": True,
        "message": message,
        "data": data,
        "error": None
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.public_message)
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail))
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors like any other ValidationError"""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = ValidationError.message
    return JSONResponse(status_code=400, content=create_error_response(message))


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
