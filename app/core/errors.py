"""
Error taxonomy for the gateway.

Every error raised by the entitlement, capability and ledger layers derives from
GatewayError. The API layer converts them into a uniform
{"success": false, "message": ..., "code": ...} payload instead of relying on
HTTP status codes.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base class for errors surfaced to API callers."""
    code = "error"
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        payload = {"success": False, "message": self.message, "code": self.code}
        payload.update(self.details)
        return payload


class AuthenticationError(GatewayError):
    code = "unauthenticated"
    default_message = "Not authenticated"


class IdentityProviderError(GatewayError):
    code = "identity_unavailable"
    default_message = "Identity service unavailable. Please try again later."


class QuotaExceededError(GatewayError):
    """Raised when the quota gate denies a request. `reason` is limit_reached or premium_required."""
    code = "quota_exceeded"
    default_message = "Free usage limit reached. Upgrade to premium for more requests."

    def __init__(self, message: Optional[str] = None, reason: str = "limit_reached", **details: Any):
        super().__init__(message, reason=reason, **details)
        self.reason = reason


class ProviderError(GatewayError):
    code = "provider_error"
    default_message = "AI service temporarily unavailable. Please try again later."


class StorageError(ProviderError):
    code = "storage_error"
    default_message = "Failed to store generated asset"


class PersistenceError(GatewayError):
    code = "persistence_error"
    default_message = "Failed to record creation"


class NotFoundError(GatewayError):
    code = "not_found"
    default_message = "Creation not found"


class ValidationError(GatewayError):
    code = "invalid_request"
    default_message = "Invalid request"


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Render a GatewayError as an outcome payload."""
    if isinstance(exc, (ProviderError, PersistenceError)):
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=200, content=exc.to_payload())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI body/form validation failures in the same outcome shape."""
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return JSONResponse(
        status_code=200,
        content={"success": False, "message": message, "code": ValidationError.code},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
