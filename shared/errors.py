"""
Shared error handling for the PIN Checker Relay.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from .logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class RelayException(Exception):
    """Base exception for relay services."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(RelayException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class AuthenticationError(RelayException):
    """Token acquisition failed."""

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None,
                 code: str = "AUTHENTICATION_ERROR"):
        super().__init__(code, message, details)


class AuthConfigError(AuthenticationError):
    """Consumer key or secret is not configured."""

    def __init__(self, message: str = "Missing KRA API credentials in environment variables."):
        super().__init__(message, code="AUTH_CONFIG_ERROR")


class AuthRejectedError(AuthenticationError):
    """Authorization endpoint answered with a non-success status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"Auth failed: token endpoint returned {status_code}",
            details={"status_code": status_code},
            code="AUTH_REJECTED",
        )


class AuthMalformedError(AuthenticationError):
    """Authorization endpoint succeeded but returned no usable token."""

    def __init__(self, message: str = "No access_token returned"):
        super().__init__(message, code="AUTH_MALFORMED_RESPONSE")


class AuthUnavailableError(AuthenticationError):
    """Authorization endpoint could not be reached in time."""

    def __init__(self, message: str = "Token endpoint unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details, code="AUTH_UNAVAILABLE")
