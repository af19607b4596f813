"""
Custom Exceptions for CourseDesk
================================

The HTTP client never raises for HTTP outcomes: it hands back an
``APIResponse`` and lets the caller decide. These exceptions are for callers
that want to fail loudly, plus configuration and argument errors.

Usage:
    from coursedesk.exceptions import APIError

    response = await client.get("/course-access/my-courses")
    try:
        response.raise_for_error()
    except APIError as e:
        console.print(f"[red]{e.message}[/red]")
"""

from typing import Optional, Any, Dict


DEFAULT_ERROR_MESSAGE = "An error occurred"
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."


class CourseDeskError(Exception):
    """Base exception for all CourseDesk errors"""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(CourseDeskError):
    """Invalid client configuration"""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(message, code="CONFIG_ERROR")
        if setting:
            self.details["setting"] = setting


# ============================================
# Authentication Errors
# ============================================

class AuthenticationError(CourseDeskError):
    """User authentication failed"""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


# ============================================
# API Errors
# ============================================

class APIError(CourseDeskError):
    """Backend answered with an error status"""

    def __init__(
        self,
        message: str = DEFAULT_ERROR_MESSAGE,
        status_code: int = 0,
        errors: Optional[Dict[str, str]] = None
    ):
        super().__init__(message, code="API_ERROR")
        self.status_code = status_code
        self.errors = errors or {}
        self.details = {"status_code": status_code}
        if self.errors:
            self.details["errors"] = self.errors

    @classmethod
    def from_response(cls, response) -> "APIError":
        """Build an error from an APIResponse, whatever shape its body has"""
        if response.status == 0:
            error = NetworkError()
            if isinstance(response.data, dict) and response.data.get("error"):
                error.details["cause"] = response.data["error"]
            return error

        errors = None
        if isinstance(response.data, dict) and isinstance(response.data.get("errors"), dict):
            errors = response.data["errors"]

        return cls(
            message=_extract_message(response.data, DEFAULT_ERROR_MESSAGE),
            status_code=response.status,
            errors=errors
        )


class NetworkError(APIError):
    """Backend could not be reached"""

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE):
        super().__init__(message, status_code=0)
        self.code = "NETWORK_ERROR"


def _extract_message(data: Any, default: str) -> str:
    if isinstance(data, dict):
        message = data.get("message") or data.get("detail") or data.get("error")
        if isinstance(message, str) and message:
            return message
    return default

