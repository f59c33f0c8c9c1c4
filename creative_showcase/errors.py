"""
Error taxonomy for Creative Showcase.

Services raise these; the API layer renders them with their status code and a
stable error code.
"""

from typing import Any, Dict


class ShowcaseError(Exception):
    """Base class for errors reported to API clients.

    Attributes:
        code: Stable error code for programmatic handling
        message: Human-readable error description
    """

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"{self.code}: {message}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {"error": self.code, "message": self.message}


class ValidationError(ShowcaseError):
    """Missing or malformed required input."""

    status_code = 400
    code = "VALIDATION_ERROR"


class Unauthenticated(ShowcaseError):
    """Missing, malformed, expired or otherwise invalid credential."""

    status_code = 401
    code = "UNAUTHENTICATED"


class Forbidden(ShowcaseError):
    """Valid credential, but the caller may not perform this action."""

    status_code = 403
    code = "FORBIDDEN"


class Unauthorized(ShowcaseError):
    """A secret supplied to confirm the action did not match."""

    status_code = 403
    code = "UNAUTHORIZED"


class NotFound(ShowcaseError):
    status_code = 404
    code = "NOT_FOUND"


class Conflict(ShowcaseError):
    """Unique field collision."""

    status_code = 409
    code = "CONFLICT"


class ServerError(ShowcaseError):
    """Unexpected store or blob-store failure. The message never carries internals."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Server error"):
        super().__init__(message)
