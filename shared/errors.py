"""
Shared error handling for the authorization engine.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class CanException(Exception):
    """Base exception for the authorization engine."""

    status_code = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class AccessDenied(CanException):
    """Raised when an authorization check fails in raise mode."""

    status_code = 403
    default_message = "You are not authorized to access this page."

    def __init__(self, message: Optional[str] = None, action: Any = None, subject: Any = None):
        self.action = action
        self.subject = subject
        details = {}
        if action is not None:
            details["action"] = str(action)
        if subject is not None:
            details["subject"] = describe_subject(subject)
        super().__init__("ACCESS_DENIED", message or self.default_message, details)


class NotFound(CanException):
    """Raised when an identifier is present but no backend yields an instance."""

    status_code = 404

    def __init__(self, subject_type: Any, identifier: Any, message: Optional[str] = None):
        self.subject_type = subject_type
        self.identifier = identifier
        super().__init__(
            "NOT_FOUND",
            message or f"{describe_subject(subject_type)} {identifier!r} not found",
            {"subject_type": describe_subject(subject_type), "id": str(identifier)}
        )


class UnknownActionError(CanException):
    """Request verb has no canonical action."""

    status_code = 405

    def __init__(self, method: str):
        self.method = method
        super().__init__(
            "UNKNOWN_ACTION",
            f"No action is defined for HTTP method {method}",
            {"method": method}
        )


class RuleDeclarationError(CanException):
    """Malformed rule declaration. Programming error, raised at setup time."""

    def __init__(self, message: str = "Malformed rule declaration", details: Optional[Dict[str, Any]] = None):
        super().__init__("RULE_DECLARATION_ERROR", message, details)


class Halt(Exception):
    """
    Response intent emitted by enforcement.

    Carries the status code and, for redirects, the target location, or
    the error to render as the response body. The host turns it into a
    response; nothing after the raise point runs.
    """

    def __init__(self, status_code: int, location: Optional[str] = None,
                 error: Optional[CanException] = None):
        self.status_code = status_code
        self.location = location
        self.error = error
        super().__init__(f"halt {status_code}" + (f" -> {location}" if location else ""))

    @property
    def is_redirect(self) -> bool:
        return self.location is not None


def describe_subject(value: Any) -> str:
    """Readable name for a subject or subject type."""
    if isinstance(value, type):
        return value.__name__
    return str(value)
