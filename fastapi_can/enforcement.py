"""
Turns a negative decision into an observable denial.
"""

from typing import Any, Optional

from shared.config import CanConfig, DenialMode
from shared.errors import AccessDenied, Halt
from .rules.models import Decision

DEFAULT_DENIAL_MESSAGE = "Not Authorized"


def redirect_status(method: str) -> int:
    """302 for GET and HEAD, 303 for anything else so the client switches to GET."""
    return 302 if method.upper() in ("GET", "HEAD") else 303


def denial_outcome(decision: Decision, config: CanConfig, method: str = "GET",
                   not_auth: Optional[str] = None, message: Optional[str] = None) -> Exception:
    """
    The exception that surfaces ``decision`` as a denial.

    In raise mode this is AccessDenied. In respond mode it is a Halt that
    redirects to ``not_auth``, else to the configured redirect target,
    else answers 403.
    """
    denied = AccessDenied(message or DEFAULT_DENIAL_MESSAGE, action=decision.action, subject=decision.subject)

    if config.denial_mode == DenialMode.RAISE:
        return denied

    target = not_auth or config.not_auth
    if target:
        return Halt(redirect_status(method), location=target)
    return Halt(403, error=denied)


def outcome_label(outcome: Any) -> str:
    """Metric label for a denial outcome."""
    if isinstance(outcome, Halt):
        return "redirect" if outcome.is_redirect else "forbidden"
    return "raised"
