"""
Authorization for FastAPI applications.

Declare what the current user may do once, in an ability definition, and
ask about it per request:

- rules: Rule model, subject hierarchy and the Ability evaluator.
- actions: HTTP verb to action resolution.
- loader: Entity loading across storage-backend shapes.
- enforcement: Denial outcomes (redirect, 403 or AccessDenied).
- context: The per-request decision surface (can, cannot, authorize,
  load_and_authorize).
- plugin: The Can extension wiring all of it into an application.
"""

from shared.errors import AccessDenied, NotFound, Halt, RuleDeclarationError, UnknownActionError
from .rules import ALL, Action, Ability, AbilityBuilder, Decision, Rule, SubjectRegistry
from .actions import resolve_action
from .loader import EntityLoader
from .context import CanContext
from .plugin import Can

__all__ = [
    "ALL", "Action", "Ability", "AbilityBuilder", "Decision", "Rule", "SubjectRegistry",
    "resolve_action", "EntityLoader", "CanContext", "Can",
    "AccessDenied", "NotFound", "Halt", "RuleDeclarationError", "UnknownActionError",
]
