"""
Per-request decision context.
"""

import time
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING, Union

from shared.logging import get_logger
from shared.errors import NotFound, RuleDeclarationError
from .actions import request_identifier, resolve_action
from .enforcement import denial_outcome, outcome_label
from .rules.engine import Ability
from .rules.models import Action, Decision

if TYPE_CHECKING:
    from .plugin import Can

_UNSET = object()


class CanContext:
    """
    Decision surface for one request.

    The current user and ability are resolved on first access and kept
    for the rest of the request. Nothing here is shared across requests.
    """

    def __init__(self, plugin: "Can", request: Any):
        self.plugin = plugin
        self.request = request
        self.logger = get_logger("can.context")
        self.published: Dict[str, Any] = {}
        self._current_user: Any = _UNSET
        self._current_ability: Optional[Ability] = None

    @property
    def current_user(self) -> Any:
        """The actor returned by the registered user resolver, or None."""
        if self._current_user is _UNSET:
            resolver = self.plugin.user_resolver
            self._current_user = resolver(self.request) if resolver is not None else None
            actor_id = getattr(self._current_user, "id", None)
            if actor_id is not None:
                self.logger = self.logger.bind(actor_id=str(actor_id))
        return self._current_user

    @property
    def current_ability(self) -> Ability:
        if self._current_ability is None:
            try:
                self._current_ability = Ability.from_definition(
                    self.current_user, self.plugin.definition, self.plugin.registry
                )
            except RuleDeclarationError as e:
                self.logger.error("Malformed rule declaration", error=e.message, details=e.details)
                raise
        return self._current_ability

    def check(self, action: Union[str, Action], subject: Any) -> Decision:
        start_time = time.time()
        decision = self.current_ability.check(action, subject)
        self.plugin.metrics.record_decision(decision.allowed, time.time() - start_time)
        return decision

    def can(self, action: Union[str, Action], subject: Any) -> bool:
        """True if the current user may perform ``action`` on ``subject``."""
        return self.check(action, subject).allowed

    def cannot(self, action: Union[str, Action], subject: Any) -> bool:
        return not self.can(action, subject)

    def authorize(self, action: Union[str, Action], subject: Any,
                  not_auth: Optional[str] = None, message: Optional[str] = None) -> Decision:
        """
        Return the decision when allowed; otherwise raise the denial outcome.

        Depending on the configured denial mode the outcome is AccessDenied
        or a Halt carrying a redirect (``not_auth`` first, then the
        configured target) or a 403.
        """
        decision = self.check(action, subject)
        if decision:
            return decision

        outcome = denial_outcome(
            decision, self.plugin.config, self.request.method, not_auth=not_auth, message=message
        )
        label = outcome_label(outcome)
        self.plugin.metrics.record_denial(label)
        self.logger.info(
            "Access denied",
            decision=decision,
            subject_type=self.plugin.registry.derived_name(self.plugin.registry.type_of(decision.subject)),
            outcome=label,
            path=self.request.url.path
        )
        raise outcome

    def load_and_authorize(self, subject_type: Any, id_param: Optional[str] = None,
                           id_type: Optional[Callable[[Any], Any]] = None) -> Any:
        """
        Resolve the action from the request, load the entity and authorize it.

        Without an identifier the bare subject type is authorized. A present
        identifier that no backend resolves raises NotFound before any
        authorization happens. The loaded instance is published under its
        derived name and returned.
        """
        identifier = request_identifier(self.request, id_param or self.plugin.config.id_param)
        action = resolve_action(self.request.method, identifier is not None)

        if identifier is None:
            self.plugin.metrics.record_entity_load("skipped")
            subject = subject_type
        else:
            try:
                subject = self.plugin.loader.load(subject_type, identifier, id_type=id_type)
            except NotFound:
                self.plugin.metrics.record_entity_load("miss")
                raise
            self.plugin.metrics.record_entity_load("hit")
            self.publish(self.plugin.registry.derived_name(subject_type), subject)

        self.authorize(action, subject)
        return subject

    def publish(self, name: str, value: Any) -> None:
        """Expose ``value`` to the rest of the request under ``name``."""
        self.published[name] = value
        setattr(self.request.state, name, value)
