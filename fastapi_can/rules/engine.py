"""
Rule evaluation engine for the authorization engine.
"""

import time
from typing import Any, Callable, List, Optional, Sequence, Union

from shared.logging import get_logger
from shared.errors import AccessDenied
from .models import Action, Decision, Rule, normalize_action
from .subjects import ALL, SubjectRegistry

AbilityDefinition = Callable[["AbilityBuilder", Any], None]


class AbilityBuilder:
    """
    Collects rules in declaration order.

    Passed to the ability definition together with the current user::

        @can.ability
        def define(rules, user):
            rules.can("read", ALL)
            if user.is_admin:
                rules.can("manage", ALL)

            @rules.can("update", Article)
            def own_article(article):
                return article.author == user.name
    """

    def __init__(self, registry: Optional[SubjectRegistry] = None):
        self.registry = registry or SubjectRegistry()
        self.rules: List[Rule] = []

    def can(self, actions: Any, subjects: Any, conditions: Any = None):
        """Declare a grant. Without conditions it may also decorate a predicate."""
        return self._declare(True, actions, subjects, conditions)

    def cannot(self, actions: Any, subjects: Any, conditions: Any = None):
        """Declare a denial. Without conditions it may also decorate a predicate."""
        return self._declare(False, actions, subjects, conditions)

    def _declare(self, grants: bool, actions: Any, subjects: Any, conditions: Any):
        rule = Rule.declare(grants, actions, subjects, conditions, registry=self.registry)
        self.rules.append(rule)
        if conditions is not None:
            return rule

        index = len(self.rules) - 1

        def attach(predicate):
            # Decorator form: replace the unconditional rule with a conditional one
            self.rules[index] = Rule.declare(
                grants, actions, subjects, predicate, registry=self.registry
            )
            return predicate

        return _RuleHandle(rule, attach)


class _RuleHandle:
    """Return value of an unconditional declaration; calling it attaches a predicate."""

    def __init__(self, rule: Rule, attach: Callable[[Callable], Callable]):
        self.rule = rule
        self._attach = attach

    def __call__(self, predicate: Callable) -> Callable:
        return self._attach(predicate)

    def __getattr__(self, name: str) -> Any:
        return getattr(self.rule, name)


class Ability:
    """Ordered rule set bound to one actor."""

    def __init__(self, user: Any = None, rules: Sequence[Rule] = (),
                 registry: Optional[SubjectRegistry] = None):
        self.logger = get_logger("can.ability")
        self.user = user
        self.registry = registry or SubjectRegistry()
        self.rules: List[Rule] = list(rules)

    @classmethod
    def from_definition(cls, user: Any, definition: Optional[AbilityDefinition],
                        registry: Optional[SubjectRegistry] = None) -> "Ability":
        """Run the ability definition with ``user`` bound and collect its rules."""
        builder = AbilityBuilder(registry)
        if definition is not None:
            definition(builder, user)
        return cls(user, builder.rules, builder.registry)

    def check(self, action: Union[str, Action], subject: Any) -> Decision:
        """Evaluate the pair: the last declared matching rule decides."""
        start_time = time.time()
        action = normalize_action(action)
        subject = _normalize_subject(subject)

        for rule in reversed(self.rules):
            if rule.matches(action, subject):
                decision = Decision(rule.grants, action, subject, rule)
                break
        else:
            decision = Decision(False, action, subject)

        self.logger.debug(
            "Authorization decision",
            decision=decision,
            subject_type=self.registry.derived_name(self.registry.type_of(subject)),
            evaluation_time_ms=round((time.time() - start_time) * 1000, 3)
        )
        return decision

    def can(self, action: Union[str, Action], subject: Any) -> bool:
        return self.check(action, subject).allowed

    def cannot(self, action: Union[str, Action], subject: Any) -> bool:
        return not self.can(action, subject)

    def authorize(self, action: Union[str, Action], subject: Any, message: Optional[str] = None) -> Decision:
        """Return the decision when allowed, raise AccessDenied otherwise."""
        decision = self.check(action, subject)
        if not decision:
            raise AccessDenied(message, action=decision.action, subject=decision.subject)
        return decision

    def relevant_rules(self, action: Union[str, Action], subject: Any) -> List[Rule]:
        """Rules matching action and subject type, in evaluation order."""
        action = normalize_action(action)
        subject = _normalize_subject(subject)
        return [rule for rule in reversed(self.rules) if rule.relevant(action, subject)]


def _normalize_subject(subject: Any) -> Any:
    if isinstance(subject, str) and subject == "all":
        return ALL
    return subject
