"""
Rule data models for the authorization engine.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, FrozenSet, Optional, Tuple, Union

from shared.errors import RuleDeclarationError
from .subjects import ALL, SubjectRegistry, is_type_descriptor


class Action(str, Enum):
    """Canonical actions. Any other string is an actor-defined label."""
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DESTROY = "destroy"
    LIST = "list"
    MANAGE = "manage"

    def __str__(self) -> str:
        return self.value


class RulePolarity(str, Enum):
    """Rule polarity."""
    GRANT = "grant"
    DENY = "deny"


def normalize_action(action: Union[str, Action]) -> str:
    if isinstance(action, Action):
        return action.value
    if not isinstance(action, str) or not action:
        raise RuleDeclarationError(
            "Actions must be non-empty strings",
            details={"action": repr(action)}
        )
    return action


_MEMBERSHIP_TYPES = (list, tuple, set, frozenset, range)
_MISSING = object()


def _read_attribute(instance: Any, name: str) -> Any:
    if isinstance(instance, Mapping):
        return instance.get(name, _MISSING)
    return getattr(instance, name, _MISSING)


def _is_collection(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))


class Condition:
    """A data-dependent refinement evaluated against a concrete instance."""

    def evaluate(self, instance: Any) -> bool:
        raise NotImplementedError


class AttributeCondition(Condition):
    """
    Attribute equality map.

    Each required value is compared against the instance attribute of the
    same name. Lists, tuples, sets and ranges always test membership, so
    ``{"tags": ["a", "b"]}`` means "tags is one of these values", never
    equality with a list attribute; use a predicate for that. Nested
    mappings are matched recursively against the attribute's value, or
    against any element when the attribute is a collection. Anything else
    tests equality.
    """

    def __init__(self, attributes: Mapping):
        for key in attributes:
            if not isinstance(key, str):
                raise RuleDeclarationError(
                    "Condition attribute names must be strings",
                    details={"attribute": repr(key)}
                )
        self.attributes = dict(attributes)

    def evaluate(self, instance: Any) -> bool:
        return self._matches(instance, self.attributes)

    def _matches(self, instance: Any, attributes: Mapping) -> bool:
        for name, required in attributes.items():
            value = _read_attribute(instance, name)
            if value is _MISSING:
                return False
            if isinstance(required, Mapping):
                if _is_collection(value):
                    if not any(self._matches(item, required) for item in value):
                        return False
                elif not self._matches(value, required):
                    return False
            elif isinstance(required, _MEMBERSHIP_TYPES):
                if value not in required:
                    return False
            elif value != required:
                return False
        return True

    def __repr__(self) -> str:
        return f"AttributeCondition({self.attributes!r})"


class PredicateCondition(Condition):
    """Arbitrary predicate over the candidate instance."""

    def __init__(self, predicate: Callable[[Any], Any]):
        self.predicate = predicate

    def evaluate(self, instance: Any) -> bool:
        return bool(self.predicate(instance))

    def __repr__(self) -> str:
        name = getattr(self.predicate, "__qualname__", repr(self.predicate))
        return f"PredicateCondition({name})"


def build_condition(conditions: Any) -> Optional[Condition]:
    """Turn a declared condition into a Condition, failing fast on anything else."""
    if conditions is None or isinstance(conditions, Condition):
        return conditions
    if isinstance(conditions, Mapping):
        return AttributeCondition(conditions)
    if callable(conditions):
        return PredicateCondition(conditions)
    raise RuleDeclarationError(
        "Conditions must be a mapping of attributes or a callable",
        details={"conditions": repr(conditions)}
    )


def _as_tuple(value: Any) -> Tuple[Any, ...]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(value)
    return (value,)


@dataclass(frozen=True)
class Rule:
    """One grant or deny declaration over actions x subjects."""
    polarity: RulePolarity
    actions: FrozenSet[str]
    subjects: FrozenSet[Any]
    condition: Optional[Condition] = None
    registry: SubjectRegistry = field(default_factory=SubjectRegistry, compare=False, repr=False)

    @classmethod
    def declare(cls, grants: bool, actions: Any, subjects: Any,
                conditions: Any = None, registry: Optional[SubjectRegistry] = None) -> "Rule":
        """Build a rule from loosely-typed declaration arguments."""
        normalized_subjects = []
        for subject in _as_tuple(subjects):
            if not is_type_descriptor(subject):
                raise RuleDeclarationError(
                    "Rule subjects must be types, string labels or ALL",
                    details={"subject": repr(subject)}
                )
            normalized_subjects.append(ALL if subject == "all" else subject)

        return cls(
            polarity=RulePolarity.GRANT if grants else RulePolarity.DENY,
            actions=frozenset(normalize_action(a) for a in _as_tuple(actions)),
            subjects=frozenset(normalized_subjects),
            condition=build_condition(conditions),
            registry=registry or SubjectRegistry(),
        )

    @property
    def grants(self) -> bool:
        return self.polarity == RulePolarity.GRANT

    def matches_action(self, action: str) -> bool:
        return Action.MANAGE.value in self.actions or action in self.actions

    def matches_subject(self, subject: Any) -> bool:
        if ALL in self.subjects:
            return True
        subject_type = self.registry.type_of(subject)
        if subject_type is ALL:
            return False
        return any(self.registry.is_subtype(subject_type, declared) for declared in self.subjects)

    def matches_condition(self, subject: Any) -> bool:
        # A bare type has no instance to test, so conditions pass
        if self.condition is None or is_type_descriptor(subject):
            return True
        return self.condition.evaluate(subject)

    def relevant(self, action: str, subject: Any) -> bool:
        """Action and subject type match, ignoring the condition."""
        return self.matches_action(action) and self.matches_subject(subject)

    def matches(self, action: Union[str, Action], subject: Any) -> bool:
        action = action.value if isinstance(action, Action) else action
        return self.relevant(action, subject) and self.matches_condition(subject)


@dataclass(frozen=True)
class Decision:
    """Result of evaluating an (action, subject) pair."""
    allowed: bool
    action: str
    subject: Any
    rule: Optional[Rule] = None

    def __bool__(self) -> bool:
        return self.allowed

    @property
    def reason(self) -> str:
        if self.rule is None:
            return "No rule matched"
        return f"{self.rule.polarity.value} rule matched"
