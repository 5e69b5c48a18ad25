"""
Rules engine package.

Defines the rule model and the ability that evaluates it. An ability is
an ordered list of grant/deny rules bound to one actor; the last declared
rule matching an (action, subject) pair decides, and no match means deny.

Modules of interest:
- subjects: The ALL wildcard and the subject-type hierarchy.
- models: Rule, conditions, actions and decision records.
- engine: Ability and the builder used by ability definitions.
"""

from .subjects import ALL, SubjectRegistry, is_type_descriptor
from .models import (
    Action, RulePolarity, Rule, Condition, AttributeCondition,
    PredicateCondition, Decision
)
from .engine import Ability, AbilityBuilder, AbilityDefinition

__all__ = [
    "ALL", "SubjectRegistry", "is_type_descriptor",
    "Action", "RulePolarity", "Rule", "Condition", "AttributeCondition",
    "PredicateCondition", "Decision",
    "Ability", "AbilityBuilder", "AbilityDefinition",
]
