"""
Unit tests for Ability evaluation.
"""

import pytest

from fastapi_can.rules.engine import Ability, AbilityBuilder
from fastapi_can.rules.models import Action
from fastapi_can.rules.subjects import ALL, SubjectRegistry
from shared.errors import AccessDenied, RuleDeclarationError
from shared.test_helpers import TestArticle, TestDataFactory, TestOther, TestResource, TestUser

ACTIONS = ["read", "create", "update", "destroy", "list", "edit", "publish"]


def build(definition, user=None, registry=None) -> Ability:
    return Ability.from_definition(user, definition, registry)


class TestAbilityEvaluation:
    """Test cases for Ability.can / cannot."""

    def test_no_rules_denies_everything(self):
        """Test that an empty ability allows nothing."""
        ability = Ability(TestUser())

        for action in ACTIONS:
            for subject in (ALL, TestArticle, TestArticle(1, "x"), "admin"):
                assert ability.can(action, subject) is False

    def test_no_definition(self):
        """Test that a missing definition yields no rules."""
        ability = build(None)
        assert ability.rules == []
        assert ability.cannot("read", ALL)

    def test_manage_all_allows_everything(self):
        """Test that manage on all matches every pair."""
        ability = build(lambda rules, user: rules.can(Action.MANAGE, ALL))

        for action in ACTIONS:
            for subject in (ALL, TestArticle, TestOther(1), "admin"):
                assert ability.can(action, subject)

    def test_cannot_is_negation_of_can(self):
        """Test cannot == not can for a mix of rules."""
        def define(rules, user):
            rules.can("read", ALL)
            rules.cannot("read", TestArticle, {"published": False})
            rules.can("edit", TestResource)

        ability = build(define)
        subjects = [ALL, TestArticle, TestArticle(1, "x"), TestArticle(2, "y", published=False), TestOther]
        for action in ACTIONS:
            for subject in subjects:
                assert ability.cannot(action, subject) == (not ability.can(action, subject))

    def test_later_rule_overrides_earlier(self):
        """Test that a later deny narrows an earlier grant only where it matches."""
        def define(rules, user):
            rules.can("edit", ALL)
            rules.cannot("edit", TestArticle)

        ability = build(define)

        assert ability.can("edit", TestArticle(1, "x")) is False
        assert ability.can("edit", TestOther(1)) is True

    def test_later_grant_overrides_earlier_deny(self):
        """Test precedence in the other direction."""
        def define(rules, user):
            rules.cannot("edit", ALL)
            rules.can("edit", TestArticle)

        ability = build(define)

        assert ability.can("edit", TestArticle(1, "x")) is True
        assert ability.can("edit", TestOther(1)) is False

    def test_subtype_grant(self):
        """Test that a rule on a supertype covers subtypes."""
        ability = build(lambda rules, user: rules.can("read", TestResource))
        assert ability.can("read", TestArticle(1, "x"))

    def test_registry_subtype_grant(self):
        """Test subtype matching declared through the registry."""
        registry = SubjectRegistry()
        registry.declare("article", parent="resource")
        ability = build(lambda rules, user: rules.can("read", "resource"), registry=registry)

        assert ability.can("read", "article")
        assert not ability.can("read", "comment")

    def test_declared_class_keeps_base_class_grants(self):
        """Test declaring a class does not hide rules on its base classes."""
        registry = SubjectRegistry()
        registry.declare(TestArticle)
        ability = build(lambda rules, user: rules.can("read", TestResource), registry=registry)

        assert ability.can("read", TestArticle(1, "x"))
        assert ability.check("read", TestArticle(1, "x")).reason == "grant rule matched"

    def test_condition_gating(self):
        """Test conditions bound to the current user."""
        owner = TestUser("alice")
        other = TestUser("bob")

        def define(rules, user):
            rules.can("edit", TestArticle, lambda article: article.creator == user)

        ability = build(define, owner)

        assert ability.can("edit", TestArticle(1, "x", creator=owner))
        assert not ability.can("edit", TestArticle(2, "y", creator=other))
        assert ability.can("edit", TestArticle)

    def test_decorator_form_attaches_predicate(self):
        """Test declaring a conditional rule with the decorator form."""
        def define(rules, user):
            @rules.can("publish", TestArticle)
            def own_article(article):
                return article.creator == user

        owner = TestUser("alice")
        ability = build(define, owner)

        assert len(ability.rules) == 1
        assert ability.can("publish", TestArticle(1, "x", creator=owner))
        assert not ability.can("publish", TestArticle(1, "x", creator=TestUser("bob")))

    def test_all_string_query(self):
        """Test that 'all' in a query means the ALL wildcard."""
        ability = build(lambda rules, user: rules.can("read", ALL))
        assert ability.can("read", "all")

    def test_malformed_definition_fails_fast(self):
        """Test that a bad declaration raises while building the ability."""
        def define(rules, user):
            rules.can("read", TestArticle, "published")

        with pytest.raises(RuleDeclarationError):
            build(define)


class TestAdminScenario:
    """Grant manage to admins, read to everyone."""

    @staticmethod
    def define(rules, user):
        if user.is_admin:
            rules.can(Action.MANAGE, ALL)
        rules.can(Action.READ, ALL)

    def test_guest(self):
        """Test a non-admin can read but not edit."""
        ability = build(self.define, TestUser("guest"))

        assert ability.can("edit", ALL) is False
        assert ability.can("read", ALL) is True

    def test_admin(self):
        """Test an admin can edit through manage."""
        ability = build(self.define, TestUser("admin"))

        assert ability.can("edit", ALL) is True
        assert ability.can("destroy", ALL) is True

    @pytest.mark.parametrize("user", TestDataFactory.create_test_users(), ids=lambda user: user.name)
    def test_only_admins_edit(self, user):
        """Test edit follows the admin role across the test users."""
        ability = build(self.define, user)

        assert ability.can("read", ALL)
        assert ability.can("edit", ALL) is user.is_admin


class TestAbilityDecisions:
    """Test cases for check, authorize and relevant_rules."""

    @pytest.fixture
    def ability(self):
        def define(rules, user):
            rules.can("read", ALL)
            rules.cannot("read", TestArticle, {"published": False})

        return build(define, TestUser())

    def test_check_records_deciding_rule(self, ability):
        """Test that decisions carry the deciding rule."""
        decision = ability.check("read", TestArticle(2, "draft", published=False))

        assert not decision
        assert decision.rule is ability.rules[1]
        assert decision.action == "read"

    def test_check_without_match(self, ability):
        """Test decisions when nothing matches."""
        decision = ability.check("edit", TestArticle)

        assert decision.allowed is False
        assert decision.rule is None

    def test_authorize_allowed(self, ability):
        """Test authorize returns the decision when allowed."""
        assert ability.authorize("read", TestArticle(1, "x")).allowed

    def test_authorize_denied(self, ability):
        """Test authorize raises AccessDenied with action and subject."""
        article = TestArticle(2, "draft", published=False)

        with pytest.raises(AccessDenied) as exc_info:
            ability.authorize("read", article, message="Nope")

        assert exc_info.value.action == "read"
        assert exc_info.value.subject is article
        assert exc_info.value.message == "Nope"

    def test_authorize_default_message(self, ability):
        """Test the default denial message."""
        with pytest.raises(AccessDenied) as exc_info:
            ability.authorize("edit", TestArticle)

        assert exc_info.value.message == AccessDenied.default_message

    def test_relevant_rules_in_evaluation_order(self, ability):
        """Test relevant_rules ignores conditions and lists last rule first."""
        relevant = ability.relevant_rules("read", TestArticle)

        assert relevant == [ability.rules[1], ability.rules[0]]
        assert ability.relevant_rules("read", TestOther) == [ability.rules[0]]


class TestAbilityBuilder:
    """Test cases for AbilityBuilder."""

    def test_rules_kept_in_declaration_order(self):
        """Test declaration order is preserved."""
        builder = AbilityBuilder()
        builder.can("read", ALL)
        builder.cannot("create", TestArticle)
        builder.can("update", TestArticle, {"published": True})

        assert [rule.grants for rule in builder.rules] == [True, False, True]

    def test_conditional_declaration_returns_rule(self):
        """Test declaring with conditions returns the rule itself."""
        builder = AbilityBuilder()
        rule = builder.can("update", TestArticle, {"published": True})

        assert rule is builder.rules[0]
