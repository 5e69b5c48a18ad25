"""
Tests for the authorization log processors.
"""

from fastapi_can.rules.models import Decision, Rule
from fastapi_can.rules.subjects import ALL
from shared.logging import add_decision_context
from shared.test_helpers import TestArticle


class TestDecisionContext:
    """Test cases for add_decision_context."""

    def test_decision_is_flattened(self):
        """Test a logged decision becomes plain fields."""
        rule = Rule.declare(False, "read", TestArticle)
        event = {"event": "Access denied", "decision": Decision(False, "read", TestArticle, rule)}

        result = add_decision_context(None, "info", event)

        assert "decision" not in result
        assert result["action"] == "read"
        assert result["subject"] == "TestArticle"
        assert result["allowed"] is False
        assert result["reason"] == "deny rule matched"

    def test_explicit_fields_are_kept(self):
        """Test fields passed alongside the decision win."""
        event = {"decision": Decision(False, "read", ALL), "subject": "dashboard"}

        result = add_decision_context(None, "debug", event)

        assert result["subject"] == "dashboard"
        assert result["reason"] == "No rule matched"

    def test_events_without_decision_untouched(self):
        """Test unrelated events pass through."""
        event = {"event": "Lookup source registered", "backend": "get"}
        assert add_decision_context(None, "info", dict(event)) == event
