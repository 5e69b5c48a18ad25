"""
Unit tests for action resolution.
"""

import pytest
from types import SimpleNamespace

from fastapi_can.actions import resolve_action, resolve_request_action, request_identifier
from fastapi_can.rules.models import Action
from shared.errors import UnknownActionError


@pytest.mark.parametrize("method,has_identifier,expected", [
    ("GET", False, Action.LIST),
    ("GET", True, Action.READ),
    ("POST", False, Action.CREATE),
    ("POST", True, Action.CREATE),
    ("PUT", True, Action.UPDATE),
    ("PATCH", True, Action.UPDATE),
    ("DELETE", True, Action.DESTROY),
    ("delete", False, Action.DESTROY),
])
def test_resolve_action(method, has_identifier, expected):
    """Test the verb/identifier table."""
    assert resolve_action(method, has_identifier) == expected


@pytest.mark.parametrize("method", ["OPTIONS", "HEAD", "TRACE"])
def test_unknown_verb(method):
    """Test that verbs outside the table are rejected."""
    with pytest.raises(UnknownActionError) as exc_info:
        resolve_action(method, True)

    assert exc_info.value.method == method
    assert exc_info.value.status_code == 405


def test_actions_compare_as_strings():
    """Test that resolved actions can be used as plain labels."""
    assert resolve_action("GET", True) == "read"
    assert str(Action.LIST) == "list"


class TestRequestResolution:
    """Test cases for request-based resolution."""

    def request(self, method, **path_params):
        return SimpleNamespace(method=method, path_params=path_params)

    def test_identifier_from_path(self):
        """Test reading the identifier from path parameters."""
        assert request_identifier(self.request("GET", id="7")) == "7"
        assert request_identifier(self.request("GET", article_id="7"), "article_id") == "7"

    def test_missing_or_blank_identifier(self):
        """Test that absent and empty identifiers count as missing."""
        assert request_identifier(self.request("GET")) is None
        assert request_identifier(self.request("GET", id="")) is None

    def test_resolve_request_action(self):
        """Test resolution from a request object."""
        assert resolve_request_action(self.request("GET")) == Action.LIST
        assert resolve_request_action(self.request("GET", id="1")) == Action.READ
        assert resolve_request_action(self.request("GET", slug="x"), "slug") == Action.READ
