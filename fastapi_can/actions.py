"""
Maps an inbound request onto a canonical action.
"""

from typing import Any, Optional

from shared.errors import UnknownActionError
from .rules.models import Action


def resolve_action(method: str, has_identifier: bool) -> Action:
    """
    Resolve the action from the HTTP verb and whether an identifier is present.

    GET without an identifier lists, GET with one reads; POST creates,
    PUT and PATCH update, DELETE destroys. Any other verb raises
    UnknownActionError.
    """
    verb = method.upper()
    if verb == "GET":
        return Action.READ if has_identifier else Action.LIST
    if verb == "POST":
        return Action.CREATE
    if verb in ("PUT", "PATCH"):
        return Action.UPDATE
    if verb == "DELETE":
        return Action.DESTROY
    raise UnknownActionError(verb)


def request_identifier(request: Any, id_param: str = "id") -> Optional[str]:
    """The resource identifier carried in the request path, if any."""
    value = request.path_params.get(id_param)
    if value is None or value == "":
        return None
    return value


def resolve_request_action(request: Any, id_param: str = "id") -> Action:
    """resolve_action for a Starlette/FastAPI request."""
    return resolve_action(request.method, request_identifier(request, id_param) is not None)
