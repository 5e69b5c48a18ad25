"""
Storage-backend lookup shapes used by the entity loader.

Each backend serves the subject types registered with it. Registration
is explicit: a backend never inspects a source to guess its shape.
"""

from typing import Any, Dict, Hashable, Optional


class LookupBackend:
    """A find-by-id capability over one storage shape."""

    name = "base"

    def __init__(self):
        self._sources: Dict[Hashable, Any] = {}

    def register(self, subject_type: Hashable, source: Any) -> None:
        """Serve ``subject_type`` from ``source``."""
        self._sources[subject_type] = source

    def unregister(self, subject_type: Hashable) -> bool:
        return self._sources.pop(subject_type, None) is not None

    def supports(self, subject_type: Hashable) -> bool:
        return subject_type in self._sources

    def find(self, subject_type: Hashable, identifier: Any) -> Optional[Any]:
        """Look up an instance. Returns None on a miss."""
        return self._lookup(self._sources[subject_type], identifier)

    def _lookup(self, source: Any, identifier: Any) -> Optional[Any]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(types={len(self._sources)})"


class FinderBackend(LookupBackend):
    """Sources exposing ``find_by_id(id)``, returning None on a miss."""

    name = "find_by_id"

    def _lookup(self, source: Any, identifier: Any) -> Optional[Any]:
        return source.find_by_id(identifier)


class GetterBackend(LookupBackend):
    """Sources exposing ``get(id)``, returning None on a miss (repositories, dicts)."""

    name = "get"

    def _lookup(self, source: Any, identifier: Any) -> Optional[Any]:
        return source.get(identifier)


class IndexBackend(LookupBackend):
    """Sources indexed with ``source[id]``, raising LookupError on a miss."""

    name = "index"

    def _lookup(self, source: Any, identifier: Any) -> Optional[Any]:
        try:
            return source[identifier]
        except LookupError:
            return None
