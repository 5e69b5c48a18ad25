"""
Entity loader: resolves a subject type and identifier to an instance.
"""

from typing import Any, Callable, Hashable, Iterable, List, Optional

from shared.logging import get_logger
from shared.errors import NotFound
from .backends import LookupBackend, FinderBackend, GetterBackend, IndexBackend


def default_backends() -> List[LookupBackend]:
    """The probing order: find_by_id, then get, then index access."""
    return [FinderBackend(), GetterBackend(), IndexBackend()]


class EntityLoader:
    """Probes backends in fixed priority order; the first that supports the type decides."""

    def __init__(self, backends: Optional[Iterable[LookupBackend]] = None):
        self.logger = get_logger("can.entity_loader")
        self.backends: List[LookupBackend] = list(backends) if backends is not None else default_backends()

    def backend(self, name: str) -> LookupBackend:
        """Get a backend by name."""
        for backend in self.backends:
            if backend.name == name:
                return backend
        raise KeyError(name)

    def register(self, subject_type: Hashable, source: Any, shape: str = "get") -> None:
        """Register ``source`` for ``subject_type`` with the backend named ``shape``."""
        self.backend(shape).register(subject_type, source)
        self.logger.info("Lookup source registered", subject_type=_name(subject_type), backend=shape)

    def backend_for(self, subject_type: Hashable) -> Optional[LookupBackend]:
        for backend in self.backends:
            if backend.supports(subject_type):
                return backend
        return None

    def load(self, subject_type: Hashable, identifier: Any,
             id_type: Optional[Callable[[Any], Any]] = None) -> Any:
        """Return the instance, or raise NotFound."""
        backend = self.backend_for(subject_type)
        if backend is None:
            self.logger.warning("No lookup backend for subject type", subject_type=_name(subject_type))
            raise NotFound(subject_type, identifier)

        key = identifier
        if id_type is not None:
            try:
                key = id_type(identifier)
            except (TypeError, ValueError):
                self.logger.info("Identifier could not be coerced", subject_type=_name(subject_type), id=identifier)
                raise NotFound(subject_type, identifier)

        try:
            instance = backend.find(subject_type, key)
        except Exception as e:
            # Backend failures surface as a miss
            self.logger.error(
                "Lookup backend error",
                subject_type=_name(subject_type),
                backend=backend.name,
                error=str(e),
                exc_info=True
            )
            instance = None

        if instance is None:
            self.logger.info("Entity not found", subject_type=_name(subject_type), id=identifier, backend=backend.name)
            raise NotFound(subject_type, identifier)

        self.logger.debug("Entity loaded", subject_type=_name(subject_type), id=identifier, backend=backend.name)
        return instance


def _name(subject_type: Any) -> str:
    return subject_type.__name__ if isinstance(subject_type, type) else str(subject_type)
