"""
Entity loading package.

Backends wrap the storage shapes an application exposes (``find_by_id``,
``get`` and index access); the loader probes them in that order.
"""

from .backends import LookupBackend, FinderBackend, GetterBackend, IndexBackend
from .entity_loader import EntityLoader, default_backends

__all__ = [
    "LookupBackend", "FinderBackend", "GetterBackend", "IndexBackend",
    "EntityLoader", "default_backends",
]
