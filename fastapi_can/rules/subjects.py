"""
Subject descriptors and the subject-type hierarchy.
"""

import re
from typing import Any, Dict, Hashable, Optional


class _AllSubjects:
    """The universal subject wildcard."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ALL"

    def __str__(self) -> str:
        return "all"

    def __reduce__(self):
        return (_AllSubjects, ())


ALL = _AllSubjects()

_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def is_type_descriptor(subject: Any) -> bool:
    """True for bare subject types (classes, string labels, ALL), False for instances."""
    return subject is ALL or isinstance(subject, (type, str))


class SubjectRegistry:
    """
    Maps subject types to their declared supertype.

    Classes match through their Python class hierarchy as well as any
    parent declared here; string labels only have the declared parents.
    """

    def __init__(self):
        self._parents: Dict[Hashable, Optional[Hashable]] = {}

    def declare(self, subject_type: Hashable, parent: Optional[Hashable] = None) -> None:
        """Declare a subject type and, optionally, its direct supertype."""
        if subject_type is ALL or parent is ALL:
            raise ValueError("ALL cannot take part in the subject hierarchy")
        if parent is not None and self.is_subtype(parent, subject_type):
            raise ValueError(f"Declaring {subject_type!r} under {parent!r} would create a cycle")
        self._parents[subject_type] = parent

    def is_declared(self, subject_type: Hashable) -> bool:
        return subject_type in self._parents

    def parent_of(self, subject_type: Hashable) -> Optional[Hashable]:
        return self._parents.get(subject_type)

    def is_subtype(self, sub: Hashable, sup: Hashable) -> bool:
        """
        True when ``sub`` equals ``sup`` or descends from it.

        Declared parents are followed, and every class reached on the way
        also keeps its Python base classes, so declaring a class never hides
        the hierarchy it inherits.
        """
        current: Optional[Hashable] = sub
        while current is not None:
            if current == sup:
                return True
            if isinstance(current, type) and isinstance(sup, type) and issubclass(current, sup):
                return True
            current = self._parents.get(current)
        return False

    def type_of(self, subject: Any) -> Any:
        """The subject type of an instance, or the descriptor itself."""
        if is_type_descriptor(subject):
            return subject
        return type(subject)

    @staticmethod
    def derived_name(subject_type: Any) -> str:
        """Lower-cased, word-boundary-delimited name: ``BlogPost`` -> ``blog_post``."""
        name = subject_type.__name__ if isinstance(subject_type, type) else str(subject_type)
        return _BOUNDARY.sub("_", name).replace("-", "_").lower()
