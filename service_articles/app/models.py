"""
Domain models for the Articles Service.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class User:
    """A person making requests."""
    id: str
    name: str
    roles: List[str] = field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles


class Resource:
    """Anything readable through the service."""


@dataclass
class Article(Resource):
    """A published article."""
    id: int
    title: str
    author: str
    published: bool = True


@dataclass
class Comment(Resource):
    """A comment on an article."""
    id: str
    article_id: int
    author: str
    body: str


@dataclass
class Tag:
    """A label; a Resource through the subject registry, not through inheritance."""
    id: int
    name: str
