"""
In-memory storage for the Articles Service.
"""

from typing import Dict, Iterator, Optional

from .models import Article, Comment, Tag, User


class ArticleRepository:
    """Article storage with a ``find_by_id`` lookup."""

    def __init__(self):
        self._articles: Dict[int, Article] = {}
        self._next_id = 1

    def create(self, title: str, author: str, published: bool = True) -> Article:
        article = Article(id=self._next_id, title=title, author=author, published=published)
        self._articles[article.id] = article
        self._next_id += 1
        return article

    def find_by_id(self, article_id: int) -> Optional[Article]:
        return self._articles.get(article_id)

    def delete(self, article_id: int) -> bool:
        return self._articles.pop(article_id, None) is not None

    def __iter__(self) -> Iterator[Article]:
        return iter(list(self._articles.values()))

    def __len__(self) -> int:
        return len(self._articles)


class Store:
    """All service data: articles by repository, comments and tags by mapping."""

    def __init__(self):
        self.users: Dict[str, User] = {}
        self.articles = ArticleRepository()
        self.comments: Dict[str, Comment] = {}
        self.tags: Dict[int, Tag] = {}

    def add_user(self, user: User) -> User:
        self.users[user.name] = user
        return user

    def add_comment(self, comment: Comment) -> Comment:
        self.comments[comment.id] = comment
        return comment

    def add_tag(self, name: str) -> Tag:
        tag = Tag(id=len(self.tags) + 1, name=name)
        self.tags[tag.id] = tag
        return tag


def seed(store: Store) -> Store:
    """Populate ``store`` with a few users and articles."""
    store.add_user(User(id="u-admin", name="admin", roles=["admin"]))
    store.add_user(User(id="u-alice", name="alice", roles=["author"]))
    store.add_user(User(id="u-bob", name="bob", roles=["author"]))

    first = store.articles.create("Hello world", author="alice")
    store.articles.create("Second thoughts", author="bob")
    store.articles.create("Unfinished", author="alice", published=False)

    store.add_comment(Comment(id="c-1", article_id=first.id, author="bob", body="Nice"))
    store.add_tag("python")
    store.add_tag("security")
    return store
