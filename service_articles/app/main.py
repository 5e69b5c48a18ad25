"""
Articles service: a publishing API guarded by the authorization engine.
"""

from typing import Any, Dict, List, Optional

from fastapi import Depends, Request, Query
from pydantic import BaseModel, Field

from shared.base_service import BaseService
from fastapi_can import ALL, Action, Can, CanContext
from .models import Article, Comment, Resource, Tag, User
from .store import Store, seed


class ArticleCreateRequest(BaseModel):
    """Request model for creating an article."""
    title: str = Field(..., description="Article title")


class ArticleUpdateRequest(BaseModel):
    """Request model for updating an article."""
    title: Optional[str] = Field(None, description="Article title")
    published: Optional[bool] = Field(None, description="Whether the article is visible")


class CommentCreateRequest(BaseModel):
    """Request model for creating a comment."""
    id: str = Field(..., description="Comment ID")
    article_id: int = Field(..., description="Article being commented on")
    body: str = Field(..., description="Comment text")


SUBJECTS: Dict[str, Any] = {
    "all": ALL,
    "article": Article,
    "comment": Comment,
    "tag": Tag,
    "resource": Resource,
}


def define_abilities(rules, user: Optional[User]) -> None:
    """What a user may do. Later rules override earlier ones."""
    rules.can(Action.LIST, ALL)
    rules.can(Action.READ, Resource)
    rules.cannot(Action.READ, Article, {"published": False})

    if user is not None:
        rules.can([Action.READ, Action.UPDATE], Article, {"author": user.name})
        rules.can(Action.CREATE, Comment)

        @rules.can(Action.DESTROY, Comment)
        def own_comment(comment: Comment) -> bool:
            return comment.author == user.name

        if user.is_admin:
            rules.can(Action.MANAGE, ALL)

    rules.cannot(Action.CREATE, Article)


class ArticlesService(BaseService):
    """Articles service implementation."""

    def __init__(self, store: Optional[Store] = None, **config_overrides):
        super().__init__("articles", 8020, **config_overrides)

        self.store = store if store is not None else seed(Store())
        self.can = Can(config=self.config, metrics=self.metrics)
        self._setup_authorization()
        self.can.register(self.app)

        self._setup_articles_routes()

    def _setup_authorization(self):
        """Wire users, abilities, subject types and lookup sources."""
        store = self.store

        @self.can.user
        def current_user(request: Request) -> Optional[User]:
            return store.users.get(request.headers.get("X-User", ""))

        self.can.ability(define_abilities)

        self.can.declare_subject(Article, Resource)
        self.can.declare_subject(Comment, Resource)
        self.can.declare_subject(Tag, Resource)

        self.can.register_source(Article, store.articles, shape="find_by_id")
        self.can.register_source(Comment, store.comments, shape="get")
        self.can.register_source(Tag, store.tags, shape="index")

    def _setup_articles_routes(self):
        """Set up articles-specific routes."""
        can = self.can
        store = self.store

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "articles",
                "version": "1.0.0",
                "denial_mode": self.config.denial_mode.value,
            }

        @self.app.get("/whoami")
        def whoami(ctx: CanContext = Depends(can.context)):
            user = ctx.current_user
            return {"user": user.name if user else None}

        @self.app.get("/abilities")
        def check_ability(action: str = Query(...), subject: str = Query("all"),
                          ctx: CanContext = Depends(can.context)):
            """Answer can/cannot for the current user against a subject type."""
            subject_type = SUBJECTS.get(subject, subject)
            return {
                "action": action,
                "subject": subject,
                "can": ctx.can(action, subject_type),
                "cannot": ctx.cannot(action, subject_type),
            }

        @self.app.get("/articles")
        def list_articles(_: Any = Depends(can.loads(Article)),
                          ctx: CanContext = Depends(can.context)) -> List[Dict[str, Any]]:
            return [_article_dict(a) for a in store.articles if ctx.can(Action.READ, a)]

        @self.app.get("/articles/{id}")
        def read_article(article: Article = Depends(can.loads(Article, id_type=int))):
            return _article_dict(article)

        @self.app.post("/articles", status_code=201)
        def create_article(body: ArticleCreateRequest,
                           _: Any = Depends(can.loads(Article)),
                           ctx: CanContext = Depends(can.context)):
            article = store.articles.create(body.title, author=ctx.current_user.name)
            return _article_dict(article)

        @self.app.put("/articles/{id}")
        def update_article(body: ArticleUpdateRequest,
                           article: Article = Depends(can.loads(Article, id_type=int))):
            if body.title is not None:
                article.title = body.title
            if body.published is not None:
                article.published = body.published
            return _article_dict(article)

        @self.app.delete("/articles/{id}", status_code=204)
        def delete_article(article: Article = Depends(can.loads(Article, id_type=int))):
            store.articles.delete(article.id)

        @self.app.get("/comments/{id}")
        def read_comment(request: Request, _: Any = Depends(can.loads(Comment))):
            comment = request.state.comment
            return {"id": comment.id, "article_id": comment.article_id, "author": comment.author, "body": comment.body}

        @self.app.post("/comments", status_code=201)
        def create_comment(body: CommentCreateRequest,
                           _: Any = Depends(can.loads(Comment)),
                           ctx: CanContext = Depends(can.context)):
            comment = store.add_comment(Comment(
                id=body.id, article_id=body.article_id, author=ctx.current_user.name, body=body.body
            ))
            return {"id": comment.id, "author": comment.author}

        @self.app.delete("/comments/{id}", status_code=204)
        def delete_comment(comment: Comment = Depends(can.loads(Comment))):
            del store.comments[comment.id]

        @self.app.get("/tags/{tag_id}")
        def read_tag(tag: Tag = Depends(can.loads(Tag, id_param="tag_id", id_type=int))):
            return {"id": tag.id, "name": tag.name}

        @self.app.get("/admin", dependencies=[Depends(can.requires("admin", ALL))])
        def admin():
            return {"users": sorted(store.users)}

        @self.app.get("/dashboard", dependencies=[Depends(can.requires("admin", ALL, not_auth="/login"))])
        def dashboard():
            return {"articles": len(store.articles)}

        @self.app.get("/login")
        def login():
            return {"message": "login here"}


def _article_dict(article: Article) -> Dict[str, Any]:
    return {
        "id": article.id,
        "title": article.title,
        "author": article.author,
        "published": article.published,
    }


def create_app(**config_overrides):
    """Create articles service application."""
    service = ArticlesService(**config_overrides)
    return service.app


if __name__ == "__main__":
    service = ArticlesService()
    service.run()
