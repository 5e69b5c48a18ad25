"""
FastAPI integration.
"""

from typing import Any, Callable, Hashable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from prometheus_client import CollectorRegistry

from shared.config import CanConfig, get_config
from shared.errors import CanException, Halt, AccessDenied, NotFound, UnknownActionError
from shared.logging import get_logger
from shared.metrics import MetricsCollector, get_metrics_collector
from .context import CanContext
from .loader import EntityLoader
from .rules.engine import AbilityDefinition
from .rules.subjects import SubjectRegistry

UserResolver = Callable[[Request], Any]


class Can:
    """
    Process-wide authorization setup for one application.

    ::

        can = Can()

        @can.user
        def current_user(request):
            return users.get(request.headers.get("X-User"))

        @can.ability
        def define(rules, user):
            rules.can("read", ALL)

        can.register(app)

        @app.get("/admin", dependencies=[Depends(can.requires("admin", ALL))])
        def admin(): ...
    """

    def __init__(self, config: Optional[CanConfig] = None,
                 registry: Optional[SubjectRegistry] = None,
                 loader: Optional[EntityLoader] = None,
                 metrics: Optional[MetricsCollector] = None,
                 metrics_registry: Optional[CollectorRegistry] = None):
        self.logger = get_logger("can.plugin")
        self.config = config or get_config()
        self.registry = registry or SubjectRegistry()
        self.loader = loader or EntityLoader()
        self.metrics = metrics or get_metrics_collector("can", metrics_registry)
        self.definition: Optional[AbilityDefinition] = None
        self.user_resolver: Optional[UserResolver] = None

    def ability(self, definition: AbilityDefinition) -> AbilityDefinition:
        """Register the ability definition, ``definition(rules, user)``."""
        self.definition = definition
        return definition

    def user(self, resolver: UserResolver) -> UserResolver:
        """Register the current-user resolver, ``resolver(request)``."""
        self.user_resolver = resolver
        return resolver

    def declare_subject(self, subject_type: Hashable, parent: Optional[Hashable] = None) -> None:
        self.registry.declare(subject_type, parent)

    def register_source(self, subject_type: Hashable, source: Any, shape: str = "get") -> None:
        self.loader.register(subject_type, source, shape)

    def register(self, app: FastAPI) -> FastAPI:
        """Install the response handlers on ``app``. Handlers the app already has are kept."""
        handlers = {
            Halt: self._halt_handler,
            AccessDenied: self._error_handler,
            NotFound: self._error_handler,
            UnknownActionError: self._error_handler,
        }
        for exc_class, handler in handlers.items():
            if exc_class not in app.exception_handlers:
                app.add_exception_handler(exc_class, handler)

        app.state.can = self
        self.logger.info("Authorization registered", denial_mode=self.config.denial_mode.value)
        return app

    init_app = register

    def context(self, request: Request) -> CanContext:
        """Dependency returning the request's CanContext."""
        ctx = getattr(request.state, "can_context", None)
        if ctx is None:
            ctx = CanContext(self, request)
            request.state.can_context = ctx
        return ctx

    def requires(self, action: Any, subject: Any, not_auth: Optional[str] = None) -> Callable[[Request], None]:
        """Route condition: authorize ``action`` on ``subject`` before the handler runs."""
        def dependency(request: Request) -> None:
            self.context(request).authorize(action, subject, not_auth=not_auth)

        return dependency

    def loads(self, subject_type: Any, id_param: Optional[str] = None,
              id_type: Optional[Callable[[Any], Any]] = None) -> Callable[[Request], Any]:
        """Route condition: load and authorize ``subject_type`` from the request."""
        def dependency(request: Request) -> Any:
            return self.context(request).load_and_authorize(subject_type, id_param=id_param, id_type=id_type)

        return dependency

    async def _halt_handler(self, request: Request, exc: Halt) -> Response:
        if exc.is_redirect:
            return RedirectResponse(exc.location, status_code=exc.status_code)
        if exc.error is not None:
            return JSONResponse(status_code=exc.status_code, content=exc.error.to_response().model_dump())
        return Response(status_code=exc.status_code)

    async def _error_handler(self, request: Request, exc: CanException) -> Response:
        return JSONResponse(status_code=exc.status_code, content=exc.to_response().model_dump())
