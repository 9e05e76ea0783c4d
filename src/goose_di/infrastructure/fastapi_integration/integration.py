import logging
from typing import Any, Awaitable, Callable, Optional

from fastapi import FastAPI, Request
from pydantic import BaseModel, ConfigDict, Field
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from goose_di.application import Injector, SimpleScope, bind_map_instance, ensure_map_bound, values_key
from goose_di.domain import IContainer

logger = logging.getLogger(__name__)


class Server:
    """Key for the assembled FastAPI application."""


class Routes:
    """Key for the multi-bound map of path to endpoint callable."""


class Mounts:
    """Key for the multi-bound map of path to mounted ASGI application."""


class Settings:
    """Key for the ServerSettings of the application."""


class RequestScoped:
    """Scope tag of the request scope, also the key of the scope object itself."""


class ServerSettings(BaseModel):
    """Settings of one FastAPI application built from the injector.

    Attributes:
        title: Title of the application.
        host: Interface the application is meant to listen on.
        port: Port the application is meant to listen on.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="goose-di", description="Title of the application.")
    host: str = Field(default="0.0.0.0", description="Interface to listen on.")
    port: int = Field(default=80, description="Port to listen on.")


class RequestContext:
    """Scope context for one HTTP request.

    Requests are not hashable, so the middleware wraps each one in a
    RequestContext, which hashes by identity.
    """

    def __init__(self, request: Request) -> None:
        """Initialize the context with the request it stands for."""
        self.request = request

    def __repr__(self) -> str:
        return f"RequestContext({self.request.method} {self.request.url.path})"


def current_context(request: Request) -> RequestContext:
    """Return the scope context that RequestScopeMiddleware attached to ``request``.

    Raises:
        RuntimeError: If the middleware is not installed.
    """
    if not hasattr(request.state, "goose_context"):
        raise RuntimeError(
            "Request does not have a goose-di context. Did you forget to add RequestScopeMiddleware?"
        )
    return request.state.goose_context


class RequestScopeMiddleware(BaseHTTPMiddleware):
    """Middleware that enters the request scope around each request.

    The request's RequestContext is available as ``request.state.goose_context``
    and is exited on every path out of the request, including errors.

    Attributes:
        scope: The scope entered for each request.

    Example:
        >>> app = FastAPI()
        >>> app.add_middleware(RequestScopeMiddleware, scope=configure_scopes(injector))
    """

    def __init__(self, app: ASGIApp, scope: SimpleScope):
        """Initialize the middleware with the request scope.

        Args:
            app: The ASGI application to wrap.
            scope: The scope entered for each request.
        """
        super().__init__(app)
        self.scope = scope

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        context = RequestContext(request)
        request.state.goose_context = context

        with self.scope.enter(context):
            return await call_next(request)


def create_request_dependency(injector: Injector, key: Any) -> Callable[[Request], Any]:
    """Create a FastAPI Depends() callable resolving ``key`` for the current request.

    Every call creates a new container from ``injector`` and resolves ``key``
    with the request's context, so request-scoped bindings are shared within
    one request and fresh for the next. Requires RequestScopeMiddleware.

    Example:
        >>> get_counter = create_request_dependency(injector, Counter)
        >>>
        >>> @app.get("/count")
        >>> def count(value: int = Depends(get_counter)):
        ...     return {"count": value}
    """

    def request_dependency(request: Request) -> Any:
        return injector.create_container().get_instance(current_context(request), key)

    return request_dependency


def provides_server(context: Any, container: IContainer) -> FastAPI:
    """Assemble the FastAPI application from the Routes and Mounts maps."""
    settings: ServerSettings = container.get_instance(context, Settings)
    scope: SimpleScope = container.get_instance(context, RequestScoped)
    routes = container.get_instance(context, values_key(Routes))
    mounts = container.get_instance(context, values_key(Mounts))

    app = FastAPI(title=settings.title)
    app.state.settings = settings
    app.add_middleware(RequestScopeMiddleware, scope=scope)
    for path, endpoint in routes.items():
        app.add_api_route(path, endpoint)
    for path, mounted_app in mounts.items():
        app.mount(path, mounted_app)

    logger.info(
        "Creating HTTP application %r for %s:%d with %d routes and %d mounts",
        settings.title,
        settings.host,
        settings.port,
        len(routes),
        len(mounts),
    )
    return app


def configure_settings(injector: Injector, settings: Optional[ServerSettings] = None) -> None:
    """Binds the following:
    Settings - ``settings``, or default ServerSettings
    """
    injector.bind_instance(Settings, settings or ServerSettings())


def configure_scopes(injector: Injector, scope: Optional[SimpleScope] = None) -> SimpleScope:
    """Binds the following:
    RequestScoped scope tag - the request scope
    RequestScoped - the request scope object, for the middleware

    A scope tag can only be bound once per injector tree, so call this once
    on the root even when several child injectors configure a server.

    Returns:
        The request scope.
    """
    scope = scope or SimpleScope("HTTP Request")
    injector.bind_scope(scope, RequestScoped)
    injector.bind_instance(RequestScoped, scope)
    return scope


def configure_injector(injector: Injector) -> None:
    """Binds the following:
    Server - the FastAPI application
    Routes, Routes(Values) - the endpoint map
    Mounts, Mounts(Values) - the mounted application map

    Requires Settings and RequestScoped to be bound on this injector or an
    ancestor. May be called on several child injectors, one per server.
    """
    injector.bind(Server, provides_server)
    ensure_map_bound(injector, Routes)
    ensure_map_bound(injector, Mounts)


def bind_route(injector: Injector, path: str, endpoint: Callable[..., Any]) -> None:
    """Contribute an endpoint for ``path`` to the Routes map of ``injector``."""
    bind_map_instance(injector, Routes, path, endpoint)


def bind_mount(injector: Injector, path: str, app: ASGIApp) -> None:
    """Contribute an ASGI application mounted at ``path`` to the Mounts map of ``injector``."""
    bind_map_instance(injector, Mounts, path, app)
