"""
FastAPI integration module.

Builds FastAPI applications from injector bindings and enters the request
scope around each request.
"""

from .integration import (
    Mounts,
    RequestContext,
    RequestScoped,
    RequestScopeMiddleware,
    Routes,
    Server,
    ServerSettings,
    Settings,
    bind_mount,
    bind_route,
    configure_injector,
    configure_scopes,
    configure_settings,
    create_request_dependency,
    current_context,
    provides_server,
)

__all__ = [
    # Keys
    "Server",
    "Routes",
    "Mounts",
    "Settings",
    "RequestScoped",
    # Types
    "ServerSettings",
    "RequestContext",
    "RequestScopeMiddleware",
    # Configuration
    "configure_settings",
    "configure_scopes",
    "configure_injector",
    "bind_route",
    "bind_mount",
    "provides_server",
    # Request helpers
    "create_request_dependency",
    "current_context",
]
