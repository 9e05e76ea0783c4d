"""Integration tests for serving FastAPI applications built from an injector."""

import logging

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("httpx")

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from goose_di import create_injector
from goose_di.infrastructure.fastapi_integration import (
    RequestScoped,
    Server,
    ServerSettings,
    bind_mount,
    bind_route,
    configure_injector,
    configure_scopes,
    configure_settings,
    create_request_dependency,
)


class Counter:
    pass


class OneServer:
    pass


class TwoServer:
    pass


def _counting_provider():
    count = {"value": 0}

    def provider(context, container):
        count["value"] += 1
        return count["value"]

    return provider


def _build_root(title="Test"):
    injector = create_injector()
    configure_settings(injector, ServerSettings(title=title))
    scope = configure_scopes(injector)
    configure_injector(injector)
    return injector, scope


class TestFastAPIIntegrationEndToEnd:
    """Test complete FastAPI scenarios served through TestClient."""

    def test_bound_route_is_served(self):
        """Test that a route contributed to the map is served by the application."""
        injector, _ = _build_root()

        def hello():
            return {"message": "Hello, world!"}

        bind_route(injector, "/hello", hello)
        app = injector.create_container().get_instance(None, Server)

        response = TestClient(app).get("/hello")

        assert response.status_code == 200
        assert response.json() == {"message": "Hello, world!"}

    def test_request_scoped_value_shared_within_request(self):
        """Test that a request-scoped binding is shared within a request and fresh across requests."""
        injector, scope = _build_root()
        injector.bind_in_scope(Counter, _counting_provider(), RequestScoped)
        get_first = create_request_dependency(injector, Counter)
        get_second = create_request_dependency(injector, Counter)

        def count(first: int = Depends(get_first), second: int = Depends(get_second)):
            return {"first": first, "second": second}

        bind_route(injector, "/count", count)
        client = TestClient(injector.create_container().get_instance(None, Server))

        assert client.get("/count").json() == {"first": 1, "second": 1}
        assert client.get("/count").json() == {"first": 2, "second": 2}
        assert scope.active_contexts == 0

    def test_mounted_application_is_served(self):
        """Test that a mounted sub-application answers under its path."""
        injector, _ = _build_root()
        sub_app = FastAPI()

        @sub_app.get("/ping")
        def ping():
            return {"pong": True}

        bind_mount(injector, "/sub", sub_app)
        client = TestClient(injector.create_container().get_instance(None, Server))

        response = client.get("/sub/ping")

        assert response.status_code == 200
        assert response.json() == {"pong": True}

    def test_unknown_path_returns_404(self):
        """Test that paths without a route are not found."""
        injector, _ = _build_root()
        client = TestClient(injector.create_container().get_instance(None, Server))

        assert client.get("/missing").status_code == 404

    def test_scope_exited_when_endpoint_raises(self):
        """Test that the request scope is exited when the endpoint fails."""
        injector, scope = _build_root()

        def boom():
            raise ValueError("Test error")

        bind_route(injector, "/boom", boom)
        client = TestClient(injector.create_container().get_instance(None, Server))

        with pytest.raises(Exception):
            client.get("/boom")

        assert scope.active_contexts == 0

    def test_two_servers_from_sibling_injectors(self):
        """Test that sibling injectors build separate servers exposed under tags."""
        root = create_injector()
        configure_scopes(root)

        one = root.create_child_injector()
        configure_settings(one, ServerSettings(title="One", port=8080))
        configure_injector(one)
        bind_route(one, "/", lambda: {"server": "one"})
        one.expose_and_tag(Server, OneServer)

        two = root.create_child_injector()
        configure_settings(two, ServerSettings(title="Two", port=9090))
        configure_injector(two)
        bind_route(two, "/", lambda: {"server": "two"})
        two.expose_and_tag(Server, TwoServer)

        container = root.create_container()
        one_app = container.get_tagged_instance(None, Server, OneServer)
        two_app = container.get_tagged_instance(None, Server, TwoServer)

        assert one_app.title == "One"
        assert two_app.title == "Two"
        assert one_app.state.settings.port == 8080
        assert TestClient(one_app).get("/").json() == {"server": "one"}
        assert TestClient(two_app).get("/").json() == {"server": "two"}

    def test_server_creation_is_logged(self, caplog):
        """Test that assembling a server logs its title and route count."""
        injector, _ = _build_root(title="Logged")
        bind_route(injector, "/hello", lambda: {})

        with caplog.at_level(logging.INFO, logger="goose_di"):
            injector.create_container().get_instance(None, Server)

        assert "Logged" in caplog.text
        assert "1 routes" in caplog.text
