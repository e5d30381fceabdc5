"""Unit tests for src/api/routing.py module."""

import pytest
from fastapi import Depends, FastAPI
from fastapi.routing import APIRoute
from pytest_mock import MockerFixture

from src.api.routing import RouteRegistrar


async def endpoint() -> dict[str, bool]:
    return {"ok": True}


async def require_admin() -> None:
    return None


def _routes(app: FastAPI) -> list[APIRoute]:
    return [route for route in app.routes if isinstance(route, APIRoute)]


@pytest.mark.unit
class TestRouteRegistrar:
    """Tests for fluent route registration."""

    @pytest.mark.parametrize("verb", ["get", "post", "put", "delete", "patch"])
    def test_verb_methods(self, verb: str) -> None:
        """Each verb method registers the route under that verb."""
        app = FastAPI()
        owner = object()
        registrar = RouteRegistrar(app, owner)

        result = getattr(registrar, verb)("/items", endpoint)

        assert result is owner
        (route,) = _routes(app)
        assert route.path == "/items"
        assert route.methods == {verb.upper()}
        assert route.endpoint is endpoint

    def test_del_alias(self) -> None:
        """del_ registers a DELETE route."""
        app = FastAPI()
        RouteRegistrar(app, None).del_("/items", endpoint)

        assert _routes(app)[0].methods == {"DELETE"}

    def test_add_any_supported_verb(self) -> None:
        """add accepts verbs case-insensitively."""
        app = FastAPI()
        RouteRegistrar(app, None).add("OPTIONS", "/items", endpoint)

        assert _routes(app)[0].methods == {"OPTIONS"}

    def test_chain_becomes_dependencies(self) -> None:
        """Handlers before the last run as route dependencies, in order."""
        app = FastAPI()

        async def audit() -> None:
            return None

        RouteRegistrar(app, None).get("/admin", require_admin, audit, endpoint)

        route = _routes(app)[0]
        assert route.endpoint is endpoint
        assert [dep.dependency for dep in route.dependencies] == [require_admin, audit]

    def test_extra_options_are_forwarded(self) -> None:
        """FastAPI route options pass through, extra dependencies after the chain."""
        app = FastAPI()

        async def extra() -> None:
            return None

        RouteRegistrar(app, None).post(
            "/items",
            require_admin,
            endpoint,
            status_code=201,
            tags=["items"],
            dependencies=[Depends(extra)],
        )

        route = _routes(app)[0]
        assert route.status_code == 201
        assert route.tags == ["items"]
        assert [dep.dependency for dep in route.dependencies] == [require_admin, extra]

    def test_unsupported_verb(self) -> None:
        """Unknown verbs are refused."""
        with pytest.raises(ValueError, match="Unsupported HTTP method: TRACE"):
            RouteRegistrar(FastAPI(), None).add("TRACE", "/x", endpoint)

    def test_handlers_required(self) -> None:
        """A route needs at least one handler."""
        with pytest.raises(TypeError, match="at least one handler"):
            RouteRegistrar(FastAPI(), None).get("/x")

    def test_guard_runs_first(self, mocker: MockerFixture) -> None:
        """A raising guard prevents the registration."""
        app = FastAPI()
        guard = mocker.Mock(side_effect=RuntimeError("closed"))

        with pytest.raises(RuntimeError, match="closed"):
            RouteRegistrar(app, None, guard=guard).get("/x", endpoint)

        guard.assert_called_once_with()
        assert _routes(app) == []
