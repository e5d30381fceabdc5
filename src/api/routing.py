"""Fluent route registration on top of the FastAPI router.

A route is a verb, a path and a chain of handlers. The last handler of the
chain is the endpoint; every handler before it runs first, in order, as a
route dependency (and can reject the request by raising). Each registration
returns the owner so calls chain:

    service.get("/items", require_admin, list_items).post("/items", create_item)

Path syntax and handler signatures are FastAPI's concern and are not checked
here.
"""

from collections.abc import Callable
from typing import Any

from fastapi import Depends, FastAPI
from loguru import logger

from src.api.constants import SUPPORTED_METHODS
from src.core.types import Handler


class RouteRegistrar[O]:
    """Method-per-verb registration surface returning ``owner``.

    Args:
        app: The FastAPI application receiving the routes.
        owner: Object returned by every registration call.
        guard: Called before each registration; raises to refuse it.
    """

    def __init__(
        self,
        app: FastAPI,
        owner: O,
        guard: Callable[[], None] | None = None,
    ) -> None:
        self._app = app
        self._owner = owner
        self._guard = guard

    def add(
        self,
        method: str,
        path: str,
        *handlers: Handler,
        **options: Any,  # noqa: ANN401 - forwarded to FastAPI
    ) -> O:
        """Register ``handlers`` for ``method`` on ``path``.

        Args:
            method: HTTP verb, case-insensitive.
            path: Route path, FastAPI syntax.
            *handlers: Handler chain; the last one is the endpoint.
            **options: Extra ``add_api_route`` options (status_code, tags...).

        Returns:
            The owner, for chaining.

        Raises:
            ValueError: If the verb is not supported.
            TypeError: If no handler is given.
        """
        if self._guard is not None:
            self._guard()

        verb = method.lower()
        if verb not in SUPPORTED_METHODS:
            msg = f"Unsupported HTTP method: {method}"
            raise ValueError(msg)
        if not handlers:
            msg = f"Route {verb.upper()} {path} needs at least one handler"
            raise TypeError(msg)

        *chain, endpoint = handlers
        dependencies = [Depends(handler) for handler in chain]
        dependencies.extend(options.pop("dependencies", None) or [])

        self._app.add_api_route(
            path,
            endpoint,
            methods=[verb.upper()],
            dependencies=dependencies,
            **options,
        )
        logger.debug("server listen on {} '{}'", verb.upper(), path)
        return self._owner

    def get(self, path: str, *handlers: Handler, **options: Any) -> O:  # noqa: ANN401
        """Register a GET route."""
        return self.add("get", path, *handlers, **options)

    def post(self, path: str, *handlers: Handler, **options: Any) -> O:  # noqa: ANN401
        """Register a POST route."""
        return self.add("post", path, *handlers, **options)

    def put(self, path: str, *handlers: Handler, **options: Any) -> O:  # noqa: ANN401
        """Register a PUT route."""
        return self.add("put", path, *handlers, **options)

    def delete(self, path: str, *handlers: Handler, **options: Any) -> O:  # noqa: ANN401
        """Register a DELETE route."""
        return self.add("delete", path, *handlers, **options)

    def patch(self, path: str, *handlers: Handler, **options: Any) -> O:  # noqa: ANN401
        """Register a PATCH route."""
        return self.add("patch", path, *handlers, **options)

    # Kept for services written against the short verb name
    del_ = delete
