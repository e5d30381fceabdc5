"""Shared fixtures for API unit tests."""

from collections.abc import Callable

import pytest
from fastapi import FastAPI
from starlette.requests import Request
from starlette.types import Message

from src.core.config import Settings

type RequestFactory = Callable[..., Request]


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """Provide a bare FastAPI application carrying the test settings."""
    application = FastAPI()
    application.state.settings = settings
    return application


@pytest.fixture
def make_request(app: FastAPI) -> RequestFactory:
    """Build real Starlette requests bound to ``app``.

    Returns:
        Callable: Factory taking method, path, query string, headers and body.
    """

    def factory(
        method: str = "GET",
        path: str = "/things",
        query: str = "",
        headers: dict[str, str] | None = None,
        body: bytes = b"",
    ) -> Request:
        scope = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "path": path,
            "raw_path": path.encode(),
            "query_string": query.encode(),
            "headers": [
                (key.lower().encode("latin-1"), value.encode("latin-1"))
                for key, value in (headers or {}).items()
            ],
            "app": app,
            "scheme": "http",
            "server": ("testserver", 80),
            "client": ("testclient", 50000),
        }

        async def receive() -> Message:
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return factory
