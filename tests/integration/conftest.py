"""Shared fixtures for integration tests.

Requests go through the complete application built by :class:`MicroService`
(force-JSON pre-step, pipeline, translators) over an in-process transport.
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.service import MicroService
from src.core.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Provide settings for a service without a database."""
    return Settings(  # type: ignore[call-arg]
        _env_file=None,
        app_name="inventory",
        app_version="2.0.0",
        pipeline_config={"default_page_size": 10, "max_page_size": 50},
    )


@pytest.fixture
def service(settings: Settings) -> MicroService:
    """Provide a configured, not started service."""
    return MicroService(settings)


@pytest.fixture
async def client(service: MicroService) -> AsyncGenerator[AsyncClient]:
    """Provide an HTTP client bound to the service application.

    Server errors are returned as responses instead of being re-raised, as a
    real server would do.
    """
    transport = ASGITransport(app=service.get_server(), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
