"""Integration tests for the error translators.

Whatever fails, the client gets status 406 and a JSON body with exactly
``message`` and ``details``.
"""

import pytest
from httpx import AsyncClient

from src.api.service import MicroService
from src.core.exceptions import InternalServerError, ValidationError


@pytest.mark.integration
class TestErrorTranslation:
    """Tests for failures raised while handling requests."""

    async def test_unexpected_error(
        self, service: MicroService, client: AsyncClient
    ) -> None:
        """An unexpected handler failure becomes a 406."""

        async def broken() -> None:
            raise RuntimeError("database exploded")

        service.get("/broken", broken)

        response = await client.get("/broken")

        assert response.status_code == 406
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"message": "database exploded", "details": None}

    async def test_internal_server_error_details(
        self, service: MicroService, client: AsyncClient
    ) -> None:
        """Details of an internal error are forwarded."""

        async def broken() -> None:
            raise InternalServerError("upstream failed", {"upstream": "billing"})

        service.put("/broken", broken)

        response = await client.put("/broken")

        assert response.status_code == 406
        assert response.json() == {
            "message": "upstream failed",
            "details": {"upstream": "billing"},
        }

    async def test_validation_error(
        self, service: MicroService, client: AsyncClient
    ) -> None:
        """A handler validation failure becomes a 406 with its details."""

        async def create() -> None:
            raise ValidationError("name is required", {"name": "missing"})

        service.post("/items", create)

        response = await client.post("/items", json={})

        assert response.status_code == 406
        assert response.json() == {
            "message": "name is required",
            "details": {"name": "missing"},
        }

    async def test_parameter_validation(
        self, service: MicroService, client: AsyncClient
    ) -> None:
        """FastAPI parameter errors are translated the same way."""

        async def lookup(item_id: int) -> dict[str, int]:
            return {"id": item_id}

        service.get("/items/{item_id}", lookup)

        response = await client.get("/items/abc")

        body = response.json()
        assert response.status_code == 406
        assert set(body) == {"message", "details"}
        assert body["message"] == "Request validation failed"
        assert body["details"][0]["loc"] == ["path", "item_id"]

    async def test_malformed_authorization(self, client: AsyncClient) -> None:
        """Pipeline rejections use the same body, even on the health route."""
        response = await client.get("/health", headers={"Authorization": "Bearer"})

        assert response.status_code == 406
        assert response.json()["message"] == "Malformed Authorization header"
