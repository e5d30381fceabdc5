"""Normalization pre-step forcing every request to negotiate JSON.

Services only produce JSON. Before any other processing, the inbound
``Accept`` header is overwritten with ``application/json`` whatever the
client sent, so content negotiation downstream always resolves to JSON.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.api.constants import ACCEPT_HEADER, JSON_MEDIA_TYPE

_ACCEPT_KEY = ACCEPT_HEADER.encode("latin-1")
_JSON_VALUE = JSON_MEDIA_TYPE.encode("latin-1")


class ForceJsonMiddleware(BaseHTTPMiddleware):
    """Middleware replacing the request's Accept header with JSON."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Rewrite the Accept header, then continue down the stack.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: The downstream response.
        """
        # Downstream requests are rebuilt from this scope
        headers = [
            (key, value)
            for key, value in request.scope["headers"]
            if key.lower() != _ACCEPT_KEY
        ]
        headers.append((_ACCEPT_KEY, _JSON_VALUE))
        request.scope["headers"] = headers

        return await call_next(request)
