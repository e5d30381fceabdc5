"""JSON response class backed by orjson.

Services only ever answer in JSON; this class is the application's default
response class so every handler return value, error body and health report
is rendered the same way.
"""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.api.constants import JSON_MEDIA_TYPE


def _default(value: object) -> object:
    """Serialize values orjson does not handle natively."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, set | frozenset):
        return sorted(value, key=str)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class ORJSONResponse(JSONResponse):
    """FastAPI Response class using orjson serialization.

    Attributes:
        media_type: The media type for the response.
    """

    media_type = JSON_MEDIA_TYPE

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        """Render the content as JSON using orjson.

        Args:
            content: The content to serialize to JSON.

        Returns:
            bytes: The JSON-encoded bytes.
        """
        return orjson.dumps(
            content,
            default=_default,
            option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS,
        )
