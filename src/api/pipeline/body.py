"""Request body parsing step.

JSON bodies are decoded with orjson, urlencoded and multipart bodies through
Starlette's form parser; any other content type is kept as raw bytes. The
result lands in ``request.state.body`` (None for requests without a body).
"""

import orjson
from fastapi import Request

from src.api.constants import (
    FORM_CONTENT_TYPES,
    JSON_CONTENT_TYPES,
    REQUEST_BODY_METHODS,
)
from src.api.pipeline.query import group_items
from src.core.exceptions import ValidationError


def _content_type(request: Request) -> str:
    header = request.headers.get("content-type", "")
    return header.partition(";")[0].strip().lower()


async def parse_body(request: Request) -> None:
    """Parse the body of POST/PUT/PATCH/DELETE requests.

    Raises:
        ValidationError: If a JSON body cannot be decoded.
    """
    request.state.body = None
    if request.method not in REQUEST_BODY_METHODS:
        return

    raw = await request.body()
    if not raw:
        return

    content_type = _content_type(request)
    if content_type in JSON_CONTENT_TYPES or content_type.endswith("+json"):
        try:
            request.state.body = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise ValidationError(
                "Invalid JSON body",
                {"body": str(e)},
                cause=e,
            ) from e
    elif content_type in FORM_CONTENT_TYPES:
        form = await request.form()
        request.state.body = group_items(form.multi_items())
    else:
        request.state.body = raw
