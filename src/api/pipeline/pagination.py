"""Pagination parameter step."""

from fastapi import Request

from src.api.constants import LIMIT_QUERY_PARAM, PAGE_QUERY_PARAM
from src.api.schemas.context import Pagination
from src.core.exceptions import ValidationError


def _positive_int(value: str | None, default: int) -> int | None:
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except ValueError:
        return None
    return number if number > 0 else None


async def parse_pagination(request: Request) -> None:
    """Store the requested page in ``request.state.pagination``.

    ``page`` defaults to 1 and ``limit`` to the configured page size; both
    must be positive integers and ``limit`` may not exceed the maximum.

    Raises:
        ValidationError: On invalid values, with one entry per bad parameter.
    """
    config = request.app.state.settings.pipeline_config
    max_limit = config.max_page_size
    default_limit = min(config.default_page_size, max_limit)

    page = _positive_int(request.query_params.get(PAGE_QUERY_PARAM), 1)
    limit = _positive_int(request.query_params.get(LIMIT_QUERY_PARAM), default_limit)

    errors: dict[str, str] = {}
    if page is None:
        errors[PAGE_QUERY_PARAM] = "must be a positive integer"
    if limit is None or limit > max_limit:
        errors[LIMIT_QUERY_PARAM] = f"must be an integer between 1 and {max_limit}"
    if errors:
        raise ValidationError("Invalid pagination parameters", errors)

    request.state.pagination = Pagination(page=page, limit=limit)
