"""Query string parsing step."""

from fastapi import Request

from src.core.types import QueryParams


def group_items(items: list[tuple[str, object]]) -> dict[str, object]:
    """Group key/value pairs; repeated keys collect their values in a list."""
    grouped: dict[str, object] = {}
    for key, value in items:
        if key not in grouped:
            grouped[key] = value
            continue
        existing = grouped[key]
        if isinstance(existing, list):
            existing.append(value)
        else:
            grouped[key] = [existing, value]
    return grouped


async def parse_query(request: Request) -> None:
    """Store the parsed query string in ``request.state.query``."""
    query: QueryParams = group_items(request.query_params.multi_items())  # type: ignore[assignment]
    request.state.query = query
