"""Content negotiation step.

Matches the request's ``Accept`` header against the media types the service
can produce. The force-JSON pre-step normally pins the header to JSON; this
step still validates it so a misconfigured ``acceptable`` list is caught per
request instead of producing responses the client did not ask for.
"""

from collections.abc import Sequence

from fastapi import Request
from loguru import logger

from src.api.constants import ACCEPT_HEADER
from src.core.exceptions import NotAcceptableError


def parse_accept(header: str) -> list[tuple[str, float]]:
    """Parse an Accept header into media ranges ordered by preference.

    Args:
        header: Raw header value, e.g. ``"text/html;q=0.8, */*;q=0.1"``.

    Returns:
        list[tuple[str, float]]: ``(media_range, quality)`` pairs, highest
            quality first, header order kept between equal qualities.
    """
    ranges: list[tuple[str, float]] = []
    for part in header.split(","):
        media_range, _, params = part.partition(";")
        media_range = media_range.strip().lower()
        if not media_range:
            continue

        quality = 1.0
        for param in params.split(";"):
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    quality = float(value.strip())
                except ValueError:
                    quality = 0.0
        ranges.append((media_range, quality))

    return sorted(ranges, key=lambda item: item[1], reverse=True)


def _matches(media_range: str, media_type: str) -> bool:
    if media_range in {"*", "*/*"}:
        return True
    range_type, _, range_subtype = media_range.partition("/")
    if range_subtype == "*":
        return media_type.split("/", 1)[0] == range_type
    return media_range == media_type


def negotiate(accept: str | None, acceptable: Sequence[str]) -> str | None:
    """Pick the media type to answer with.

    Args:
        accept: The Accept header, or None when the client sent none.
        acceptable: Media types the service can produce, in preference order.

    Returns:
        str | None: The chosen media type, None when nothing matches.
    """
    if not accept or not accept.strip():
        return acceptable[0] if acceptable else None

    for media_range, quality in parse_accept(accept):
        if quality <= 0:
            continue
        for media_type in acceptable:
            if _matches(media_range, media_type.lower()):
                return media_type
    return None


async def negotiate_content(request: Request) -> None:
    """Resolve the response media type into ``request.state.accept``.

    Raises:
        NotAcceptableError: If none of the acceptable types matches.
    """
    acceptable = request.app.state.settings.pipeline_config.acceptable
    accept = request.headers.get(ACCEPT_HEADER)

    media_type = negotiate(accept, acceptable)
    if media_type is None:
        logger.debug("No acceptable media type for Accept: {}", accept)
        raise NotAcceptableError(
            f"Server accepts: {', '.join(acceptable)}",
            {"accept": accept, "acceptable": list(acceptable)},
        )

    request.state.accept = media_type
