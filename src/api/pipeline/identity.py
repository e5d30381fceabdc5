"""Caller identity steps: group membership and authorization credentials.

Both steps only extract what the caller presented. Deciding what a caller may
do is left to the handlers.
"""

from fastapi import Request

from src.api.constants import AUTHORIZATION_HEADER
from src.api.schemas.context import AuthContext
from src.core.exceptions import ValidationError


async def parse_groups(request: Request) -> None:
    """Store the caller's groups in ``request.state.groups``.

    Groups come from the configured header as a comma-separated list; empty
    entries are dropped and order is kept.
    """
    header_name = request.app.state.settings.pipeline_config.group_header
    raw = request.headers.get(header_name, "")
    request.state.groups = [group.strip() for group in raw.split(",") if group.strip()]


async def parse_auth(request: Request) -> None:
    """Store the presented credentials in ``request.state.auth``.

    A missing header leaves ``auth`` as None (anonymous caller).

    Raises:
        ValidationError: If the header has a scheme but no credentials.
    """
    request.state.auth = None
    header = request.headers.get(AUTHORIZATION_HEADER)
    if header is None or not header.strip():
        return

    scheme, _, credentials = header.strip().partition(" ")
    credentials = credentials.strip()
    if not credentials:
        raise ValidationError(
            "Malformed Authorization header",
            {"authorization": "expected '<scheme> <credentials>'"},
        )

    request.state.auth = AuthContext(scheme=scheme, credentials=credentials)
