"""Inbound request pipeline.

Every request passes through a fixed, ordered chain of steps before its
route handler runs:

1. content negotiation (``request.state.accept``)
2. query parsing (``request.state.query``)
3. body parsing (``request.state.body``)
4. group extraction (``request.state.groups``)
5. auth extraction (``request.state.auth``)
6. pagination (``request.state.pagination``)

Order matters: later steps may rely on context set by earlier ones. Any step
may reject the request by raising a ``ValidationError``, which stops the
chain and is answered by the validation translator.

Steps are FastAPI dependencies installed on the application router, so they
also apply to routes registered after the pipeline is configured. The group,
auth and pagination steps are pluggable; any FastAPI dependency callable can
replace them.
"""

from typing import Annotated, Any

from fastapi import Depends, FastAPI, Request
from loguru import logger

from src.api.pipeline.body import parse_body
from src.api.pipeline.identity import parse_auth, parse_groups
from src.api.pipeline.negotiation import negotiate_content
from src.api.pipeline.pagination import parse_pagination
from src.api.pipeline.query import parse_query
from src.api.schemas.context import AuthContext, Pagination
from src.core.types import Handler, QueryParams


def build_pipeline(
    *,
    group_parser: Handler = parse_groups,
    auth_parser: Handler = parse_auth,
    pagination: Handler = parse_pagination,
) -> list[tuple[str, Handler]]:
    """Return the ordered ``(name, step)`` pairs of the inbound chain."""
    return [
        ("accept parser", negotiate_content),
        ("query parser", parse_query),
        ("body parser", parse_body),
        ("group parser", group_parser),
        ("auth parser", auth_parser),
        ("pagination", pagination),
    ]


def configure_pipeline(app: FastAPI, steps: list[tuple[str, Handler]]) -> None:
    """Install the steps, in order, ahead of every route of ``app``.

    Args:
        app: The FastAPI application.
        steps: Ordered ``(name, step)`` pairs, see :func:`build_pipeline`.
    """
    for name, step in steps:
        logger.debug("server use {}", name)
        app.router.dependencies.append(Depends(step))


def current_accept(request: Request) -> str:
    """Negotiated response media type."""
    return str(request.state.accept)


def current_query(request: Request) -> QueryParams:
    """Parsed query string."""
    query: QueryParams = request.state.query
    return query


def current_body(request: Request) -> Any:  # noqa: ANN401 - body shape is the client's
    """Parsed request body, None when the request had none."""
    return request.state.body


def current_groups(request: Request) -> list[str]:
    """Groups presented by the caller."""
    groups: list[str] = getattr(request.state, "groups", [])
    return groups


def current_auth(request: Request) -> AuthContext | None:
    """Credentials presented by the caller, None for anonymous calls."""
    auth: AuthContext | None = getattr(request.state, "auth", None)
    return auth


def current_pagination(request: Request) -> Pagination:
    """Requested page."""
    pagination: Pagination = request.state.pagination
    return pagination


# Type aliases for cleaner dependency injection in handlers
CurrentAccept = Annotated[str, Depends(current_accept)]
CurrentQuery = Annotated[QueryParams, Depends(current_query)]
CurrentBody = Annotated[Any, Depends(current_body)]
CurrentGroups = Annotated[list[str], Depends(current_groups)]
CurrentAuth = Annotated[AuthContext | None, Depends(current_auth)]
CurrentPagination = Annotated[Pagination, Depends(current_pagination)]

__all__ = [
    "CurrentAccept",
    "CurrentAuth",
    "CurrentBody",
    "CurrentGroups",
    "CurrentPagination",
    "CurrentQuery",
    "build_pipeline",
    "configure_pipeline",
    "negotiate_content",
    "parse_auth",
    "parse_body",
    "parse_groups",
    "parse_pagination",
    "parse_query",
]
