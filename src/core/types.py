"""Type aliases shared across the bootstrap layer."""

from collections.abc import Awaitable, Callable
from typing import Any

# Parsed query string: single values stay strings, repeated keys become lists
type QueryParams = dict[str, str | list[str]]

# Outcome of an initializer: a plain value or something to await
type InitializerOutcome = Awaitable[object] | object

# Initializer task; receives the service that registered it
type InitializerTask[S] = Callable[[S], InitializerOutcome]

# Route handler or pipeline step callable, opaque to the bootstrap layer
type Handler = Callable[..., Any]

# Result of a health probe: (ok, error message)
type HealthStatus = tuple[bool, str | None]
