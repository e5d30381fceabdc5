"""Database infrastructure for services that own a database.

- **session**: the async :class:`DatabaseHandle` with connect/close lifecycle
- **dependencies**: FastAPI dependencies handing sessions to handlers
"""

from src.infrastructure.database.dependencies import (
    DatabaseSession,
    get_database,
    get_db,
)
from src.infrastructure.database.session import DatabaseHandle, mask_url

__all__ = [
    "DatabaseHandle",
    "DatabaseSession",
    "get_database",
    "get_db",
    "mask_url",
]
