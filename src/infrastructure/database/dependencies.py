"""FastAPI dependency injection for database sessions.

Handlers declare a ``DatabaseSession`` parameter to receive a session from the
database handle owned by the service. The session is committed when the
request succeeds and rolled back when it fails.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import ServiceStateError
from src.infrastructure.database.session import DatabaseHandle


def get_database(request: Request) -> DatabaseHandle:
    """Return the service's database handle.

    Raises:
        ServiceStateError: If the service has no database configured.
    """
    database: DatabaseHandle | None = getattr(request.app.state, "database", None)
    if database is None:
        msg = "No database is configured for this service"
        raise ServiceStateError(msg)
    return database


async def get_db(
    database: Annotated[DatabaseHandle, Depends(get_database)],
) -> AsyncGenerator[AsyncSession]:
    """Provide a database session for FastAPI dependency injection.

    Yields:
        AsyncSession: Session bound to the service's database.
    """
    async with database.session() as session:
        yield session


# Type alias for cleaner dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
