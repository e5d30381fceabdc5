"""Default health check handler.

Registered as ``GET /health`` on every service. It is a liveness probe: it
always answers 200, reporting ``degraded`` when the service owns a database
that does not currently answer.
"""

from fastapi import Request
from loguru import logger

from src.api.schemas.health import HealthResponse
from src.infrastructure.database.session import DatabaseHandle


async def health(request: Request) -> HealthResponse:
    """Health check endpoint for monitoring and container orchestration.

    Returns:
        HealthResponse: Status, service identity and database reachability.
    """
    settings = request.app.state.settings
    report = HealthResponse(
        status="healthy",
        service=settings.app_name,
        version=settings.app_version,
    )

    database: DatabaseHandle | None = getattr(request.app.state, "database", None)
    if database is not None:
        is_healthy, error_msg = await database.check_connection()
        report.database = is_healthy
        if not is_healthy:
            # Degraded rather than down: the process itself is alive
            logger.warning("Database health check failed: {}", error_msg)
            report.status = "degraded"

    return report
