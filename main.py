"""Main entry point running a bare service from the environment settings."""

import os

from loguru import logger

from src.api.service import MicroService
from src.core.config import get_settings
from src.core.logging import setup_logging


def main() -> None:
    """Build the service from settings and run it until shutdown."""
    settings = get_settings()

    # Setup logging first
    setup_logging(settings)

    # Container platforms announce the port to listen on through PORT
    if port := os.environ.get("PORT"):
        settings = settings.model_copy(update={"api_port": int(port)})

    service = MicroService(settings)
    logger.info(
        "Starting {} v{} on http://{}:{}",
        settings.app_name,
        settings.app_version,
        settings.api_host,
        settings.api_port,
    )
    service.start()


if __name__ == "__main__":
    main()
