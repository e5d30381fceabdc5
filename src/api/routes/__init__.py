"""Routes every service registers by default."""

from src.api.routes.health import health

__all__ = ["health"]
