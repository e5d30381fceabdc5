"""Request-scoped context produced by the inbound pipeline.

Pipeline steps store these models on ``request.state``; handlers read them
through the typed dependencies in :mod:`src.api.pipeline`.
"""

from pydantic import BaseModel, Field, computed_field


class AuthContext(BaseModel):
    """Credentials extracted from the ``Authorization`` header."""

    scheme: str = Field(..., description="Authorization scheme", examples=["Bearer"])
    credentials: str = Field(..., description="Raw credentials", repr=False)


class Pagination(BaseModel):
    """Page selection requested by the client."""

    page: int = Field(default=1, ge=1, description="1-based page number")
    limit: int = Field(default=20, ge=1, description="Items per page")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def offset(self) -> int:
        """Number of items to skip."""
        return (self.page - 1) * self.limit
