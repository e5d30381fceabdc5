"""Error response schema shared by both error translators.

Every failed request is answered with the same two-field body, whatever the
failure was:

    {"message": "<human readable>", "details": <anything or null>}
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Structured error body returned with status 406."""

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Invalid JSON body", "Internal server error"],
    )

    details: Any = Field(
        default=None,
        description="Structured error details (field errors, context), if any",
        examples=[{"page": "must be a positive integer"}],
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "message": "Invalid pagination parameters",
                    "details": {"limit": "must be between 1 and 100"},
                },
                {
                    "message": "Internal server error",
                    "details": None,
                },
            ]
        }
    }
