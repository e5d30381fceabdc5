"""Pydantic schema models for the API layer.

- **errors**: the ``{message, details}`` error body
- **context**: request context produced by the inbound pipeline
- **health**: the health check report
"""
