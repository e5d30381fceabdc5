"""Middleware and error translation installed on every service.

- **ForceJsonMiddleware**: pre-step forcing JSON content negotiation
- **error_handler**: the internal-server and validation error translators
"""
