"""HTTP layer of the bootstrap.

Key components:
- **service**: the ``MicroService`` façade and its lifecycle
- **pipeline**: the ordered inbound request chain
- **middleware**: force-JSON pre-step and error translators
- **routing**: fluent route registration
- **routes**: default routes (health)
- **schemas**: error body, request context and health models
- **utils**: orjson response class
"""
