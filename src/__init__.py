"""Bootstrap layer for building HTTP microservices on FastAPI.

A service is one :class:`~src.api.service.MicroService` object that wires a
fixed inbound pipeline, structured error translation and a health route, and
runs external initializers (database connections, caches...) in registration
order before it starts listening.

Architecture Overview:
- **API Layer**: service façade, pipeline, error translators, routing
- **Core Layer**: configuration, logging, exceptions, initializer sequencing
- **Infrastructure Layer**: resources owned by a service (database handle)
"""
