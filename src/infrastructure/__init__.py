"""Infrastructure layer for external resources owned by a service.

The only resource currently managed is the optional async database handle.
Each resource has an explicit lifecycle: it is opened by an initializer
before the service listens and released when the service shuts down.
"""
