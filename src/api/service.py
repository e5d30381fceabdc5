"""Service façade: the single object a microservice is built from.

A :class:`MicroService` composes four independent collaborators behind one
object:

- the **pipeline configurator** (:mod:`src.api.pipeline`) installing the
  ordered inbound chain and the force-JSON pre-step
- the **error translators** (:mod:`src.api.middleware.error_handler`)
- the **route registrar** (:class:`src.api.routing.RouteRegistrar`)
- the **initializer sequencer** (:class:`src.core.initializers.InitializerSequencer`)

Lifecycle::

    CONSTRUCTING -> CONFIGURED -> INITIALIZING -> RUNNING -> TERMINATED
                                       |
                                       +-> TERMINATED (initializer failed)

Construction wires everything synchronously. Routes and initializers can be
added while the service is configured; once :meth:`MicroService.start` is
called any further registration raises ``ServiceStateError``. ``start`` runs
the initializers one after the other and only binds the listener when all of
them succeeded; a failure is logged and the process exits with status 1.

Example:
    service = MicroService(settings)
    service.add_external(connect_cache)
    service.get("/items", list_items).post("/items", create_item)
    service.start()
"""

import asyncio
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, Self

import uvicorn
from fastapi import FastAPI
from loguru import logger

from src.api.constants import HEALTH_PATH
from src.api.middleware.error_handler import register_exception_handlers
from src.api.middleware.force_json import ForceJsonMiddleware
from src.api.pipeline import build_pipeline, configure_pipeline
from src.api.pipeline.identity import parse_auth, parse_groups
from src.api.pipeline.pagination import parse_pagination
from src.api.routes.health import health
from src.api.routing import RouteRegistrar
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings, get_settings
from src.core.constants import EXIT_INITIALIZATION_FAILED
from src.core.exceptions import ServiceStateError
from src.core.initializers import InitializerSequencer
from src.core.types import Handler, InitializerTask
from src.infrastructure.database.session import DatabaseHandle

type InitializerFn = InitializerTask[MicroService]

# Route uvicorn's own loggers through Loguru
UVICORN_LOG_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "default": {
            "class": "src.core.logging.InterceptHandler",
        },
    },
    "loggers": {
        "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.error": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.access": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
    },
}


class ServiceState(Enum):
    """Lifecycle states of a service."""

    CONSTRUCTING = "constructing"
    CONFIGURED = "configured"
    INITIALIZING = "initializing"
    RUNNING = "running"
    TERMINATED = "terminated"


async def connect_database(service: "MicroService") -> None:
    """Initializer opening the service's database handle."""
    if service.database is not None:
        await service.database.connect()


class MicroService:
    """HTTP microservice with ordered asynchronous initialization.

    Args:
        settings: Service settings; defaults to :func:`get_settings`.
        health_handler: Handler of ``GET /health``.
        group_parser: Pipeline step extracting caller groups.
        auth_parser: Pipeline step extracting caller credentials.
        pagination: Pipeline step extracting pagination parameters.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        health_handler: Handler = health,
        group_parser: Handler = parse_groups,
        auth_parser: Handler = parse_auth,
        pagination: Handler = parse_pagination,
    ) -> None:
        self.state = ServiceState.CONSTRUCTING
        self.settings = settings if settings is not None else get_settings()
        self.initializers: InitializerSequencer[MicroService] = InitializerSequencer()
        self.database: DatabaseHandle | None = None

        self.app = FastAPI(
            title=self.settings.app_name,
            version=self.settings.app_version,
            default_response_class=ORJSONResponse,
            lifespan=self._lifespan,
        )
        self.app.state.settings = self.settings
        self.app.state.service = self
        self.routes: RouteRegistrar[Self] = RouteRegistrar(
            self.app, self, guard=self._ensure_configurable
        )

        if self.settings.database_config.database_url:
            self.add_database()

        self.default_configuration(
            group_parser=group_parser,
            auth_parser=auth_parser,
            pagination=pagination,
        )
        self.default_listeners()
        self.default_pre()
        self.default_routes(health_handler)

        self.state = ServiceState.CONFIGURED

    # Setup

    def add_database(self) -> None:
        """Own a database handle and open it as the next initializer."""
        self.database = DatabaseHandle(self.settings.database_config)
        self.app.state.database = self.database
        self.add_external(connect_database)

    def default_configuration(
        self,
        *,
        group_parser: Handler,
        auth_parser: Handler,
        pagination: Handler,
    ) -> None:
        """Install the ordered inbound pipeline."""
        steps = build_pipeline(
            group_parser=group_parser,
            auth_parser=auth_parser,
            pagination=pagination,
        )
        configure_pipeline(self.app, steps)

    def default_listeners(self) -> None:
        """Install the error translators."""
        register_exception_handlers(self.app)

    def default_pre(self) -> None:
        """Install the pre-processing normalization step."""
        logger.debug("Force request to be json")
        self.app.add_middleware(ForceJsonMiddleware)

    def default_routes(self, health_handler: Handler) -> None:
        """Register the routes every service exposes."""
        self.get(HEALTH_PATH, health_handler)

    def get_server(self) -> FastAPI:
        """Return the underlying FastAPI application."""
        return self.app

    def _ensure_configurable(self) -> None:
        if self.state not in (ServiceState.CONSTRUCTING, ServiceState.CONFIGURED):
            msg = f"Service is {self.state.value}; routes and initializers must be added before start()"
            raise ServiceStateError(msg)

    def add_external(self, fn: InitializerFn) -> Self:
        """Register an external initializer, run in order before listening.

        Args:
            fn: Callable receiving this service; may return an awaitable.

        Returns:
            Self: The service, for chaining.

        Raises:
            ServiceStateError: If the service was already started.
        """
        self._ensure_configurable()
        self.initializers.register(fn)
        return self

    # Routes

    def add(self, method: str, path: str, *handlers: Handler, **options: Any) -> Self:  # noqa: ANN401
        """Register a route for any verb, see :meth:`RouteRegistrar.add`."""
        return self.routes.add(method, path, *handlers, **options)

    def get(self, path: str, *handlers: Handler, **options: Any) -> Self:  # noqa: ANN401
        """Register a GET route."""
        return self.routes.get(path, *handlers, **options)

    def post(self, path: str, *handlers: Handler, **options: Any) -> Self:  # noqa: ANN401
        """Register a POST route."""
        return self.routes.post(path, *handlers, **options)

    def put(self, path: str, *handlers: Handler, **options: Any) -> Self:  # noqa: ANN401
        """Register a PUT route."""
        return self.routes.put(path, *handlers, **options)

    def delete(self, path: str, *handlers: Handler, **options: Any) -> Self:  # noqa: ANN401
        """Register a DELETE route."""
        return self.routes.delete(path, *handlers, **options)

    def patch(self, path: str, *handlers: Handler, **options: Any) -> Self:  # noqa: ANN401
        """Register a PATCH route."""
        return self.routes.patch(path, *handlers, **options)

    del_ = delete

    # Lifecycle

    @asynccontextmanager
    async def _lifespan(self, _app: FastAPI) -> AsyncGenerator[None]:
        yield
        logger.info("Service shutdown initiated")
        await self.shutdown()

    def _uvicorn_config(self) -> uvicorn.Config:
        return uvicorn.Config(
            self.app,
            host=self.settings.api_host,
            port=self.settings.api_port,
            log_config=UVICORN_LOG_CONFIG,
            lifespan="on",
        )

    async def serve(self) -> None:
        """Run every initializer, then listen until shutdown.

        Raises:
            ServiceStateError: If the service was already started.
            Exception: The first initializer failure, unchanged; the listener
                is never started in that case.
        """
        self._ensure_configurable()
        self.state = ServiceState.INITIALIZING
        try:
            await self.initializers.run_all(self)
        except Exception:
            self.state = ServiceState.TERMINATED
            if self.database is not None:
                await self.database.close()
            raise

        server = uvicorn.Server(self._uvicorn_config())
        self.state = ServiceState.RUNNING
        logger.info(
            "{} listening at http://{}:{}",
            self.settings.app_name,
            self.settings.api_host,
            self.settings.api_port,
        )
        await server.serve()

    async def shutdown(self) -> None:
        """Release owned resources; never raises."""
        if self.database is not None:
            await self.database.close()
        self.state = ServiceState.TERMINATED
        logger.info("{} terminated", self.settings.app_name)

    def start(self) -> None:
        """Let's go!

        Blocks until the service shuts down. Exits the process with status 1
        when an initializer fails.
        """
        self._ensure_configurable()
        try:
            asyncio.run(self.serve())
        except KeyboardInterrupt:
            # uvicorn re-raises the interrupt after its graceful shutdown
            logger.info("{} stopped by interrupt", self.settings.app_name)
        except Exception as exc:
            logger.opt(exception=exc).error(
                "{} failed to start: {}", self.settings.app_name, exc
            )
            sys.exit(EXIT_INITIALIZATION_FAILED)

