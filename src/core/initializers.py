"""Ordered asynchronous initialization of external subsystems.

External components (database connections, caches, remote configuration)
register setup steps on the service before it starts. The sequencer keeps
them in an explicit list and runs them in a single pass, awaiting each one
before starting the next, so a step can rely on everything registered before
it being ready.

Guarantees:
- **Registration order**: steps run exactly in the order they were registered
- **Sequential**: a step starts only after its predecessor's outcome is known
- **Short-circuit**: the first failure propagates unchanged; later steps are
  never started
- **Single run**: the sequence runs once; there is no re-initialization

No timeout or cancellation is applied here. A step that never completes keeps
the service from ever listening; steps impose their own timeouts.
"""

import inspect
from collections.abc import Callable, Iterator

from loguru import logger

from src.core.exceptions import ServiceStateError
from src.core.types import InitializerTask


def _task_name(task: Callable[..., object]) -> str:
    return getattr(task, "__qualname__", None) or repr(task)


class InitializerSequencer[S]:
    """Accumulates initializer tasks and runs them in registration order.

    Each task is called with the service passed to :meth:`run_all` and may
    return a plain value or an awaitable; awaitables are awaited before the
    next task starts.
    """

    def __init__(self) -> None:
        self._tasks: list[InitializerTask[S]] = []
        self._started = False

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[InitializerTask[S]]:
        return iter(tuple(self._tasks))

    @property
    def started(self) -> bool:
        """Whether :meth:`run_all` has been invoked."""
        return self._started

    def register(self, task: InitializerTask[S]) -> None:
        """Append a task to the pending sequence without running it.

        Args:
            task: Callable receiving the service.

        Raises:
            ServiceStateError: If the sequence has already started running.
            TypeError: If ``task`` is not callable.
        """
        if self._started:
            msg = "Initializers cannot be registered once initialization started"
            raise ServiceStateError(msg)
        if not callable(task):
            msg = f"Initializer must be callable, got {type(task).__name__}"
            raise TypeError(msg)

        self._tasks.append(task)
        logger.debug(
            "Registered initializer {} (position {})", _task_name(task), len(self)
        )

    async def run_all(self, service: S) -> None:
        """Run every registered task in order, awaiting each one.

        Args:
            service: The service handed to each task.

        Raises:
            ServiceStateError: If the sequence already ran.
            Exception: The first task failure, unchanged.
        """
        if self._started:
            msg = "Initializers already ran; re-initialization is not supported"
            raise ServiceStateError(msg)
        self._started = True

        total = len(self._tasks)
        for position, task in enumerate(self._tasks, start=1):
            name = _task_name(task)
            logger.debug("Running initializer {} ({}/{})", name, position, total)

            try:
                outcome = task(service)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                logger.error(
                    "Initializer {} failed ({}/{}), skipping the rest",
                    name,
                    position,
                    total,
                )
                raise

            logger.debug("Initializer {} completed", name)

        logger.info("Initializers ready ({} run)", total)
