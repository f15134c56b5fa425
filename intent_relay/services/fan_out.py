"""Fan-out executor: concurrent dispatch with index-aligned gather.

Each sub-request runs on its own worker thread when more than one is
dispatched. A task's outcome is always captured as a :class:`SubResult`, so a
slow or failing handler never cancels or aborts its siblings. The gather step
waits for every task and writes each result into the slot recorded at
submission time, which restores input order regardless of completion order.

The request's cancel event is bound in a context variable while a task runs,
so handlers can check it between backend calls and fan-outs nested inside a
handler inherit it without it being passed down explicitly.
"""

from __future__ import annotations

import contextvars
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from contextlib import contextmanager
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterator, Optional, Sequence, cast

from intent_relay.core.config import config
from intent_relay.core.intents import ErrorKind, SubRequest, SubResult
from intent_relay.core.logging import get_logger, task_index_context
from intent_relay.core.ports import Handler
from intent_relay.services.task_registry import TaskRegistry

logger = get_logger(__name__)

SubTask = Callable[[], SubResult]

CANCELLED_DETAIL = "request was cancelled before this task started"

_cancel_event: contextvars.ContextVar[Optional[threading.Event]] = contextvars.ContextVar(
    "cancel_event", default=None
)


def current_cancel_event() -> Optional[threading.Event]:
    """Return the cancel event of the request whose task is running, if any."""
    return _cancel_event.get()


def is_cancelled() -> bool:
    """True when the running task belongs to a request that has been cancelled."""
    event = _cancel_event.get()
    return event is not None and event.is_set()


@contextmanager
def cancel_event_context(event: Optional[threading.Event]) -> Iterator[None]:
    """Bind ``event`` as the current request's cancel event."""
    token = _cancel_event.set(event)
    try:
        yield
    finally:
        _cancel_event.reset(token)


@dataclass(slots=True, frozen=True)
class DispatchRecord:
    """Correlation between a submitted task and its slot in the output."""

    index: int
    label: str


def _execute_handler(handler: Handler, request: SubRequest) -> SubResult:
    return handler.execute(request.description)


class FanOutExecutor:
    """Run independent sub-tasks and gather their results in input order."""

    def __init__(
        self,
        registry: TaskRegistry,
        *,
        max_workers: int | None = None,
        thread_name_prefix: str = "fan-out",
    ) -> None:
        self._registry = registry
        self._max_workers = max_workers or config.RELAY_FAN_OUT_MAX_WORKERS
        self._thread_name_prefix = thread_name_prefix

    @property
    def registry(self) -> TaskRegistry:
        """Registry used to resolve sub-request handlers."""
        return self._registry

    def dispatch(
        self,
        requests: Sequence[SubRequest],
        cancel_event: Optional[threading.Event] = None,
    ) -> list[SubResult]:
        """Execute ``requests`` and return one result per request, index-aligned.

        Handlers are resolved before any work starts so an unregistered kind
        raises :class:`FatalConfigurationError` without launching tasks.
        """
        handlers = [self._registry.resolve(request.kind) for request in requests]
        tasks: list[SubTask] = [
            partial(_execute_handler, handler, request)
            for handler, request in zip(handlers, requests)
        ]
        labels = [request.kind.value for request in requests]
        return self.run_all(tasks, labels=labels, cancel_event=cancel_event)

    def run_all(
        self,
        tasks: Sequence[SubTask],
        *,
        labels: Optional[Sequence[str]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> list[SubResult]:
        """Run zero-argument sub-tasks and gather their results in input order.

        Without an explicit ``cancel_event`` the one bound by an enclosing task is
        used, so nested fan-outs stop with their parent request.
        """
        if cancel_event is None:
            cancel_event = current_cancel_event()
        records = [
            DispatchRecord(index=index, label=labels[index] if labels else f"task-{index}")
            for index in range(len(tasks))
        ]
        if not tasks:
            return []
        if len(tasks) == 1:
            logger.info("[fan-out] Single sub-task (%s); running inline", records[0].label)
            return [self._run_task(records[0], tasks[0], cancel_event)]

        workers = min(len(tasks), self._max_workers)
        logger.info(
            "[fan-out] Dispatching %d sub-tasks on %d workers: %s",
            len(tasks),
            workers,
            [record.label for record in records],
        )
        results: list[Optional[SubResult]] = [None] * len(tasks)
        started = time.perf_counter()
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix=self._thread_name_prefix
        ) as pool:
            submitted: dict[Future[SubResult], DispatchRecord] = {}
            for record, task in zip(records, tasks):
                # Each task gets its own context copy so correlation ids follow it.
                context = contextvars.copy_context()
                future = pool.submit(context.run, self._run_task, record, task, cancel_event)
                submitted[future] = record
            done, _ = wait(submitted)
            for future in done:
                results[submitted[future].index] = future.result()

        failures = sum(1 for result in results if result is not None and not result.is_success)
        logger.info(
            "[fan-out] Gathered %d results (%d failed) in %.1f ms",
            len(results),
            failures,
            (time.perf_counter() - started) * 1000.0,
        )
        return cast(list[SubResult], results)

    @staticmethod
    def _run_task(
        record: DispatchRecord,
        task: SubTask,
        cancel_event: Optional[threading.Event],
    ) -> SubResult:
        with task_index_context(record.index), cancel_event_context(cancel_event):
            if cancel_event is not None and cancel_event.is_set():
                logger.info("[fan-out] Skipping %s; request cancelled", record.label)
                return SubResult.err(ErrorKind.CANCELLED, CANCELLED_DETAIL)
            started = time.perf_counter()
            try:
                result = task()
            except Exception as exc:  # pylint: disable=broad-except
                logger.error(
                    "[fan-out] Sub-task %s raised past its handler boundary",
                    record.label,
                    exc_info=True,
                )
                return SubResult.err(ErrorKind.HANDLER_FAILURE, str(exc) or type(exc).__name__)
            if not isinstance(result, SubResult):
                logger.error(
                    "[fan-out] Sub-task %s returned %s instead of a SubResult",
                    record.label,
                    type(result).__name__,
                )
                return SubResult.err(
                    ErrorKind.MALFORMED_OUTPUT, f"{record.label} returned an invalid result"
                )
            logger.info(
                "[fan-out] Sub-task %s finished (success=%s) in %.1f ms",
                record.label,
                result.is_success,
                (time.perf_counter() - started) * 1000.0,
            )
            return result


__all__ = [
    "CANCELLED_DETAIL",
    "DispatchRecord",
    "FanOutExecutor",
    "SubTask",
    "cancel_event_context",
    "current_cancel_event",
    "is_cancelled",
]
