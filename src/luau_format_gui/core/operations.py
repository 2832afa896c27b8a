"""Background operations polled from the UI thread.

Each slow operation kind (open dialog, save dialog, tool download) owns a
:class:`BackgroundOperation`. The UI thread starts it, a dedicated worker
thread runs it to completion and posts exactly one terminal
:class:`Completion` into the operation's inbox, and the UI thread drains
that inbox once per frame with :meth:`BackgroundOperation.poll`.

Lifecycle
---------
::

    IDLE --start()--> IN_FLIGHT --worker posts--> COMPLETED --poll()--> IDLE

``start()`` refuses to spawn while the operation is not idle, which is what
keeps every kind single-flight.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class OperationKind(Enum):
    """The kinds of work that run off the UI thread."""

    OPEN_DIALOG = "open-dialog"
    SAVE_DIALOG = "save-dialog"
    TOOL_DOWNLOAD = "tool-download"


class OperationState(Enum):
    """Lifecycle states for a background operation."""

    IDLE = "idle"
    IN_FLIGHT = "in-flight"
    COMPLETED = "completed"


class OperationCancelled(Exception):
    """Raised by a worker target that noticed its cancel event."""


@dataclass(frozen=True)
class Completion:
    """Terminal message posted by a worker thread."""

    kind: OperationKind
    value: Any = None
    error: str | None = None
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        """True when the worker returned normally."""
        return self.error is None and not self.cancelled


# Worker targets receive the cancel event first, then the start() args
WorkerTarget = Callable[..., Any]


class BackgroundOperation:
    """A single-flight, cancellable task with a one-slot result inbox.

    Args:
        kind: Operation kind, used for thread names and log lines.
    """

    def __init__(self, kind: OperationKind) -> None:
        self._kind = kind
        self._state = OperationState.IDLE
        self._inbox: queue.Queue[Completion] = queue.Queue(maxsize=1)
        self._cancel_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def kind(self) -> OperationKind:
        return self._kind

    @property
    def state(self) -> OperationState:
        """Current state; a posted but unconsumed result reads as COMPLETED."""
        if self._state is OperationState.IN_FLIGHT and not self._inbox.empty():
            return OperationState.COMPLETED
        return self._state

    @property
    def is_in_flight(self) -> bool:
        """True from ``start()`` until the result has been consumed."""
        return self._state is not OperationState.IDLE

    @property
    def thread(self) -> threading.Thread | None:
        """The worker thread of the current or most recent run."""
        return self._thread

    # ------------------------------------------------------------------ #
    # UI-thread API                                                        #
    # ------------------------------------------------------------------ #

    def start(self, target: WorkerTarget, *args: Any) -> bool:
        """Spawn *target* on a new daemon thread unless already in flight.

        The worker is called as ``target(cancel_event, *args)``.

        Returns:
            True if a worker was spawned, False if the trigger was ignored.
        """
        if self.is_in_flight:
            logger.debug("%s already in flight; ignoring trigger", self._kind.value)
            return False

        self._state = OperationState.IN_FLIGHT
        self._cancel_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(target, self._cancel_event, args),
            name=self._kind.value,
            daemon=True,
        )
        self._thread.start()
        logger.debug("Started %s", self._kind.value)
        return True

    def poll(self) -> Completion | None:
        """Consume the terminal message if one has arrived. Never blocks."""
        try:
            completion = self._inbox.get_nowait()
        except queue.Empty:
            return None
        self._state = OperationState.IDLE
        return completion

    def cancel(self) -> None:
        """Ask the running worker to stop at its next checkpoint."""
        self._cancel_event.set()

    def wait(self, timeout: float | None = None) -> Completion | None:
        """Block until the terminal message arrives, then consume it.

        Only the bootstrap uses this; the UI thread always polls.

        Returns:
            The completion, or None if *timeout* elapsed first.
        """
        try:
            completion = self._inbox.get(timeout=timeout)
        except queue.Empty:
            return None
        self._state = OperationState.IDLE
        return completion

    # ------------------------------------------------------------------ #
    # Worker thread                                                        #
    # ------------------------------------------------------------------ #

    def _run(
        self,
        target: WorkerTarget,
        cancel_event: threading.Event,
        args: tuple[Any, ...],
    ) -> None:
        try:
            value = target(cancel_event, *args)
        except OperationCancelled:
            logger.info("%s cancelled", self._kind.value)
            completion = Completion(self._kind, cancelled=True)
        except Exception as exc:
            logger.exception("%s failed", self._kind.value)
            completion = Completion(self._kind, error=str(exc) or exc.__class__.__name__)
        else:
            completion = Completion(self._kind, value=value)
        self._inbox.put(completion)
