"""Dispatcher: logs messages to one backend and fans them out to observers."""

import asyncio
import itertools
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from types import TracebackType
from typing import NewType

from logdispatch.core.errors import (
    DispatcherClosedError,
    InvalidLevelError,
    InvalidObserverError,
    WriteError,
)
from logdispatch.core.models import LogMessage
from logdispatch.core.ports import Backend, LogObserver
from logdispatch.core.priority import Priority, to_priority

logger = logging.getLogger(__name__)

ObserverHandle = NewType("ObserverHandle", int)


class DispatcherState(Enum):
    """Lifecycle state of a Dispatcher."""

    CLOSED = "closed"
    OPEN = "open"


def _wrap_backend_error(exc: Exception) -> WriteError:
    """Turn an untyped backend exception into a WriteError chained to it."""
    error = WriteError(f"backend write failed: {exc!r}")
    error.__cause__ = exc
    return error


@dataclass(frozen=True)
class _Registration:
    observer: LogObserver
    min_priority: Priority


class Dispatcher:
    """Per-identity logger bound to a single backend.

    A Dispatcher starts CLOSED, becomes OPEN once its backend opens, and
    returns to CLOSED for good after close(). Backend I/O is serialized
    per dispatcher, so close() waits for an in-flight write; a log() that
    loses the race against close() raises DispatcherClosedError.

    Observers are notified of every logged message whose priority is at
    least as severe as their threshold, whether or not the backend write
    succeeded.

    Example:
        ```python
        dispatcher = Dispatcher(ConsoleBackend("", "app"), identity="app")
        dispatcher.open()
        dispatcher.attach(RecordingObserver(Priority.WARNING))
        dispatcher.log("disk almost full", Priority.WARNING)
        ```
    """

    def __init__(self, backend: Backend, identity: str = "") -> None:
        self._backend = backend
        self._identity = identity
        self._state = DispatcherState.CLOSED
        self._shut_down = False
        self._io_lock = threading.Lock()
        self._observers_lock = threading.Lock()
        self._observers: dict[ObserverHandle, _Registration] = {}
        self._handles = itertools.count(1)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(backend={type(self._backend).__name__}, "
            f"identity={self._identity!r}, state={self._state.value})"
        )

    @property
    def identity(self) -> str:
        """Label of the log stream this dispatcher represents."""
        return self._identity

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def state(self) -> DispatcherState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is DispatcherState.OPEN

    @property
    def observer_count(self) -> int:
        with self._observers_lock:
            return len(self._observers)

    # --- Lifecycle ---

    def open(self) -> None:
        """Open the backend and move to OPEN.

        Idempotent while open.

        Raises:
            ConnectError: If the backend cannot be opened.
            DispatcherClosedError: If the dispatcher was already closed.
        """
        with self._io_lock:
            if self._shut_down:
                raise DispatcherClosedError(
                    f"dispatcher {self._identity!r} has been closed"
                )
            if self._state is DispatcherState.OPEN:
                return
            self._backend.open()
            self._state = DispatcherState.OPEN

    def close(self) -> None:
        """Close the backend and drop all observers. Safe to call repeatedly."""
        with self._io_lock:
            if self._shut_down:
                return
            self._shut_down = True
            self._state = DispatcherState.CLOSED
            try:
                self._backend.close()
            finally:
                with self._observers_lock:
                    self._observers.clear()

    def __enter__(self) -> "Dispatcher":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # --- Logging ---

    def _build_message(self, text: str, priority: Priority) -> LogMessage:
        return LogMessage(
            text=text,
            priority=to_priority(priority),
            identity=self._identity,
            timestamp=time.time(),
        )

    def _write(self, message: LogMessage) -> None:
        with self._io_lock:
            if self._state is not DispatcherState.OPEN:
                raise DispatcherClosedError(
                    f"dispatcher {self._identity!r} is not open"
                )
            self._backend.write(message)

    def log(self, text: str, priority: Priority = Priority.INFO) -> None:
        """Write a message to the backend, then notify observers.

        Observers are notified even when the write fails; the write error
        is re-raised afterwards.

        Args:
            text: The message text.
            priority: Severity of the message (default INFO).

        Raises:
            InvalidLevelError: If priority is outside the scale.
            WriteError: If the backend failed to deliver the message.
            DispatcherClosedError: If the dispatcher is not open.
        """
        message = self._build_message(text, priority)
        error: WriteError | None = None
        try:
            self._write(message)
        except WriteError as exc:
            error = exc
        except Exception as exc:
            error = _wrap_backend_error(exc)
        self.notify_all(message)
        if error is not None:
            raise error

    async def alog(self, text: str, priority: Priority = Priority.INFO) -> None:
        """Async variant of log().

        Uses the backend's ``awrite`` coroutine when it provides one,
        otherwise runs the blocking write in a worker thread.
        """
        message = self._build_message(text, priority)
        awrite = getattr(self._backend, "awrite", None)
        error: WriteError | None = None
        try:
            if awrite is None:
                await asyncio.to_thread(self._write, message)
            else:
                if self._state is not DispatcherState.OPEN:
                    raise DispatcherClosedError(
                        f"dispatcher {self._identity!r} is not open"
                    )
                await awrite(message)
        except WriteError as exc:
            error = exc
        except Exception as exc:
            error = _wrap_backend_error(exc)
        self.notify_all(message)
        if error is not None:
            raise error

    def emergency(self, text: str) -> None:
        self.log(text, Priority.EMERGENCY)

    def alert(self, text: str) -> None:
        self.log(text, Priority.ALERT)

    def critical(self, text: str) -> None:
        self.log(text, Priority.CRITICAL)

    def error(self, text: str) -> None:
        self.log(text, Priority.ERROR)

    def warning(self, text: str) -> None:
        self.log(text, Priority.WARNING)

    def notice(self, text: str) -> None:
        self.log(text, Priority.NOTICE)

    def info(self, text: str) -> None:
        self.log(text, Priority.INFO)

    def debug(self, text: str) -> None:
        self.log(text, Priority.DEBUG)

    # --- Observers ---

    def attach(self, observer: LogObserver) -> ObserverHandle:
        """Register an observer and return its handle.

        The observer's ``min_priority`` is read once, at attach time.

        Raises:
            InvalidObserverError: If observer has no callable notify() or
                no valid min_priority.
        """
        if not callable(getattr(observer, "notify", None)):
            raise InvalidObserverError(
                f"{type(observer).__name__} has no callable notify()"
            )
        if not hasattr(observer, "min_priority"):
            raise InvalidObserverError(
                f"{type(observer).__name__} does not declare min_priority"
            )
        try:
            threshold = to_priority(observer.min_priority)
        except InvalidLevelError as exc:
            raise InvalidObserverError(str(exc)) from exc

        with self._observers_lock:
            handle = ObserverHandle(next(self._handles))
            self._observers[handle] = _Registration(observer, threshold)
        return handle

    def detach(self, handle: ObserverHandle) -> None:
        """Remove an observer. Unknown or stale handles are ignored."""
        with self._observers_lock:
            self._observers.pop(handle, None)

    def notify_all(self, message: LogMessage) -> None:
        """Send message to every observer whose threshold it satisfies.

        Observers are called in attach order, outside the lock, on a
        snapshot taken at the start of the call. An observer that raises
        is logged and skipped.
        """
        with self._observers_lock:
            registrations = list(self._observers.values())
        for registration in registrations:
            if message.priority > registration.min_priority:
                continue
            try:
                registration.observer.notify(message)
            except Exception:
                logger.exception(
                    "observer %r failed on message from %r",
                    registration.observer,
                    message.identity,
                )

    def is_composite(self) -> bool:
        """Return True if the bound backend aggregates child backends."""
        return self._backend.supports_composite()
