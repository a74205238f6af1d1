"""Ready-made observers for attaching to a Dispatcher."""

from collections import deque
from collections.abc import Callable

from logdispatch.core.models import LogMessage
from logdispatch.core.priority import Priority, to_priority


class Observer:
    """Base class for observers.

    Subclasses override notify(). The default threshold is INFO, so
    DEBUG messages are skipped unless a lower threshold is requested.

    Args:
        min_priority: Least severe priority this observer accepts.
    """

    def __init__(self, min_priority: Priority = Priority.INFO) -> None:
        self.min_priority = to_priority(min_priority)

    def notify(self, message: LogMessage) -> None:
        """Receive a dispatched message."""
        raise NotImplementedError


class CallbackObserver(Observer):
    """Observer that forwards each message to a callable.

    Example:
        ```python
        dispatcher.attach(CallbackObserver(print, Priority.ERROR))
        ```
    """

    def __init__(
        self,
        callback: Callable[[LogMessage], None],
        min_priority: Priority = Priority.INFO,
    ) -> None:
        if not callable(callback):
            raise TypeError("callback must be callable")
        super().__init__(min_priority)
        self._callback = callback

    def notify(self, message: LogMessage) -> None:
        self._callback(message)


class RecordingObserver(Observer):
    """Observer that keeps the most recent messages it was sent.

    Stores messages in a bounded buffer; when full, the oldest message
    is evicted. Useful in tests and for "last N errors" displays.

    Args:
        min_priority: Least severe priority this observer accepts.
        max_size: Maximum number of messages kept, or None for unbounded.
    """

    def __init__(
        self,
        min_priority: Priority = Priority.DEBUG,
        max_size: int | None = None,
    ) -> None:
        super().__init__(min_priority)
        self._messages: deque[LogMessage] = deque(maxlen=max_size)

    def notify(self, message: LogMessage) -> None:
        self._messages.append(message)

    @property
    def messages(self) -> list[LogMessage]:
        """Messages received so far, oldest first."""
        return list(self._messages)

    def clear(self) -> None:
        """Forget all recorded messages."""
        self._messages.clear()
