"""Port interfaces for backends and observers.

These protocols define the contracts that adapters must implement.
The dispatcher depends only on these interfaces, not on concrete sinks.
"""

from typing import Protocol, runtime_checkable

from logdispatch.core.models import LogMessage
from logdispatch.core.priority import Priority


@runtime_checkable
class Backend(Protocol):
    """Port for a log sink.

    Adapters implementing this protocol deliver messages somewhere.
    Examples: ConsoleBackend, FileBackend, SQLBackend, CompositeBackend.
    """

    def open(self) -> None:
        """Establish the underlying channel.

        Calling open on an already open backend is a no-op.

        Raises:
            ConnectError: If the channel cannot be established.
        """
        ...

    def write(self, message: LogMessage) -> None:
        """Deliver a message to the sink.

        Raises:
            WriteError: If delivery fails.
        """
        ...

    def close(self) -> None:
        """Release underlying resources. Safe to call more than once."""
        ...

    def supports_composite(self) -> bool:
        """Return True if this backend aggregates child backends."""
        ...


@runtime_checkable
class LogObserver(Protocol):
    """Port for components notified of every dispatched message.

    An observer receives messages whose priority is at least as severe
    as its ``min_priority`` (``message.priority <= min_priority``).
    """

    min_priority: Priority

    def notify(self, message: LogMessage) -> None:
        """Receive a dispatched message."""
        ...
