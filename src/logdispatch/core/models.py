"""Core domain models for dispatched log data."""

from dataclasses import dataclass

from logdispatch.core.priority import Priority


@dataclass(frozen=True)
class LogMessage:
    """A single message handed to a backend and to observers.

    Attributes:
        text: The message text.
        priority: Severity of the message.
        identity: Label of the dispatcher that emitted it.
        timestamp: Unix timestamp in seconds.
    """

    text: str
    priority: Priority
    identity: str
    timestamp: float
