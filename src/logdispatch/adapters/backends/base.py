"""Base class for the built-in backends."""

import time
from collections.abc import Mapping

from logdispatch.core.models import LogMessage
from logdispatch.core.priority import priority_name

_TIME_FORMAT = "%b %d %H:%M:%S"


def format_line(message: LogMessage) -> str:
    """Render a message as ``<time> <identity> [<priority>] <text>``."""
    stamp = time.strftime(_TIME_FORMAT, time.localtime(message.timestamp))
    return (
        f"{stamp} {message.identity} "
        f"[{priority_name(message.priority)}] {message.text}"
    )


class BackendBase:
    """Common state and open/close bookkeeping for backends.

    Subclasses implement _open(), _close() and write(). open() and close()
    are idempotent: _open() runs only when closed, _close() only when open.

    Args:
        target: Backend-specific destination (path, socket, table).
        identity: Label of the log stream.
        config: Backend-specific options.
    """

    def __init__(
        self,
        target: str = "",
        identity: str = "",
        config: Mapping[str, str] | None = None,
    ) -> None:
        self.target = target
        self.identity = identity
        self.config = dict(config or {})
        self._opened = False

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"{name}(target={self.target!r}, identity={self.identity!r})"

    @property
    def is_open(self) -> bool:
        return self._opened

    def open(self) -> None:
        """Open the backend if it is not open already."""
        if self._opened:
            return
        self._open()
        self._opened = True

    def close(self) -> None:
        """Close the backend if it is open."""
        if not self._opened:
            return
        self._opened = False
        self._close()

    def supports_composite(self) -> bool:
        return False

    def _open(self) -> None:
        """Acquire resources. Must be overridden by subclasses that need any."""

    def _close(self) -> None:
        """Release resources. Must be overridden by subclasses that need any."""

    def write(self, message: LogMessage) -> None:
        raise NotImplementedError
