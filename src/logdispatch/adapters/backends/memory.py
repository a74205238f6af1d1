"""Ring buffer backend keeping recent messages in memory.

Provides bounded storage that automatically evicts the oldest message
when the buffer is full. Useful for tests and for services that expose
recent log lines without touching disk.
"""

from collections import deque
from collections.abc import Mapping

from logdispatch.adapters.backends.base import BackendBase
from logdispatch.core.config import get_int
from logdispatch.core.errors import WriteError
from logdispatch.core.models import LogMessage

DEFAULT_MAX_SIZE = 1000


class MemoryBackend(BackendBase):
    """Keeps the last ``max_size`` messages.

    Config:
        max_size: Maximum number of messages kept (default 1000).
    """

    def __init__(
        self,
        target: str = "",
        identity: str = "",
        config: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(target, identity, config)
        max_size = get_int(self.config, "max_size", DEFAULT_MAX_SIZE, minimum=1)
        self._buffer: deque[LogMessage] = deque(maxlen=max_size)

    def write(self, message: LogMessage) -> None:
        if not self._opened:
            raise WriteError("memory backend is not open")
        self._buffer.append(message)

    def read(self, since: float = 0) -> list[LogMessage]:
        """Return buffered messages with timestamp > since, oldest first."""
        filtered = [m for m in self._buffer if m.timestamp > since]
        return sorted(filtered, key=lambda m: m.timestamp)

    def clear(self) -> None:
        """Drop all buffered messages."""
        self._buffer.clear()
