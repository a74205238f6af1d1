"""Backend that discards every message."""

from logdispatch.adapters.backends.base import BackendBase
from logdispatch.core.models import LogMessage


class NullBackend(BackendBase):
    """Accepts and drops messages. Observers are still notified."""

    def write(self, message: LogMessage) -> None:
        pass
