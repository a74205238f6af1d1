"""Backend writing one line per message to stdout or stderr."""

import sys
from collections.abc import Mapping
from typing import TextIO

from logdispatch.adapters.backends.base import BackendBase, format_line
from logdispatch.core.config import get_choice
from logdispatch.core.errors import WriteError
from logdispatch.core.models import LogMessage


class ConsoleBackend(BackendBase):
    """Writes messages to a standard stream.

    The stream is resolved when the backend opens, so replacing
    ``sys.stderr``/``sys.stdout`` beforehand (as test capture does) works.

    Config:
        stream: "stderr" (default) or "stdout".
    """

    def __init__(
        self,
        target: str = "",
        identity: str = "",
        config: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(target, identity, config)
        self._stream_name = get_choice(
            self.config, "stream", ("stderr", "stdout"), "stderr"
        )
        self._stream: TextIO | None = None

    def _open(self) -> None:
        self._stream = sys.stdout if self._stream_name == "stdout" else sys.stderr

    def _close(self) -> None:
        self._stream = None

    def write(self, message: LogMessage) -> None:
        if self._stream is None:
            raise WriteError("console backend is not open")
        try:
            self._stream.write(format_line(message) + "\n")
            self._stream.flush()
        except (OSError, ValueError) as exc:
            raise WriteError(f"cannot write to {self._stream_name}: {exc}") from exc
