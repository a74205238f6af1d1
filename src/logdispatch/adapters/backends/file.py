"""Backend appending messages to a text file."""

import os
from collections.abc import Mapping
from typing import TextIO

from logdispatch.adapters.backends.base import BackendBase, format_line
from logdispatch.core.config import get_bool, get_choice, get_int
from logdispatch.core.encoding.ndjson import encode_message
from logdispatch.core.errors import ConfigError, ConnectError, WriteError
from logdispatch.core.models import LogMessage


class FileBackend(BackendBase):
    """Writes one line per message to the file named by ``target``.

    Config:
        append: Keep existing content (default "true").
        mode: Octal permissions applied when the file is created
            (default "0644").
        format: "text" (default) or "ndjson".
    """

    def __init__(
        self,
        target: str = "",
        identity: str = "",
        config: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(target, identity, config)
        if not target:
            raise ConfigError("file backend requires a target path")
        self._append = get_bool(self.config, "append", True)
        self._mode = get_int(self.config, "mode", 0o644, base=8, minimum=0)
        self._format = get_choice(self.config, "format", ("text", "ndjson"), "text")
        self._fp: TextIO | None = None

    def _open(self) -> None:
        created = not os.path.exists(self.target)
        try:
            self._fp = open(  # noqa: SIM115
                self.target, "a" if self._append else "w", encoding="utf-8"
            )
            if created:
                os.chmod(self.target, self._mode)
        except OSError as exc:
            if self._fp is not None:
                self._fp.close()
                self._fp = None
            raise ConnectError(f"cannot open log file {self.target!r}: {exc}") from exc

    def _close(self) -> None:
        if self._fp is not None:
            self._fp.close()
            self._fp = None

    def write(self, message: LogMessage) -> None:
        if self._fp is None:
            raise WriteError(f"log file {self.target!r} is not open")
        if self._format == "ndjson":
            line = encode_message(message)
        else:
            line = format_line(message)
        try:
            self._fp.write(line + "\n")
            self._fp.flush()
        except (OSError, ValueError) as exc:
            raise WriteError(f"cannot write to {self.target!r}: {exc}") from exc
