"""Backend sending messages to a syslog daemon.

Transport is delegated to the stdlib SysLogHandler: a Unix datagram
socket by default, or UDP when a host is configured.
"""

import logging
import logging.handlers
from collections.abc import Mapping

from logdispatch.adapters.backends.base import BackendBase
from logdispatch.core.config import get_choice, get_int, get_str
from logdispatch.core.errors import ConnectError, WriteError
from logdispatch.core.models import LogMessage
from logdispatch.core.priority import (
    Priority,
    priority_name,
    priority_to_logging_level,
)

DEFAULT_SOCKET = "/dev/log"
DEFAULT_PORT = logging.handlers.SYSLOG_UDP_PORT

# canonical priority name -> syslog keyword understood by SysLogHandler
_SYSLOG_KEYWORDS: dict[str, str] = {
    priority_name(Priority.EMERGENCY): "emerg",
    priority_name(Priority.ALERT): "alert",
    priority_name(Priority.CRITICAL): "crit",
    priority_name(Priority.ERROR): "err",
    priority_name(Priority.WARNING): "warning",
    priority_name(Priority.NOTICE): "notice",
    priority_name(Priority.INFO): "info",
    priority_name(Priority.DEBUG): "debug",
}


class _PrioritySysLogHandler(logging.handlers.SysLogHandler):
    """SysLogHandler that keeps all eight priorities and raises on failure."""

    def mapPriority(self, levelName: str) -> str:  # noqa: N802
        return _SYSLOG_KEYWORDS.get(levelName, "warning")

    def handleError(self, record: logging.LogRecord) -> None:  # noqa: N802
        # Called from inside emit()'s except block.
        raise  # noqa: PLE0704


class SyslogBackend(BackendBase):
    """Sends each message to syslog with its own priority.

    ``target`` is the Unix socket path (default /dev/log) unless a host
    is configured. open() raises ConnectError when the Unix socket cannot
    be connected; UDP has no handshake, so an unreachable host only shows
    up as a WriteError, if at all.

    Config:
        facility: Syslog facility name (default "user").
        host: Send over UDP to this host instead of a Unix socket.
        port: UDP port (default 514).
    """

    def __init__(
        self,
        target: str = "",
        identity: str = "",
        config: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(target, identity, config)
        facilities = tuple(sorted(logging.handlers.SysLogHandler.facility_names))
        self._facility = get_choice(self.config, "facility", facilities, "user")
        host = get_str(self.config, "host", "")
        self._address: str | tuple[str, int]
        if host:
            port = get_int(self.config, "port", DEFAULT_PORT, minimum=1)
            self._address = (host, port)
        else:
            self._address = target or DEFAULT_SOCKET
        self._handler: _PrioritySysLogHandler | None = None

    def _open(self) -> None:
        try:
            handler = _PrioritySysLogHandler(
                address=self._address, facility=self._facility
            )
        except OSError as exc:
            raise ConnectError(
                f"cannot reach syslog at {self._address!r}: {exc}"
            ) from exc
        # SysLogHandler ignores a failed Unix socket connect and leaves the
        # socket closed.
        sock = getattr(handler, "socket", None)
        if handler.unixsocket and (sock is None or sock.fileno() == -1):
            handler.close()
            raise ConnectError(f"cannot reach syslog at {self._address!r}")
        handler.setFormatter(logging.Formatter("%(message)s"))
        if self.identity:
            handler.ident = f"{self.identity}: "
        self._handler = handler

    def _close(self) -> None:
        if self._handler is not None:
            self._handler.close()
            self._handler = None

    def write(self, message: LogMessage) -> None:
        if self._handler is None:
            raise WriteError("syslog backend is not open")
        record = logging.LogRecord(
            name=message.identity,
            level=priority_to_logging_level(message.priority),
            pathname="",
            lineno=0,
            msg=message.text,
            args=None,
            exc_info=None,
        )
        record.created = message.timestamp
        record.levelname = priority_name(message.priority)
        try:
            self._handler.emit(record)
        except Exception as exc:
            raise WriteError(
                f"cannot send to syslog at {self._address!r}: {exc}"
            ) from exc
