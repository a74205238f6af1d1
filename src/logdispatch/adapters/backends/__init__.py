"""Built-in backends and the table that names them."""

from collections.abc import Mapping

from logdispatch.adapters.backends.composite import CompositeBackend
from logdispatch.adapters.backends.console import ConsoleBackend
from logdispatch.adapters.backends.file import FileBackend
from logdispatch.adapters.backends.memory import MemoryBackend
from logdispatch.adapters.backends.null import NullBackend
from logdispatch.adapters.backends.sql import SQLBackend
from logdispatch.adapters.backends.syslog import SyslogBackend
from logdispatch.core.registry import BackendFactory

BUILTIN_BACKENDS: Mapping[str, BackendFactory] = {
    "composite": CompositeBackend,
    "console": ConsoleBackend,
    "file": FileBackend,
    "memory": MemoryBackend,
    "null": NullBackend,
    "sql": SQLBackend,
    "syslog": SyslogBackend,
}

__all__ = [
    "BUILTIN_BACKENDS",
    "CompositeBackend",
    "ConsoleBackend",
    "FileBackend",
    "MemoryBackend",
    "NullBackend",
    "SQLBackend",
    "SyslogBackend",
]
