"""Pluggable logging façade with observer fan-out."""

from logdispatch.adapters.logging import DispatcherHandler
from logdispatch.core.dispatcher import Dispatcher, DispatcherState, ObserverHandle
from logdispatch.core.errors import (
    ConfigError,
    ConnectError,
    DispatchError,
    DispatcherClosedError,
    InvalidLevelError,
    InvalidObserverError,
    UnknownBackendError,
    WriteError,
)
from logdispatch.core.models import LogMessage
from logdispatch.core.observers import CallbackObserver, Observer, RecordingObserver
from logdispatch.core.ports import Backend, LogObserver
from logdispatch.core.priority import (
    Priority,
    priority_from_name,
    priority_name,
    to_priority,
)
from logdispatch.core.registry import (
    BackendTable,
    Registry,
    default_backends,
    signature,
)

__all__ = [
    "Backend",
    "BackendTable",
    "CallbackObserver",
    "ConfigError",
    "ConnectError",
    "DispatchError",
    "Dispatcher",
    "DispatcherClosedError",
    "DispatcherHandler",
    "DispatcherState",
    "InvalidLevelError",
    "InvalidObserverError",
    "LogMessage",
    "LogObserver",
    "Observer",
    "ObserverHandle",
    "Priority",
    "RecordingObserver",
    "Registry",
    "UnknownBackendError",
    "WriteError",
    "default_backends",
    "priority_from_name",
    "priority_name",
    "signature",
    "to_priority",
]
