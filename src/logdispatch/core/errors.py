"""Error taxonomy for the dispatch core.

Every failure the core reports is a subclass of DispatchError. Some also
derive from the matching builtin so callers can catch them idiomatically
(e.g. ``except ValueError`` around priority parsing).
"""


class DispatchError(Exception):
    """Base class for all logdispatch errors."""


class UnknownBackendError(DispatchError, LookupError):
    """Raised when a backend type has no registered constructor."""

    def __init__(self, backend_type: str) -> None:
        super().__init__(f"unknown backend type: {backend_type!r}")
        self.backend_type = backend_type


class ConnectError(DispatchError):
    """Raised when a backend cannot open its underlying channel."""


class WriteError(DispatchError):
    """Raised when a backend fails to deliver a message."""


class DispatcherClosedError(WriteError):
    """Raised when logging through a dispatcher that is not open."""


class InvalidObserverError(DispatchError, TypeError):
    """Raised when attaching an object that cannot act as an observer."""


class InvalidLevelError(DispatchError, ValueError):
    """Raised for a priority value outside the defined scale."""


class ConfigError(DispatchError, ValueError):
    """Raised when a backend option in the config mapping is malformed."""
