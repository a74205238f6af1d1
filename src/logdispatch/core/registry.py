"""Backend table and the Registry that builds and shares Dispatchers."""

import hashlib
import logging
import threading
from collections.abc import Callable, Iterator, Mapping

from logdispatch.core.dispatcher import Dispatcher
from logdispatch.core.errors import UnknownBackendError
from logdispatch.core.ports import Backend

logger = logging.getLogger(__name__)

BackendFactory = Callable[[str, str, Mapping[str, str]], Backend]


class BackendTable:
    """Mapping from lowercase backend type names to constructors.

    A constructor takes ``(target, identity, config)`` and returns a
    Backend. Names are matched case-insensitively.
    """

    def __init__(self, factories: Mapping[str, BackendFactory] | None = None) -> None:
        self._factories: dict[str, BackendFactory] = {}
        for name, factory in (factories or {}).items():
            self.register(name, factory)

    def register(self, name: str, factory: BackendFactory) -> None:
        """Register a backend constructor under name.

        Raises:
            TypeError: If factory is not callable.
            ValueError: If name is empty or already registered.
        """
        if not callable(factory):
            raise TypeError("backend factory must be callable")
        key = name.strip().lower()
        if not key:
            raise ValueError("backend name must not be empty")
        if key in self._factories:
            raise ValueError(f"backend {key!r} is already registered")
        self._factories[key] = factory

    def lookup(self, name: str) -> BackendFactory | None:
        """Return the constructor for name, or None if it is not registered."""
        return self._factories.get(name.strip().lower())

    def names(self) -> list[str]:
        """Registered backend names, sorted."""
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._factories)


def default_backends() -> BackendTable:
    """Return a fresh table holding the built-in backends."""
    # Deferred so the core does not import adapters at module load.
    from logdispatch.adapters.backends import BUILTIN_BACKENDS

    return BackendTable(BUILTIN_BACKENDS)


def signature(
    backend_type: str,
    target: str = "",
    identity: str = "",
    config: Mapping[str, str] | None = None,
) -> str:
    """Compute the cache key for a backend configuration.

    The key is a SHA-256 digest over the lowercased type, target,
    identity and the config pairs sorted by key. Field boundaries are
    kept unambiguous by encoding every part with repr().

    Returns:
        Hex digest string.
    """
    parts = [backend_type.strip().lower(), target, identity]
    parts.extend(
        f"{key!r}={value!r}" for key, value in sorted((config or {}).items())
    )
    raw = "][".join(repr(part) for part in parts)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class Registry:
    """Factory and shared-instance cache for Dispatchers.

    create() always builds a new Dispatcher; get_or_create() returns the
    Dispatcher already built for the same configuration signature. The
    cache lives as long as the Registry, so pass the Registry to the code
    that needs it instead of relying on a global.

    Args:
        backends: Table of available backend types. Defaults to the
            built-in backends.

    Example:
        ```python
        registry = Registry()
        log = registry.get_or_create("console", identity="app")
        log.info("started")
        ```
    """

    def __init__(self, backends: BackendTable | None = None) -> None:
        self._backends = backends if backends is not None else default_backends()
        self._lock = threading.Lock()
        self._instances: dict[str, Dispatcher] = {}
        self._signature_locks: dict[str, threading.Lock] = {}

    @property
    def backends(self) -> BackendTable:
        return self._backends

    def create(
        self,
        backend_type: str,
        target: str = "",
        identity: str = "",
        config: Mapping[str, str] | None = None,
    ) -> Dispatcher:
        """Build and open a new Dispatcher for a backend type.

        Args:
            backend_type: Registered backend name (case-insensitive).
            target: Backend-specific destination (file path, table, socket).
            identity: Label reported with every message.
            config: Backend-specific options.

        Returns:
            An open Dispatcher.

        Raises:
            UnknownBackendError: If backend_type is not registered.
            ConnectError: If the backend cannot be opened.
            ConfigError: If the backend rejects its config.
        """
        factory = self._backends.lookup(backend_type)
        if factory is None:
            raise UnknownBackendError(backend_type)
        backend = factory(target, identity, dict(config or {}))
        dispatcher = Dispatcher(backend, identity)
        dispatcher.open()
        logger.debug(
            "created %s backend for identity %r (target %r)",
            backend_type,
            identity,
            target,
        )
        return dispatcher

    def get_or_create(
        self,
        backend_type: str,
        target: str = "",
        identity: str = "",
        config: Mapping[str, str] | None = None,
    ) -> Dispatcher:
        """Return the shared Dispatcher for a configuration, creating it once.

        Concurrent first requests for the same signature construct (and
        open) exactly one Dispatcher. A failed creation is not cached.

        Raises:
            UnknownBackendError: If backend_type is not registered.
            ConnectError: If the backend cannot be opened.
        """
        key = signature(backend_type, target, identity, config)
        with self._lock:
            existing = self._instances.get(key)
            if existing is not None:
                return existing
            signature_lock = self._signature_locks.setdefault(key, threading.Lock())

        with signature_lock:
            with self._lock:
                existing = self._instances.get(key)
                if existing is not None:
                    return existing
            dispatcher = self.create(backend_type, target, identity, config)
            with self._lock:
                self._instances[key] = dispatcher
                self._signature_locks.pop(key, None)
        return dispatcher

    def close(self) -> None:
        """Close every cached Dispatcher and empty the cache.

        A get_or_create() still constructing when close() runs completes
        and caches its Dispatcher, so a later close() shuts it down.
        Requests for that signature keep waiting on the same creation.
        """
        with self._lock:
            dispatchers = list(self._instances.values())
            self._instances.clear()
        for dispatcher in dispatchers:
            dispatcher.close()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._instances

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)
