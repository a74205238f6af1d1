"""Backend that fans each write out to several child backends."""

from collections.abc import Mapping

from logdispatch.adapters.backends.base import BackendBase
from logdispatch.core.errors import ConnectError, WriteError
from logdispatch.core.models import LogMessage
from logdispatch.core.ports import Backend


class CompositeBackend(BackendBase):
    """Owns child backends and writes every message to all of them.

    Children added while the composite is open are opened immediately.
    A failing child does not stop delivery to the others; after trying
    all of them a single WriteError lists the failures.

    Example:
        ```python
        log = registry.create("composite", identity="app")
        log.backend.add_child(ConsoleBackend("", "app"))
        log.backend.add_child(FileBackend("/var/log/app.log", "app"))
        ```
    """

    def __init__(
        self,
        target: str = "",
        identity: str = "",
        config: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(target, identity, config)
        self._children: list[Backend] = []

    def supports_composite(self) -> bool:
        return True

    @property
    def children(self) -> list[Backend]:
        return list(self._children)

    def add_child(self, child: Backend) -> None:
        """Add a child backend, opening it if the composite is open.

        Raises:
            TypeError: If child does not implement the Backend protocol.
            ConnectError: If the child cannot be opened.
        """
        if not isinstance(child, Backend):
            raise TypeError(f"{type(child).__name__} is not a Backend")
        if child is self or child in self._children:
            return
        if self._opened:
            child.open()
        self._children.append(child)

    def remove_child(self, child: Backend) -> bool:
        """Remove a child backend without closing it.

        Returns:
            True if the child was present.
        """
        try:
            self._children.remove(child)
        except ValueError:
            return False
        return True

    def _open(self) -> None:
        opened: list[Backend] = []
        try:
            for child in self._children:
                child.open()
                opened.append(child)
        except ConnectError:
            for child in opened:
                child.close()
            raise

    def _close(self) -> None:
        for child in self._children:
            child.close()

    def write(self, message: LogMessage) -> None:
        if not self._opened:
            raise WriteError("composite backend is not open")
        failures: list[str] = []
        for child in self._children:
            try:
                child.write(message)
            except WriteError as exc:
                failures.append(f"{child!r}: {exc}")
        if failures:
            raise WriteError(
                f"{len(failures)} of {len(self._children)} child backends failed: "
                + "; ".join(failures)
            )
