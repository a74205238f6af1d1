"""Shared test fixtures for all test modules."""

import time
from collections.abc import Iterator, Mapping
from pathlib import Path

import pytest

from logdispatch.core.dispatcher import Dispatcher
from logdispatch.core.errors import ConnectError, WriteError
from logdispatch.core.models import LogMessage
from logdispatch.core.registry import BackendTable


class FakeBackend:
    """Backend double that records calls and fails on request."""

    def __init__(
        self,
        target: str = "",
        identity: str = "",
        config: Mapping[str, str] | None = None,
    ) -> None:
        self.target = target
        self.identity = identity
        self.config = dict(config or {})
        self.open_calls = 0
        self.close_calls = 0
        self.written: list[LogMessage] = []
        self.fail_open = False
        self.fail_writes = False
        self.composite = False
        self.open_delay = 0.0

    def open(self) -> None:
        self.open_calls += 1
        if self.open_delay:
            time.sleep(self.open_delay)
        if self.fail_open:
            raise ConnectError("connection refused")

    def write(self, message: LogMessage) -> None:
        if self.fail_writes:
            raise WriteError("disk full")
        self.written.append(message)

    def close(self) -> None:
        self.close_calls += 1

    def supports_composite(self) -> bool:
        return self.composite


class FakeBackendFactory:
    """Backend constructor that remembers every backend it built."""

    def __init__(self, open_delay: float = 0.0) -> None:
        self.created: list[FakeBackend] = []
        self.open_delay = open_delay

    def __call__(
        self, target: str, identity: str, config: Mapping[str, str]
    ) -> FakeBackend:
        backend = FakeBackend(target, identity, config)
        backend.open_delay = self.open_delay
        self.created.append(backend)
        return backend


@pytest.fixture
def fake_backend() -> FakeBackend:
    """A fresh, unopened fake backend."""
    return FakeBackend(identity="test")


@pytest.fixture
def dispatcher(fake_backend: FakeBackend) -> Iterator[Dispatcher]:
    """An open dispatcher bound to the fake backend."""
    d = Dispatcher(fake_backend, identity="test")
    d.open()
    yield d
    d.close()


@pytest.fixture
def fake_factory() -> FakeBackendFactory:
    """Factory registered as the "fake" backend type."""
    return FakeBackendFactory()


@pytest.fixture
def fake_table(fake_factory: FakeBackendFactory) -> BackendTable:
    """Backend table containing only the fake backend."""
    return BackendTable({"fake": fake_factory})


@pytest.fixture
def log_file_path(tmp_path: Path) -> str:
    """Provide a temporary path for file backend tests."""
    return str(tmp_path / "app.log")


@pytest.fixture
def sql_db_path(tmp_path: Path) -> str:
    """Provide a temporary database path for SQL backend tests."""
    return str(tmp_path / "logs.db")
