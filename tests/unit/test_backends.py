"""Tests for the in-process backends: memory, null and composite."""

import time

import pytest

from logdispatch.adapters.backends import CompositeBackend, MemoryBackend, NullBackend
from logdispatch.adapters.backends.base import format_line
from logdispatch.core.errors import ConfigError, ConnectError, WriteError
from logdispatch.core.models import LogMessage
from logdispatch.core.priority import Priority
from logdispatch.core.registry import Registry

pytestmark = [pytest.mark.tier(1)]


def _message(text: str = "x", timestamp: float = 1000.0) -> LogMessage:
    return LogMessage(
        text=text, priority=Priority.INFO, identity="app", timestamp=timestamp
    )


class TestFormatLine:
    """Tests for the shared text line format."""

    def test_contains_identity_priority_and_text(self) -> None:
        message = LogMessage(
            text="disk full", priority=Priority.CRITICAL, identity="app", timestamp=0.0
        )
        stamp = time.strftime("%b %d %H:%M:%S", time.localtime(0.0))
        assert format_line(message) == f"{stamp} app [critical] disk full"


class TestMemoryBackend:
    """Tests for MemoryBackend."""

    @pytest.mark.storage
    def test_write_and_read(self) -> None:
        backend = MemoryBackend()
        backend.open()
        entry = _message()

        backend.write(entry)

        assert backend.read() == [entry]

    @pytest.mark.storage
    def test_read_filters_by_since(self) -> None:
        backend = MemoryBackend()
        backend.open()
        old, new = _message("old", 1000.0), _message("new", 2000.0)
        backend.write(old)
        backend.write(new)

        assert backend.read(since=1000.0) == [new]

    @pytest.mark.storage
    def test_read_orders_by_timestamp(self) -> None:
        backend = MemoryBackend()
        backend.open()
        third, first = _message("third", 3.0), _message("first", 1.0)
        backend.write(third)
        backend.write(first)

        assert backend.read() == [first, third]

    @pytest.mark.storage
    def test_evicts_oldest_when_full(self) -> None:
        backend = MemoryBackend(config={"max_size": "2"})
        backend.open()
        for i in range(3):
            backend.write(_message(f"m{i}", float(i + 1)))

        assert [m.text for m in backend.read()] == ["m1", "m2"]

    def test_rejects_invalid_max_size(self) -> None:
        with pytest.raises(ConfigError):
            MemoryBackend(config={"max_size": "0"})

    def test_write_when_closed_raises(self) -> None:
        with pytest.raises(WriteError):
            MemoryBackend().write(_message())

    def test_open_and_close_are_idempotent(self) -> None:
        backend = MemoryBackend()
        backend.open()
        backend.open()
        assert backend.is_open
        backend.close()
        backend.close()
        assert not backend.is_open

    def test_clear(self) -> None:
        backend = MemoryBackend()
        backend.open()
        backend.write(_message())
        backend.clear()
        assert backend.read() == []

    def test_is_not_composite(self) -> None:
        assert MemoryBackend().supports_composite() is False


class TestNullBackend:
    """Tests for NullBackend."""

    def test_discards_but_observers_still_see_message(self) -> None:
        registry = Registry()
        dispatcher = registry.get_or_create("null", identity="app")
        seen: list[str] = []

        class Observer:
            min_priority = Priority.DEBUG

            def notify(self, message: LogMessage) -> None:
                seen.append(message.text)

        dispatcher.attach(Observer())
        dispatcher.log("dropped")

        assert isinstance(dispatcher.backend, NullBackend)
        assert seen == ["dropped"]
        registry.close()


class TestCompositeBackend:
    """Tests for CompositeBackend."""

    def test_supports_composite(self) -> None:
        assert CompositeBackend().supports_composite() is True

    def test_dispatcher_reports_composite(self) -> None:
        registry = Registry()
        dispatcher = registry.create("composite", identity="app")
        assert dispatcher.is_composite() is True
        dispatcher.close()

    def test_writes_to_every_child(self) -> None:
        composite = CompositeBackend()
        first, second = MemoryBackend(), MemoryBackend()
        composite.add_child(first)
        composite.add_child(second)
        composite.open()
        entry = _message()

        composite.write(entry)

        assert first.read() == [entry]
        assert second.read() == [entry]

    def test_open_and_close_cascade(self) -> None:
        composite = CompositeBackend()
        child = MemoryBackend()
        composite.add_child(child)

        composite.open()
        assert child.is_open
        composite.close()
        assert not child.is_open

    def test_child_added_while_open_is_opened(self) -> None:
        composite = CompositeBackend()
        composite.open()
        child = MemoryBackend()

        composite.add_child(child)

        assert child.is_open

    def test_adding_same_child_twice_is_ignored(self) -> None:
        composite = CompositeBackend()
        child = MemoryBackend()
        composite.add_child(child)
        composite.add_child(child)
        assert composite.children == [child]

    def test_add_child_rejects_non_backend(self) -> None:
        with pytest.raises(TypeError, match="not a Backend"):
            CompositeBackend().add_child(object())  # type: ignore[arg-type]

    def test_remove_child(self) -> None:
        composite = CompositeBackend()
        child = MemoryBackend()
        composite.add_child(child)

        assert composite.remove_child(child) is True
        assert composite.remove_child(child) is False
        assert composite.children == []

    def test_failing_child_does_not_block_others(self, fake_backend) -> None:
        composite = CompositeBackend()
        healthy = MemoryBackend()
        fake_backend.fail_writes = True
        composite.add_child(fake_backend)
        composite.add_child(healthy)
        composite.open()

        with pytest.raises(WriteError, match="1 of 2 child backends failed"):
            composite.write(_message())

        assert len(healthy.read()) == 1

    def test_failed_open_closes_opened_children(self, fake_backend) -> None:
        composite = CompositeBackend()
        first = MemoryBackend()
        fake_backend.fail_open = True
        composite.add_child(first)
        composite.add_child(fake_backend)

        with pytest.raises(ConnectError):
            composite.open()

        assert not first.is_open
        assert not composite.is_open

    def test_write_when_closed_raises(self) -> None:
        with pytest.raises(WriteError):
            CompositeBackend().write(_message())
