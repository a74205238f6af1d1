"""BDD step definitions for dispatch features."""

from collections.abc import Iterator
from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from logdispatch.core.dispatcher import Dispatcher
from logdispatch.core.errors import DispatchError, UnknownBackendError, WriteError
from logdispatch.core.models import LogMessage
from logdispatch.core.observers import RecordingObserver
from logdispatch.core.priority import priority_from_name
from logdispatch.core.registry import Registry


@dataclass
class DispatchScenarioContext:
    """Shared state between steps in a dispatch scenario."""

    registry: Registry | None = None
    dispatcher: Dispatcher | None = None
    other: Dispatcher | None = None
    observer: RecordingObserver | None = None
    error: DispatchError | None = None
    cleanup: list[Dispatcher] = field(default_factory=list)


@pytest.fixture
def ctx() -> Iterator[DispatchScenarioContext]:
    """Fresh scenario context for each test."""
    context = DispatchScenarioContext()
    yield context
    for dispatcher in context.cleanup:
        dispatcher.close()
    if context.registry is not None:
        context.registry.close()


# === Background Steps ===


@given("a registry with the built-in backends")
def given_registry(ctx: DispatchScenarioContext) -> None:
    ctx.registry = Registry()


# === Setup Steps ===


@given(parsers.parse('a shared "{backend_type}" dispatcher for identity "{identity}"'))
def given_shared_dispatcher(
    ctx: DispatchScenarioContext, backend_type: str, identity: str
) -> None:
    assert ctx.registry is not None
    ctx.dispatcher = ctx.registry.get_or_create(backend_type, "", identity, {})


@given("a dispatcher whose backend rejects every write")
def given_failing_dispatcher(ctx: DispatchScenarioContext, fake_backend) -> None:
    fake_backend.fail_writes = True
    ctx.dispatcher = Dispatcher(fake_backend, identity="broken")
    ctx.dispatcher.open()
    ctx.cleanup.append(ctx.dispatcher)


@given(parsers.parse('an observer with threshold "{threshold}"'))
def given_observer(ctx: DispatchScenarioContext, threshold: str) -> None:
    assert ctx.dispatcher is not None
    ctx.observer = RecordingObserver(priority_from_name(threshold))
    ctx.dispatcher.attach(ctx.observer)


# === Action Steps ===


@when(parsers.parse('"{text}" is logged at "{priority}"'))
def when_logged(ctx: DispatchScenarioContext, text: str, priority: str) -> None:
    assert ctx.dispatcher is not None
    ctx.dispatcher.log(text, priority_from_name(priority))


@when(parsers.parse('"{text}" is logged at "{priority}" and the write fails'))
def when_logged_and_fails(
    ctx: DispatchScenarioContext, text: str, priority: str
) -> None:
    assert ctx.dispatcher is not None
    with pytest.raises(WriteError):
        ctx.dispatcher.log(text, priority_from_name(priority))


@when(
    parsers.parse(
        'the same "{backend_type}" dispatcher for identity "{identity}" '
        "is requested again"
    )
)
def when_requested_again(
    ctx: DispatchScenarioContext, backend_type: str, identity: str
) -> None:
    assert ctx.registry is not None
    ctx.other = ctx.registry.get_or_create(backend_type, "", identity, {})


@when(parsers.parse('a "{backend_type}" dispatcher for identity "{identity}" is requested'))
def when_other_requested(
    ctx: DispatchScenarioContext, backend_type: str, identity: str
) -> None:
    assert ctx.registry is not None
    ctx.other = ctx.registry.get_or_create(backend_type, "", identity, {})


@when(parsers.parse('a "{backend_type}" dispatcher is requested'))
def when_unknown_requested(ctx: DispatchScenarioContext, backend_type: str) -> None:
    assert ctx.registry is not None
    try:
        ctx.registry.get_or_create(backend_type)
    except DispatchError as exc:
        ctx.error = exc


# === Assertion Steps ===


@then("the observer was notified once")
def then_notified_once(ctx: DispatchScenarioContext) -> None:
    assert ctx.observer is not None
    assert len(ctx.observer.messages) == 1


@then(parsers.parse("the observer was notified {count:d} times"))
def then_notified_times(ctx: DispatchScenarioContext, count: int) -> None:
    assert ctx.observer is not None
    assert len(ctx.observer.messages) == count


@then(
    parsers.parse(
        'the notification carries text "{text}", priority "{priority}" '
        'and identity "{identity}"'
    )
)
def then_notification_fields(
    ctx: DispatchScenarioContext, text: str, priority: str, identity: str
) -> None:
    assert ctx.observer is not None
    message: LogMessage = ctx.observer.messages[0]
    assert message.text == text
    assert message.priority is priority_from_name(priority)
    assert message.identity == identity


@then("both requests returned the same dispatcher")
def then_same_dispatcher(ctx: DispatchScenarioContext) -> None:
    assert ctx.other is ctx.dispatcher


@then("a different dispatcher was returned")
def then_different_dispatcher(ctx: DispatchScenarioContext) -> None:
    assert ctx.other is not None
    assert ctx.other is not ctx.dispatcher


@then(parsers.parse('an unknown backend error is raised for "{backend_type}"'))
def then_unknown_backend(ctx: DispatchScenarioContext, backend_type: str) -> None:
    assert isinstance(ctx.error, UnknownBackendError)
    assert ctx.error.backend_type == backend_type
