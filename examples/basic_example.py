"""Basic logdispatch usage.

Builds a shared console dispatcher, attaches an observer that collects
errors, and routes stdlib logging through the same dispatcher.

Run with:
    python examples/basic_example.py
"""

import logging

from logdispatch import (
    CallbackObserver,
    DispatcherHandler,
    Priority,
    RecordingObserver,
    Registry,
)


def main() -> None:
    registry = Registry()
    config = {"stream": "stdout"}
    log = registry.get_or_create("console", identity="example", config=config)

    # Other call sites asking for the same configuration share the dispatcher
    assert registry.get_or_create("console", identity="example", config=config) is log

    errors = RecordingObserver(Priority.ERROR)
    log.attach(errors)
    log.attach(
        CallbackObserver(lambda m: print(f"  -> paged: {m.text}"), Priority.ALERT)
    )

    log.info("service starting")
    log.error("upstream timed out")
    log.alert("primary database unreachable")

    # stdlib logging records flow through the dispatcher too
    logging.getLogger("example.lib").addHandler(DispatcherHandler(log))
    logging.getLogger("example.lib").setLevel(logging.INFO)
    logging.getLogger("example.lib").warning("cache miss ratio high")

    print(f"errors recorded: {[m.text for m in errors.messages]}")
    registry.close()


if __name__ == "__main__":
    main()
