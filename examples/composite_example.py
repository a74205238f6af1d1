"""Composite backend writing to a file and a SQLite table at once.

Run with:
    python examples/composite_example.py /tmp/app.log /tmp/app.db
"""

import asyncio
import sys

from logdispatch import Priority, Registry
from logdispatch.adapters.backends import FileBackend, SQLBackend


async def main(log_path: str, db_path: str) -> None:
    registry = Registry()
    log = registry.create("composite", identity="worker")
    log.backend.add_child(FileBackend(log_path, "worker", {"format": "ndjson"}))
    store = SQLBackend(db_path, "worker")
    log.backend.add_child(store)

    log.notice("batch started")
    await log.alog("batch finished", Priority.INFO)

    for message in await store.afetch(min_priority=Priority.NOTICE):
        print(message.timestamp, message.text)

    log.close()
    registry.close()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1], sys.argv[2]))
