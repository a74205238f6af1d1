"""Python logging handler adapter for logdispatch.

This adapter bridges Python's standard library logging module to a
Dispatcher, so records from existing ``logging`` calls reach the
dispatcher's backend and observers.
"""

import logging

from logdispatch.core.dispatcher import Dispatcher
from logdispatch.core.priority import priority_from_logging_level


class DispatcherHandler(logging.Handler):
    """Logging handler that forwards log records to a Dispatcher.

    Each record's level is mapped onto the priority scale and its
    formatted message becomes the message text. Formatting and write
    failures go through the standard ``handleError`` path.

    Example:
        ```python
        from logdispatch import DispatcherHandler, Registry

        dispatcher = Registry().get_or_create("console", identity="app")
        logging.getLogger().addHandler(DispatcherHandler(dispatcher))
        ```
    """

    def __init__(self, dispatcher: Dispatcher, level: int = logging.NOTSET) -> None:
        """Initialize the handler with a dispatcher.

        Args:
            dispatcher: Open Dispatcher that receives the records.
            level: Minimum stdlib level handled (default NOTSET).
        """
        super().__init__(level)
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record through the dispatcher.

        Args:
            record: The log record to emit.
        """
        try:
            text = self.format(record)
            self._dispatcher.log(text, priority_from_logging_level(record.levelno))
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)
