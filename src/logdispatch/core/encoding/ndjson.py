"""NDJSON encoder for log messages."""

import json
from collections.abc import Iterable

from logdispatch.core.models import LogMessage
from logdispatch.core.priority import priority_name


def encode_message(message: LogMessage) -> str:
    """Encode a single message as one JSON object (no trailing newline)."""
    obj = {
        "timestamp": message.timestamp,
        "identity": message.identity,
        "priority": priority_name(message.priority),
        "text": message.text,
    }
    return json.dumps(obj)


def encode_messages(messages: Iterable[LogMessage]) -> str:
    """Encode messages to newline-delimited JSON.

    Args:
        messages: An iterable of LogMessage objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no messages.
    """
    lines = [encode_message(message) for message in messages]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
