"""Priority scale shared by messages, observers and backends.

Values follow the syslog numbering: a lower number is a more severe
message. Filtering anywhere in the package compares with ``<=``.
"""

import logging
from enum import IntEnum

from logdispatch.core.errors import InvalidLevelError


class Priority(IntEnum):
    """Severity levels, most severe first."""

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


_NAMES: dict[Priority, str] = {level: level.name.lower() for level in Priority}

_ALIASES: dict[str, Priority] = {
    **{name: level for level, name in _NAMES.items()},
    "emerg": Priority.EMERGENCY,
    "crit": Priority.CRITICAL,
    "err": Priority.ERROR,
    "warn": Priority.WARNING,
}

# (minimum stdlib level, priority), checked from most severe downwards
_FROM_LOGGING: tuple[tuple[int, Priority], ...] = (
    (logging.CRITICAL, Priority.CRITICAL),
    (logging.ERROR, Priority.ERROR),
    (logging.WARNING, Priority.WARNING),
    (logging.INFO, Priority.INFO),
)

_TO_LOGGING: dict[Priority, int] = {
    Priority.EMERGENCY: logging.CRITICAL,
    Priority.ALERT: logging.CRITICAL,
    Priority.CRITICAL: logging.CRITICAL,
    Priority.ERROR: logging.ERROR,
    Priority.WARNING: logging.WARNING,
    Priority.NOTICE: logging.INFO,
    Priority.INFO: logging.INFO,
    Priority.DEBUG: logging.DEBUG,
}


def to_priority(value: object) -> Priority:
    """Coerce an integer or Priority into a Priority.

    Args:
        value: A Priority member or a plain int on the scale.

    Returns:
        The matching Priority member.

    Raises:
        InvalidLevelError: If value is not an int on the scale. Booleans
            are rejected even though they are ints.
    """
    if isinstance(value, Priority):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidLevelError(f"priority must be an int, got {value!r}")
    try:
        return Priority(value)
    except ValueError:
        raise InvalidLevelError(f"priority out of range: {value!r}") from None


def priority_name(level: object) -> str:
    """Return the canonical lowercase name of a priority.

    Raises:
        InvalidLevelError: If level is outside the scale.
    """
    return _NAMES[to_priority(level)]


def priority_from_name(name: str) -> Priority:
    """Parse a priority name (case-insensitive, syslog short names accepted)."""
    try:
        return _ALIASES[name.strip().lower()]
    except (KeyError, AttributeError):
        raise InvalidLevelError(f"unknown priority name: {name!r}") from None


def priority_from_logging_level(levelno: int) -> Priority:
    """Map a stdlib logging level number onto the priority scale.

    Levels between the named stdlib levels round down to the next less
    severe priority (e.g. 25 becomes INFO).
    """
    for threshold, priority in _FROM_LOGGING:
        if levelno >= threshold:
            return priority
    return Priority.DEBUG


def priority_to_logging_level(priority: Priority) -> int:
    """Map a priority onto the closest stdlib logging level."""
    return _TO_LOGGING[to_priority(priority)]
