"""Helpers for reading backend options from a string config mapping.

Backends receive their configuration as an opaque ``Mapping[str, str]``.
These helpers parse individual keys and raise ConfigError for values
that cannot be interpreted.
"""

from collections.abc import Mapping

from logdispatch.core.errors import ConfigError

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def get_str(config: Mapping[str, str], key: str, default: str) -> str:
    """Return config[key] as a string, or default if missing."""
    value = config.get(key)
    if value is None:
        return default
    return str(value)


def get_bool(config: Mapping[str, str], key: str, default: bool) -> bool:
    """Parse a boolean option ("true"/"false", "1"/"0", "yes"/"no", "on"/"off").

    Args:
        config: Backend configuration mapping.
        key: Option name.
        default: Value used when the key is absent.

    Returns:
        The parsed boolean.

    Raises:
        ConfigError: If the value is not a recognised boolean spelling.
    """
    value = config.get(key)
    if value is None:
        return default
    normalized = str(value).strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ConfigError(f"option {key!r} must be a boolean, got {value!r}")


def get_int(
    config: Mapping[str, str],
    key: str,
    default: int,
    base: int = 10,
    minimum: int | None = None,
) -> int:
    """Parse an integer option.

    Args:
        config: Backend configuration mapping.
        key: Option name.
        default: Value used when the key is absent.
        base: Numeric base of the string form (8 for file modes).
        minimum: Smallest accepted value, if any.

    Raises:
        ConfigError: If the value is not an integer or is below minimum.
    """
    value = config.get(key)
    if value is None:
        return default
    try:
        result = int(str(value).strip(), base)
    except ValueError:
        raise ConfigError(
            f"option {key!r} must be an integer, got {value!r}"
        ) from None
    if minimum is not None and result < minimum:
        raise ConfigError(f"option {key!r} must be >= {minimum}, got {result}")
    return result


def get_choice(
    config: Mapping[str, str],
    key: str,
    choices: tuple[str, ...],
    default: str,
) -> str:
    """Parse an option restricted to a fixed set of lowercase values."""
    value = get_str(config, key, default).strip().lower()
    if value not in choices:
        raise ConfigError(
            f"option {key!r} must be one of {', '.join(choices)}; got {value!r}"
        )
    return value
