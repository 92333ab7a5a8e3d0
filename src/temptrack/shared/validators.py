"""Input validation utilities for temptrack."""

from collections.abc import Mapping
from typing import Any, Callable, Optional

from ..errors import TempTrackError

AFFIX_KEYS = frozenset({"prefix", "suffix", "dir"})


class ValidationError(TempTrackError, ValueError):
    """Raised when validation fails."""

    pass


def validate_affix_value(name: str, value: Any) -> Optional[str]:
    """Validate a single affix option.

    Args:
        name: Option name, used in error messages
        value: Option value, ``None`` or a string (``os.PathLike`` is accepted for ``dir``)

    Returns:
        The value as a string, or None when unset

    Raises:
        ValidationError: If the value has an unsupported type
    """
    if value is None:
        return None

    if name == "dir" and hasattr(value, "__fspath__"):
        value = value.__fspath__()

    if not isinstance(value, str):
        raise ValidationError(f"Affix option '{name}' must be a string, got: {type(value).__name__}")

    if name != "dir" and ("/" in value or "\\" in value):
        raise ValidationError(f"Affix option '{name}' cannot contain path separators: {value}")

    return value


def validate_affix_mapping(affixes: Mapping) -> dict:
    """Validate an affix mapping and return a normalized copy.

    Raises:
        ValidationError: If the mapping holds unknown keys or bad values
    """
    unknown = set(affixes) - AFFIX_KEYS
    if unknown:
        raise ValidationError(
            f"Unknown affix option(s): {', '.join(sorted(map(str, unknown)))}. "
            f"Allowed: {', '.join(sorted(AFFIX_KEYS))}"
        )

    return {key: validate_affix_value(key, affixes.get(key)) for key in AFFIX_KEYS}


def validate_callback(callback: Any) -> Optional[Callable]:
    """Ensure a callback argument is either omitted or callable.

    Raises:
        ValidationError: If callback is neither None nor callable
    """
    if callback is not None and not callable(callback):
        raise ValidationError(f"Callback must be callable, got: {type(callback).__name__}")
    return callback


def validate_max_tries(value: Any, name: str = "max_busy_tries") -> int:
    """Validate a retry attempt count.

    Args:
        value: Attempt count (int or numeric string)
        name: Name of the setting for error messages

    Returns:
        Validated attempt count as integer

    Raises:
        ValidationError: If the value is not a positive integer
    """
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer, got: {value}")
    try:
        tries = int(value)
    except (ValueError, TypeError):
        raise ValidationError(f"{name} must be an integer, got: {value}")

    if tries < 1:
        raise ValidationError(f"{name} must be at least 1, got: {tries}")

    return tries
