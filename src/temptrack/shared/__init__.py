"""Shared utilities package."""

from .retry import (
    async_retry_on_busy,
    is_transient_busy_error,
    retry_on_busy,
)
from .validators import (
    ValidationError,
    validate_affix_mapping,
    validate_affix_value,
    validate_callback,
    validate_max_tries,
)

__all__ = [
    'ValidationError',
    'validate_affix_mapping',
    'validate_affix_value',
    'validate_callback',
    'validate_max_tries',
    'async_retry_on_busy',
    'is_transient_busy_error',
    'retry_on_busy',
]
