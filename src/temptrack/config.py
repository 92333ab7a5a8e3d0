"""Environment-driven settings for temptrack."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass

from .constants import (
    DEFAULT_MAX_BUSY_TRIES,
    ENV_DIR,
    ENV_HANDLE_SIGTERM,
    ENV_MAX_BUSY_TRIES,
    ENV_TRACK,
)
from .shared.validators import ValidationError, validate_max_tries

_FALSE_VALUES = {"0", "false", "no", "off"}
_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _FALSE_VALUES:
        return False
    if value in _TRUE_VALUES:
        return True
    raise ValidationError(f"{name} must be a boolean flag, got: {raw}")


@dataclass(frozen=True)
class Settings:
    base_dir: str
    track: bool = True
    max_busy_tries: int = DEFAULT_MAX_BUSY_TRIES
    handle_signals: bool = False


def load_settings() -> Settings:
    """Read settings from the environment.

    - ``TEMPTRACK_DIR``: base directory for generated names
    - ``TEMPTRACK_TRACK``: initial tracking state (on unless ``0/false/no/off``)
    - ``TEMPTRACK_MAX_BUSY_TRIES``: removal attempts on busy resources
    - ``TEMPTRACK_HANDLE_SIGTERM``: run exit cleanup on SIGTERM too
    """
    base_dir = os.getenv(ENV_DIR) or tempfile.gettempdir()
    max_tries = os.getenv(ENV_MAX_BUSY_TRIES)

    return Settings(
        base_dir=os.path.abspath(base_dir),
        track=_env_flag(ENV_TRACK, True),
        max_busy_tries=(
            validate_max_tries(max_tries, ENV_MAX_BUSY_TRIES) if max_tries else DEFAULT_MAX_BUSY_TRIES
        ),
        handle_signals=_env_flag(ENV_HANDLE_SIGTERM, False),
    )
