"""Unique name generation for temporary resources."""

from __future__ import annotations

import os
import secrets
import string
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from .config import load_settings
from .constants import RANDOM_NAME_SPACE
from .shared.validators import ValidationError, validate_affix_mapping, validate_affix_value

_BASE36_DIGITS = string.digits + string.ascii_lowercase

# Process-wide default directory for generated names, resolved on first use
_base_dir: Optional[str] = None


@dataclass(frozen=True)
class Affixes:
    """Prefix, suffix and parent directory of a generated name."""

    prefix: Optional[str] = None
    suffix: Optional[str] = None
    dir: Optional[str] = None


AffixesLike = Union[str, Mapping, Affixes, None]


def get_base_dir() -> str:
    """Return the directory used when affixes do not name one."""
    global _base_dir
    if _base_dir is None:
        _base_dir = load_settings().base_dir
    return _base_dir


def set_base_dir(path: Union[str, os.PathLike, None]) -> str:
    """Replace the default directory; ``None`` goes back to the configured one."""
    global _base_dir
    if path is None:
        _base_dir = None
        return get_base_dir()
    _base_dir = os.path.abspath(validate_affix_value("dir", path))
    return _base_dir


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def parse_affixes(affixes: AffixesLike, default_prefix: Optional[str] = None) -> Affixes:
    """Normalize the accepted affix shapes into an :class:`Affixes`.

    A bare string is a prefix. None, "", an empty mapping and an
    ``Affixes()`` with nothing set mean "no affixes" and select
    ``default_prefix``.

    Raises:
        ValidationError: For any other shape or an unknown option
    """
    if isinstance(affixes, Affixes):
        if affixes == Affixes():
            return Affixes(prefix=default_prefix)
        affixes = {"prefix": affixes.prefix, "suffix": affixes.suffix, "dir": affixes.dir}
    if affixes is None or (isinstance(affixes, (str, Mapping)) and not affixes):
        return Affixes(prefix=default_prefix)
    if isinstance(affixes, str):
        return Affixes(prefix=validate_affix_value("prefix", affixes))
    if isinstance(affixes, Mapping):
        return Affixes(**validate_affix_mapping(affixes))
    raise ValidationError(f"Unknown affix declaration: {affixes!r}")


def generate_name(affixes: AffixesLike = None, default_prefix: Optional[str] = None) -> str:
    """Build an absolute path for a new temporary resource.

    Layout: ``<prefix><YYYYMMDD>-<pid>-<base36 random><suffix>`` inside
    ``affixes.dir`` or the base directory. Nothing is created on disk.

    Example:
        >>> generate_name({"prefix": "a-", "suffix": ".tmp"})  # doctest: +SKIP
        '/tmp/a-20261017-4242-1y2p0ij.tmp'
    """
    parsed = parse_affixes(affixes, default_prefix)
    name = "".join(
        [
            parsed.prefix or "",
            datetime.now().strftime("%Y%m%d"),
            "-",
            str(os.getpid()),
            "-",
            to_base36(secrets.randbelow(RANDOM_NAME_SPACE) + 1),
            parsed.suffix or "",
        ]
    )
    return os.path.join(os.path.abspath(parsed.dir or get_base_dir()), name)
