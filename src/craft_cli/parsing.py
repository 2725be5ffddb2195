"""Flag-parsing helpers shared by the command handlers.

Each helper turns a raw string flag into a typed value or raises one of the
:mod:`craft_cli.exceptions` errors, so the command boundary can report it
before any network call is made.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from typing import Any, Optional, TypeVar, Union

from craft_cli.exceptions import ConfirmationRequiredError, InputError, ValidationError

T = TypeVar("T")

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

_ACCEPT_ALIASES = {
    "markdown": "text/markdown",
    "text/markdown": "text/markdown",
    "json": "application/json",
    "application/json": "application/json",
}


def parse_json(value: str, label: str) -> Any:  # noqa: ANN401
    """Parse *value* as JSON or raise ``ValidationError("Invalid <label> JSON.")``."""
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError):
        raise ValidationError(f"Invalid {label} JSON.") from None


def parse_number(value: Any, label: str) -> int:  # noqa: ANN401
    """Parse the leading integer of a flag value such as ``--max-depth``.

    Trailing text is ignored, so ``"3.5"`` gives 3 and ``"2px"`` gives 2.
    """
    match = _LEADING_INT.match(str(value))
    if match is None:
        raise InputError(f"Invalid {label} value: {value}")
    return int(match.group(1))


def to_list(value: Union[T, Iterable[T], None]) -> list[T]:
    """Normalise an absent, single or repeated flag value to a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]  # type: ignore[list-item]


def parse_key_value(value: str, label: str) -> tuple[str, str]:
    """Split ``key=value`` on the first ``=``. The key is stripped, the value is not."""
    key, sep, val = value.partition("=")
    if not sep:
        raise InputError(f"{label} must be in key=value format.")
    key = key.strip()
    if not key:
        raise InputError(f"{label} key is required.")
    return key, val


def parse_key_value_list(values: Iterable[str], label: str) -> list[tuple[str, str]]:
    return [parse_key_value(value, label) for value in values]


def normalize_accept(value: Optional[str]) -> Optional[str]:
    """Map ``markdown``/``json`` shorthands to MIME types; pass others through.

    Example::

        >>> normalize_accept("Markdown")
        'text/markdown'
        >>> normalize_accept("text/plain")
        'text/plain'
    """
    if not value:
        return None
    return _ACCEPT_ALIASES.get(value.lower(), value)


def require_confirm(confirm: bool, command: str) -> None:
    """Refuse to run the destructive *command* unless ``--confirm`` was given."""
    if not confirm:
        raise ConfirmationRequiredError(command)


def require_single_source(
    first: Optional[str],
    second: Optional[str],
    first_flag: str,
    second_flag: str,
) -> None:
    """Reject two mutually exclusive flags given together (e.g. ``--body`` and ``--body-file``)."""
    if first is not None and second is not None:
        raise InputError(f"Use either {first_flag} or {second_flag}, not both.")
