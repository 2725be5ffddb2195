"""Response rendering -- maps :class:`httpx.Response` to terminal output.

Two modes are supported:

* **Raw** (``--raw``) -- the body is printed verbatim to stdout; only the
  status code decides the outcome.
* **Structured** (default) -- JSON bodies are pretty-printed. Successful
  responses go to stdout; failed ones print ``"<status> <reason>"`` followed
  by the body to stderr and nothing to stdout.

See Also:
    :mod:`craft_cli.output` -- the output manager that writes the streams.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from craft_cli.models import Outcome
from craft_cli.output import dumps_pretty, get_output

_MISSING: Any = object()


def render_response(response: httpx.Response, raw: bool = False) -> Outcome:
    """Print *response* according to the output mode and return the outcome.

    Args:
        response: A fully read :class:`httpx.Response`.
        raw: Print the body verbatim instead of reformatting JSON.

    Returns:
        :meth:`Outcome.ok` for 2xx statuses, :meth:`Outcome.failure` otherwise.
    """
    output = get_output()
    text = response.text
    ok = response.is_success

    if raw:
        if text:
            output.print_data(text)
        return Outcome.ok() if ok else Outcome.failure()

    data = parse_json_text(text)

    if not ok:
        output.print_error_data(f"{response.status_code} {response.reason_phrase}")
        if is_json(data):
            output.print_error_data(dumps_pretty(data))
        elif text:
            output.print_error_data(text)
        return Outcome.failure()

    if is_json(data):
        output.print_json(data)
    elif text:
        output.print_data(text)
    return Outcome.ok()


def parse_json_text(text: str) -> Any:  # noqa: ANN401
    """Parse *text* as JSON, returning a sentinel for empty or non-JSON text.

    A sentinel is used because ``null`` is valid JSON and must still be
    printed.
    """
    if not text:
        return _MISSING
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return _MISSING


def is_json(value: Any) -> bool:  # noqa: ANN401
    """Return True if *value* came from a successful :func:`parse_json_text`."""
    return value is not _MISSING
