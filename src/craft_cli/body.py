"""Request-body resolution: inline text, a file, or standard input.

Commands accept a body either inline (``--body``/``--data``) or from a file
(``--body-file``/``--data-file``). Passing ``-`` as the file path reads the
body from stdin. Mutual exclusivity between the two flags is checked by the
caller with :func:`~craft_cli.parsing.require_single_source`; here the
inline value simply wins when both are present.

When the target content type mentions ``json`` the text is parsed once to
catch syntax errors locally, but the exact source text is what gets sent.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from craft_cli.exceptions import InputError, ValidationError

DEFAULT_CONTENT_TYPE = "application/json"
STDIN_MARKER = "-"


def resolve_body(
    inline: Optional[str],
    file_path: Optional[str],
    content_type: Optional[str] = None,
    stdin_marker: str = STDIN_MARKER,
) -> str:
    """Return the request body text from exactly one source.

    Args:
        inline: Body text given directly on the command line.
        file_path: Path to read the body from; *stdin_marker* means stdin.
        content_type: Target content type; defaults to ``application/json``.
        stdin_marker: The file path that selects standard input.

    Returns:
        The body text, unchanged.

    Raises:
        InputError: If neither source is given or the file cannot be read.
        ValidationError: If the content type is JSON-like and the text is
            not valid JSON.
    """
    if inline is None and file_path is None:
        raise InputError("Request body is required.")

    if inline is not None:
        text = inline
    elif file_path == stdin_marker:
        text = sys.stdin.read()
    else:
        text = _read_file_text(file_path)

    content_type = content_type or DEFAULT_CONTENT_TYPE
    if "json" in content_type:
        try:
            json.loads(text)
        except json.JSONDecodeError:
            raise ValidationError(
                f"Request body must be valid JSON when using {content_type}."
            ) from None

    return text


def resolve_delete_body(
    body: Optional[str],
    body_file: Optional[str],
    ids: Optional[Sequence[str]],
    key: str,
) -> str:
    """Build the JSON body for a delete-style command.

    An explicit body wins; otherwise the ids are wrapped as ``{key: [...]}``
    (e.g. ``{"blockIds": ["a", "b"]}``).

    Raises:
        InputError: If neither a body nor any ids are supplied.
    """
    if body or body_file:
        return resolve_body(body, body_file, DEFAULT_CONTENT_TYPE)

    id_list = [str(item) for item in ids or []]
    if not id_list:
        raise InputError("Provide --ids or --body/--body-file.")

    return json.dumps({key: id_list}, separators=(",", ":"))


def _read_file_text(path: str) -> str:
    try:
        return Path(path).expanduser().read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        raise InputError(f"Unable to read file: {path}") from None
