"""Request command -- call an arbitrary API path.

The escape hatch for endpoints without a dedicated command::

    craft request GET blocks --query date=today --header Accept=text/markdown
    craft request POST tasks --data-file tasks.json
    craft request PUT https://other.example/api/v1/blocks --data '{"blocks": []}'

A repeated ``--query`` or ``--header`` key keeps its last value.
"""

from __future__ import annotations

from typing import Optional

import typer

from craft_cli.body import resolve_body
from craft_cli.commands._common import (
    command_boundary,
    raw_option,
    send,
    token_option,
    url_option,
)
from craft_cli.models import Outcome, QueryValue, RequestDescriptor
from craft_cli.parsing import parse_key_value_list, require_single_source, to_list


@command_boundary
def request_command(
    ctx: typer.Context,
    method: str = typer.Argument(help="HTTP method (GET, POST, PUT, DELETE, ...)."),
    path: str = typer.Argument(help="API path relative to the base URL, or an absolute URL."),
    query: Optional[list[str]] = typer.Option(
        None, "--query", help="Add query param as key=value (repeatable)."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", help="Add header as key=value (repeatable)."
    ),
    data: Optional[str] = typer.Option(None, "--data", help="JSON body as a string."),
    data_file: Optional[str] = typer.Option(
        None, "--data-file", help="Read request body from file ('-' for stdin)."
    ),
    content_type: Optional[str] = typer.Option(
        None, "--content-type", help="Override Content-Type."
    ),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Call an arbitrary API path."""
    params: dict[str, QueryValue] = dict(parse_key_value_list(to_list(query), "query"))

    headers = dict(parse_key_value_list(to_list(header), "header"))

    require_single_source(data, data_file, "--data", "--data-file")
    body = None
    if data is not None or data_file is not None:
        body = resolve_body(data, data_file, content_type)

    return send(
        ctx,
        url,
        token,
        RequestDescriptor(
            method=method,
            path=path,
            query=params,
            headers=headers,
            body=body,
            content_type=content_type,
            raw=raw,
        ),
    )
