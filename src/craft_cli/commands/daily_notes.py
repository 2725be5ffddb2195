"""Daily-notes commands -- search across all daily notes.

Provides the ``craft daily-notes`` sub-command group::

    craft daily-notes search --include alpha --include beta --start-date today
"""

from __future__ import annotations

from typing import Optional

import typer

from craft_cli.commands._common import (
    command_boundary,
    raw_option,
    send,
    token_option,
    url_option,
)
from craft_cli.models import Outcome, QueryValue, RequestDescriptor
from craft_cli.parsing import to_list

daily_notes_app = typer.Typer(no_args_is_help=True)


@daily_notes_app.command("search")
@command_boundary
def daily_notes_search(
    ctx: typer.Context,
    include: Optional[list[str]] = typer.Option(
        None, "--include", help="Include term (repeatable)."
    ),
    regex: Optional[list[str]] = typer.Option(
        None, "--regex", help="Regex pattern (repeatable)."
    ),
    start_date: Optional[str] = typer.Option(
        None, "--start-date", help="Start date (YYYY-MM-DD or relative)."
    ),
    end_date: Optional[str] = typer.Option(
        None, "--end-date", help="End date (YYYY-MM-DD or relative)."
    ),
    fetch_metadata: bool = typer.Option(False, "--fetch-metadata", help="Include metadata."),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Search across daily notes.

    Repeated ``--include`` and ``--regex`` flags are sent as repeated
    ``include`` and ``regexps`` query parameters, in the order given.
    """
    query: dict[str, QueryValue] = {}
    include_terms = to_list(include)
    patterns = to_list(regex)

    if include_terms:
        query["include"] = include_terms
    if patterns:
        query["regexps"] = patterns
    if start_date:
        query["startDate"] = start_date
    if end_date:
        query["endDate"] = end_date
    if fetch_metadata:
        query["fetchMetadata"] = "true"

    return send(
        ctx,
        url,
        token,
        RequestDescriptor(method="GET", path="daily-notes/search", query=query, raw=raw),
    )
