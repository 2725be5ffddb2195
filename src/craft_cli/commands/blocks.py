"""Blocks commands -- read and edit daily note blocks.

Provides the ``craft blocks`` sub-command group::

    craft blocks get --date today --accept markdown
    craft blocks insert --markdown "# Title" --position '{"position":"end"}'
    craft blocks update --body-file blocks.json
    craft blocks delete --ids abc --ids def --confirm
    craft blocks move --ids abc --position '{"position":"start","date":"today"}'
    craft blocks search meeting --before 1 --after 2
"""

from __future__ import annotations

import json
from typing import Optional

import typer

from craft_cli.body import resolve_body, resolve_delete_body
from craft_cli.commands._common import (
    body_file_option,
    body_option,
    command_boundary,
    confirm_option,
    ids_option,
    raw_option,
    send,
    token_option,
    url_option,
)
from craft_cli.exceptions import InputError
from craft_cli.models import Outcome, QueryValue, RequestDescriptor
from craft_cli.parsing import (
    normalize_accept,
    parse_json,
    parse_number,
    require_confirm,
    require_single_source,
    to_list,
)

blocks_app = typer.Typer(no_args_is_help=True)


@blocks_app.command("get")
@command_boundary
def blocks_get(
    ctx: typer.Context,
    date: Optional[str] = typer.Option(
        None, "--date", help="Daily note date (today, tomorrow, yesterday, or YYYY-MM-DD)."
    ),
    block_id: Optional[str] = typer.Option(None, "--id", help="Block ID to fetch."),
    max_depth: Optional[str] = typer.Option(None, "--max-depth", help="Maximum depth."),
    fetch_metadata: bool = typer.Option(False, "--fetch-metadata", help="Include metadata."),
    accept: Optional[str] = typer.Option(
        None, "--accept", help="Response format: json or markdown (default: json)."
    ),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Fetch blocks from daily notes.

    Selects either a whole daily note (``--date``) or a single block
    (``--id``); giving both is an error.
    """
    if date and block_id:
        raise InputError("Use either --date or --id, not both.")

    query: dict[str, QueryValue] = {}
    if date:
        query["date"] = date
    if block_id:
        query["id"] = block_id
    if max_depth is not None:
        query["maxDepth"] = str(parse_number(max_depth, "max-depth"))
    if fetch_metadata:
        query["fetchMetadata"] = "true"

    accept_value = normalize_accept(accept)

    return send(
        ctx,
        url,
        token,
        RequestDescriptor(
            method="GET",
            path="blocks",
            query=query,
            headers={"Accept": accept_value} if accept_value else {},
            raw=raw,
        ),
    )


@blocks_app.command("insert")
@command_boundary
def blocks_insert(
    ctx: typer.Context,
    body: Optional[str] = body_option(),
    body_file: Optional[str] = body_file_option(),
    markdown: Optional[str] = typer.Option(
        None, "--markdown", help="Insert raw markdown (text/markdown)."
    ),
    position: Optional[str] = typer.Option(
        None, "--position", help="Position object as JSON string."
    ),
    content_type: Optional[str] = typer.Option(
        None, "--content-type", help="Override Content-Type."
    ),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Insert blocks or markdown into daily notes.

    With ``--markdown`` the text is sent as ``text/markdown`` and the
    position travels as the ``position`` query parameter. If the content type
    is overridden to a JSON type, markdown and position are wrapped in a JSON
    object instead.
    """
    has_body = body is not None or body_file is not None
    has_markdown = markdown is not None

    if not has_body and not has_markdown:
        raise InputError("Provide --body/--body-file or --markdown.")
    if has_body and has_markdown:
        raise InputError("Use either --body/--body-file or --markdown, not both.")
    require_single_source(body, body_file, "--body", "--body-file")

    position_value = parse_json(position, "position") if position else None
    query: dict[str, QueryValue] = {}

    if has_body:
        content_type = content_type or "application/json"
        payload = resolve_body(body, body_file, content_type)
    else:
        content_type = content_type or "text/markdown"
        if "json" in content_type:
            wrapped: dict[str, object] = {"markdown": markdown}
            if position_value is not None:
                wrapped["position"] = position_value
            payload = json.dumps(wrapped, separators=(",", ":"), ensure_ascii=False)
        else:
            payload = markdown
            if position_value is not None:
                query["position"] = json.dumps(
                    position_value, separators=(",", ":"), ensure_ascii=False
                )

    return send(
        ctx,
        url,
        token,
        RequestDescriptor(
            method="POST",
            path="blocks",
            query=query,
            body=payload,
            content_type=content_type,
            raw=raw,
        ),
    )


@blocks_app.command("update")
@command_boundary
def blocks_update(
    ctx: typer.Context,
    body: Optional[str] = body_option(),
    body_file: Optional[str] = body_file_option(),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Update blocks in daily notes."""
    require_single_source(body, body_file, "--body", "--body-file")
    payload = resolve_body(body, body_file, "application/json")
    return send(
        ctx,
        url,
        token,
        RequestDescriptor(
            method="PUT",
            path="blocks",
            body=payload,
            content_type="application/json",
            raw=raw,
        ),
    )


@blocks_app.command("delete")
@command_boundary
def blocks_delete(
    ctx: typer.Context,
    ids: Optional[list[str]] = ids_option("Block ID to delete (repeatable)."),
    body: Optional[str] = body_option(),
    body_file: Optional[str] = body_file_option(),
    confirm: bool = confirm_option(),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Delete blocks from daily notes. Requires --confirm."""
    require_confirm(confirm, "blocks delete")
    require_single_source(body, body_file, "--body", "--body-file")
    payload = resolve_delete_body(body, body_file, ids, "blockIds")
    return send(
        ctx,
        url,
        token,
        RequestDescriptor(
            method="DELETE",
            path="blocks",
            body=payload,
            content_type="application/json",
            raw=raw,
        ),
    )


@blocks_app.command("move")
@command_boundary
def blocks_move(
    ctx: typer.Context,
    ids: Optional[list[str]] = ids_option("Block ID to move (repeatable)."),
    position: Optional[str] = typer.Option(
        None, "--position", help="Position object as JSON string."
    ),
    body: Optional[str] = body_option(),
    body_file: Optional[str] = body_file_option(),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Move blocks to a new position."""
    require_single_source(body, body_file, "--body", "--body-file")

    if body or body_file:
        payload = resolve_body(body, body_file, "application/json")
    else:
        id_list = to_list(ids)
        if not id_list:
            raise InputError("Provide --ids or --body/--body-file.")
        if not position:
            raise InputError("Provide --position when using --ids.")
        position_value = parse_json(position, "position")
        payload = json.dumps(
            {"blockIds": id_list, "position": position_value},
            separators=(",", ":"),
            ensure_ascii=False,
        )

    return send(
        ctx,
        url,
        token,
        RequestDescriptor(
            method="PUT",
            path="blocks/move",
            body=payload,
            content_type="application/json",
            raw=raw,
        ),
    )


@blocks_app.command("search")
@command_boundary
def blocks_search(
    ctx: typer.Context,
    pattern: str = typer.Argument(help="Text or pattern to search for."),
    date: Optional[str] = typer.Option(
        None, "--date", help="Daily note date (default: today)."
    ),
    case_sensitive: bool = typer.Option(
        False, "--case-sensitive", help="Case-sensitive search."
    ),
    before: Optional[str] = typer.Option(None, "--before", help="Blocks before the match."),
    after: Optional[str] = typer.Option(None, "--after", help="Blocks after the match."),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Search a daily note."""
    query: dict[str, QueryValue] = {
        "pattern": pattern,
        "date": date or "today",
    }
    if case_sensitive:
        query["caseSensitive"] = "true"
    if before is not None:
        query["beforeBlockCount"] = str(parse_number(before, "before"))
    if after is not None:
        query["afterBlockCount"] = str(parse_number(after, "after"))

    return send(
        ctx,
        url,
        token,
        RequestDescriptor(method="GET", path="blocks/search", query=query, raw=raw),
    )
