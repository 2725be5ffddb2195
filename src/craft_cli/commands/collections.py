"""Collections commands -- inspect collections and manage their items.

Provides the ``craft collections`` sub-command group::

    craft collections list --start-date 2024-01-01
    craft collections schema col1 --format json-schema-items
    craft collections items col1 --max-depth 2
    craft collections add-items col1 --body-file items.json
    craft collections update-items col1 --body '{"itemsToUpdate": []}'
    craft collections delete-items col1 --ids item1 --confirm
"""

from __future__ import annotations

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
from craft_cli.models import Outcome, QueryValue, RequestDescriptor
from craft_cli.parsing import parse_number, require_confirm, require_single_source

collections_app = typer.Typer(no_args_is_help=True)


def _items_path(collection_id: str) -> str:
    return f"collections/{collection_id}/items"


@collections_app.command("list")
@command_boundary
def collections_list(
    ctx: typer.Context,
    start_date: Optional[str] = typer.Option(
        None, "--start-date", help="Start date (YYYY-MM-DD or relative)."
    ),
    end_date: Optional[str] = typer.Option(
        None, "--end-date", help="End date (YYYY-MM-DD or relative)."
    ),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """List collections."""
    query: dict[str, QueryValue] = {}
    if start_date:
        query["startDate"] = start_date
    if end_date:
        query["endDate"] = end_date

    return send(
        ctx,
        url,
        token,
        RequestDescriptor(method="GET", path="collections", query=query, raw=raw),
    )


@collections_app.command("schema")
@command_boundary
def collections_schema(
    ctx: typer.Context,
    collection_id: str = typer.Argument(help="Collection ID."),
    schema_format: Optional[str] = typer.Option(
        None, "--format", help="schema or json-schema-items."
    ),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Get collection schema."""
    query: dict[str, QueryValue] = {}
    if schema_format:
        query["format"] = schema_format

    return send(
        ctx,
        url,
        token,
        RequestDescriptor(
            method="GET",
            path=f"collections/{collection_id}/schema",
            query=query,
            raw=raw,
        ),
    )


@collections_app.command("items")
@command_boundary
def collections_items(
    ctx: typer.Context,
    collection_id: str = typer.Argument(help="Collection ID."),
    max_depth: Optional[str] = typer.Option(None, "--max-depth", help="Maximum depth."),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Get collection items."""
    query: dict[str, QueryValue] = {}
    if max_depth is not None:
        query["maxDepth"] = str(parse_number(max_depth, "max-depth"))

    return send(
        ctx,
        url,
        token,
        RequestDescriptor(
            method="GET", path=_items_path(collection_id), query=query, raw=raw
        ),
    )


@collections_app.command("add-items")
@command_boundary
def collections_add_items(
    ctx: typer.Context,
    collection_id: str = typer.Argument(help="Collection ID."),
    body: Optional[str] = body_option(),
    body_file: Optional[str] = body_file_option(),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Add collection items."""
    require_single_source(body, body_file, "--body", "--body-file")
    payload = resolve_body(body, body_file, "application/json")
    return send(
        ctx,
        url,
        token,
        RequestDescriptor(
            method="POST",
            path=_items_path(collection_id),
            body=payload,
            content_type="application/json",
            raw=raw,
        ),
    )


@collections_app.command("update-items")
@command_boundary
def collections_update_items(
    ctx: typer.Context,
    collection_id: str = typer.Argument(help="Collection ID."),
    body: Optional[str] = body_option(),
    body_file: Optional[str] = body_file_option(),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Update collection items."""
    require_single_source(body, body_file, "--body", "--body-file")
    payload = resolve_body(body, body_file, "application/json")
    return send(
        ctx,
        url,
        token,
        RequestDescriptor(
            method="PUT",
            path=_items_path(collection_id),
            body=payload,
            content_type="application/json",
            raw=raw,
        ),
    )


@collections_app.command("delete-items")
@command_boundary
def collections_delete_items(
    ctx: typer.Context,
    collection_id: str = typer.Argument(help="Collection ID."),
    ids: Optional[list[str]] = ids_option("Item ID to delete (repeatable)."),
    body: Optional[str] = body_option(),
    body_file: Optional[str] = body_file_option(),
    confirm: bool = confirm_option(),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Delete collection items. Requires --confirm."""
    require_confirm(confirm, "collections delete-items")
    require_single_source(body, body_file, "--body", "--body-file")
    payload = resolve_delete_body(body, body_file, ids, "idsToDelete")
    return send(
        ctx,
        url,
        token,
        RequestDescriptor(
            method="DELETE",
            path=_items_path(collection_id),
            body=payload,
            content_type="application/json",
            raw=raw,
        ),
    )
