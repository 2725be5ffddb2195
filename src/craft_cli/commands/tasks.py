"""Tasks commands -- list, add, update and delete tasks.

Provides the ``craft tasks`` sub-command group::

    craft tasks list --scope inbox
    craft tasks add --body '{"tasks": [{"markdown": "Call Bob"}]}'
    craft tasks delete --ids t1 --confirm
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
from craft_cli.exceptions import InputError
from craft_cli.models import Outcome, RequestDescriptor
from craft_cli.parsing import require_confirm, require_single_source

tasks_app = typer.Typer(no_args_is_help=True)


@tasks_app.command("list")
@command_boundary
def tasks_list(
    ctx: typer.Context,
    scope: Optional[str] = typer.Option(
        None, "--scope", help="active, upcoming, inbox, or logbook."
    ),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """List tasks by scope."""
    if not scope:
        raise InputError("--scope is required (active, upcoming, inbox, logbook).")
    return send(
        ctx,
        url,
        token,
        RequestDescriptor(method="GET", path="tasks", query={"scope": scope}, raw=raw),
    )


def _send_tasks_body(
    ctx: typer.Context,
    method: str,
    body: Optional[str],
    body_file: Optional[str],
    raw: bool,
    url: Optional[str],
    token: Optional[str],
) -> Outcome:
    require_single_source(body, body_file, "--body", "--body-file")
    payload = resolve_body(body, body_file, "application/json")
    return send(
        ctx,
        url,
        token,
        RequestDescriptor(
            method=method,
            path="tasks",
            body=payload,
            content_type="application/json",
            raw=raw,
        ),
    )


@tasks_app.command("add")
@command_boundary
def tasks_add(
    ctx: typer.Context,
    body: Optional[str] = body_option(),
    body_file: Optional[str] = body_file_option(),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Add tasks."""
    return _send_tasks_body(ctx, "POST", body, body_file, raw, url, token)


@tasks_app.command("update")
@command_boundary
def tasks_update(
    ctx: typer.Context,
    body: Optional[str] = body_option(),
    body_file: Optional[str] = body_file_option(),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Update tasks."""
    return _send_tasks_body(ctx, "PUT", body, body_file, raw, url, token)


@tasks_app.command("delete")
@command_boundary
def tasks_delete(
    ctx: typer.Context,
    ids: Optional[list[str]] = ids_option("Task ID to delete (repeatable)."),
    body: Optional[str] = body_option(),
    body_file: Optional[str] = body_file_option(),
    confirm: bool = confirm_option(),
    raw: bool = raw_option(),
    url: Optional[str] = url_option(),
    token: Optional[str] = token_option(),
) -> Outcome:
    """Delete tasks. Requires --confirm."""
    require_confirm(confirm, "tasks delete")
    require_single_source(body, body_file, "--body", "--body-file")
    payload = resolve_delete_body(body, body_file, ids, "idsToDelete")
    return send(
        ctx,
        url,
        token,
        RequestDescriptor(
            method="DELETE",
            path="tasks",
            body=payload,
            content_type="application/json",
            raw=raw,
        ),
    )
