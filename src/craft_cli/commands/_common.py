"""Shared plumbing for command handlers.

* Option factories for the flags every command repeats (``--url``,
  ``--token``, ``--raw``, ``--body``, ...).
* :func:`command_boundary` -- the single per-command error boundary.
* :func:`send` -- resolves connection options from the Typer context and
  dispatches a request.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Optional

import typer

from craft_cli.client import dispatch
from craft_cli.config import ENV_API_TOKEN, ENV_API_URL, resolve_options
from craft_cli.exceptions import CraftError
from craft_cli.models import GlobalOptions, Outcome, RequestDescriptor, ResolvedConfig
from craft_cli.output import error


# ------------------------------------------------------------------ #
# Option factories
# ------------------------------------------------------------------ #


def url_option() -> Any:  # noqa: ANN401
    return typer.Option(None, "--url", help=f"Craft API base URL (env: {ENV_API_URL}).")


def token_option() -> Any:  # noqa: ANN401
    return typer.Option(None, "--token", help=f"API token (env: {ENV_API_TOKEN}).")


def raw_option() -> Any:  # noqa: ANN401
    return typer.Option(False, "--raw", help="Print raw response.")


def body_option() -> Any:  # noqa: ANN401
    return typer.Option(None, "--body", help="Request body as JSON string.")


def body_file_option() -> Any:  # noqa: ANN401
    return typer.Option(
        None, "--body-file", help="Read request body from file ('-' for stdin)."
    )


def ids_option(help: str) -> Any:  # noqa: ANN401
    return typer.Option(None, "--ids", help=help)


def confirm_option() -> Any:  # noqa: ANN401
    return typer.Option(False, "--confirm", help="Confirm deletion.")


# ------------------------------------------------------------------ #
# Boundary and dispatch
# ------------------------------------------------------------------ #


def command_boundary(func: Callable[..., Optional[Outcome]]) -> Callable[..., None]:
    """Convert command errors and failed outcomes into a clean exit.

    A :class:`~craft_cli.exceptions.CraftError` is printed to stderr (no
    traceback) and exits with its ``exit_code``; a failed
    :class:`~craft_cli.models.Outcome` exits with the outcome's code.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        try:
            outcome = func(*args, **kwargs)
        except CraftError as exc:
            error(str(exc))
            raise typer.Exit(code=exc.exit_code) from None
        if outcome is not None and not outcome.success:
            raise typer.Exit(code=outcome.exit_code)

    return wrapper


def resolve_context_options(
    ctx: typer.Context,
    url: Optional[str],
    token: Optional[str],
) -> ResolvedConfig:
    """Merge command-level flags over root-level flags, then resolve.

    ``craft blocks get --url X`` beats ``craft --url Y blocks get``, which in
    turn beats ``CRAFT_API_URL``.
    """
    obj = ctx.obj or {}
    flags = GlobalOptions(
        url=url if url is not None else obj.get("url"),
        token=token if token is not None else obj.get("token"),
    )
    return resolve_options(flags)


def send(
    ctx: typer.Context,
    url: Optional[str],
    token: Optional[str],
    descriptor: RequestDescriptor,
) -> Outcome:
    """Resolve connection options and dispatch *descriptor*.

    A transport stored as ``ctx.obj["transport"]`` replaces the network
    transport (used by tests).
    """
    config = resolve_context_options(ctx, url, token)
    transport = (ctx.obj or {}).get("transport")
    return dispatch(config, descriptor, transport=transport)
