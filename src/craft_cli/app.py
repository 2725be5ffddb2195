"""Typer application and CLI entry point for craft_cli.

This module wires together the root Typer application, the resource groups
(``blocks``, ``daily-notes``, ``collections``, ``tasks``) and the generic
``request`` command.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a Ctrl-C handler and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`craft_cli.config`: Option resolution for ``--url``/``--token``.
    :mod:`craft_cli.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from craft_cli import __version__
from craft_cli.commands.blocks import blocks_app
from craft_cli.commands.collections import collections_app
from craft_cli.commands.daily_notes import daily_notes_app
from craft_cli.commands.request import request_command
from craft_cli.commands.tasks import tasks_app
from craft_cli.config import ENV_API_TOKEN, ENV_API_URL
from craft_cli.exit_codes import EXIT_FAILURE, EXIT_INTERRUPTED


app = typer.Typer(
    name="craft",
    help="Command-line client for the Craft API.",
    no_args_is_help=True,
    add_completion=False,
)

app.add_typer(blocks_app, name="blocks", help="Work with daily note blocks.")
app.add_typer(daily_notes_app, name="daily-notes", help="Search across daily notes.")
app.add_typer(collections_app, name="collections", help="Manage collections.")
app.add_typer(tasks_app, name="tasks", help="Manage tasks.")
app.command("request")(request_command)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"craft {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    url: Optional[str] = typer.Option(
        None, "--url", help=f"Craft API base URL (env: {ENV_API_URL})."
    ),
    token: Optional[str] = typer.Option(
        None, "--token", help=f"API token (env: {ENV_API_TOKEN})."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~craft_cli.output.OutputManager` and stores
    the root-level ``--url``/``--token`` in ``ctx.obj`` so that commands can
    layer their own flags on top.
    """
    from craft_cli.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["url"] = url
    ctx.obj["token"] = token


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from craft_cli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``craft`` console script.

    Command-level errors are already reported by each command's boundary;
    anything else reaching this function is unexpected and produces a crash
    log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from craft_cli.exceptions import CraftError
        from craft_cli.output import error

        if isinstance(exc, CraftError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error: {exc}. Debug log: {log_path}")
        sys.exit(EXIT_FAILURE)
