"""Command handlers for craft_cli.

Each module exports a :class:`typer.Typer` sub-application for one API
resource group, or a plain callback registered on the root app:

* :mod:`~craft_cli.commands.blocks` -- ``craft blocks ...``
* :mod:`~craft_cli.commands.daily_notes` -- ``craft daily-notes ...``
* :mod:`~craft_cli.commands.collections` -- ``craft collections ...``
* :mod:`~craft_cli.commands.tasks` -- ``craft tasks ...``
* :mod:`~craft_cli.commands.request` -- ``craft request METHOD PATH``

Shared option factories and the per-command error boundary live in
:mod:`~craft_cli.commands._common`.
"""
