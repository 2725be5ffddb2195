"""craft_cli -- command-line client for the Craft notes REST API.

Every subcommand maps its flags onto exactly one HTTP request against the
configured API (blocks, collections, tasks and daily notes) and prints the
response. The base URL and bearer token come from ``--url``/``--token`` or
the ``CRAFT_API_URL``/``CRAFT_API_TOKEN`` environment variables.

Typical usage::

    export CRAFT_API_URL=https://connect.craft.do/links/<share-id>/api/v1
    craft blocks get --date today --accept markdown
    craft tasks delete --ids abc --confirm

Modules:
    app: Typer application and console-script entry point.
    models: Pydantic models for resolved config, requests and outcomes.
    config: Layered option resolution (defaults, environment, flags).
    body: Request-body resolution and validation.
    parsing: Small flag-parsing helpers shared by the commands.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
