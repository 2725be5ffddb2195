"""HTTP layer for craft_cli.

:class:`ApiClient` wraps :class:`httpx.Client` for a single request under the
resolved timeout, and :func:`dispatch` sends a
:class:`~craft_cli.models.RequestDescriptor` and renders the response via
:func:`~craft_cli.client.response.render_response`.

Example::

    from craft_cli.client import dispatch

    outcome = dispatch(config, RequestDescriptor(method="GET", path="tasks",
                                                 query={"scope": "inbox"}))
"""

from craft_cli.client.response import render_response
from craft_cli.client.sync_client import ApiClient, build_headers, build_url, dispatch

__all__ = ["ApiClient", "build_headers", "build_url", "dispatch", "render_response"]
