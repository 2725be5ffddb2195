"""Pydantic models shared across craft_cli.

All models are request-scoped value objects: they are built once per
invocation and never mutated afterwards (``frozen=True``).

* :class:`GlobalOptions` -- the explicit ``--url``/``--token`` flag layer.
* :class:`ResolvedConfig` -- the merged base URL, token and timeout.
* :class:`RequestDescriptor` -- one outgoing HTTP request.
* :class:`Outcome` -- success or failure of a dispatched request, returned
  instead of mutating a process-wide exit status.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from craft_cli.exit_codes import EXIT_FAILURE, EXIT_SUCCESS

QueryValue = Union[str, list[str], None]
"""A scalar query value or an ordered list for repeatable parameters."""


class GlobalOptions(BaseModel):
    """Explicit connection flags given on the command line."""

    model_config = ConfigDict(frozen=True)

    url: Optional[str] = Field(default=None, description="API base URL (--url)")
    token: Optional[str] = Field(default=None, description="API token (--token)")


class ResolvedConfig(BaseModel):
    """Effective connection settings for a single invocation.

    Produced by :func:`~craft_cli.config.resolve_options`. ``base_url``
    never ends with a slash; ``token`` is ``None`` for unauthenticated use.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str
    token: Optional[str] = None
    timeout_ms: int = Field(default=30_000, gt=0)


class RequestDescriptor(BaseModel):
    """In-memory description of one outgoing request.

    ``path`` is either relative to the base URL (``"blocks/search"``) or an
    absolute ``http(s)://`` URL. Query values that are ``None`` or empty
    strings are dropped when the URL is built.

    Example::

        RequestDescriptor(
            method="GET",
            path="daily-notes/search",
            query={"include": ["alpha", "beta"], "startDate": "today"},
        )
    """

    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    query: dict[str, QueryValue] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None
    content_type: Optional[str] = None
    raw: bool = False


class Outcome(BaseModel):
    """Result of dispatching a request, handed back to the command boundary."""

    model_config = ConfigDict(frozen=True)

    success: bool
    exit_code: int = EXIT_SUCCESS

    @classmethod
    def ok(cls) -> Outcome:
        return cls(success=True, exit_code=EXIT_SUCCESS)

    @classmethod
    def failure(cls, exit_code: int = EXIT_FAILURE) -> Outcome:
        return cls(success=False, exit_code=exit_code)
