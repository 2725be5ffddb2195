"""Synchronous request dispatcher built on :mod:`httpx`.

This module turns a :class:`~craft_cli.models.RequestDescriptor` into one
HTTP call:

- **URL building** -- relative paths are resolved against the base URL,
  query parameters are appended in order (:func:`build_url`).
- **Header assembly** -- caller headers, then the bearer token, then a
  default ``content-type`` for requests with a body (:func:`build_headers`).
- **Timeout** -- ``ResolvedConfig.timeout_ms`` is one deadline for the whole
  call, reading the body included. The underlying :class:`httpx.Client` is
  always closed afterwards.
- **Error mapping** -- transport failures become
  :class:`~craft_cli.exceptions.ConnectionError_` /
  :class:`~craft_cli.exceptions.RequestTimeoutError`. HTTP error statuses
  are *not* raised; they are rendered by
  :func:`~craft_cli.client.response.render_response`.

There is no retry loop: exactly one request is sent per invocation.
"""

from __future__ import annotations

import time
from typing import Mapping, Optional
from urllib.parse import urljoin

import httpx

from craft_cli.client.response import render_response
from craft_cli.exceptions import ConfigurationError, ConnectionError_, RequestTimeoutError
from craft_cli.models import Outcome, QueryValue, RequestDescriptor, ResolvedConfig
from craft_cli.output import get_output

DEFAULT_CONTENT_TYPE = "application/json"


def build_url(
    base_url: str,
    path: str,
    query: Optional[Mapping[str, QueryValue]] = None,
) -> str:
    """Build the absolute request URL.

    Absolute ``http://``/``https://`` paths are used directly; anything else
    is resolved against ``base_url + "/"`` so that ``"blocks"`` lands under
    the base path rather than replacing its last segment.

    Scalar query values replace any parameter of the same name already in
    the path; list values append one entry per element. ``None`` and empty
    strings are skipped.

    Example::

        >>> build_url("https://x/api/v1", "daily-notes/search",
        ...           {"include": ["alpha", "beta"], "startDate": "today"})
        'https://x/api/v1/daily-notes/search?include=alpha&include=beta&startDate=today'
    """
    if path.startswith("http://") or path.startswith("https://"):
        target = path
    else:
        target = urljoin(f"{base_url}/", path)

    url = httpx.URL(target)
    if not query:
        return str(url)

    params = url.params
    for key, value in query.items():
        if value is None or value == "":
            continue
        if isinstance(value, (list, tuple)):
            for entry in value:
                if entry is not None and entry != "":
                    params = params.add(key, entry)
        else:
            params = params.set(key, value)

    return str(url.copy_with(params=params))


def build_headers(config: ResolvedConfig, descriptor: RequestDescriptor) -> httpx.Headers:
    """Assemble request headers.

    Caller headers are applied first. A resolved token always sets
    ``Authorization: Bearer <token>``, replacing any caller value. When the
    request has a body and no ``content-type`` was given, it defaults to
    ``descriptor.content_type`` or ``application/json``.
    """
    headers = httpx.Headers(descriptor.headers)

    if config.token:
        headers["Authorization"] = f"Bearer {config.token}"

    if descriptor.body is not None and "content-type" not in headers:
        headers["content-type"] = descriptor.content_type or DEFAULT_CONTENT_TYPE

    return headers


class ApiClient:
    """Single-request HTTP client for the configured API.

    Wraps :class:`httpx.Client` with the resolved timeout. Must be used as a
    context manager so that the transport is closed whatever the outcome.

    Args:
        config: The resolved base URL, token and timeout.
        transport: Optional :class:`httpx.BaseTransport`, e.g. an
            :class:`httpx.MockTransport` in tests.

    Example::

        with ApiClient(config) as client:
            response = client.send(descriptor)
    """

    def __init__(
        self,
        config: ResolvedConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> ApiClient:
        self._client = httpx.Client(
            timeout=self._config.timeout_ms / 1000,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def send(self, descriptor: RequestDescriptor) -> httpx.Response:
        """Send *descriptor* and return the fully read response.

        The configured timeout is one deadline for the whole call: the body
        is streamed and the deadline is checked after every chunk, so a
        server trickling bytes cannot keep the call alive.

        Raises:
            ConfigurationError: If the base URL and path form an invalid URL.
            RequestTimeoutError: If the call does not finish within the timeout.
            ConnectionError_: On any other transport failure.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        method = descriptor.method.upper()
        try:
            url = build_url(self._config.base_url, descriptor.path, descriptor.query)
        except httpx.InvalidURL as exc:
            raise ConfigurationError(f"Invalid API URL: {exc}") from None
        headers = build_headers(self._config, descriptor)

        output = get_output()
        output.debug(f"{method} {url}")
        if not self._config.token:
            output.debug("No API token resolved; sending unauthenticated request")

        deadline = time.monotonic() + self._config.timeout_ms / 1000
        try:
            with self._client.stream(
                method,
                url,
                headers=headers,
                content=descriptor.body,
            ) as streamed:
                body = bytearray()
                _check_deadline(deadline, streamed.request)
                for chunk in streamed.iter_bytes():
                    body.extend(chunk)
                    _check_deadline(deadline, streamed.request)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(
                f"Request timed out after {self._config.timeout_ms}ms: {method} {url}"
            ) from exc
        except httpx.InvalidURL as exc:
            raise ConfigurationError(f"Invalid API URL: {exc}") from None
        except (httpx.TransportError, httpx.DecodingError) as exc:
            raise ConnectionError_(f"Request failed: {exc}") from exc

        # The body is already decoded; drop the headers describing the wire form.
        response_headers = streamed.headers.copy()
        response_headers.pop("content-encoding", None)
        response_headers.pop("content-length", None)
        response_headers.pop("transfer-encoding", None)
        response = httpx.Response(
            streamed.status_code,
            headers=response_headers,
            content=bytes(body),
            request=streamed.request,
            extensions=streamed.extensions,
        )
        output.debug(f"HTTP {response.status_code} {response.reason_phrase}")
        return response


def _check_deadline(deadline: float, request: httpx.Request) -> None:
    if time.monotonic() > deadline:
        raise httpx.ReadTimeout("Deadline exceeded", request=request)


def dispatch(
    config: ResolvedConfig,
    descriptor: RequestDescriptor,
    transport: Optional[httpx.BaseTransport] = None,
) -> Outcome:
    """Send one request and render its response.

    Args:
        config: Resolved connection settings.
        descriptor: The request to send.
        transport: Optional transport override (tests).

    Returns:
        :meth:`Outcome.ok` for 2xx responses, :meth:`Outcome.failure`
        otherwise.
    """
    with ApiClient(config, transport=transport) as client:
        response = client.send(descriptor)
    return render_response(response, raw=descriptor.raw)
