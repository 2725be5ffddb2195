"""Shared test fixtures for craft_cli.

Provides reusable fixtures for isolating the environment, resetting the
global output manager, and recording requests sent through a mock
transport. These fixtures are automatically discovered by pytest.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from craft_cli.models import ResolvedConfig
from craft_cli.output import OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager's Rich consoles keep references to the streams that
    were current when it was created; Typer's CliRunner swaps those streams
    per invocation.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove CRAFT_* and colour variables so tests never see real settings."""
    for var in ["CRAFT_API_URL", "CRAFT_API_TOKEN", "NO_COLOR", "TERM"]:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def api_env(clean_env: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Point the CLI at a fake API with a token via environment variables."""
    clean_env.setenv("CRAFT_API_URL", "https://example.com/api/v1")
    clean_env.setenv("CRAFT_API_TOKEN", "token")
    return clean_env


@pytest.fixture
def config() -> ResolvedConfig:
    return ResolvedConfig(
        base_url="https://example.com/api/v1",
        token="token",
        timeout_ms=5000,
    )


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output(capsys: pytest.CaptureFixture[str]) -> OutputManager:
    """Install a colourless OutputManager writing to the captured streams."""
    output = OutputManager(no_color=True)
    set_output(output)
    return output


# ---------------------------------------------------------------------------
# Mock API
# ---------------------------------------------------------------------------


class RecordingAPI:
    """An httpx transport that records requests and replies with a canned response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.content: bytes = json.dumps({"ok": True}).encode()
        self.headers: dict[str, str] = {"content-type": "application/json"}
        self.handler: Callable[[httpx.Request], httpx.Response] | None = None
        self.transport = httpx.MockTransport(self._handle)

    def reply(self, status_code: int = 200, body: Any = None, text: str | None = None) -> None:  # noqa: ANN401
        self.status_code = status_code
        if text is not None:
            self.content = text.encode()
            self.headers = {"content-type": "text/plain"}
        else:
            self.content = json.dumps(body).encode()
            self.headers = {"content-type": "application/json"}

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        return httpx.Response(self.status_code, content=self.content, headers=self.headers)


@pytest.fixture
def mock_api() -> RecordingAPI:
    return RecordingAPI()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def run_cli(cli_runner, mock_api: RecordingAPI) -> Callable[..., Any]:
    """Invoke the root app with the mock transport injected through ``ctx.obj``."""
    from craft_cli.app import app

    def _run(*args: str, input: str | None = None) -> Any:  # noqa: ANN401
        return cli_runner.invoke(
            app,
            ["--no-color", *args],
            obj={"transport": mock_api.transport},
            input=input,
        )

    return _run
