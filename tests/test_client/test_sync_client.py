"""Tests for the request dispatcher."""

from __future__ import annotations

import gzip
import json
from types import SimpleNamespace
from urllib.parse import parse_qsl, urlsplit

import httpx
import pytest

from craft_cli.client import sync_client
from craft_cli.client.sync_client import ApiClient, build_headers, build_url, dispatch
from craft_cli.exceptions import ConfigurationError, ConnectionError_, RequestTimeoutError
from craft_cli.models import RequestDescriptor, ResolvedConfig
from craft_cli.output import OutputManager, set_output


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _query_pairs(url: str) -> list[tuple[str, str]]:
    return parse_qsl(urlsplit(url).query)


@pytest.fixture(autouse=True)
def _quiet_output(plain_output: OutputManager) -> None:
    """Every test writes through a colourless manager."""


# ---------------------------------------------------------------------------
# URL building
# ---------------------------------------------------------------------------


class TestBuildUrl:
    def test_relative_path_resolves_under_base_path(self) -> None:
        url = build_url("https://example.com/api/v1", "blocks")
        assert url == "https://example.com/api/v1/blocks"

    def test_nested_relative_path(self) -> None:
        url = build_url("https://example.com/api/v1", "collections/c1/items")
        assert urlsplit(url).path == "/api/v1/collections/c1/items"

    def test_absolute_url_is_used_directly(self) -> None:
        url = build_url("https://example.com/api/v1", "https://other.example/x")
        assert url == "https://other.example/x"

    def test_list_values_repeat_key_in_order(self) -> None:
        url = build_url(
            "https://example.com/api/v1",
            "daily-notes/search",
            {"include": ["alpha", "beta"], "startDate": "today"},
        )
        assert "include=alpha&include=beta&startDate=today" in url

    def test_empty_and_none_values_are_skipped(self) -> None:
        url = build_url(
            "https://example.com/api/v1",
            "blocks",
            {"a": "", "b": None, "c": ["", "x", None], "d": []},
        )
        assert _query_pairs(url) == [("c", "x")]

    def test_no_query_leaves_url_bare(self) -> None:
        url = build_url("https://example.com/api/v1", "tasks", {})
        assert "?" not in url

    def test_scalar_replaces_existing_param_in_path(self) -> None:
        url = build_url("https://example.com/api/v1", "blocks?date=old&x=1", {"date": "new"})
        assert dict(_query_pairs(url)) == {"date": "new", "x": "1"}

    def test_json_values_are_encoded(self) -> None:
        position = json.dumps({"position": "end"}, separators=(",", ":"))
        url = build_url("https://example.com/api/v1", "blocks", {"position": position})
        assert _query_pairs(url) == [("position", '{"position":"end"}')]


# ---------------------------------------------------------------------------
# Headers
# ---------------------------------------------------------------------------


class TestBuildHeaders:
    def test_token_adds_bearer_header(self, config: ResolvedConfig) -> None:
        headers = build_headers(config, RequestDescriptor(method="GET", path="x"))
        assert headers["authorization"] == "Bearer token"

    def test_no_token_no_authorization(self) -> None:
        config = ResolvedConfig(base_url="https://x")
        headers = build_headers(config, RequestDescriptor(method="GET", path="x"))
        assert "authorization" not in headers

    def test_config_token_is_authoritative(self, config: ResolvedConfig) -> None:
        descriptor = RequestDescriptor(
            method="GET", path="x", headers={"Authorization": "Bearer caller"}
        )
        headers = build_headers(config, descriptor)
        assert headers.get_list("authorization") == ["Bearer token"]

    def test_body_defaults_content_type_to_json(self, config: ResolvedConfig) -> None:
        headers = build_headers(config, RequestDescriptor(method="POST", path="x", body="{}"))
        assert headers["content-type"] == "application/json"

    def test_body_uses_descriptor_content_type(self, config: ResolvedConfig) -> None:
        descriptor = RequestDescriptor(
            method="POST", path="x", body="# T", content_type="text/markdown"
        )
        assert build_headers(config, descriptor)["content-type"] == "text/markdown"

    def test_caller_content_type_wins(self, config: ResolvedConfig) -> None:
        descriptor = RequestDescriptor(
            method="POST",
            path="x",
            body="a=b",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            content_type="text/plain",
        )
        headers = build_headers(config, descriptor)
        assert headers["content-type"] == "application/x-www-form-urlencoded"

    def test_no_body_no_content_type(self, config: ResolvedConfig) -> None:
        headers = build_headers(
            config, RequestDescriptor(method="GET", path="x", content_type="text/plain")
        )
        assert "content-type" not in headers


# ---------------------------------------------------------------------------
# ApiClient
# ---------------------------------------------------------------------------


class TestApiClient:
    def test_enter_creates_and_exit_closes_client(self, config: ResolvedConfig) -> None:
        client = ApiClient(config)
        assert client._client is None
        with client:
            assert client._client is not None
        assert client._client is None

    def test_timeout_comes_from_config(self, config: ResolvedConfig) -> None:
        with ApiClient(config) as client:
            assert client._client is not None
            assert client._client.timeout.read == 5.0

    def test_sends_method_url_headers_and_body(self, config: ResolvedConfig) -> None:
        seen: dict[str, object] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            seen["content_type"] = request.headers.get("content-type")
            seen["body"] = request.content
            return httpx.Response(201, json={"id": 1})

        descriptor = RequestDescriptor(
            method="post", path="tasks", body='{"tasks":[]}', content_type="application/json"
        )
        with ApiClient(config, transport=httpx.MockTransport(handler)) as client:
            response = client.send(descriptor)

        assert response.status_code == 201
        assert seen == {
            "method": "POST",
            "url": "https://example.com/api/v1/tasks",
            "auth": "Bearer token",
            "content_type": "application/json",
            "body": b'{"tasks":[]}',
        }

    def test_timeout_raises_request_timeout_error(self, config: ResolvedConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with ApiClient(config, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(RequestTimeoutError, match="timed out after 5000ms"):
                client.send(RequestDescriptor(method="GET", path="blocks"))

    def test_connect_error_raises_connection_error(self, config: ResolvedConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with ApiClient(config, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ConnectionError_, match="connection refused"):
                client.send(RequestDescriptor(method="GET", path="blocks"))

    def test_send_outside_context_manager_fails(self, config: ResolvedConfig) -> None:
        with pytest.raises(AssertionError):
            ApiClient(config).send(RequestDescriptor(method="GET", path="blocks"))

    def test_invalid_base_url_raises_configuration_error(self) -> None:
        config = ResolvedConfig(base_url="https://example.com:abc/api")
        transport = httpx.MockTransport(lambda request: httpx.Response(200))

        with ApiClient(config, transport=transport) as client:
            with pytest.raises(ConfigurationError, match="Invalid API URL"):
                client.send(RequestDescriptor(method="GET", path="blocks"))

    def test_gzip_body_is_decoded_once(self, config: ResolvedConfig) -> None:
        payload = gzip.compress(b'{"ok":true}')

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                content=payload,
                headers={"content-encoding": "gzip", "content-type": "application/json"},
            )

        with ApiClient(config, transport=httpx.MockTransport(handler)) as client:
            response = client.send(RequestDescriptor(method="GET", path="blocks"))

        assert response.json() == {"ok": True}
        assert "content-encoding" not in response.headers

    def test_client_released_after_timeout(self, config: ResolvedConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("slow", request=request)

        client = ApiClient(config, transport=httpx.MockTransport(handler))
        with pytest.raises(RequestTimeoutError):
            with client:
                client.send(RequestDescriptor(method="GET", path="blocks"))
        assert client._client is None


# ---------------------------------------------------------------------------
# Whole-call deadline
# ---------------------------------------------------------------------------


class TestDeadline:
    @pytest.fixture
    def clock(self, monkeypatch: pytest.MonkeyPatch) -> dict[str, float]:
        now = {"value": 0.0}
        monkeypatch.setattr(
            sync_client, "time", SimpleNamespace(monotonic=lambda: now["value"])
        )
        return now

    def test_slow_body_hits_deadline(self, clock: dict[str, float]) -> None:
        config = ResolvedConfig(base_url="https://example.com/api/v1", timeout_ms=1000)
        sent: list[bytes] = []

        def slow_body():
            for _ in range(8):
                clock["value"] += 0.4
                sent.append(b"x")
                yield b"x"

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=slow_body())

        with ApiClient(config, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(RequestTimeoutError, match="timed out after 1000ms"):
                client.send(RequestDescriptor(method="GET", path="blocks"))

        assert len(sent) == 3

    def test_body_within_deadline_is_returned(self, clock: dict[str, float]) -> None:
        config = ResolvedConfig(base_url="https://example.com/api/v1", timeout_ms=1000)

        def body():
            for part in (b'{"ok"', b":true}"):
                clock["value"] += 0.2
                yield part

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=body())

        with ApiClient(config, transport=httpx.MockTransport(handler)) as client:
            response = client.send(RequestDescriptor(method="GET", path="blocks"))

        assert response.json() == {"ok": True}

    def test_dispatch_reports_timeout_for_slow_body(self, clock: dict[str, float]) -> None:
        config = ResolvedConfig(base_url="https://example.com/api/v1", timeout_ms=500)

        def slow_body():
            while True:
                clock["value"] += 0.4
                yield b" "

        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=slow_body()))

        with pytest.raises(RequestTimeoutError):
            dispatch(config, RequestDescriptor(method="GET", path="blocks"), transport=transport)


# ---------------------------------------------------------------------------
# dispatch
# ---------------------------------------------------------------------------


class TestDispatch:
    def test_builds_query_params_and_auth_headers(
        self, config: ResolvedConfig, capsys: pytest.CaptureFixture[str]
    ) -> None:
        captured: dict[str, object] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["method"] = request.method
            captured["url"] = request.url
            captured["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json={"ok": True})

        outcome = dispatch(
            config,
            RequestDescriptor(
                method="GET",
                path="daily-notes/search",
                query={"include": ["alpha", "beta"], "startDate": "today"},
            ),
            transport=httpx.MockTransport(handler),
        )

        assert outcome.success
        assert outcome.exit_code == 0
        url = captured["url"]
        assert isinstance(url, httpx.URL)
        assert captured["method"] == "GET"
        assert url.path == "/api/v1/daily-notes/search"
        assert url.params.get_list("include") == ["alpha", "beta"]
        assert url.params.get("startDate") == "today"
        assert captured["auth"] == "Bearer token"

        out = capsys.readouterr().out
        assert json.loads(out) == {"ok": True}

    def test_non_2xx_returns_failure_outcome(
        self, config: ResolvedConfig, capsys: pytest.CaptureFixture[str]
    ) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(500, json={"error": "boom"})
        )
        outcome = dispatch(config, RequestDescriptor(method="GET", path="x"), transport=transport)

        assert not outcome.success
        assert outcome.exit_code == 1

    def test_verbose_logs_request_line(
        self, config: ResolvedConfig, capsys: pytest.CaptureFixture[str]
    ) -> None:
        set_output(OutputManager(no_color=True, verbose=True))
        transport = httpx.MockTransport(lambda request: httpx.Response(204))

        dispatch(config, RequestDescriptor(method="get", path="tasks"), transport=transport)

        err = capsys.readouterr().err
        assert "[debug] GET https://example.com/api/v1/tasks" in err
        assert "[debug] HTTP 204 No Content" in err
