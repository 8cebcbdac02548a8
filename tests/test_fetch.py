"""Tests for policy header retrieval."""

from __future__ import annotations

import httpx
import pytest

from csp_editor.config.loader import load_settings
from csp_editor.fetch import _build_client, fetch_policy_header, load_initial_directives
from csp_editor.testing import ScriptedIO

POLICY = "default-src 'self'; img-src 'self' data:"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _serving(headers: dict[str, str]):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers=headers, text="<html></html>")
    return handler


class TestFetchPolicyHeader:
    @pytest.mark.asyncio
    async def test_returns_header_value(self):
        async with _client(_serving({"Content-Security-Policy": POLICY})) as client:
            result = await fetch_policy_header("https://example.com", client=client)
        assert result == POLICY

    @pytest.mark.asyncio
    async def test_header_lookup_case_insensitive(self):
        async with _client(_serving({"CONTENT-SECURITY-POLICY": POLICY})) as client:
            result = await fetch_policy_header("https://example.com", client=client)
        assert result == POLICY

    @pytest.mark.asyncio
    async def test_missing_header(self):
        io = ScriptedIO()
        async with _client(_serving({})) as client:
            result = await fetch_policy_header("https://example.com", client=client, io=io)
        assert result is None
        assert io.output == ["No Content Security Policy found for https://example.com"]

    @pytest.mark.asyncio
    async def test_empty_header_treated_as_missing(self):
        async with _client(_serving({"Content-Security-Policy": ""})) as client:
            result = await fetch_policy_header("https://example.com", client=client)
        assert result is None

    @pytest.mark.asyncio
    async def test_non_2xx_response_still_read(self):
        def handler(request):
            return httpx.Response(404, headers={"Content-Security-Policy": POLICY})

        async with _client(handler) as client:
            result = await fetch_policy_header("https://example.com/missing", client=client)
        assert result == POLICY

    @pytest.mark.asyncio
    async def test_configured_header_name(self):
        settings = load_settings(header_name="Content-Security-Policy-Report-Only")
        headers = {
            "Content-Security-Policy": "default-src 'none'",
            "Content-Security-Policy-Report-Only": POLICY,
        }
        async with _client(_serving(headers)) as client:
            result = await fetch_policy_header("https://example.com", settings=settings, client=client)
        assert result == POLICY

    def test_client_built_from_settings(self):
        settings = load_settings(user_agent="csp-editor-test", request_timeout=3.0, follow_redirects=False)
        client = _build_client(settings)
        assert client.headers["user-agent"] == "csp-editor-test"
        assert client.timeout.read == 3.0
        assert client.follow_redirects is False


class TestFetchFailures:
    @pytest.mark.asyncio
    async def test_connect_error(self):
        def handler(request):
            raise httpx.ConnectError("Name or service not known", request=request)

        io = ScriptedIO()
        async with _client(handler) as client:
            result = await fetch_policy_header("https://nowhere.invalid", client=client, io=io)
        assert result is None
        assert len(io.output) == 1
        assert io.output[0].startswith("Error fetching the URL: could not connect")

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        io = ScriptedIO()
        async with _client(handler) as client:
            result = await fetch_policy_header("https://slow.example.com", client=client, io=io)
        assert result is None
        assert io.output == ["Error fetching the URL: request timed out"]

    @pytest.mark.asyncio
    async def test_other_http_error(self):
        def handler(request):
            raise httpx.RemoteProtocolError("peer closed connection", request=request)

        io = ScriptedIO()
        async with _client(handler) as client:
            result = await fetch_policy_header("https://example.com", client=client, io=io)
        assert result is None
        assert io.output == ["Error fetching the URL: peer closed connection"]

    @pytest.mark.asyncio
    async def test_url_without_scheme(self):
        io = ScriptedIO()
        result = await fetch_policy_header("example.com", io=io)
        assert result is None
        assert io.output[0].startswith("Error fetching the URL:")

    @pytest.mark.asyncio
    async def test_failure_without_io_is_silent(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            assert await fetch_policy_header("https://example.com", client=client) is None


class TestLoadInitialDirectives:
    @pytest.mark.asyncio
    async def test_parses_fetched_policy(self):
        async with _client(_serving({"Content-Security-Policy": POLICY})) as client:
            directives = await load_initial_directives("https://example.com", client=client)
        assert directives == {"default-src": ["'self'"], "img-src": ["'self'", "data:"]}
        assert list(directives) == ["default-src", "img-src"]

    @pytest.mark.asyncio
    async def test_empty_on_missing(self):
        async with _client(_serving({})) as client:
            assert await load_initial_directives("https://example.com", client=client) == {}

    @pytest.mark.asyncio
    async def test_empty_on_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            assert await load_initial_directives("https://example.com", client=client) == {}
