"""
Test suite for the transport adapters.

This module tests, using httpx.MockTransport:
- The relay request envelope and reply parsing
- Relay failures mapped to TransportError
- Direct requests: headers, redirects and Set-Cookie reporting

Run with: pytest tests/test_transport.py -v
"""
from __future__ import annotations

import json

import httpx
import pytest

from src.survey_crawler.config import DEFAULT_USER_AGENT
from src.survey_crawler.errors import TransportError
from src.survey_crawler.models.envelope import HttpMethod, TransportRequest
from src.survey_crawler.transport.direct import DirectTransport
from src.survey_crawler.transport.relay import RelayTransport


RELAY_URL = "https://relay.example.com/fetch"
SURVEY_URL = "https://survey.example.jp/s/RJP12345"


def post_request() -> TransportRequest:
    return TransportRequest(
        url=SURVEY_URL,
        method=HttpMethod.POST,
        headers={"Cookie": "sid=abc", "Referer": SURVEY_URL},
        body="mode=init&agree=on",
    )


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestRelayTransport:
    """Test suite for the relay envelope."""

    @pytest.mark.asyncio
    async def test_request_envelope(self):
        captured = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"status": 200, "html": "<p>ok</p>", "set_cookie": []})

        async with mock_client(handler) as client:
            async with RelayTransport(RELAY_URL, client=client) as relay:
                await relay.send(post_request())

        assert str(captured[0].url) == RELAY_URL
        assert captured[0].method == "POST"
        assert json.loads(captured[0].content) == {
            "url": SURVEY_URL,
            "method": "POST",
            "headers": {"Cookie": "sid=abc", "Referer": SURVEY_URL},
            "data": "mode=init&agree=on",
        }

    @pytest.mark.asyncio
    async def test_get_request_sends_null_data(self):
        captured = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(json.loads(request.content))
            return httpx.Response(200, json={"status": 200, "html": ""})

        async with mock_client(handler) as client:
            async with RelayTransport(RELAY_URL, client=client) as relay:
                await relay.send(TransportRequest(url=SURVEY_URL))

        assert captured[0]["method"] == "GET"
        assert captured[0]["data"] is None

    @pytest.mark.asyncio
    async def test_reply_is_parsed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={
                "status": 302,
                "location": "/s/next",
                "html": "",
                "set_cookie": ["sid=1; Path=/", "lang=ja"],
                "error": None,
            })

        async with mock_client(handler) as client:
            async with RelayTransport(RELAY_URL, client=client) as relay:
                envelope = await relay.send(post_request())

        assert envelope.http_status == 302
        assert envelope.redirect_location == "/s/next"
        assert envelope.set_cookie_headers == ["sid=1; Path=/", "lang=ja"]
        assert envelope.is_redirect

    @pytest.mark.asyncio
    async def test_single_cookie_string_and_stray_location(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={
                "status": 200,
                "location": "/ignored",
                "html": "<p>page</p>",
                "set_cookie": "sid=1",
            })

        async with mock_client(handler) as client:
            async with RelayTransport(RELAY_URL, client=client) as relay:
                envelope = await relay.send(post_request())

        assert envelope.set_cookie_headers == ["sid=1"]
        assert envelope.redirect_location is None
        assert envelope.body_html == "<p>page</p>"

    @pytest.mark.asyncio
    async def test_relay_error_is_verbatim(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, json={"error": "Upstream fetch failed: ECONNRESET"})

        async with mock_client(handler) as client:
            async with RelayTransport(RELAY_URL, client=client) as relay:
                with pytest.raises(TransportError, match="^Upstream fetch failed: ECONNRESET$"):
                    await relay.send(post_request())

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response,message", [
        (httpx.Response(200, text="<html>not json</html>"), "non-JSON"),
        (httpx.Response(200, json=[1, 2]), "malformed"),
        (httpx.Response(500, json={"status": 200}), "HTTP 500"),
        (httpx.Response(200, json={"html": "x"}), "no valid status"),
        (httpx.Response(200, json={"status": True}), "no valid status"),
    ])
    async def test_unusable_replies(self, response, message):
        async with mock_client(lambda request: response) as client:
            async with RelayTransport(RELAY_URL, client=client) as relay:
                with pytest.raises(TransportError, match=message):
                    await relay.send(post_request())

    @pytest.mark.asyncio
    async def test_network_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with mock_client(handler) as client:
            async with RelayTransport(RELAY_URL, client=client) as relay:
                with pytest.raises(TransportError, match="Relay request failed"):
                    await relay.send(post_request())

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        async with mock_client(handler) as client:
            async with RelayTransport(RELAY_URL, timeout_ms=1500, client=client) as relay:
                with pytest.raises(TransportError, match="timed out after 1500ms"):
                    await relay.send(post_request())

    @pytest.mark.asyncio
    async def test_malformed_endpoint(self):
        async with mock_client(lambda request: httpx.Response(200, json={"status": 200})) as client:
            async with RelayTransport("https://relay.example.com/fetch\x00", client=client) as relay:
                with pytest.raises(TransportError, match="Relay request failed"):
                    await relay.send(post_request())

    def test_endpoint_is_required(self):
        with pytest.raises(ValueError):
            RelayTransport("")

    @pytest.mark.asyncio
    async def test_send_outside_context_manager(self):
        relay = RelayTransport(RELAY_URL)

        with pytest.raises(RuntimeError):
            await relay.send(post_request())

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self):
        relay = RelayTransport(RELAY_URL)

        async with relay:
            client = relay.client
            assert not client.is_closed

        assert client.is_closed


class TestDirectTransport:
    """Test suite for direct requests."""

    @pytest.mark.asyncio
    async def test_request_is_forwarded(self):
        captured = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, text="<p>ok</p>")

        async with mock_client(handler) as client:
            async with DirectTransport(client=client) as transport:
                envelope = await transport.send(post_request())

        sent = captured[0]
        assert sent.method == "POST"
        assert str(sent.url) == SURVEY_URL
        assert sent.content == b"mode=init&agree=on"
        assert sent.headers["cookie"] == "sid=abc"
        assert sent.headers["referer"] == SURVEY_URL
        assert sent.headers["user-agent"] == DEFAULT_USER_AGENT
        assert envelope.http_status == 200
        assert envelope.body_html == "<p>ok</p>"

    @pytest.mark.asyncio
    async def test_redirect_and_cookies_are_reported(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers=[
                ("Location", "/s/next"),
                ("Set-Cookie", "sid=1; Path=/"),
                ("Set-Cookie", "lang=ja"),
            ])

        async with mock_client(handler) as client:
            async with DirectTransport(client=client) as transport:
                envelope = await transport.send(post_request())

        assert envelope.http_status == 302
        assert envelope.redirect_location == "/s/next"
        assert envelope.set_cookie_headers == ["sid=1; Path=/", "lang=ja"]

    @pytest.mark.asyncio
    async def test_client_cookie_store_is_not_reused(self):
        captured = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, headers=[("Set-Cookie", "sid=1; Path=/")], text="")

        async with mock_client(handler) as client:
            async with DirectTransport(client=client) as transport:
                await transport.send(TransportRequest(url=SURVEY_URL))
                await transport.send(TransportRequest(url=SURVEY_URL))

        assert "cookie" not in captured[1].headers

    @pytest.mark.asyncio
    async def test_network_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with mock_client(handler) as client:
            async with DirectTransport(client=client) as transport:
                with pytest.raises(TransportError, match="Request failed"):
                    await transport.send(TransportRequest(url=SURVEY_URL))

    @pytest.mark.asyncio
    async def test_malformed_url(self):
        async with mock_client(lambda request: httpx.Response(200)) as client:
            async with DirectTransport(client=client) as transport:
                with pytest.raises(TransportError, match="Request failed"):
                    await transport.send(TransportRequest(url="https://survey.example.jp/s/\x00"))
