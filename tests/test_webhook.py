"""Tests for webhook notification."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

import httpx
import pytest

from querypilot import QueryRequest, WebhookDeliveryError
from querypilot.decorators import WebhookNotifier, WebhookPayload, WebhookQueryBuilder

URL = "https://hooks.example.com/query"


class Recorder:
    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code)


class Opaque:
    pass


def _notifier(handler) -> WebhookNotifier:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WebhookNotifier(client=client)


@pytest.mark.asyncio
class TestWebhookQueryBuilder:
    async def test_posts_result_and_returns_it(self, builder):
        recorder = Recorder()
        notifier = _notifier(recorder)
        hooked = WebhookQueryBuilder(
            builder, notifier, URL, headers={"X-Api-Key": "secret"}
        )
        request = QueryRequest(model="user", limit=2)

        result = await hooked.query(request)
        await notifier.drain()

        assert result == await builder.query(request)
        (sent,) = recorder.requests
        assert sent.method == "POST"
        assert str(sent.url) == URL
        assert sent.headers["Content-Type"] == "application/json"
        assert sent.headers["X-Api-Key"] == "secret"
        body = json.loads(sent.content)
        assert [row["id"] for row in body["data"]] == [1, 2]
        assert body["meta"] == {"total": 5, "page": 1, "limit": 2, "total_pages": 3}
        assert datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))
        assert "query" not in body

    async def test_include_query(self, builder):
        recorder = Recorder()
        notifier = _notifier(recorder)
        hooked = WebhookQueryBuilder(builder, notifier, URL, include_query=True)
        request = QueryRequest(model="user", filters={"status": "ACTIVE"})

        await hooked.query(request)
        await notifier.drain()

        body = json.loads(recorder.requests[0].content)
        assert body["query"] == request.to_dict()

    async def test_delivery_failure_does_not_change_result(self, builder, caplog):
        notifier = _notifier(Recorder(status_code=500))
        hooked = WebhookQueryBuilder(builder, notifier, URL)
        request = QueryRequest(model="user")

        with caplog.at_level(logging.ERROR, logger="querypilot.webhook"):
            result = await hooked.query(request)
            await notifier.drain()

        assert result.meta.total == 5
        assert "Webhook error" in caplog.text
        assert "HTTP 500" in caplog.text
        assert notifier.pending == 0

    async def test_query_does_not_wait_for_delivery(self, builder):
        notifier = _notifier(Recorder())
        hooked = WebhookQueryBuilder(builder, notifier, URL)

        await hooked.query(QueryRequest(model="user"))

        assert notifier.pending == 1
        await notifier.drain()
        assert notifier.pending == 0

    async def test_closed_client_is_logged_not_raised(self, builder, caplog):
        client = httpx.AsyncClient(transport=httpx.MockTransport(Recorder()))
        await client.aclose()
        notifier = WebhookNotifier(client=client)
        hooked = WebhookQueryBuilder(builder, notifier, URL)

        with caplog.at_level(logging.ERROR, logger="querypilot.webhook"):
            result = await hooked.query(QueryRequest(model="user"))
            await notifier.drain()

        assert result.meta.total == 5
        assert "Webhook error" in caplog.text

    async def test_unserializable_row_is_logged_not_raised(
        self, executor, builder, caplog
    ):
        executor.add("blob", {"id": 1, "payload": Opaque()})
        recorder = Recorder()
        notifier = _notifier(recorder)
        hooked = WebhookQueryBuilder(builder, notifier, URL)

        with caplog.at_level(logging.ERROR, logger="querypilot.webhook"):
            result = await hooked.query(QueryRequest(model="blob"))
            await notifier.drain()

        assert [row["id"] for row in result.data] == [1]
        assert recorder.requests == []
        assert "Webhook error" in caplog.text


@pytest.mark.asyncio
class TestWebhookNotifier:
    async def test_send_raises_on_transport_error(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        payload = WebhookPayload(
            data=[], meta={}, timestamp=datetime.now(timezone.utc)
        )

        with pytest.raises(WebhookDeliveryError) as exc_info:
            await _notifier(refuse).send(URL, payload)

        assert exc_info.value.url == URL
        assert exc_info.value.reason == "refused"

    async def test_send_raises_on_http_error(self):
        payload = WebhookPayload(
            data=[], meta={}, timestamp=datetime.now(timezone.utc)
        )

        with pytest.raises(WebhookDeliveryError, match="HTTP 404"):
            await _notifier(Recorder(status_code=404)).send(URL, payload)


def test_payload_omits_query_when_absent():
    payload = WebhookPayload(
        data=[{"id": 1}],
        meta={"total": 1},
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    assert json.loads(payload.to_json()) == {
        "data": [{"id": 1}],
        "meta": {"total": 1},
        "timestamp": "2024-01-01T00:00:00Z",
    }


@pytest.mark.asyncio
async def test_send_wraps_serialization_failures():
    payload = WebhookPayload(
        data=[{"blob": Opaque()}], meta={}, timestamp=datetime.now(timezone.utc)
    )

    with pytest.raises(WebhookDeliveryError) as exc_info:
        await _notifier(Recorder()).send(URL, payload)

    assert exc_info.value.url == URL
