"""Fire-and-forget webhook notification of query results."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, ConfigDict

from ..exceptions import WebhookDeliveryError
from .base import QueryBuilderDecorator

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..ports.builder import IQueryBuilder
    from ..request import QueryRequest
    from ..response import PagedResponse

logger = logging.getLogger("querypilot.webhook")


class WebhookPayload(BaseModel):
    """POST body: ``{data, meta, timestamp, query?}``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: list[Any]
    meta: dict[str, Any]
    timestamp: datetime
    query: dict[str, Any] | None = None

    def to_json(self) -> str:
        exclude = {"query"} if self.query is None else None
        return self.model_dump_json(exclude=exclude)


class WebhookNotifier:
    """
    Posts JSON payloads with ``httpx``.

    ``send`` raises :class:`WebhookDeliveryError`; ``notify`` schedules
    ``send`` as a background task whose failure is only logged.  Pending
    tasks are tracked so ``drain()`` can await them on shutdown.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self.timeout = timeout
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def send(
        self,
        url: str,
        payload: WebhookPayload,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        merged = {"Content-Type": "application/json", **(headers or {})}
        try:
            body = payload.to_json()
            if self._client is not None:
                response = await self._client.post(url, content=body, headers=merged)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, content=body, headers=merged)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise WebhookDeliveryError(url, f"HTTP {e.response.status_code}") from e
        except Exception as e:  # noqa: BLE001
            raise WebhookDeliveryError(url, str(e) or type(e).__name__) from e
        logger.debug("Webhook delivered to %s", url)

    async def _deliver(
        self,
        url: str,
        payload: WebhookPayload,
        headers: Mapping[str, str] | None,
    ) -> None:
        try:
            await self.send(url, payload, headers)
        except Exception as e:  # noqa: BLE001
            logger.error("Webhook error: %s", e)

    def notify(
        self,
        url: str,
        payload: WebhookPayload,
        headers: Mapping[str, str] | None = None,
    ) -> asyncio.Task[None]:
        task = asyncio.create_task(self._deliver(url, payload, headers))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every scheduled delivery to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))


class WebhookQueryBuilder(QueryBuilderDecorator):
    """
    Runs the query, schedules a webhook with the result and returns the
    result unchanged without waiting for delivery.
    """

    def __init__(
        self,
        inner: IQueryBuilder,
        notifier: WebhookNotifier,
        url: str,
        headers: Mapping[str, str] | None = None,
        include_query: bool = False,
    ) -> None:
        super().__init__(inner)
        self._notifier = notifier
        self._url = url
        self._headers = dict(headers or {})
        self._include_query = include_query

    async def query(
        self, request: QueryRequest, *, max_limit: int | None = None
    ) -> PagedResponse:
        result = await self._inner.query(request, max_limit=max_limit)
        payload = WebhookPayload(
            data=result.data,
            meta=result.meta.model_dump(),
            timestamp=datetime.now(timezone.utc),
            query=request.to_dict() if self._include_query else None,
        )
        self._notifier.notify(self._url, payload, self._headers)
        return result
