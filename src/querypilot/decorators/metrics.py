"""Query timing: slow-query detection, an observer hook and Prometheus metrics."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from prometheus_client import Counter, Histogram
from pydantic import BaseModel, ConfigDict

from ..response import PagedResponse
from .base import QueryBuilderDecorator

if TYPE_CHECKING:
    from collections.abc import Callable

    from prometheus_client import CollectorRegistry

    from ..ports.builder import IQueryBuilder
    from ..request import QueryRequest

logger = logging.getLogger("querypilot.metrics")

SLOW_QUERY_THRESHOLD_MS = 1000.0


class QueryMetrics(BaseModel):
    """Timing of one list query. ``query_time`` is in milliseconds."""

    model_config = ConfigDict(frozen=True)

    query_time: float
    result_count: int
    is_slow: bool
    timestamp: datetime


class QueryMetricsEvent(BaseModel):
    """What the observer receives: the metrics plus the request that produced them."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    metrics: QueryMetrics
    request: Any


class MonitoredPagedResponse(PagedResponse):
    metrics: QueryMetrics


class MetricsRecorder:
    """
    Turns elapsed times into :class:`QueryMetrics` and fans them out.

    Holds one observer slot; registering a new observer replaces the
    previous one.  When a ``registry`` is given, durations are also
    recorded as Prometheus metrics:

      - ``querypilot_query_duration_seconds{model}``
      - ``querypilot_slow_queries_total{model}``
    """

    def __init__(
        self,
        slow_threshold_ms: float = SLOW_QUERY_THRESHOLD_MS,
        registry: CollectorRegistry | None = None,
    ) -> None:
        self.slow_threshold_ms = slow_threshold_ms
        self._callback: Callable[[QueryMetricsEvent], None] | None = None
        self._histogram: Histogram | None = None
        self._slow_counter: Counter | None = None
        if registry is not None:
            self._histogram = Histogram(
                "querypilot_query_duration_seconds",
                "List query duration",
                ["model"],
                registry=registry,
            )
            self._slow_counter = Counter(
                "querypilot_slow_queries_total",
                "Queries slower than the configured threshold",
                ["model"],
                registry=registry,
            )

    def on_query_metrics(
        self, callback: Callable[[QueryMetricsEvent], None] | None
    ) -> None:
        """Register the observer, replacing any earlier one. ``None`` clears it."""
        self._callback = callback

    def record(
        self, request: QueryRequest, elapsed_ms: float, result_count: int
    ) -> QueryMetrics:
        is_slow = elapsed_ms > self.slow_threshold_ms
        metrics = QueryMetrics(
            query_time=elapsed_ms,
            result_count=result_count,
            is_slow=is_slow,
            timestamp=datetime.now(timezone.utc),
        )
        if is_slow:
            logger.warning(
                "Slow query detected: %.2fms (model=%s, page=%s, filters=%s)",
                elapsed_ms,
                request.model,
                request.page,
                request.to_dict().get("filters"),
            )
        model = request.model or "unknown"
        if self._histogram is not None:
            self._histogram.labels(model=model).observe(elapsed_ms / 1000.0)
        if self._slow_counter is not None and is_slow:
            self._slow_counter.labels(model=model).inc()
        if self._callback is not None:
            self._callback(QueryMetricsEvent(metrics=metrics, request=request))
        return metrics


class MonitoredQueryBuilder(QueryBuilderDecorator):
    """
    Times ``query`` and attaches the metrics to the response.

    ``result_count`` is the total matching rows (``meta.total``), not the
    page length.  Failed queries are not recorded.
    """

    def __init__(
        self, inner: IQueryBuilder, recorder: MetricsRecorder | None = None
    ) -> None:
        super().__init__(inner)
        self._recorder = recorder or MetricsRecorder()

    @property
    def recorder(self) -> MetricsRecorder:
        return self._recorder

    async def query(
        self, request: QueryRequest, *, max_limit: int | None = None
    ) -> MonitoredPagedResponse:
        start = time.perf_counter()
        result = await self._inner.query(request, max_limit=max_limit)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        metrics = self._recorder.record(request, elapsed_ms, result.meta.total)
        return MonitoredPagedResponse(
            data=result.data, meta=result.meta, metrics=metrics
        )
