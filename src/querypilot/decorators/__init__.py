"""Decorators layered over :class:`~querypilot.ports.IQueryBuilder`."""

from __future__ import annotations

from .base import QueryBuilderDecorator
from .batch import NamedQuery, batch_query
from .caching import CachingQueryBuilder, generate_cache_key
from .export import query_and_export_csv, query_and_export_json, to_csv, to_json
from .group_by import group_by_query
from .metrics import (
    MetricsRecorder,
    MonitoredPagedResponse,
    MonitoredQueryBuilder,
    QueryMetrics,
    QueryMetricsEvent,
)
from .presets import PresetRegistry
from .soft_delete import SoftDeleteQueryBuilder, build_soft_delete_filter
from .tenant import TenantQueryBuilder, build_tenant_filter
from .webhook import WebhookNotifier, WebhookPayload, WebhookQueryBuilder

__all__ = [
    "CachingQueryBuilder",
    "MetricsRecorder",
    "MonitoredPagedResponse",
    "MonitoredQueryBuilder",
    "NamedQuery",
    "PresetRegistry",
    "QueryBuilderDecorator",
    "QueryMetrics",
    "QueryMetricsEvent",
    "SoftDeleteQueryBuilder",
    "TenantQueryBuilder",
    "WebhookNotifier",
    "WebhookPayload",
    "WebhookQueryBuilder",
    "batch_query",
    "build_soft_delete_filter",
    "build_tenant_filter",
    "generate_cache_key",
    "group_by_query",
    "query_and_export_csv",
    "query_and_export_json",
    "to_csv",
    "to_json",
]
