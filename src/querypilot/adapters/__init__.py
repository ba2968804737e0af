"""Adapters implementing the querypilot ports.

``querypilot.adapters.redis`` needs the ``redis`` extra and is not imported
here.
"""

from __future__ import annotations

from .memory import InMemoryCacheStore, InMemoryExecutor

__all__ = ["InMemoryCacheStore", "InMemoryExecutor"]
