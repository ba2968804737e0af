"""Named, reusable query requests."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..exceptions import PresetNotFoundError
from ..request import QueryRequest

if TYPE_CHECKING:
    from ..ports.builder import IQueryBuilder
    from ..response import PagedResponse

logger = logging.getLogger("querypilot.presets")


class PresetRegistry:
    """
    Caller-owned store of named :class:`QueryRequest` presets.

    Saving under an existing name replaces the preset.  ``execute`` applies
    overrides key by key on top of the preset before running it.
    """

    def __init__(self, builder: IQueryBuilder) -> None:
        self._builder = builder
        self._presets: dict[str, QueryRequest] = {}

    def save(self, name: str, request: QueryRequest | Mapping[str, Any]) -> None:
        if isinstance(request, Mapping):
            request = QueryRequest(**request)
        if name in self._presets:
            logger.debug("Replacing preset %s", name)
        self._presets[name] = request

    def load(self, name: str) -> QueryRequest:
        try:
            return self._presets[name]
        except KeyError:
            raise PresetNotFoundError(name) from None

    def names(self) -> list[str]:
        return list(self._presets)

    def delete(self, name: str) -> bool:
        """Remove a preset; returns whether one was removed."""
        return self._presets.pop(name, None) is not None

    async def execute(
        self, name: str, overrides: Mapping[str, Any] | None = None
    ) -> PagedResponse:
        request = self.load(name).merged(overrides)
        logger.debug("Executing preset %s", name)
        return await self._builder.query(request)
