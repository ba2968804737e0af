"""Tests for the query preset registry."""

from __future__ import annotations

import pytest

from querypilot import PresetNotFoundError, QueryRequest
from querypilot.decorators import PresetRegistry


@pytest.fixture
def presets(builder):
    return PresetRegistry(builder)


def test_save_and_load(presets):
    request = QueryRequest(model="user", filters={"status": "ACTIVE"})
    presets.save("active-users", request)
    assert presets.load("active-users") is request


def test_save_accepts_mappings(presets):
    presets.save("admins", {"model": "user", "filters": {"role": "ADMIN"}})
    assert presets.load("admins").model == "user"


def test_missing_preset(presets):
    with pytest.raises(PresetNotFoundError) as exc_info:
        presets.load("nope")
    assert str(exc_info.value) == 'Preset "nope" not found'
    assert exc_info.value.to_dict()["error"] == "PRESET_NOT_FOUND"


def test_names_and_delete(presets):
    presets.save("a", QueryRequest(model="user"))
    presets.save("b", QueryRequest(model="order"))

    assert presets.names() == ["a", "b"]
    assert presets.delete("a") is True
    assert presets.delete("a") is False
    assert presets.names() == ["b"]


def test_save_replaces(presets):
    presets.save("a", QueryRequest(model="user"))
    presets.save("a", QueryRequest(model="order"))
    assert presets.load("a").model == "order"


@pytest.mark.asyncio
async def test_execute_applies_overrides(presets):
    presets.save("active", QueryRequest(model="user", filters={"status": "ACTIVE"}))

    result = await presets.execute("active", {"limit": 1, "page": 2})

    assert [row["id"] for row in result.data] == [3]
    assert result.meta.total == 3
    assert presets.load("active").limit is None


@pytest.mark.asyncio
async def test_execute_unknown_preset(presets):
    with pytest.raises(PresetNotFoundError):
        await presets.execute("ghost")
