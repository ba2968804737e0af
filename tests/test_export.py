"""Tests for CSV and JSON export."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime

import pytest

from querypilot import QueryBuilder, QueryRequest
from querypilot.decorators import (
    query_and_export_csv,
    query_and_export_json,
    to_csv,
    to_json,
)


class TestToCsv:
    def test_empty(self):
        assert to_csv([]) == ""

    def test_header_from_first_row(self):
        rows = [{"id": 1, "name": "a"}, {"id": 2, "name": "b", "extra": "x"}]
        assert to_csv(rows) == "id,name\n1,a\n2,b"

    def test_value_normalization(self):
        rows = [
            {
                "flag": True,
                "off": False,
                "missing": None,
                "ratio": 1.5,
                "tags": ["a", "b"],
                "when": datetime(2024, 1, 2, 3, 4, 5),
            }
        ]
        assert to_csv(rows).splitlines()[1] == (
            'true,false,,1.5,"[""a"", ""b""]",2024-01-02T03:04:05'
        )

    def test_escaping_survives_an_rfc4180_reader(self):
        tricky = [
            {"id": 1, "text": 'say "hi", then leave'},
            {"id": 2, "text": "line one\nline two"},
            {"id": 3, "text": "carriage\rreturn"},
            {"id": 4, "text": "plain"},
        ]

        parsed = list(csv.DictReader(io.StringIO(to_csv(tricky), newline="")))

        assert [row["text"] for row in parsed] == [row["text"] for row in tricky]

    def test_no_trailing_newline(self):
        assert not to_csv([{"a": 1}]).endswith("\n")


class TestToJson:
    def test_pretty(self):
        assert to_json([{"a": 1}]) == '[\n  {\n    "a": 1\n  }\n]'

    def test_compact(self):
        assert to_json([{"a": 1, "b": [1, 2]}], pretty=False) == '[{"a":1,"b":[1,2]}]'


@pytest.mark.asyncio
class TestQueryAndExport:
    async def test_csv_export_bypasses_max_limit(self, executor):
        executor.add("event", *({"id": i, "kind": "click"} for i in range(150)))

        output = await query_and_export_csv(
            QueryBuilder(executor), QueryRequest(model="event", limit=5)
        )

        lines = output.split("\n")
        assert lines[0] == "id,kind"
        assert len(lines) == 151

    async def test_row_cap(self, builder):
        output = await query_and_export_csv(
            builder, QueryRequest(model="user"), max_rows=2
        )
        assert len(output.split("\n")) == 3

    async def test_json_export(self, builder):
        output = await query_and_export_json(
            builder,
            QueryRequest(model="user", projection={"select": ["id"]}),
            pretty=False,
        )
        assert json.loads(output) == [{"id": i} for i in (1, 2, 3, 4, 5)]
