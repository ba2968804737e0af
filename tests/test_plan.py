"""Tests for QueryRequest and QueryPlanAssembler."""

from __future__ import annotations

from querypilot import QueryPilotConfig, QueryRequest
from querypilot.conditions import ArrayIn, Exact, RelationExistence
from querypilot.operators import ConditionOperator
from querypilot.plan import PaginationMode, QueryPlanAssembler
from querypilot.predicates import AndNode, FieldPredicate, NotNode, OrNode


class TestQueryRequest:
    def test_filters_are_resolved_on_construction(self):
        request = QueryRequest(
            model="user",
            filters={"status": ["ACTIVE"], "role": "ADMIN"},
            relation_filters={"posts": {"some": {"status": "PUBLISHED"}}},
        )
        assert request.filters == {
            "status": ArrayIn(("ACTIVE",)),
            "role": Exact("ADMIN"),
        }
        assert request.relation_filters == {
            "posts": (RelationExistence("some", {"status": Exact("PUBLISHED")}),)
        }

    def test_invalid_relation_filters_are_dropped(self):
        request = QueryRequest(relation_filters={"posts": None, "tags": "bad"})
        assert request.relation_filters == {}

    def test_single_or_group_is_accepted(self):
        request = QueryRequest(or_filters={"status": "ACTIVE"})
        assert request.or_filters == ({"status": Exact("ACTIVE")},)

    def test_merged_replaces_top_level_keys(self):
        base = QueryRequest(model="user", filters={"status": "ACTIVE"}, limit=5)
        merged = base.merged({"limit": 50, "search": "bob"})
        assert merged.limit == 50
        assert merged.search == "bob"
        assert merged.filters == base.filters
        assert base.limit == 5

    def test_with_filters_extra_wins(self):
        request = QueryRequest(filters={"tenantId": "evil", "status": "ACTIVE"})
        scoped = request.with_filters({"tenantId": "t1"})
        assert scoped.filters == {
            "tenantId": Exact("t1"),
            "status": Exact("ACTIVE"),
        }

    def test_to_dict_renders_raw_shapes(self):
        request = QueryRequest(
            model="user",
            filters={"age": {"from": 18}, "status": ["A"]},
            relation_filters={"posts": {"none": {"status": "DRAFT"}}},
        )
        assert request.to_dict() == {
            "model": "user",
            "search_mode": "contains",
            "filters": {"age": {"from": 18, "to": None}, "status": ["A"]},
            "relation_filters": {"posts": {"none": {"status": "DRAFT"}}},
        }


class TestAssembler:
    def test_default_offset_plan(self):
        plan = QueryPlanAssembler().assemble(QueryRequest(model="user"))
        assert plan.where is None
        assert plan.order_by == (("createdAt", "desc"),)
        assert plan.take == 10
        assert plan.skip == 0
        assert plan.cursor is None

    def test_limit_is_capped_unless_overridden(self):
        assembler = QueryPlanAssembler()
        request = QueryRequest(model="user", limit=500)
        assert assembler.assemble(request).take == 100
        assert assembler.assemble(request, max_limit=10_000).take == 500

    def test_config_defaults(self):
        config = QueryPilotConfig(
            default_limit=25, default_sort_field="name", default_sort_order="asc"
        )
        plan = QueryPlanAssembler(config).assemble(QueryRequest(model="user"))
        assert plan.take == 25
        assert plan.order_by == (("name", "asc"),)

    def test_where_combines_every_source(self):
        request = QueryRequest(
            model="user",
            filters={"status": "ACTIVE"},
            search="john",
            search_fields=["email"],
            or_filters=[{"role": "ADMIN"}, {"role": "OWNER"}],
            not_filters={"verified": False},
        )
        where = QueryPlanAssembler().build_where(request)
        assert where == AndNode(
            (
                FieldPredicate("status", ConditionOperator.EQ, "ACTIVE"),
                FieldPredicate("email", ConditionOperator.ICONTAINS, "john"),
                OrNode(
                    (
                        FieldPredicate("role", ConditionOperator.EQ, "ADMIN"),
                        FieldPredicate("role", ConditionOperator.EQ, "OWNER"),
                    )
                ),
                NotNode(FieldPredicate("verified", ConditionOperator.EQ, False)),
            )
        )

    def test_search_mode_selects_operator(self):
        request = QueryRequest(
            search="bob", search_fields=["name"], search_mode="prefix"
        )
        where = QueryPlanAssembler().build_where(request)
        assert where == FieldPredicate("name", ConditionOperator.ISTARTSWITH, "bob")

    def test_cursor_plan_first_page(self):
        plan = QueryPlanAssembler().assemble(
            QueryRequest(model="user", limit=2), PaginationMode.CURSOR
        )
        assert plan.take == 3
        assert plan.skip == 0
        assert plan.cursor is None
        assert plan.order_by == (("createdAt", "desc"), ("id", "desc"))

    def test_cursor_plan_with_cursor(self):
        plan = QueryPlanAssembler().assemble(
            QueryRequest(
                model="user",
                limit=2,
                cursor="abc",
                cursor_field="slug",
                sort_by="slug",
                sort_order="asc",
            ),
            PaginationMode.CURSOR,
        )
        assert plan.skip == 1
        assert plan.cursor == {"slug": "abc"}
        assert plan.order_by == (("slug", "asc"),)

    def test_count_plan_has_no_window(self):
        plan = QueryPlanAssembler().assemble_count(
            QueryRequest(model="user", page=3, filters={"status": "ACTIVE"})
        )
        assert plan.take is None
        assert plan.skip is None
        assert plan.order_by == ()
        assert plan.where == FieldPredicate("status", ConditionOperator.EQ, "ACTIVE")

    def test_plan_to_dict(self):
        plan = QueryPlanAssembler().assemble(
            QueryRequest(model="user", filters={"status": "ACTIVE"}, limit=5)
        )
        assert plan.to_dict() == {
            "model": "user",
            "where": {"op": "=", "attr": "status", "val": "ACTIVE"},
            "order_by": [["createdAt", "desc"]],
            "take": 5,
            "skip": 0,
        }
