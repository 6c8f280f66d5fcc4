"""
Plan-level behaviour: document unwrapping, tree-wide ranges, edges, sizing and detail rows.
"""

import json
import logging

import pytest

from dbviz_parsers.query_plan import MetricRange, QueryPlan, load_plan, node_details
from dbviz_parsers.utils_plan import PlanDialect

from plan_documents import MARIADB_PLAN, MYSQL_PLAN, PG_PLAN


class TestLoadPlan:
    def test_postgres_list_document(self):
        plan = load_plan(PG_PLAN)
        assert isinstance(plan, QueryPlan)
        assert plan.dialect is PlanDialect.Postgres
        assert plan.root.node_type == "Limit"
        assert plan.metadata == {"Planning Time": 0.21, "Execution Time": 3.75}

    def test_postgres_plan_object(self):
        plan = load_plan(PG_PLAN[0])
        assert plan.root.node_type == "Limit"

    def test_bare_plan_node(self):
        plan = load_plan(PG_PLAN[0]["Plan"])
        assert plan.root.node_type == "Limit"
        assert plan.metadata == {}

    def test_mysql_query_block(self):
        plan = load_plan(MYSQL_PLAN)
        assert plan.dialect is PlanDialect.MySQL
        assert plan.root.node_type == "query_block"

    def test_mariadb_query_block(self):
        plan = load_plan(MARIADB_PLAN)
        assert plan.dialect is PlanDialect.MariaDB
        assert len(plan.nodes()) == 4

    def test_query_block_with_siblings(self):
        document = {"query_optimization": {"r_total_time_ms": 0.05}, **MARIADB_PLAN}
        plan = load_plan(document)
        assert plan.dialect is PlanDialect.MariaDB
        assert plan.root.node_type == "query_block"
        assert len(plan.nodes()) == 4
        assert plan.metadata == {"query_optimization": {"r_total_time_ms": 0.05}}
        assert plan.to_json()["query_optimization"] == {"r_total_time_ms": 0.05}

    def test_query_block_not_a_mapping_is_root(self):
        plan = load_plan({"query_block": [1, 2], "Node Type": "Result"})
        assert plan.root.node_type == "Result"
        assert plan.metadata == {}

    def test_unrecognized_is_not_fatal(self, caplog):
        with caplog.at_level(logging.WARNING, logger="dbviz_parsers.query_plan"):
            plan = load_plan({"Node Type": "Mystery", "children": [{"Node Type": "Leaf"}]})
        assert plan.dialect is PlanDialect.Unrecognized
        assert [n.node_type for n in plan.nodes()] == ["Mystery", "Leaf"]
        assert plan.cost_range == MetricRange(0.0, 0.0)
        assert "unrecognized plan dialect" in caplog.text

    @pytest.mark.parametrize("document, error", [
        ([], ValueError),
        ({}, ValueError),
        ("EXPLAIN", TypeError),
        ([42], TypeError),
    ])
    def test_structural_errors(self, document, error):
        with pytest.raises(error):
            load_plan(document)

    def test_reload_builds_new_tree(self):
        first, second = load_plan(PG_PLAN), load_plan(PG_PLAN)
        assert first.root is not second.root
        assert first.to_json() == second.to_json()


class TestRangesAndEdges:
    def test_postgres_ranges(self):
        plan = load_plan(PG_PLAN)
        assert plan.cost_range == MetricRange(0.0, 100.0)
        assert plan.rows_range == MetricRange(10.0, 500.0)

    def test_mysql_ranges(self):
        plan = load_plan(MYSQL_PLAN)
        assert plan.cost_range == MetricRange(0.0, 1250.0)
        assert plan.rows_range == MetricRange(0.0, 2000.0)

    def test_edges_follow_links(self):
        plan = load_plan(PG_PLAN)
        edges = plan.edges()
        assert len(edges) == len(plan.nodes()) - 1
        assert [(e.source.node_type, e.target.node_type) for e in edges] == [
            ("Limit", "Hash Join"),
            ("Hash Join", "Seq Scan"),
            ("Hash Join", "Hash"),
            ("Hash", "Index Scan"),
        ]
        assert edges[1].cost == 90.0
        assert edges[1].rows == 500

    def test_edge_metrics_belong_to_target(self):
        for edge in load_plan(MYSQL_PLAN).edges():
            assert (edge.cost, edge.rows) == (edge.target.self_cost, edge.target.row_estimate)


class TestSizing:
    def test_scale(self):
        scale = MetricRange(0.0, 100.0)
        assert scale.scale(0.0) == 10.0
        assert scale.scale(100.0) == 30.0
        assert scale.scale(50.0) == 20.0

    def test_degenerate_range(self):
        assert MetricRange(5.0, 5.0).scale(5.0) == 20.0

    def test_custom_output_range(self):
        assert MetricRange(0.0, 10.0).scale(5.0, low=0.0, high=1.0) == 0.5

    def test_node_size(self):
        plan = load_plan(PG_PLAN)
        seq_scan, hash_node = plan.nodes()[2], plan.nodes()[3]
        assert plan.node_size(seq_scan, "cost") == pytest.approx(28.0)
        assert plan.node_size(hash_node, "cost") == 10.0
        assert plan.node_size(seq_scan, "rows") == pytest.approx(30.0)
        assert plan.node_size(seq_scan) == 15.0


class TestNodeDetails:
    def test_postgres_scan(self):
        seq_scan = load_plan(PG_PLAN).nodes()[2]
        assert node_details(seq_scan) == [
            ("Node Type", "Seq Scan"),
            ("Relation Name", "ORDERS"),
            ("Cost", "90.00"),
            ("Plan Rows", "500"),
            ("Plan Width", "8"),
            ("Parent Relationship", "Outer"),
            ("Alias", "o"),
        ]

    def test_limit_skips_cost_block(self):
        limit = load_plan(PG_PLAN).root
        assert node_details(limit) == [
            ("Node Type", "Limit"),
            ("Plan Rows", "10"),
            ("Plan Width", "16"),
        ]

    def test_mysql_table(self):
        orders = load_plan(MYSQL_PLAN).nodes()[3]
        details = dict(node_details(orders))
        assert details["Relation Name"] == "ORDERS"
        assert details["Cost"] == "210.00"
        assert details["access_type"] == "ALL"
        assert json.loads(details["used_columns"]) == ["id", "customer_id"]
        assert "cost_info" not in details
        assert "table_name" not in details

    def test_mariadb_table(self):
        table = load_plan(MARIADB_PLAN).nodes()[-1]
        details = node_details(table)
        assert details[:3] == [("Node Type", "Full Table Scan"), ("Relation Name", "T1"), ("Cost", "2.75")]
        assert ("r_rows", "998") in details
        assert "r_total_time_ms" not in dict(details)

    def test_unrecognized_has_no_cost(self):
        plan = load_plan({"Node Type": "Mystery", "flag": True, "note": None})
        assert node_details(plan.root) == [("Node Type", "Mystery"), ("flag", "true"), ("note", "null")]


class TestToJson:
    def test_serializable(self):
        res = load_plan(PG_PLAN).to_json()
        assert json.loads(json.dumps(res)) == res
        assert res["Dialect"] == "PostgreSQL"
        assert res["Cost Range"] == [0.0, 100.0]
        assert res["Execution Time"] == 3.75

    def test_terminology(self):
        res = load_plan(MYSQL_PLAN).to_json("PostgreSQL")
        assert res["Plan"]["data"]["node_type"] == "Result"
        assert res["Plan"]["children"][0]["data"]["node_type"] == "Sort"
