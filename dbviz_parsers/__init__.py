'''
Normalize database benchmark artifacts for charting: sysbench OLTP run logs and
PostgreSQL / MySQL / MariaDB EXPLAIN plans.
'''

from dbviz_parsers.dialect import detect_dialect
from dbviz_parsers.metrics import extract_cost, extract_metrics, extract_rows
from dbviz_parsers.plan_node import PlanNode, build_plan_tree
from dbviz_parsers.query_plan import MetricRange, PlanEdge, QueryPlan, load_plan, node_details
from dbviz_parsers.sysbench_log import (
    BenchmarkRun,
    IntervalSample,
    extract_avg_tps,
    extract_results,
    parse_benchmark_log,
)
from dbviz_parsers.terminology import Terminology, map_label
from dbviz_parsers.utils_plan import PlanDialect

__all__ = [
    "BenchmarkRun",
    "IntervalSample",
    "MetricRange",
    "PlanDialect",
    "PlanEdge",
    "PlanNode",
    "QueryPlan",
    "Terminology",
    "build_plan_tree",
    "detect_dialect",
    "extract_avg_tps",
    "extract_cost",
    "extract_metrics",
    "extract_results",
    "extract_rows",
    "load_plan",
    "map_label",
    "node_details",
    "parse_benchmark_log",
]
