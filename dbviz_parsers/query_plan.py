'''
Plan-level view over a PlanNode tree: document unwrapping, tree-wide metric ranges,
parent->child edges, node sizing and tooltip rows for the rendering layer.
'''

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from dbviz_parsers.dialect import detect_dialect
from dbviz_parsers.plan_node import PlanNode, build_plan_tree, plain_value
from dbviz_parsers.utils_plan import (
    COST_METRIC,
    DEFAULT_NODE_SIZE,
    DETAIL_EXCLUDED_KEYS,
    MS_QUERY_BLOCK_KEY,
    PG_PLAN_KEY,
    PG_ROWS_KEY,
    PG_WIDTH_KEY,
    ROWS_METRIC,
    SIZE_RANGE,
    UNSIZED_NODE_SIZE,
    PlanDialect,
)

logger = logging.getLogger(__name__)

LIMIT_NODE_TYPE = "Limit"


@dataclass(frozen=True)
class MetricRange:
    minimum: float
    maximum: float

    def scale(self, value: float, low: float = SIZE_RANGE[0], high: float = SIZE_RANGE[1]) -> float:
        span = self.maximum - self.minimum
        if span == 0:
            return (low + high) / 2
        return low + (value - self.minimum) / span * (high - low)


@dataclass(frozen=True)
class PlanEdge:
    source: PlanNode
    target: PlanNode
    cost: float
    rows: float


class QueryPlan():
    def __init__(self, root: PlanNode, metadata: Optional[Dict[str, Any]] = None):
        self.root = root
        self.metadata = dict(metadata or {})
        nodes = self.nodes()
        costs = [node.self_cost for node in nodes]
        rows = [node.row_estimate for node in nodes]
        self.cost_range = MetricRange(min(costs), max(costs))
        self.rows_range = MetricRange(min(rows), max(rows))

    @property
    def dialect(self) -> PlanDialect:
        return self.root.dialect

    def nodes(self) -> List[PlanNode]:
        return list(self.root.iter_nodes())

    def edges(self) -> List[PlanEdge]:
        return [
            PlanEdge(source=node, target=child, cost=child.self_cost, rows=child.row_estimate)
            for node in self.root.iter_nodes()
            for child in node.children
        ]

    def node_size(self, node: PlanNode, metric: Optional[str] = None) -> float:
        if metric == COST_METRIC:
            return self.cost_range.scale(node.self_cost) if node.self_cost else DEFAULT_NODE_SIZE
        if metric == ROWS_METRIC:
            return self.rows_range.scale(node.row_estimate) if node.row_estimate else DEFAULT_NODE_SIZE
        return UNSIZED_NODE_SIZE

    def to_json(self, terminology=None) -> Dict[str, Any]:
        res = {
            "Dialect": self.dialect.value,
            "Plan": self.root.to_json(terminology),
            "Cost Range": [self.cost_range.minimum, self.cost_range.maximum],
            "Rows Range": [self.rows_range.minimum, self.rows_range.maximum],
        }
        res.update(self.metadata)
        return res


def _format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(plain_value(value), ensure_ascii=False, default=str)
    return str(value)


def node_details(node: PlanNode) -> List[Tuple[str, str]]:
    """
    Ordered (key, text) rows describing one node, for a tooltip or detail panel.
    """
    rows = [("Node Type", str(node.node_type))]
    shown = set(DETAIL_EXCLUDED_KEYS)
    attributes = node.raw_attributes

    if node.node_type != LIMIT_NODE_TYPE:
        if node.display_relation:
            rows.append(("Relation Name", node.display_relation))
        if node.dialect is not PlanDialect.Unrecognized:
            rows.append(("Cost", f"{node.self_cost:.2f}"))
        if node.dialect is PlanDialect.Postgres:
            for key in (PG_ROWS_KEY, PG_WIDTH_KEY):
                if key in attributes:
                    rows.append((key, _format_value(attributes[key])))
                    shown.add(key)
        shown.add("Relation Name")

    rows.extend(
        (key, _format_value(value)) for key, value in attributes.items() if key not in shown
    )
    return rows


def _unwrap_document(document):
    '''returns (root mapping, root label, document metadata)'''
    if isinstance(document, list):
        if not document:
            raise ValueError("empty plan document")
        document = document[0]
    if not isinstance(document, Mapping):
        raise TypeError(f"plan document must be a mapping or a list, got {type(document).__name__}")
    if isinstance(document.get(PG_PLAN_KEY), Mapping):
        metadata = {key: value for key, value in document.items() if key != PG_PLAN_KEY}
        return document[PG_PLAN_KEY], None, metadata
    if isinstance(document.get(MS_QUERY_BLOCK_KEY), Mapping):
        #^ mariadb ANALYZE puts query_optimization next to query_block
        metadata = {key: value for key, value in document.items() if key != MS_QUERY_BLOCK_KEY}
        return document[MS_QUERY_BLOCK_KEY], MS_QUERY_BLOCK_KEY, metadata
    if not document:
        raise ValueError("plan document has no plan object")
    return document, None, {}


def load_plan(document) -> QueryPlan:
    '''
    Normalize one parsed EXPLAIN document (PostgreSQL FORMAT JSON, MySQL / MariaDB FORMAT=JSON,
    or an already-nested plan object) into a QueryPlan.
    '''
    raw_root, label, metadata = _unwrap_document(document)
    dialect = detect_dialect(raw_root)
    if dialect is PlanDialect.Unrecognized:
        logger.warning("unrecognized plan dialect (root keys: %s); metrics default to 0", ", ".join(map(str, raw_root)))
    return QueryPlan(build_plan_tree(raw_root, dialect=dialect, label=label), metadata)
