from collections.abc import Mapping
from types import MappingProxyType

from dbviz_parsers.dialect import detect_dialect
from dbviz_parsers.metrics import extract_metrics
from dbviz_parsers.terminology import map_label
from dbviz_parsers.utils_plan import (
    ACCESS_TYPE_LABELS,
    CHILDREN_KEY,
    MS_ACCESS_TYPE_KEY,
    MS_TABLE_KEY,
    NESTED_KEYS,
    PG_CHILDREN_KEY,
    PG_NODE_TYPE_KEY,
    PG_RELATION_KEY,
    TABLE_NAME_KEY,
    UNKNOWN_NODE_TYPE,
)


def freeze_value(value):
    '''read-only deep copy of a raw plan value: mappings become proxies, lists tuples'''
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_value(inner) for key, inner in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_value(inner) for inner in value)
    return value


def plain_value(value):
    ''' inverse of freeze_value, for JSON output '''
    if isinstance(value, Mapping):
        return {key: plain_value(inner) for key, inner in value.items()}
    if isinstance(value, tuple):
        return [plain_value(inner) for inner in value]
    return value


class PlanNode():
    '''one operator of a query plan, dialect-agnostic

    raw_attributes keeps the source mapping verbatim minus the nested children,
    frozen all the way down; self_cost / row_estimate are derived from it once at
    construction. Nodes cannot be modified after construction.

    synthetic marks a grouping node made for a list of operations (e.g. nested_loop);
    it has no source attributes of its own.
    '''
    __slots__ = (
        "node_type", "relation_name", "dialect", "raw_attributes",
        "children", "synthetic", "self_cost", "row_estimate",
    )

    def __init__(self, node_type, dialect, raw_attributes, relation_name=None, children=(), synthetic=False):
        init = object.__setattr__
        init(self, "node_type", node_type)
        init(self, "relation_name", relation_name)
        init(self, "dialect", dialect)
        init(self, "raw_attributes", freeze_value(dict(raw_attributes)))
        init(self, "children", tuple(children))
        init(self, "synthetic", synthetic)
        self_cost, row_estimate = extract_metrics(self.raw_attributes, dialect)
        init(self, "self_cost", self_cost)
        init(self, "row_estimate", row_estimate)

    def __setattr__(self, name, value):
        raise AttributeError(f"PlanNode is immutable, cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"PlanNode is immutable, cannot delete {name!r}")

    @property
    def display_relation(self):
        return self.relation_name.upper() if self.relation_name else None

    def label(self, terminology=None):
        return map_label(self.node_type, terminology)

    def walk(self):
        ''' (depth, node) pairs, depth-first pre-order, source child order '''
        stack = [(0, self)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            stack.extend((depth + 1, child) for child in reversed(node.children))

    def iter_nodes(self):
        for _, node in self.walk():
            yield node

    def __str__(self):
        return self.get_tree_str()

    def __repr__(self):
        return f"PlanNode({self.node_type!r}, {self.dialect.name}, children={len(self.children)})"

    def get_tree_str(self):
        # one line per node, indented by depth
        return "".join(
            f"{'  ' * depth}{node.node_type} (cost={node.self_cost:.2f}, rows={node.row_estimate:g})\n"
            for depth, node in self.walk()
        )

    def to_json(self, terminology=None):
        res = {}
        res["data"] = {
            "node_type": self.label(terminology),
            "relation_name": self.relation_name,
            "dialect": self.dialect.value,
            "self_cost": self.self_cost,
            "row_estimate": self.row_estimate,
            "attributes": plain_value(self.raw_attributes),
        }
        res["children"] = [child.to_json(terminology) for child in self.children]
        return res


# list-valued keys whose members are plain children rather than one grouping operator
FLAT_LIST_KEYS = (PG_CHILDREN_KEY, CHILDREN_KEY)


def _unwrap(key, item, nested_keys):
    # {"table": {...}} inside a nested_loop list
    if len(item) == 1:
        inner_key, inner = next(iter(item.items()))
        if inner_key in nested_keys and isinstance(inner, Mapping):
            return inner_key, inner
    return (None if key in FLAT_LIST_KEYS else key), item


def _node_type(label, attributes):
    node_type = attributes.get(PG_NODE_TYPE_KEY)
    if isinstance(node_type, str):
        return node_type
    if label == MS_TABLE_KEY and attributes.get(MS_ACCESS_TYPE_KEY) in ACCESS_TYPE_LABELS:
        return ACCESS_TYPE_LABELS[attributes[MS_ACCESS_TYPE_KEY]]
    return label or UNKNOWN_NODE_TYPE


def _relation_name(attributes):
    for key in (PG_RELATION_KEY, TABLE_NAME_KEY):
        value = attributes.get(key)
        if isinstance(value, str):
            return value
    return None


def _build_node(label, raw, dialect):
    if not isinstance(raw, Mapping):
        raise TypeError(f"plan node must be a mapping, got {type(raw).__name__}")
    nested_keys = NESTED_KEYS[dialect]
    attributes = {}
    children = []
    for key, value in raw.items():
        if key not in nested_keys or not isinstance(value, (Mapping, list)):
            attributes[key] = value
        elif isinstance(value, Mapping):
            children.append(_build_node(key, value, dialect))
        else:
            members = [
                _build_node(*_unwrap(key, item, nested_keys), dialect)
                for item in value if isinstance(item, Mapping)
            ]
            if key in FLAT_LIST_KEYS:
                children.extend(members)
            else:
                #^ synthetic grouping operator, e.g. nested_loop
                children.append(PlanNode(key, dialect, {}, children=members, synthetic=True))
    return PlanNode(
        _node_type(label, attributes),
        dialect,
        attributes,
        relation_name=_relation_name(attributes),
        children=children,
    )


def build_plan_tree(raw_root, dialect=None, label=None):
    '''walk dialect-native nested plan data into a PlanNode tree

    The dialect is detected once at the root and propagated to every descendant.
    label names the root when it carries no "Node Type" (e.g. "query_block").
    '''
    if dialect is None:
        dialect = detect_dialect(raw_root)
    return _build_node(label, raw_root, dialect)
