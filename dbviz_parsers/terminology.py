from enum import Enum


class Terminology(Enum):
    Native = "native"
    Postgres = "PostgreSQL"
    MySQL = "MariaDB / MySQL"


# operator mapping
manual_operator_mapping = {
    "MS_TO_PG": { # key: ms operator ; value: pg operator
        # EXPLAIN ANALYZE tree operators
        "Sort": "Sort",
        "Covering index scan": "Index Only Scan",
        "Index range scan": "Index Scan",
        "Index scan": "Index Scan",
        "Table scan": "Seq Scan",
        "Inner hash join": "Hash Join",
        "Left hash join": "Hash Join",
        "Hash semijoin": "Hash Join",
        "Hash antijoin": "Hash Join",
        "Nested loop antijoin": "Nested Loop",
        "Nested loop inner join": "Nested Loop",
        "Nested loop left join": "Nested Loop",
        "Nested loop semijoin": "Nested Loop",
        "Aggregate": "Aggregate",
        "Group aggregate": "Aggregate",
        "Covering index lookup": "Index Only Scan",
        "Hash": "Hash",
        "Index lookup": "Index Scan",
        "Limit": "Limit",
        "Materialize": "Materialize",
        "Single-row index lookup": "Index Scan",
        "Stream results": "Gather",
        # FORMAT=JSON operations
        "query_block": "Result",
        "nested_loop": "Nested Loop",
        "block-nl-join": "Nested Loop",
        "ordering_operation": "Sort",
        "filesort": "Sort",
        "grouping_operation": "Aggregate",
        "duplicates_removal": "Unique",
        "windowing": "WindowAgg",
        "materialized_from_subquery": "Subquery Scan",
        "temporary_table": "Materialize",
        "union_result": "Append",
        "attached_subqueries": "SubPlan",
        # table access types
        "Full Table Scan": "Seq Scan",
        "Full Index Scan": "Index Only Scan",
        "Index Range Scan": "Index Scan",
        "Non-Unique Key Lookup": "Index Scan",
        "Unique Key Lookup": "Index Scan",
        "Single Row (constant)": "Index Scan",
        "Fulltext Index Search": "Bitmap Heap Scan",
        "Index Merge": "BitmapOr",
    },
    "PG_TO_MS": { # key: pg operator ; value: ms operator
        "Seq Scan": "Full Table Scan",
        "Index Scan": "Index Range Scan",
        "Index Only Scan": "Covering index scan",
        "Bitmap Heap Scan": "Index Range Scan",
        "Bitmap Index Scan": "Index Range Scan",
        "BitmapOr": "Index Merge",
        "BitmapAnd": "Index Merge",
        "Nested Loop": "nested_loop",
        "Hash Join": "Inner hash join",
        "Merge Join": "Nested loop inner join",
        "Hash": "Hash",
        "Sort": "ordering_operation",
        "Incremental Sort": "ordering_operation",
        "Aggregate": "grouping_operation",
        "HashAggregate": "grouping_operation",
        "GroupAggregate": "grouping_operation",
        "Unique": "duplicates_removal",
        "WindowAgg": "windowing",
        "Materialize": "Materialize",
        "Subquery Scan": "materialized_from_subquery",
        "CTE Scan": "materialized_from_subquery",
        "Append": "union_result",
        "Limit": "Limit",
        "Gather": "Stream results",
        "Gather Merge": "Stream results",
        "Result": "query_block",
    },
}

MYSQL_TO_POSTGRES = manual_operator_mapping["MS_TO_PG"]
POSTGRES_TO_MYSQL = manual_operator_mapping["PG_TO_MS"]


def map_label(label, terminology=None):
    '''relabel a native node type in the requested terminology; unknown labels pass through
    '''
    if terminology is None:
        return label
    terminology = Terminology(terminology)
    if terminology is Terminology.Postgres:
        return MYSQL_TO_POSTGRES.get(label, label)
    if terminology is Terminology.MySQL:
        return POSTGRES_TO_MYSQL.get(label, label)
    return label
