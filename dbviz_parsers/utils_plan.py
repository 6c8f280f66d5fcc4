from enum import Enum

# constants
# postgres keys
PG_NODE_TYPE_KEY = "Node Type"
PG_TOTAL_COST_KEY = "Total Cost"
PG_STARTUP_COST_KEY = "Startup Cost"
PG_ROWS_KEY = "Plan Rows"
PG_WIDTH_KEY = "Plan Width"
PG_RELATION_KEY = "Relation Name"
PG_CHILDREN_KEY = "Plans"
PG_PLAN_KEY = "Plan"
# mysql keys
MS_COST_INFO_KEY = "cost_info"
MS_QUERY_BLOCK_KEY = "query_block"
MS_TABLE_KEY = "table"
MS_ACCESS_TYPE_KEY = "access_type"
TABLE_NAME_KEY = "table_name"
# mariadb keys
MDB_TOTAL_TIME_KEY = "r_total_time_ms"
MDB_ROWS_KEY = "rows"
# generic hierarchy key (d3-style pre-converted plans)
CHILDREN_KEY = "children"

COST_SUBSTRING = "cost"
ROWS_SUBSTRING = "rows"

UNKNOWN_NODE_TYPE = "Unknown"

## DIALECTS
class PlanDialect(Enum):
    Postgres = "PostgreSQL"
    MySQL = "MySQL"
    MariaDB = "MariaDB"
    Unrecognized = "Unrecognized"


# operation keys under which MySQL / MariaDB EXPLAIN FORMAT=JSON nests sub-operations
MYSQL_NESTED_KEYS = (
    MS_QUERY_BLOCK_KEY,
    "nested_loop",
    MS_TABLE_KEY,
    "ordering_operation",
    "grouping_operation",
    "duplicates_removal",
    "windowing",
    "buffer_result",
    "materialized_from_subquery",
    "attached_subqueries",
    "optimized_away_subqueries",
    "select_list_subqueries",
    "having_subqueries",
    "order_by_subqueries",
    "group_by_subqueries",
    "update_value_subqueries",
    "subqueries",
    "union_result",
    "query_specifications",
    # mariadb only
    "filesort",
    "temporary_table",
    "block-nl-join",
    "read_sorted_file",
    "expression_cache",
)

NESTED_KEYS = {
    PlanDialect.Postgres: (PG_CHILDREN_KEY, CHILDREN_KEY),
    PlanDialect.MySQL: MYSQL_NESTED_KEYS + (CHILDREN_KEY,),
    PlanDialect.MariaDB: MYSQL_NESTED_KEYS + (CHILDREN_KEY,),
    PlanDialect.Unrecognized: (PG_CHILDREN_KEY, CHILDREN_KEY),
}

# mysql workbench labels for table access types
ACCESS_TYPE_LABELS = {
    "ALL": "Full Table Scan",
    "index": "Full Index Scan",
    "range": "Index Range Scan",
    "ref": "Non-Unique Key Lookup",
    "eq_ref": "Unique Key Lookup",
    "const": "Single Row (constant)",
    "system": "Single Row (system constant)",
    "fulltext": "Fulltext Index Search",
    "ref_or_null": "Key Lookup + Fetch NULL Values",
    "index_merge": "Index Merge",
    "unique_subquery": "Unique Key Lookup into table of subquery",
    "index_subquery": "Non-Unique Key Lookup into table of subquery",
}

# keys already rendered by the detail view (or structural)
DETAIL_EXCLUDED_KEYS = (
    CHILDREN_KEY,
    PG_NODE_TYPE_KEY,
    TABLE_NAME_KEY,
    MS_COST_INFO_KEY,
    PG_TOTAL_COST_KEY,
    PG_STARTUP_COST_KEY,
    MDB_TOTAL_TIME_KEY,
)

# node sizing (radius in px)
SIZE_RANGE = (10.0, 30.0)
DEFAULT_NODE_SIZE = 10.0
UNSIZED_NODE_SIZE = 15.0

COST_METRIC = "cost"
ROWS_METRIC = "rows"
