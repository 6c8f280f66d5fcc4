from collections.abc import Mapping

from dbviz_parsers.utils_plan import (
    MDB_TOTAL_TIME_KEY,
    MS_COST_INFO_KEY,
    PG_TOTAL_COST_KEY,
    PlanDialect,
)

# first match wins; exports may carry overlapping incidental keys
SIGNATURE_KEYS = (
    (PG_TOTAL_COST_KEY, PlanDialect.Postgres),
    (MS_COST_INFO_KEY, PlanDialect.MySQL),
    (MDB_TOTAL_TIME_KEY, PlanDialect.MariaDB),
)


def detect_dialect(raw_node):
    '''returns the dialect whose signature key the node carries, or PlanDialect.Unrecognized
    '''
    if not isinstance(raw_node, Mapping):
        raise TypeError(f"plan node must be a mapping, got {type(raw_node).__name__}")
    for key, dialect in SIGNATURE_KEYS:
        if key in raw_node:
            return dialect
    return PlanDialect.Unrecognized
