import logging
import math
from collections.abc import Mapping

from dbviz_parsers.utils_plan import (
    COST_SUBSTRING,
    MDB_ROWS_KEY,
    MDB_TOTAL_TIME_KEY,
    MS_COST_INFO_KEY,
    PG_NODE_TYPE_KEY,
    PG_ROWS_KEY,
    PG_STARTUP_COST_KEY,
    PG_TOTAL_COST_KEY,
    ROWS_SUBSTRING,
    PlanDialect,
)

logger = logging.getLogger(__name__)


SUFFIX_MULTIPLIERS = {'K': 1e3, 'M': 1e6, 'G': 1e9, 'T': 1e12}


def parse_number(s):
    '''"1.25K" -> 1250.0; raises ValueError on anything float() rejects'''
    s = s.strip()
    multiplier = SUFFIX_MULTIPLIERS.get(s[-1:])
    if multiplier is None:
        return float(s)
    return float(s[:-1]) * multiplier


def to_number(value):
    '''coerce a raw plan value to a finite float; anything unusable counts as 0.0
    '''
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = parse_number(value) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError):
        logger.debug("unparsable numeric value %r, counting as 0", value)
        return 0.0
    return number if math.isfinite(number) else 0.0


def _sum_matching(mapping, substring):
    total = sum(to_number(value) for key, value in mapping.items() if substring in key)
    return total if math.isfinite(total) else 0.0


def extract_cost(raw_node, dialect):
    '''the node's own cost contribution, normalized across dialects'''
    if dialect is PlanDialect.Postgres:
        cost = to_number(raw_node.get(PG_TOTAL_COST_KEY)) - to_number(raw_node.get(PG_STARTUP_COST_KEY))
        if cost < 0:
            logger.warning(
                "%s: startup cost exceeds total cost, clamping self cost %s to 0",
                raw_node.get(PG_NODE_TYPE_KEY),
                cost,
            )
            return 0.0
        return cost if math.isfinite(cost) else 0.0
    if dialect is PlanDialect.MySQL:
        cost_info = raw_node.get(MS_COST_INFO_KEY)
        if not isinstance(cost_info, Mapping):
            return 0.0
        return _sum_matching(cost_info, COST_SUBSTRING)
    if dialect is PlanDialect.MariaDB:
        return to_number(raw_node.get(MDB_TOTAL_TIME_KEY))
    return 0.0


def extract_rows(raw_node, dialect):
    if dialect is PlanDialect.Postgres:
        return to_number(raw_node.get(PG_ROWS_KEY))
    if dialect is PlanDialect.MySQL:
        # mysql puts row counts at node level (rows_examined_per_scan, rows_produced_per_join, ...)
        return _sum_matching(raw_node, ROWS_SUBSTRING)
    if dialect is PlanDialect.MariaDB:
        return to_number(raw_node.get(MDB_ROWS_KEY))
    return 0.0


def extract_metrics(raw_node, dialect):
    return extract_cost(raw_node, dialect), extract_rows(raw_node, dialect)
