# Database utilities package
from .sql import (
    BASE_AREA_FILTER,
    SALES_STATS_FILTER,
    SORTABLE_DATE_SQL,
    like_clause,
    like_pattern,
    run_sql,
    run_sql_scalar,
    run_sql_one,
)
from .engine import StoreUnavailableError, TransactionStore
