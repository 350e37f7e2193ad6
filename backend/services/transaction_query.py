"""
Transaction Query Service - filtered, sorted, paginated DLD transactions

Runs two statements over the same WHERE clause: a COUNT(*) for the full
filtered set, then the page fetch. `total` therefore never depends on
limit/offset.

Usage:
    from services.transaction_query import TransactionQueryEngine
    from utils.filter_builder import TransactionFilters

    engine = TransactionQueryEngine(store)
    result = engine.query(
        TransactionFilters(area="Dubai Marina", min_size=1000),
        limit=20, offset=40, sort_by="actual_worth", sort_order="DESC",
    )
    result.total, result.truncated, [r.to_dict() for r in result.rows]
"""

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from constants import DEFAULT_LIMIT
from db.sql import run_sql, run_sql_scalar
from models.transaction import ROW_SELECT_SQL, TransactionRow
from utils.filter_builder import TransactionFilters, build_order_by, build_where_clause, normalize_sort
from utils.normalize import ValidationError

logger = logging.getLogger('transaction_query')

SOURCE_SQLITE = "sqlite"
SOURCE_SAMPLE = "sample"


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class PageRequest:
    """Pagination and sort for one query."""
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    sort_by: str = "instance_date"
    sort_order: str = "DESC"

    def __post_init__(self):
        if isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit < 1:
            raise ValidationError("limit must be a positive integer", field='limit', received_value=self.limit)
        if isinstance(self.offset, bool) or not isinstance(self.offset, int) or self.offset < 0:
            raise ValidationError("offset must be >= 0", field='offset', received_value=self.offset)
        key, order = normalize_sort(self.sort_by, self.sort_order)
        object.__setattr__(self, 'sort_by', key)
        object.__setattr__(self, 'sort_order', order)


@dataclass
class QueryResult:
    rows: List[TransactionRow]
    total: int
    source: str = SOURCE_SQLITE
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    filters_applied: Dict[str, Any] = field(default_factory=dict)

    @property
    def truncated(self) -> bool:
        """True when the filtered set extends past this page."""
        return self.offset + len(self.rows) < self.total

    @property
    def page(self) -> int:
        return self.offset // self.limit + 1

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.total else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'data': [row.to_dict() for row in self.rows],
            'total': self.total,
            'truncated': self.truncated,
            'source': self.source,
        }


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

class TransactionQueryEngine:
    """Filter / sort / paginate over the transactions table."""

    def __init__(self, store, max_limit: Optional[int] = None):
        from config import Config

        self.store = store
        self.max_limit = max_limit or Config.MAX_PAGE_SIZE

    def count(self, filters: TransactionFilters) -> int:
        where_sql, params = build_where_clause(filters)
        total = run_sql_scalar(
            self.store,
            f"SELECT COUNT(*) FROM transactions {where_sql}",
            **params,
        )
        return int(total or 0)

    def query(
        self,
        filters: Optional[TransactionFilters] = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> QueryResult:
        """
        Count then fetch one page.

        Raises:
            ValidationError: On a bad sort key or pagination value
            StoreUnavailableError: If the store cannot be read
        """
        filters = filters or TransactionFilters()
        page = PageRequest(
            limit=limit,
            offset=offset,
            sort_by=sort_by or "instance_date",
            sort_order=sort_order or "DESC",
        )
        if page.limit > self.max_limit:
            page = replace(page, limit=self.max_limit)
        start = time.perf_counter()

        where_sql, params = build_where_clause(filters)
        order_sql = build_order_by(page.sort_by, page.sort_order)

        total = self.count(filters)

        rows: List[TransactionRow] = []
        if page.offset < total:
            fetched = run_sql(
                self.store,
                f"""
                SELECT {ROW_SELECT_SQL}
                FROM transactions
                {where_sql}
                {order_sql}
                LIMIT :limit OFFSET :offset
                """,
                limit=page.limit,
                offset=page.offset,
                **params,
            )
            rows = [TransactionRow.from_mapping(r) for r in fetched]

        if filters.has_overridden_fields:
            logger.debug("search overrides area/building filters=%s", filters.to_dict())

        logger.info(
            "query_transactions total=%d returned=%d offset=%d sort=%s:%s elapsed_ms=%d",
            total, len(rows), page.offset, page.sort_by, page.sort_order,
            int((time.perf_counter() - start) * 1000),
        )

        return QueryResult(
            rows=rows,
            total=total,
            source=SOURCE_SQLITE,
            limit=page.limit,
            offset=page.offset,
            filters_applied=filters.to_dict(),
        )
