"""
Health and Readiness Check Service

Functions:
- StoreReadiness.check(): store readiness with TTL caching
- describe_store(): row count and date span for the health payload
"""

from typing import Any, Dict, Optional, Tuple
import logging
import time

from sqlalchemy import text

from db.engine import StoreUnavailableError
from db.sql import BASE_AREA_FILTER, SORTABLE_DATE_SQL, run_sql_one

logger = logging.getLogger(__name__)

_CACHE_TTL_SECONDS = 10


class StoreReadiness:
    """
    Readiness probe for one TransactionStore.

    The last result is cached for a few seconds so a burst of health checks
    does not become a burst of store reads.
    """

    def __init__(self, store, ttl_seconds: float = _CACHE_TTL_SECONDS):
        self.store = store
        self.ttl_seconds = ttl_seconds
        # (result, timestamp)
        self._cache: Optional[Tuple[bool, float]] = None

    def check(self, use_cache: bool = True) -> bool:
        """True if the store is open and answers a trivial query."""
        if use_cache and self._cache is not None:
            cached_result, cached_time = self._cache
            age = time.time() - cached_time
            if age < self.ttl_seconds:
                logger.debug("Using cached readiness result: %s (age: %.1fs)", cached_result, age)
                return cached_result

        try:
            self.store.execute(text("SELECT 1"))
            result = True
            logger.debug("Store readiness check succeeded")
        except StoreUnavailableError as e:
            result = False
            logger.debug("Store readiness check failed: %s", e)

        if use_cache:
            self._cache = (result, time.time())
        return result


def describe_store(store) -> Dict[str, Any]:
    """
    Row count and date span of the store.

    Raises:
        StoreUnavailableError: If the store cannot be read
    """
    row = run_sql_one(
        store,
        f"""
        SELECT
            COUNT(*) AS row_count,
            MIN({SORTABLE_DATE_SQL}) AS min_date,
            MAX({SORTABLE_DATE_SQL}) AS max_date
        FROM transactions
        WHERE {BASE_AREA_FILTER}
        """,
    ) or {}
    return {
        'path': getattr(store, 'path', None),
        'rows': int(row.get('row_count') or 0),
        'min_date': row.get('min_date'),
        'max_date': row.get('max_date'),
    }
