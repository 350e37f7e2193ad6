"""
Market Stats Service - area, building and market-wide rollups

All rollups count Sales records with a positive price only
(db.sql.SALES_STATS_FILTER). Averages are rounded to whole AED.
Name search counts every transaction type.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from constants import (
    AREA_STATS_UNFILTERED_LIMIT,
    BUILDING_STATS_LIMIT,
    SEARCH_MIN_QUERY_LENGTH,
    SEARCH_PER_KIND_LIMIT,
    SQM_TO_SQFT,
)
from db.sql import (
    BASE_AREA_FILTER,
    SALES_STATS_FILTER,
    SORTABLE_DATE_SQL,
    like_clause,
    like_pattern,
    run_sql,
    run_sql_one,
)

logger = logging.getLogger('market_stats')


def _to_int(value) -> Optional[int]:
    return int(value) if value is not None else None


@dataclass(frozen=True)
class AreaStat:
    area_name: str
    transaction_count: int
    avg_price: Optional[int]
    avg_price_sqft: Optional[int]
    total_value: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'area_name_en': self.area_name,
            'transaction_count': self.transaction_count,
            'avg_price': self.avg_price,
            'avg_price_sqft': self.avg_price_sqft,
            'total_value': self.total_value,
        }


@dataclass(frozen=True)
class BuildingStat:
    building_name: str
    transaction_count: int
    avg_price: Optional[int]
    avg_price_sqft: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'building_name_en': self.building_name,
            'transaction_count': self.transaction_count,
            'avg_price': self.avg_price,
            'avg_price_sqft': self.avg_price_sqft,
        }


@dataclass(frozen=True)
class MarketRollup:
    total_transactions: int
    total_value: Optional[int]
    avg_price_sqft: Optional[int]
    unique_areas: int
    min_date: Optional[str]
    max_date: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_transactions': self.total_transactions,
            'total_value': self.total_value,
            'avg_price_sqft': self.avg_price_sqft,
            'unique_areas': self.unique_areas,
            'date_range': {'min': self.min_date, 'max': self.max_date},
        }


@dataclass(frozen=True)
class SearchHit:
    name: str
    type: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'type': self.type, 'count': self.count}


class MarketStatsService:

    def __init__(self, store):
        self.store = store

    def get_area_stats(self, area_name: Optional[str] = None) -> List[AreaStat]:
        """
        Per-area rollup ordered by sales count. Unfiltered calls return the
        top 50 areas; a substring filter returns every matching area.
        """
        params: Dict[str, Any] = {}
        area_sql = ""
        limit_sql = ""
        if area_name:
            area_sql = f"AND {like_clause('area_name_en', 'area')}"
            params['area'] = like_pattern(area_name)
        else:
            limit_sql = "LIMIT :limit"
            params['limit'] = AREA_STATS_UNFILTERED_LIMIT

        rows = run_sql(
            self.store,
            f"""
            SELECT
                area_name_en,
                COUNT(*) AS transaction_count,
                ROUND(AVG(actual_worth), 0) AS avg_price,
                ROUND(AVG(meter_sale_price / {SQM_TO_SQFT}), 0) AS avg_price_sqft,
                ROUND(SUM(actual_worth), 0) AS total_value
            FROM transactions
            WHERE {SALES_STATS_FILTER}
              {area_sql}
            GROUP BY area_name_en
            ORDER BY transaction_count DESC, area_name_en ASC
            {limit_sql}
            """,
            **params,
        )
        logger.info("area_stats filter=%s rows=%d", area_name, len(rows))
        return [
            AreaStat(
                area_name=r['area_name_en'],
                transaction_count=int(r['transaction_count']),
                avg_price=_to_int(r['avg_price']),
                avg_price_sqft=_to_int(r['avg_price_sqft']),
                total_value=_to_int(r['total_value']),
            )
            for r in rows
        ]

    def get_building_stats(self, area_name: str) -> List[BuildingStat]:
        """Top 20 buildings by sales count within areas matching `area_name`."""
        rows = run_sql(
            self.store,
            f"""
            SELECT
                building_name_en,
                COUNT(*) AS transaction_count,
                ROUND(AVG(actual_worth), 0) AS avg_price,
                ROUND(AVG(meter_sale_price / {SQM_TO_SQFT}), 0) AS avg_price_sqft
            FROM transactions
            WHERE {SALES_STATS_FILTER}
              AND {like_clause('area_name_en', 'area')}
              AND building_name_en IS NOT NULL
              AND building_name_en != ''
            GROUP BY building_name_en
            ORDER BY transaction_count DESC, building_name_en ASC
            LIMIT :limit
            """,
            area=like_pattern(area_name or ""),
            limit=BUILDING_STATS_LIMIT,
        )
        logger.info("building_stats area=%s rows=%d", area_name, len(rows))
        return [
            BuildingStat(
                building_name=r['building_name_en'],
                transaction_count=int(r['transaction_count']),
                avg_price=_to_int(r['avg_price']),
                avg_price_sqft=_to_int(r['avg_price_sqft']),
            )
            for r in rows
        ]

    def get_market_stats(self) -> MarketRollup:
        row = run_sql_one(
            self.store,
            f"""
            SELECT
                COUNT(*) AS total_transactions,
                ROUND(SUM(actual_worth), 0) AS total_value,
                ROUND(AVG(meter_sale_price / {SQM_TO_SQFT}), 0) AS avg_price_sqft,
                COUNT(DISTINCT area_name_en) AS unique_areas,
                MIN({SORTABLE_DATE_SQL}) AS min_date,
                MAX({SORTABLE_DATE_SQL}) AS max_date
            FROM transactions
            WHERE {SALES_STATS_FILTER}
            """,
        ) or {}
        return MarketRollup(
            total_transactions=int(row.get('total_transactions') or 0),
            total_value=_to_int(row.get('total_value')),
            avg_price_sqft=_to_int(row.get('avg_price_sqft')),
            unique_areas=int(row.get('unique_areas') or 0),
            min_date=row.get('min_date'),
            max_date=row.get('max_date'),
        )

    def search_all(self, query: str, limit: int = 10) -> List[SearchHit]:
        """
        Area and building names containing `query`, top 5 of each by
        transaction count, merged by count and capped at `limit`.

        Queries shorter than 2 characters return [] without touching the store.
        """
        query = (query or "").strip()
        if len(query) < SEARCH_MIN_QUERY_LENGTH or limit <= 0:
            return []

        term = like_pattern(query)
        areas = run_sql(
            self.store,
            f"""
            SELECT area_name_en AS name, COUNT(*) AS count
            FROM transactions
            WHERE {BASE_AREA_FILTER}
              AND {like_clause('area_name_en', 'term')}
            GROUP BY area_name_en
            ORDER BY count DESC, name ASC
            LIMIT :per_kind
            """,
            term=term,
            per_kind=SEARCH_PER_KIND_LIMIT,
        )
        buildings = run_sql(
            self.store,
            f"""
            SELECT building_name_en AS name, COUNT(*) AS count
            FROM transactions
            WHERE {BASE_AREA_FILTER}
              AND building_name_en IS NOT NULL
              AND building_name_en != ''
              AND {like_clause('building_name_en', 'term')}
            GROUP BY building_name_en
            ORDER BY count DESC, name ASC
            LIMIT :per_kind
            """,
            term=term,
            per_kind=SEARCH_PER_KIND_LIMIT,
        )

        hits = [SearchHit(r['name'], 'area', int(r['count'])) for r in areas]
        hits += [SearchHit(r['name'], 'building', int(r['count'])) for r in buildings]
        # sorted() is stable: on equal counts areas stay ahead of buildings
        hits = sorted(hits, key=lambda h: h.count, reverse=True)
        return hits[:limit]
