"""
Deterministic synthetic DLD data.

Served in place of the store when it is unavailable, always flagged with
source="sample". Every value is derived from a seed built from the request
(area + row index), so the same request returns the same rows and
paginating through a virtual result set is consistent.

Nothing here reads the store.
"""

import random
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from constants import (
    AREA_STATS_UNFILTERED_LIMIT,
    BUILDING_STATS_LIMIT,
    PROPERTY_TYPES,
    REG_TYPE_OFF_PLAN,
    REG_TYPE_READY,
    SEARCH_MIN_QUERY_LENGTH,
    SEARCH_PER_KIND_LIMIT,
    SQM_TO_SQFT,
    TRANS_GROUPS,
    TRANS_GROUP_SALES,
    USAGE_COMMERCIAL,
    USAGE_RESIDENTIAL,
)
from models.transaction import TransactionRow
from services.market_stats import AreaStat, BuildingStat, MarketRollup, SearchHit

DEFAULT_SAMPLE_AREA = "Dubai Marina"

# Newest synthetic record; fixed so output does not drift day to day
SAMPLE_ANCHOR_DATE = date(2026, 1, 30)
SAMPLE_HISTORY_DAYS = 365

SAMPLE_BUILDINGS = [
    'Marina Gate', 'Cayan Tower', 'Princess Tower', 'The Address', 'Damac Heights',
    'Burj Vista', 'Opera Grand', 'Boulevard Point', 'Forte', 'The Residences',
    'Park Heights', 'Golf Vista', 'Mulberry', 'Collective', 'Sidra Villas',
    'Marina Promenade', 'Sparkle Towers', 'Azure Residences', 'Palm View',
]

SAMPLE_SUB_TYPES = ['Apartment', 'Townhouse', 'Penthouse', 'Studio', 'Duplex', 'Office', 'Shop']
SAMPLE_ROOMS = ['Studio', '1 B/R', '2 B/R', '3 B/R', '4 B/R', '5 B/R']

# Headline figures per area (avg_price_sqm is AED per m²)
SAMPLE_AREA_STATS = {
    'Dubai Marina': {'transaction_count': 3240, 'avg_price': 1900000, 'avg_price_sqm': 18500, 'total_value': 6156000000},
    'DownTown Dubai': {'transaction_count': 2890, 'avg_price': 2500000, 'avg_price_sqm': 22000, 'total_value': 7225000000},
    'Palm Jumeirah': {'transaction_count': 1560, 'avg_price': 4200000, 'avg_price_sqm': 28000, 'total_value': 6552000000},
    'Business Bay': {'transaction_count': 2100, 'avg_price': 1400000, 'avg_price_sqm': 16000, 'total_value': 2940000000},
    'Dubai Hills Estate': {'transaction_count': 1890, 'avg_price': 2100000, 'avg_price_sqm': 15000, 'total_value': 3969000000},
    'Jumeirah Village Circle': {'transaction_count': 4500, 'avg_price': 800000, 'avg_price_sqm': 10500, 'total_value': 3600000000},
}

DEFAULT_AREA_STATS = {'transaction_count': 500, 'avg_price': 1500000, 'avg_price_sqm': 14000, 'total_value': 750000000}

SAMPLE_MARKET_ROLLUP = MarketRollup(
    total_transactions=142847,
    total_value=389500000000,
    avg_price_sqft=1325,
    unique_areas=187,
    min_date='2008-01-01',
    max_date='2026-01-30',
)


def _rng(*parts: Any) -> random.Random:
    return random.Random(":".join(str(p) for p in parts))


def sample_total(area: str) -> int:
    """Size of the virtual result set for an area (5,000 to 14,999)."""
    return 5000 + _rng("total", area.lower()).randrange(10000)


def sample_transaction(
    area: str,
    index: int,
    total: int,
    overrides: Optional[Dict[str, Optional[str]]] = None,
) -> TransactionRow:
    """
    Row `index` of the virtual set for `area`. Dates fall back from the anchor
    as the index grows, so the set is already newest-first.
    """
    rnd = _rng(area.lower(), index)
    overrides = overrides or {}

    days_ago = index * SAMPLE_HISTORY_DAYS // max(total, 1)
    instance_date = SAMPLE_ANCHOR_DATE - timedelta(days=days_ago)

    procedure_area = float(50 + rnd.randrange(350))
    price_per_sqm = float(8000 + rnd.randrange(30000))
    trans_group = TRANS_GROUP_SALES if rnd.random() < 0.7 else rnd.choice(TRANS_GROUPS)

    return TransactionRow(
        transaction_id=f"TX{instance_date.year}{index:08d}",
        instance_date=instance_date,
        area_name=area,
        building_name=rnd.choice(SAMPLE_BUILDINGS),
        project_name=rnd.choice(SAMPLE_BUILDINGS),
        master_project_name=area,
        property_type=overrides.get('property_type') or rnd.choice(PROPERTY_TYPES),
        property_sub_type=rnd.choice(SAMPLE_SUB_TYPES),
        property_usage=overrides.get('property_usage') or (
            USAGE_RESIDENTIAL if rnd.random() > 0.2 else USAGE_COMMERCIAL
        ),
        reg_type=overrides.get('reg_type') or (
            REG_TYPE_READY if rnd.random() > 0.3 else REG_TYPE_OFF_PLAN
        ),
        trans_group=overrides.get('trans_group') or trans_group,
        rooms=rnd.choice(SAMPLE_ROOMS),
        procedure_area=procedure_area,
        actual_worth=int(procedure_area * price_per_sqm),
        meter_sale_price=price_per_sqm,
        procedure_name="Sell",
        has_parking=rnd.random() > 0.3,
        nearest_metro="Dubai Marina Metro",
        nearest_mall="Dubai Marina Mall",
        nearest_landmark="Marina Walk",
    )


def generate_transactions(
    area: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
    overrides: Optional[Dict[str, Optional[str]]] = None,
) -> Dict[str, Any]:
    """One page of the virtual set: {'rows': [...], 'total': int}."""
    area = area or DEFAULT_SAMPLE_AREA
    total = sample_total(area)
    end = min(offset + limit, total)
    rows: List[TransactionRow] = [
        sample_transaction(area, idx, total, overrides) for idx in range(offset, end)
    ]
    return {'rows': rows, 'total': total}


def _area_stat(name: str, figures: Dict[str, int]) -> AreaStat:
    return AreaStat(
        area_name=name,
        transaction_count=figures['transaction_count'],
        avg_price=figures['avg_price'],
        avg_price_sqft=int(round(figures['avg_price_sqm'] / SQM_TO_SQFT)),
        total_value=figures['total_value'],
    )


def sample_area_stats(area_name: Optional[str] = None) -> List[AreaStat]:
    if area_name:
        needle = area_name.lower()
        matches = [
            _area_stat(name, figures)
            for name, figures in SAMPLE_AREA_STATS.items()
            if needle in name.lower()
        ]
        if not matches:
            matches = [_area_stat(area_name, DEFAULT_AREA_STATS)]
    else:
        matches = [_area_stat(name, figures) for name, figures in SAMPLE_AREA_STATS.items()]
    matches.sort(key=lambda s: s.transaction_count, reverse=True)
    return matches[:AREA_STATS_UNFILTERED_LIMIT]


def sample_building_stats(area_name: str) -> List[BuildingStat]:
    stats = []
    for building in SAMPLE_BUILDINGS:
        rnd = _rng("building", (area_name or "").lower(), building)
        price_per_sqm = 8000 + rnd.randrange(30000)
        stats.append(BuildingStat(
            building_name=building,
            transaction_count=20 + rnd.randrange(480),
            avg_price=(50 + rnd.randrange(350)) * price_per_sqm,
            avg_price_sqft=int(round(price_per_sqm / SQM_TO_SQFT)),
        ))
    stats.sort(key=lambda s: (-s.transaction_count, s.building_name))
    return stats[:BUILDING_STATS_LIMIT]


def sample_market_stats() -> MarketRollup:
    return SAMPLE_MARKET_ROLLUP


def sample_search(query: str, limit: int = 10) -> List[SearchHit]:
    query = (query or "").strip()
    if len(query) < SEARCH_MIN_QUERY_LENGTH or limit <= 0:
        return []
    needle = query.lower()
    areas = [
        SearchHit(s.area_name, 'area', s.transaction_count)
        for s in sample_area_stats()
        if needle in s.area_name.lower()
    ][:SEARCH_PER_KIND_LIMIT]
    buildings = [
        SearchHit(s.building_name, 'building', s.transaction_count)
        for s in sample_building_stats(DEFAULT_SAMPLE_AREA)
        if needle in s.building_name.lower()
    ][:SEARCH_PER_KIND_LIMIT]
    return sorted(areas + buildings, key=lambda h: h.count, reverse=True)[:limit]
