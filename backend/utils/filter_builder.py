"""
Filter builder utilities.

Single source of truth for turning a transaction filter spec into SQL
WHERE parts, bind params and an ORDER BY clause.

Filter precedence:
    `search` is a four-field OR match over area, building, project and
    master project names. When `search` is present it wins: `area` and
    `building` are ignored. TransactionFilters.effective_area and
    effective_building encode that rule; the builder only reads those.
"""

from dataclasses import dataclass, fields, replace
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Tuple

from constants import (
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    SORT_ORDERS,
    SORTABLE_COLUMNS,
)
from db.sql import BASE_AREA_FILTER, SORTABLE_DATE_SQL, like_clause, like_pattern
from utils.normalize import ValidationError
from utils.units import sqft_to_sqm

# Name fields searched by `search` and `area`
NAME_COLUMNS = (
    'area_name_en',
    'building_name_en',
    'project_name_en',
    'master_project_en',
)

DEVELOPER_COLUMNS = ('project_name_en', 'master_project_en')


@dataclass(frozen=True)
class TransactionFilters:
    """
    Typed filter spec for the transaction query engine.

    All fields are optional; None means "no constraint". Sizes are square
    feet (converted to m² when the SQL is built); prices are AED.
    """
    search: Optional[str] = None
    area: Optional[str] = None
    building: Optional[str] = None
    trans_group: Optional[str] = None
    property_type: Optional[str] = None
    property_sub_type: Optional[str] = None
    property_usage: Optional[str] = None
    reg_type: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_size: Optional[float] = None
    max_size: Optional[float] = None
    developer: Optional[str] = None

    def __post_init__(self):
        for name in ('min_price', 'max_price', 'min_size', 'max_size'):
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
                raise ValidationError(
                    f"{name} must be a number, got {type(value).__name__}",
                    field=name,
                    received_value=value,
                )
        for name in ('from_date', 'to_date'):
            value = getattr(self, name)
            if value is not None and not isinstance(value, date):
                raise ValidationError(
                    f"{name} must be a date, got {type(value).__name__}",
                    field=name,
                    received_value=value,
                )

    @property
    def effective_area(self) -> Optional[str]:
        """`area`, unless `search` overrides it."""
        return None if self.search else self.area

    @property
    def effective_building(self) -> Optional[str]:
        """`building`, unless `search` overrides it."""
        return None if self.search else self.building

    @property
    def has_overridden_fields(self) -> bool:
        return bool(self.search and (self.area or self.building))

    def with_area(self, area: Optional[str]) -> "TransactionFilters":
        return replace(self, area=area)

    def to_dict(self) -> Dict[str, Any]:
        """Non-empty fields only, dates as ISO strings (for filters_applied)."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or value == "":
                continue
            result[f.name] = value.isoformat() if isinstance(value, date) else value
        return result

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "TransactionFilters":
        """Build from a dict keyed by field name; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known and v not in (None, "")})


def _or_like_group(columns, param: str) -> str:
    return "(" + " OR ".join(like_clause(col, param) for col in columns) + ")"


def build_sql_where(filters: TransactionFilters) -> Tuple[List[str], Dict[str, Any]]:
    """
    Build raw SQL WHERE clause parts and params from a filter spec.

    Parts are combined with AND by the caller. BASE_AREA_FILTER is always
    the first part.

    Returns:
        (where_parts, params)
    """
    where_parts: List[str] = [BASE_AREA_FILTER]
    params: Dict[str, Any] = {}

    # Name search / area / building
    if filters.search:
        where_parts.append(_or_like_group(NAME_COLUMNS, 'search'))
        params['search'] = like_pattern(filters.search)

    area = filters.effective_area
    if area:
        where_parts.append(_or_like_group(NAME_COLUMNS, 'area'))
        params['area'] = like_pattern(area)

    building = filters.effective_building
    if building:
        where_parts.append(like_clause('building_name_en', 'building'))
        params['building'] = like_pattern(building)

    # Exact categorical matches
    if filters.trans_group:
        where_parts.append("trans_group_en = :trans_group")
        params['trans_group'] = filters.trans_group
    if filters.property_type:
        where_parts.append("property_type_en = :property_type")
        params['property_type'] = filters.property_type
    if filters.property_usage:
        where_parts.append("property_usage_en = :property_usage")
        params['property_usage'] = filters.property_usage
    if filters.reg_type:
        where_parts.append("reg_type_en = :reg_type")
        params['reg_type'] = filters.reg_type

    if filters.property_sub_type:
        where_parts.append(like_clause('property_sub_type_en', 'property_sub_type'))
        params['property_sub_type'] = like_pattern(filters.property_sub_type)

    # Date range (inclusive)
    if filters.from_date is not None:
        where_parts.append(f"{SORTABLE_DATE_SQL} >= :from_date")
        params['from_date'] = filters.from_date
    if filters.to_date is not None:
        where_parts.append(f"{SORTABLE_DATE_SQL} <= :to_date")
        params['to_date'] = filters.to_date

    # Price range (inclusive)
    if filters.min_price is not None:
        where_parts.append("actual_worth >= :min_price")
        params['min_price'] = filters.min_price
    if filters.max_price is not None:
        where_parts.append("actual_worth <= :max_price")
        params['max_price'] = filters.max_price

    # Size range: caller sqft -> stored m²
    if filters.min_size is not None:
        where_parts.append("procedure_area >= :min_size_sqm")
        params['min_size_sqm'] = sqft_to_sqm(filters.min_size)
    if filters.max_size is not None:
        where_parts.append("procedure_area <= :max_size_sqm")
        params['max_size_sqm'] = sqft_to_sqm(filters.max_size)

    # Developer proxy: no developer column, match project names
    if filters.developer:
        where_parts.append(_or_like_group(DEVELOPER_COLUMNS, 'developer'))
        params['developer'] = like_pattern(filters.developer)

    return where_parts, params


def build_where_clause(filters: TransactionFilters) -> Tuple[str, Dict[str, Any]]:
    """Same as build_sql_where, joined into a single `WHERE ...` string."""
    where_parts, params = build_sql_where(filters)
    return "WHERE " + " AND ".join(where_parts), params


def normalize_sort(sort_by: Optional[str], sort_order: Optional[str]) -> Tuple[str, str]:
    """
    Validate sort key and direction against the whitelist.

    Raises:
        ValidationError: On an unknown key or direction
    """
    key = (sort_by or DEFAULT_SORT_BY).strip()
    if key.endswith('_en') and key[:-3] in SORTABLE_COLUMNS:
        key = key[:-3]
    if key not in SORTABLE_COLUMNS:
        raise ValidationError(
            f"Cannot sort by {sort_by!r}. Allowed: {sorted(SORTABLE_COLUMNS)}",
            field='sortBy',
            received_value=sort_by,
        )
    order = (sort_order or DEFAULT_SORT_ORDER).strip().upper()
    if order not in SORT_ORDERS:
        raise ValidationError(
            f"sortOrder must be ASC or DESC, got {sort_order!r}",
            field='sortOrder',
            received_value=sort_order,
        )
    return key, order


def build_order_by(sort_by: Optional[str] = None, sort_order: Optional[str] = None) -> str:
    """
    ORDER BY for a whitelisted key, with transaction_id as tie-breaker so
    offset pagination never repeats or skips rows.
    """
    key, order = normalize_sort(sort_by, sort_order)
    column = SORTABLE_COLUMNS[key]
    expr = SORTABLE_DATE_SQL if column == 'instance_date' else column
    if column == 'transaction_id':
        return f"ORDER BY transaction_id {order}"
    return f"ORDER BY {expr} {order}, transaction_id {order}"
