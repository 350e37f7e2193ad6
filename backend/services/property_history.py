"""
Property History Service - flip history for one physical unit

A unit has no ID across DLD records, so it is identified by a fingerprint:
building (exact) + size window + room label + property sub-type. All
matching sales are read oldest-first, annotated with the gain against the
previous sale, then returned newest-first.

Key Features:
- Size matching within a 2% window around the converted m² size
- Per-sale gain and gain % versus the previous sale
- Total appreciation first -> last sale
- "Developer sale" flag: first sale is a Ready-registered Sales record

Usage:
    from services.property_history import PropertyHistoryService

    history = PropertyHistoryService(store).get_property_history(
        building="Marina Gate 1",
        size=1000,          # sqft
        rooms="2 B/R",
    )
    if history.found:
        history.transactions[0].gain_pct
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from constants import (
    REG_TYPE_READY,
    SIZE_TOLERANCE,
    SQM_TO_SQFT,
    TRANS_GROUP_SALES,
    UNKNOWN_DEVELOPER_LABEL,
)
from db.sql import BASE_AREA_FILTER, SORTABLE_DATE_SQL, run_sql
from models.transaction import ROW_SELECT_SQL, TransactionRow
from services.developer_lookup import DeveloperResolution, resolve_developer
from utils.normalize import ValidationError
from utils.units import round_to, size_window_sqm, sqft_to_sqm

logger = logging.getLogger('property_history')


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class FlipRecord:
    """One sale of the unit with its gain over the previous sale."""
    transaction: TransactionRow
    flip_number: int
    previous_price: Optional[int] = None
    gain: Optional[int] = None
    gain_pct: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.transaction.to_dict()
        data.update({
            'flip_number': self.flip_number,
            'previous_price': self.previous_price,
            'gain': self.gain,
            'gain_pct': self.gain_pct,
        })
        return data


@dataclass(frozen=True)
class HistoryStats:
    total_sales: int
    first_sale: Optional[TransactionRow]
    last_sale: Optional[TransactionRow]
    total_appreciation_pct: float
    developer_sale: bool

    def to_dict(self) -> Dict[str, Any]:
        first, last = self.first_sale, self.last_sale
        return {
            'total_sales': self.total_sales,
            'first_sale_price': first.actual_worth if first else None,
            'first_sale_date': first.instance_date.isoformat() if first and first.instance_date else None,
            'last_sale_price': last.actual_worth if last else None,
            'last_sale_date': last.instance_date.isoformat() if last and last.instance_date else None,
            'total_appreciation_pct': self.total_appreciation_pct,
            'developer_sale': self.developer_sale,
        }


@dataclass(frozen=True)
class PropertySummary:
    building: str
    area: Optional[str]
    project: Optional[str]
    master_project: Optional[str]
    developer: DeveloperResolution
    type: Optional[str]
    rooms: Optional[str]
    size_sqm: Optional[float]
    size_sqft: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'building': self.building,
            'area': self.area,
            'project': self.project,
            'master_project': self.master_project,
            'developer': self.developer.label(UNKNOWN_DEVELOPER_LABEL),
            'developer_resolved': self.developer.is_resolved,
            'type': self.type,
            'rooms': self.rooms,
            'size_sqm': self.size_sqm,
            'size_sqft': self.size_sqft,
        }


@dataclass
class PropertyHistory:
    """
    Flip history result. `found` is False when nothing matched the
    fingerprint; that is a normal outcome, not an error.
    """
    found: bool
    property: Optional[PropertySummary] = None
    stats: Optional[HistoryStats] = None
    transactions: List[FlipRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'found': self.found,
            'property': self.property.to_dict() if self.property else None,
            'stats': self.stats.to_dict() if self.stats else None,
            'transactions': [t.to_dict() for t in self.transactions],
        }


# =============================================================================
# PURE COMPUTATION
# =============================================================================

def annotate_flips(chronological: List[TransactionRow]) -> List[FlipRecord]:
    """
    Annotate sales (oldest first) with flip number and gain versus the
    previous sale. Returns the annotated list NEWEST first.

    gain/gain_pct stay None for the first sale and whenever the previous
    price is missing or zero.
    """
    annotated: List[FlipRecord] = []
    previous_price: Optional[int] = None

    for idx, tx in enumerate(chronological):
        gain = None
        gain_pct = None
        if idx > 0 and previous_price and tx.actual_worth is not None:
            gain = tx.actual_worth - previous_price
            gain_pct = round_to(gain / previous_price * 100, 1)

        annotated.append(FlipRecord(
            transaction=tx,
            flip_number=idx + 1,
            previous_price=previous_price if idx > 0 else None,
            gain=gain,
            gain_pct=gain_pct,
        ))
        previous_price = tx.actual_worth

    annotated.reverse()
    return annotated


def summarize_history(chronological: List[TransactionRow]) -> HistoryStats:
    """Summary over the oldest-first list. Appreciation is 0 when undefined."""
    if not chronological:
        return HistoryStats(
            total_sales=0,
            first_sale=None,
            last_sale=None,
            total_appreciation_pct=0.0,
            developer_sale=False,
        )

    first = chronological[0]
    last = chronological[-1]

    appreciation = 0.0
    if first.actual_worth and last.actual_worth is not None:
        appreciation = round_to(
            (last.actual_worth - first.actual_worth) / first.actual_worth * 100, 1
        )

    return HistoryStats(
        total_sales=len(chronological),
        first_sale=first,
        last_sale=last,
        total_appreciation_pct=appreciation,
        developer_sale=(
            first.trans_group == TRANS_GROUP_SALES and first.reg_type == REG_TYPE_READY
        ),
    )


def build_property_summary(
    building: str,
    chronological: List[TransactionRow],
    size: Optional[float] = None,
    rooms: Optional[str] = None,
    property_type: Optional[str] = None,
) -> PropertySummary:
    """Unit metadata from the first chronological sale, query values first."""
    first = chronological[0] if chronological else None

    if first is not None and first.procedure_area:
        size_sqm = first.procedure_area
    elif size is not None:
        size_sqm = round_to(sqft_to_sqm(size), 2)
    else:
        size_sqm = None

    if size is not None:
        size_sqft = size
    elif first is not None and first.procedure_area is not None:
        size_sqft = round_to(first.procedure_area * SQM_TO_SQFT, 0)
    else:
        size_sqft = None

    return PropertySummary(
        building=building,
        area=first.area_name if first else None,
        project=first.project_name if first else None,
        master_project=first.master_project_name if first else None,
        developer=resolve_developer(
            first.master_project_name if first else None,
            first.project_name if first else None,
        ),
        type=property_type or (first.property_sub_type if first else None),
        rooms=rooms or (first.rooms if first else None),
        size_sqm=size_sqm,
        size_sqft=size_sqft,
    )


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

class PropertyHistoryService:

    def __init__(self, store, tolerance: float = SIZE_TOLERANCE):
        self.store = store
        self.tolerance = tolerance

    def fetch_chronological(
        self,
        building: str,
        size: Optional[float] = None,
        rooms: Optional[str] = None,
        property_type: Optional[str] = None,
    ) -> List[TransactionRow]:
        """All sales matching the fingerprint, oldest first."""
        conditions = [BASE_AREA_FILTER, "building_name_en = :building"]
        params: Dict[str, Any] = {"building": building}

        if size is not None:
            size_min, size_max = size_window_sqm(size, self.tolerance)
            conditions.append("procedure_area BETWEEN :size_min AND :size_max")
            params["size_min"] = size_min
            params["size_max"] = size_max

        if rooms:
            conditions.append("rooms_en = :rooms")
            params["rooms"] = rooms

        if property_type:
            conditions.append("property_sub_type_en = :property_type")
            params["property_type"] = property_type

        rows = run_sql(
            self.store,
            f"""
            SELECT {ROW_SELECT_SQL}
            FROM transactions
            WHERE {' AND '.join(conditions)}
            ORDER BY {SORTABLE_DATE_SQL} ASC, transaction_id ASC
            """,
            **params,
        )
        return [TransactionRow.from_mapping(r) for r in rows]

    def get_property_history(
        self,
        building: str,
        size: Optional[float] = None,
        rooms: Optional[str] = None,
        property_type: Optional[str] = None,
    ) -> PropertyHistory:
        """
        Reconstruct the flip history for a unit fingerprint.

        Args:
            building: Exact building name (required)
            size: Unit size in sqft; matched within the tolerance window
            rooms: Exact room label, e.g. "2 B/R"
            property_type: Exact property sub-type, e.g. "Flat"

        Raises:
            ValidationError: If building is empty or size is not positive
            StoreUnavailableError: If the store cannot be read
        """
        building = (building or "").strip()
        if not building:
            raise ValidationError("building is required", field='building')
        if size is not None and size <= 0:
            raise ValidationError("size must be positive", field='size', received_value=size)

        chronological = self.fetch_chronological(building, size, rooms, property_type)

        if not chronological:
            logger.info("property_history_not_found building=%s size=%s rooms=%s type=%s",
                        building, size, rooms, property_type)
            return PropertyHistory(found=False)

        history = PropertyHistory(
            found=True,
            property=build_property_summary(building, chronological, size, rooms, property_type),
            stats=summarize_history(chronological),
            transactions=annotate_flips(chronological),
        )
        logger.info(
            "property_history building=%s sales=%d appreciation_pct=%s",
            building, history.stats.total_sales, history.stats.total_appreciation_pct,
        )
        return history
