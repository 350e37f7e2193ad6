"""
Transaction list endpoint.

Endpoints:
- /transactions - Filtered, sorted, paginated DLD transactions
"""

import time

from flask import jsonify

from api.contracts import parse_params
from api.contracts.pydantic_models import TransactionsParams
from api.serializers import paginated_envelope
from routes.dld import dld_bp
from routes.dld._route_utils import log_success, query_args, route_logger, with_fallback
from services.area_resolver import resolve_area_name

logger = route_logger("transactions")


@dld_bp.route("/transactions", methods=["GET"])
def transactions():
    """
    Paginated transaction list.

    Query params (all optional):
      search, area, building, transGroup, propertyType, propertySubType,
      usage / propertyUsage, regType, fromDate, toDate, minPrice, maxPrice,
      minSize, maxSize (sqft), developer, limit, offset, sortBy, sortOrder

    `area` accepts aliases ("jvc", "downtown") and is resolved to the DLD
    area name before filtering. `search` overrides area and building.
    """
    start = time.perf_counter()
    params = parse_params(TransactionsParams, query_args())

    area = resolve_area_name(params.area) if params.area else None
    filters = params.to_filters(area=area)

    result = with_fallback(
        "transactions",
        lambda provider: provider.query_transactions(
            filters,
            limit=params.limit,
            offset=params.offset,
            sort_by=params.sort_by,
            sort_order=params.sort_order,
        ),
    )

    warnings = []
    if filters.has_overridden_fields:
        warnings.append("search overrides area and building filters")
    ignored = sorted(set(filters.to_dict()) - set(result.filters_applied))
    if ignored:
        warnings.append(f"filters not applied to {result.source} data: {', '.join(ignored)}")

    log_success(logger, "transactions", start, {
        "total": result.total,
        "returned": len(result.rows),
        "source": result.source,
    })
    return jsonify(paginated_envelope(
        [row.to_dict() for row in result.rows],
        limit=result.limit,
        offset=result.offset,
        total=result.total,
        source=result.source,
        truncated=result.truncated,
        meta={"filtersApplied": result.filters_applied},
        warnings=warnings,
    ))
