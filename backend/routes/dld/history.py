"""
Property flip history endpoint.

Endpoints:
- /property - Sale history for one unit fingerprint (building, size, rooms, type)

No sample fallback: synthetic history for a real unit would be misleading,
so a store failure propagates and becomes 503 SERVICE_UNAVAILABLE.
"""

import time

from flask import jsonify

from api.contracts import parse_params
from api.contracts.pydantic_models import PropertyParams
from api.middleware.error_envelope import make_error_response
from api.serializers import success_envelope
from routes.dld import dld_bp
from routes.dld._route_utils import log_success, mark_source, query_args, route_logger, store_provider

logger = route_logger("property")


@dld_bp.route("/property", methods=["GET"])
def property_history():
    start = time.perf_counter()
    params = parse_params(PropertyParams, query_args())

    provider = store_provider()
    history = provider.get_property_history(
        params.building,
        size=params.size,
        rooms=params.rooms,
        property_type=params.property_type,
    )
    mark_source(provider.source)

    if not history.found:
        return make_error_response(
            "NOT_FOUND",
            f"No transactions found for {params.building}",
            details={
                "building": params.building,
                "size": params.size,
                "rooms": params.rooms,
                "type": params.property_type,
            },
        )

    log_success(logger, "property", start, {
        "building": params.building,
        "sales": history.stats.total_sales,
    })
    return jsonify(success_envelope(history.to_dict(), source=provider.source))
