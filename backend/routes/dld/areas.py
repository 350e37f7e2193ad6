"""
Area endpoints.

Endpoints:
- /areas/stats - Per-area rollup (optional substring filter)
- /areas/<area>/buildings - Top buildings within an area
- /areas/resolve - Map a slug or alias to its DLD area name
"""

import time

from flask import jsonify

from api.contracts import parse_params
from api.contracts.pydantic_models import AreaStatsParams, ResolveAreaParams
from api.serializers import success_envelope
from routes.dld import dld_bp
from routes.dld._route_utils import log_success, query_args, route_logger, with_fallback
from services.area_resolver import is_known_alias, resolve_area_name

logger = route_logger("areas")


@dld_bp.route("/areas/stats", methods=["GET"])
def area_stats():
    start = time.perf_counter()
    params = parse_params(AreaStatsParams, query_args())

    area = resolve_area_name(params.area) if params.area else None

    result = with_fallback("areas/stats", lambda p: p.get_area_stats(area))

    log_success(logger, "areas/stats", start, {"area": area, "rows": len(result.data)})
    return jsonify(success_envelope(
        [stat.to_dict() for stat in result.data],
        meta={"count": len(result.data)},
        source=result.source,
    ))


@dld_bp.route("/areas/<path:area>/buildings", methods=["GET"])
def area_buildings(area):
    start = time.perf_counter()
    area_name = resolve_area_name(area)

    result = with_fallback("areas/buildings", lambda p: p.get_building_stats(area_name))

    log_success(logger, "areas/buildings", start, {"area": area_name, "rows": len(result.data)})
    return jsonify(success_envelope(
        [stat.to_dict() for stat in result.data],
        meta={"area": area_name, "count": len(result.data)},
        source=result.source,
    ))


@dld_bp.route("/areas/resolve", methods=["GET"])
def resolve_area():
    params = parse_params(ResolveAreaParams, query_args())
    return jsonify(success_envelope({
        "input": params.name,
        "area_name_en": resolve_area_name(params.name),
        "alias": is_known_alias(params.name),
    }))
