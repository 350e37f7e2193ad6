"""
Market-wide endpoints.

Endpoints:
- /stats - Headline rollup over all sales
- /search - Area and building name search
"""

import time

from flask import jsonify

from api.contracts import parse_params
from api.contracts.pydantic_models import SearchParams
from api.serializers import success_envelope
from routes.dld import dld_bp
from routes.dld._route_utils import log_success, query_args, route_logger, with_fallback

logger = route_logger("market")


@dld_bp.route("/stats", methods=["GET"])
def market_stats():
    start = time.perf_counter()
    result = with_fallback("stats", lambda p: p.get_market_stats())

    log_success(logger, "stats", start, {"source": result.source})
    return jsonify(success_envelope(result.data.to_dict(), source=result.source))


@dld_bp.route("/search", methods=["GET"])
def search():
    """Typeahead. Queries shorter than 2 characters return an empty list."""
    start = time.perf_counter()
    params = parse_params(SearchParams, query_args())

    result = with_fallback("search", lambda p: p.search_all(params.q, params.limit))

    log_success(logger, "search", start, {"q": params.q, "hits": len(result.data)})
    return jsonify(success_envelope(
        [hit.to_dict() for hit in result.data],
        meta={"query": params.q, "count": len(result.data)},
        source=result.source,
    ))
