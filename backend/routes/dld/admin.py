"""
Admin endpoints - health and ping.

Endpoints:
- /health - Store readiness plus row count and date span
- /ping - Liveness only, never touches the store
"""

from flask import current_app, jsonify

from db.engine import StoreUnavailableError
from routes.dld import dld_bp
from routes.dld._route_utils import dld_state, route_logger
from services.health import describe_store

logger = route_logger("admin")


@dld_bp.route("/ping", methods=["GET"])
def ping():
    return jsonify({"status": "ok"})


@dld_bp.route("/health", methods=["GET"])
def health():
    """
    200 when the store answers, 503 otherwise. The 503 body still reports
    whether sample fallback is on, since data routes keep serving in that case.
    """
    state = dld_state()
    store = state['store']
    fallback_enabled = bool(current_app.config.get('SAMPLE_FALLBACK_ENABLED', True))

    info = None
    if state['readiness'].check():
        try:
            info = describe_store(store)
        except StoreUnavailableError as e:
            logger.warning("health_describe_failed path=%s err=%s", store.path, e)

    if info is None:
        return jsonify({
            "status": "degraded" if fallback_enabled else "unavailable",
            "store": {"path": store.path, "ready": False},
            "sampleFallback": fallback_enabled,
        }), 503

    return jsonify({
        "status": "healthy",
        "store": {
            "path": info['path'],
            "ready": True,
            "rows": info['rows'],
            "minDate": info['min_date'],
            "maxDate": info['max_date'],
        },
        "sampleFallback": fallback_enabled,
    })
