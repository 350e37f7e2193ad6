"""
Flask Application Factory - DLD transactions API

Read-only over a SQLite store of Dubai Land Department transactions.
If the store cannot be opened the app still starts: data routes serve
deterministic sample data (flagged source="sample") and /api/health
reports 503 until the store is back.
"""

import atexit
import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS

from config import Config
from db.engine import StoreUnavailableError, TransactionStore
from services.health import StoreReadiness
from services.providers import SampleDataProvider, StoreDataProvider

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _open_store(store: TransactionStore) -> None:
    """Open the store, logging (not raising) when it is unavailable."""
    if store.is_open:
        return
    try:
        store.open()
        logger.info("store_ready path=%s", store.path)
    except StoreUnavailableError as e:
        logger.warning("store_unavailable_at_startup path=%s err=%s", store.path, e)


def create_app(store: TransactionStore = None, config: dict = None) -> Flask:
    """
    Build the Flask app.

    Args:
        store: An existing TransactionStore. When omitted, one is created for
            Config.DLD_DATABASE_PATH and closed at interpreter exit.
        config: Overrides applied after Config (e.g. {"TESTING": True})
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    _configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    # Enable CORS for the API
    CORS(app, resources={
        r"/api/*": {
            "origins": app.config.get('CORS_ORIGINS', '*'),
            "methods": ["GET", "OPTIONS"],
            "allow_headers": ["Content-Type", "X-Request-ID"],
            "expose_headers": ["X-Request-ID", "X-Data-Source"],
        }
    })

    # Global middleware (order matters: request ID first so errors can reference it)
    from api.middleware import (
        setup_error_handlers,
        setup_request_id_middleware,
        setup_request_logging_middleware,
    )
    setup_request_id_middleware(app)
    setup_error_handlers(app)
    setup_request_logging_middleware(app)

    owns_store = store is None
    if owns_store:
        store = TransactionStore(app.config.get('DLD_DATABASE_PATH'))
        atexit.register(store.close)
    _open_store(store)

    max_limit = app.config.get('MAX_PAGE_SIZE')
    app.extensions['dld'] = {
        'store': store,
        'provider': StoreDataProvider(store, max_limit=max_limit),
        'sample': SampleDataProvider(max_limit=max_limit),
        'readiness': StoreReadiness(store, ttl_seconds=app.config.get('HEALTH_CACHE_TTL_SECONDS', 10)),
    }

    # Register routes
    from routes.dld import dld_bp
    app.register_blueprint(dld_bp, url_prefix='/api')

    @app.route("/", methods=["GET"])
    def index():
        return jsonify({
            "name": "DLD Transactions API",
            "status": "running",
            "store_open": store.is_open,
        })

    return app


def run_app():
    """Main entry point for local development - starts server with Flask's dev server."""
    app = create_app()
    store = app.extensions['dld']['store']
    logger.info("starting dld api store=%s open=%s", store.path, store.is_open)
    port = int(os.getenv('PORT', '5000'))
    app.run(debug=app.config.get('DEBUG', False), host="0.0.0.0", port=port)


if __name__ == "__main__":
    run_app()
