"""
DLD API Routes - split into domain-specific modules

- transactions.py: Filtered, sorted, paginated transaction list
- history.py: Property flip history for one unit fingerprint
- areas.py: Area rollups, per-area building rollups, alias resolution
- market.py: Market-wide rollup and name search
- developers.py: Developer resolution
- admin.py: Health and ping

All modules share the same blueprint (dld_bp) registered at /api.
"""

from flask import Blueprint, g

# Create the shared blueprint
dld_bp = Blueprint('dld', __name__)


@dld_bp.after_request
def add_data_source_header(response):
    """Add X-Data-Source ("sqlite" / "sample") to every DLD response that served data."""
    source = getattr(g, 'data_source', None)
    if source:
        response.headers['X-Data-Source'] = source
    return response


# Import all route modules to register their routes with the blueprint
from routes.dld import transactions
from routes.dld import history
from routes.dld import areas
from routes.dld import market
from routes.dld import developers
from routes.dld import admin
