"""
Developer resolution endpoint.

Endpoints:
- /developers/resolve - Developer for a master project / project name pair
"""

from flask import jsonify

from api.contracts import parse_params
from api.contracts.pydantic_models import DeveloperParams
from api.serializers import success_envelope
from routes.dld import dld_bp
from routes.dld._route_utils import query_args
from services.developer_lookup import resolve_developer


@dld_bp.route("/developers/resolve", methods=["GET"])
def resolve_developer_route():
    params = parse_params(DeveloperParams, query_args())
    resolution = resolve_developer(params.master_project, params.project)
    return jsonify(success_envelope(resolution.to_dict()))
