"""
Pydantic models for API param validation.

Key features:
- Frozen models (immutable after normalization)
- Auto type coercion with clear error messages
- camelCase wire names via aliases

Usage:
    from api.contracts.pydantic_models import TransactionsParams

    params = TransactionsParams(**request.args.to_dict())
    filters = params.to_filters()
"""

from .base import BaseParamsModel
from .property import PropertyParams
from .stats import AreaStatsParams, DeveloperParams, ResolveAreaParams, SearchParams
from .transactions import TransactionsParams

__all__ = [
    'BaseParamsModel',
    'AreaStatsParams',
    'DeveloperParams',
    'PropertyParams',
    'ResolveAreaParams',
    'SearchParams',
    'TransactionsParams',
]
