"""
Response envelope helpers.

Every DLD response carries meta.source ("sqlite" or "sample") so clients can
tell real data from synthetic fallback data.
"""

from typing import Any, Dict, List, Optional
from flask import g


def success_envelope(
    data: Any,
    meta: Optional[Dict[str, Any]] = None,
    warnings: Optional[List[str]] = None,
    source: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build a standardized success response envelope.

    Returns:
        {
            "data": ...,
            "meta": {"source": "sqlite", "requestId": "...", ...},
            "warnings": [...]  # if any
        }
    """
    response = {"data": data}

    meta = dict(meta) if meta else {}
    if source is not None:
        meta['source'] = source

    if hasattr(g, 'request_id'):
        meta['requestId'] = g.request_id

    response['meta'] = meta

    if warnings:
        response['warnings'] = warnings

    return response


def error_envelope(
    code: str,
    message: str,
    field: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    hint: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build a standardized error response envelope.

    Returns:
        {"error": {"code": "...", "message": "...", "requestId": "...", ...}}
    """
    error = {
        "code": code,
        "message": message,
    }

    if hasattr(g, 'request_id'):
        error['requestId'] = g.request_id

    if field:
        error['field'] = field
    if details:
        error['details'] = details
    if hint:
        error['hint'] = hint

    return {"error": error}


def paginated_envelope(
    data: List[Any],
    limit: int,
    offset: int,
    total: int,
    source: str,
    truncated: bool,
    meta: Optional[Dict[str, Any]] = None,
    warnings: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Build an offset-paginated response envelope.

    Returns:
        {
            "data": [...],
            "meta": {
                "pagination": {
                    "page": 3, "limit": 20, "offset": 40, "total": 100,
                    "totalPages": 5, "hasMore": true
                },
                "source": "sqlite",
                "truncated": true,
                ...
            }
        }
    """
    total_pages = (total + limit - 1) // limit if limit > 0 else 0
    page = offset // limit + 1 if limit > 0 else 1

    pagination = {
        "page": page,
        "limit": limit,
        "offset": offset,
        "total": total,
        "totalPages": total_pages,
        "hasMore": truncated,
    }

    response_meta = dict(meta) if meta else {}
    response_meta['pagination'] = pagination
    response_meta['truncated'] = truncated

    return success_envelope(data, meta=response_meta, warnings=warnings, source=source)
