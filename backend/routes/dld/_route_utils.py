"""
Shared route utilities for DLD endpoints.

Goals:
- Structured logger usage for timing and errors
- One place for the store -> sample fallback policy
- Keep endpoint handlers small and consistent
"""

import time
import logging
from typing import Any, Callable, Dict, Optional, TypeVar

from flask import current_app, g, request

from db.engine import StoreUnavailableError
from services.providers import DataProvider, SampleDataProvider, StoreDataProvider

EXTENSION_KEY = 'dld'

T = TypeVar('T')

_fallback_logger = logging.getLogger("dld.fallback")


def route_logger(name: str) -> logging.Logger:
    """Return namespaced logger for DLD routes."""
    return logging.getLogger(f"dld.{name}")


def elapsed_ms(start_time: float) -> int:
    """Elapsed milliseconds since a perf_counter() start value."""
    return int((time.perf_counter() - start_time) * 1000)


def log_success(
    logger: logging.Logger,
    route: str,
    start_time: float,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    payload = {"route": route, "elapsed_ms": elapsed_ms(start_time)}
    if details:
        payload.update(details)
    logger.info("route_success %s", payload)


def log_error(
    logger: logging.Logger,
    route: str,
    start_time: float,
    err: Exception,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    payload = {"route": route, "elapsed_ms": elapsed_ms(start_time)}
    if details:
        payload.update(details)
    logger.exception("route_error %s err=%s", payload, err)


def query_args() -> Dict[str, str]:
    """Request query string as a flat dict (first value wins)."""
    return request.args.to_dict()


def dld_state() -> Dict[str, Any]:
    return current_app.extensions[EXTENSION_KEY]


def store_provider() -> StoreDataProvider:
    return dld_state()['provider']


def sample_provider() -> SampleDataProvider:
    return dld_state()['sample']


def mark_source(source: str) -> None:
    """Record the data source for the X-Data-Source header and access log."""
    g.data_source = source


def with_fallback(route: str, call: Callable[[DataProvider], T]) -> T:
    """
    Run `call` against the store provider.

    If the store is unavailable and SAMPLE_FALLBACK_ENABLED is set, log a
    warning and run the same call against the sample provider instead. The
    result's `source` tells the client which one answered. Validation errors
    are not caught.
    """
    try:
        result = call(store_provider())
    except StoreUnavailableError as e:
        if not current_app.config.get('SAMPLE_FALLBACK_ENABLED', True):
            raise
        _fallback_logger.warning(
            "store_unavailable_fallback route=%s path=%s err=%s",
            route, e.path, e,
        )
        result = call(sample_provider())
    mark_source(result.source)
    return result
