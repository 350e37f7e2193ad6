"""
Request logging middleware - sampled access log for /api.

Settings come from app.config (see config.Config, REQUEST_LOG_*). Sampling
never drops two kinds of request:
- responses served from sample data (X-Data-Source: sample)
- requests slower than REQUEST_LOG_SLOW_MS, logged at WARNING
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Mapping, Tuple

from flask import Flask, g, request


logger = logging.getLogger("api.request")

SAMPLE_SOURCE = "sample"


@dataclass(frozen=True)
class RequestLogSettings:
    enabled: bool = True
    sample_rate: float = 1.0
    watchlist: Tuple[str, ...] = ()
    slow_ms: float = 1000.0

    @classmethod
    def from_config(cls, config: Mapping) -> "RequestLogSettings":
        raw_rate = config.get("REQUEST_LOG_SAMPLE_RATE", 1.0)
        try:
            sample_rate = float(raw_rate)
        except (TypeError, ValueError):
            logger.warning("Invalid REQUEST_LOG_SAMPLE_RATE=%r, sampling disabled", raw_rate)
            sample_rate = 0.0

        raw_watchlist = config.get("REQUEST_LOG_ENDPOINTS") or ""
        if isinstance(raw_watchlist, str):
            raw_watchlist = raw_watchlist.split(",")
        watchlist = tuple(p.strip() for p in raw_watchlist if p and p.strip())

        return cls(
            enabled=bool(config.get("REQUEST_LOG_ENABLED", True)),
            sample_rate=sample_rate,
            watchlist=watchlist,
            slow_ms=float(config.get("REQUEST_LOG_SLOW_MS", 1000.0)),
        )

    def sampled(self, path: str) -> bool:
        if self.watchlist:
            return path.startswith(self.watchlist)
        if self.sample_rate <= 0:
            return False
        if self.sample_rate >= 1:
            return True
        return random.random() <= self.sample_rate


def setup_request_logging_middleware(app: Flask) -> None:
    """Log /api requests as `api_request ...` lines on the api.request logger."""
    settings = RequestLogSettings.from_config(app.config)
    if not settings.enabled:
        return

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()

    @app.after_request
    def _log_request(response):
        path = request.path
        if not path.startswith("/api"):
            return response

        duration_ms = None
        if hasattr(g, "request_start"):
            duration_ms = round((time.perf_counter() - g.request_start) * 1000, 2)

        source = response.headers.get("X-Data-Source", "-")
        slow = duration_ms is not None and duration_ms >= settings.slow_ms
        if not (slow or source == SAMPLE_SOURCE or settings.sampled(path)):
            return response

        logger.log(
            logging.WARNING if slow else logging.INFO,
            "api_request path=%s method=%s status=%s source=%s duration_ms=%s slow=%s request_id=%s",
            path,
            request.method,
            response.status_code,
            source,
            duration_ms,
            slow,
            getattr(g, "request_id", None),
        )
        return response
