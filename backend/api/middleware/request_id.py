"""
Request ID middleware - X-Request-ID correlation.

An incoming X-Request-ID is reused (trimmed to 128 chars) so that a proxy's
ID follows the request through our logs; otherwise a UUID4 is generated.
"""

import uuid
from flask import Flask, request, g

MAX_REQUEST_ID_LENGTH = 128


def setup_request_id_middleware(app: Flask) -> None:
    """Set g.request_id before each request and echo it as a response header."""

    @app.before_request
    def inject_request_id():
        incoming = (request.headers.get('X-Request-ID') or '').strip()
        g.request_id = incoming[:MAX_REQUEST_ID_LENGTH] or str(uuid.uuid4())

    @app.after_request
    def add_request_id_header(response):
        if hasattr(g, 'request_id'):
            response.headers['X-Request-ID'] = g.request_id
        return response


def get_request_id() -> str:
    """Current request ID, or a fresh UUID outside a request."""
    if hasattr(g, 'request_id'):
        return g.request_id
    return str(uuid.uuid4())
