"""
API package - HTTP boundary for the DLD engine.

This package provides:
- Pydantic param contracts (api.contracts)
- Response envelopes (api.serializers)
- Global middleware (request_id, error_envelope, request_logging)
"""
