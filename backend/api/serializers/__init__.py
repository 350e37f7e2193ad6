"""
Response serializers and envelope helpers.
"""

from .response import success_envelope, error_envelope, paginated_envelope

__all__ = ['success_envelope', 'error_envelope', 'paginated_envelope']
