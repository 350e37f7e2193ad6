"""
Utility modules for the backend.
"""
