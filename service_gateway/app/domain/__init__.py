"""
Domain utilities for the Gateway Service.

Includes the authentication gate and the request validation helpers that
sit between the transport layer and the upstream adapters.
"""

from .auth_middleware import AuthGate, extract_bearer_token
from .validation import comments_query, or_default, parse_bool_flag

__all__ = [
    "AuthGate",
    "extract_bearer_token",
    "comments_query",
    "or_default",
    "parse_bool_flag",
]
