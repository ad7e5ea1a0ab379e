"""
Adapters package for the Gateway Service.

Contains one client per upstream surface (auth provider, Polymarket
market data, CLOB trading, comments) plus the builder signer. These
adapters encapsulate:

- Base URLs, timeouts and request shapes
- Error handling that maps upstream failures to shared errors

Keep adapters thin: one upstream call per operation, no retries.
"""

from .auth_client import SupabaseAuthClient
from .base import UpstreamClient
from .builder_signing import BuilderSigner
from .clob_client import ClobClient
from .comments_client import CommentsClient
from .gamma_client import GammaClient

__all__ = [
    "SupabaseAuthClient",
    "UpstreamClient",
    "BuilderSigner",
    "ClobClient",
    "CommentsClient",
    "GammaClient",
]
