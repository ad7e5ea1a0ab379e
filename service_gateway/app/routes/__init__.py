"""
Route factories for the Gateway Service.

Each factory receives the upstream client it proxies and the shared
authentication gate, and returns an ``APIRouter`` mounted under the
versioned API prefix by ``app.main``.
"""

from .auth import build_auth_router
from .comments import build_comments_router
from .markets import build_markets_router
from .polymarket import build_polymarket_router
from .trading import build_trading_router

__all__ = [
    "build_auth_router",
    "build_comments_router",
    "build_markets_router",
    "build_polymarket_router",
    "build_trading_router",
]
