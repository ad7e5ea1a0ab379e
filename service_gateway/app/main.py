"""
API Gateway service for the HollyMarket Access Gateway.
"""

import sys
from typing import Any, Dict, Optional

from shared.base_service import BaseService
from shared.config import ConfigurationError, GatewaySettings, load_settings
from shared.logging import get_logger

from .adapters import BuilderSigner, ClobClient, CommentsClient, GammaClient, SupabaseAuthClient
from .domain import AuthGate
from .routes import (
    build_auth_router,
    build_comments_router,
    build_markets_router,
    build_polymarket_router,
    build_trading_router,
)


class GatewayService(BaseService):
    """API Gateway service implementation."""

    def __init__(
        self,
        settings: Optional[GatewaySettings] = None,
        *,
        auth_client: Optional[SupabaseAuthClient] = None,
        gamma_client: Optional[GammaClient] = None,
        clob_client: Optional[ClobClient] = None,
        comments_client: Optional[CommentsClient] = None,
        builder_signer: Optional[BuilderSigner] = None,
    ):
        self.settings = settings or load_settings()
        self._injected = {
            "auth_client": auth_client,
            "gamma_client": gamma_client,
            "clob_client": clob_client,
            "comments_client": comments_client,
            "builder_signer": builder_signer,
        }
        super().__init__("gateway", self.settings)
        self.app.state.gateway_service = self

    def _build_clients(self) -> None:
        settings = self.settings
        injected = self._injected

        self.auth_client = injected["auth_client"] or SupabaseAuthClient(
            settings.supabase_base_url,
            settings.supabase_anon_key,
            settings.supabase_service_role_key,
            metrics=self.metrics,
        )
        self.gamma_client = injected["gamma_client"] or GammaClient(
            settings.gamma_base_url,
            timeout=settings.upstream_timeout_seconds,
            metrics=self.metrics,
        )
        self.clob_client = injected["clob_client"] or ClobClient(
            settings.clob_base_url,
            timeout=settings.upstream_timeout_seconds,
            metrics=self.metrics,
        )
        self.comments_client = injected["comments_client"] or CommentsClient(
            settings.gamma_base_url,
            timeout=settings.comments_timeout_seconds,
            metrics=self.metrics,
        )
        self.builder_signer = injected["builder_signer"] or BuilderSigner(
            settings.polymarket_builder_api_key,
            settings.polymarket_builder_secret,
            settings.polymarket_builder_passphrase,
        )
        self.auth_gate = AuthGate(self.auth_client, metrics=self.metrics)

        if not self.builder_signer.configured:
            self.logger.warning("Builder credentials are missing; /polymarket/sign will return 503")

    def _cors_origins(self):
        return self.settings.cors_origins

    def _setup_routes(self):
        """Set up gateway routes."""
        super()._setup_routes()
        self._build_clients()

        prefix = self.settings.api_prefix
        self.app.include_router(build_auth_router(self.auth_client, self.auth_gate), prefix=prefix)
        self.app.include_router(build_markets_router(self.gamma_client, self.auth_gate), prefix=prefix)
        self.app.include_router(build_trading_router(self.clob_client, self.auth_gate), prefix=prefix)
        self.app.include_router(build_comments_router(self.comments_client, self.auth_gate), prefix=prefix)
        self.app.include_router(build_polymarket_router(self.builder_signer, self.auth_gate), prefix=prefix)

    def _service_metadata(self) -> Dict[str, Any]:
        return {
            "polymarket": {
                "api": self.settings.gamma_base_url,
                "clob": self.settings.clob_base_url,
                "chainId": self.settings.polymarket_chain_id,
            }
        }

    async def _on_shutdown(self) -> None:
        for client in (self.auth_client, self.gamma_client, self.clob_client, self.comments_client):
            close = getattr(client, "close", None)
            if close is not None:
                await close()


def create_app():
    """Create FastAPI application."""
    service = GatewayService()
    return service.app


def main() -> None:
    try:
        service = GatewayService()
    except ConfigurationError as e:
        get_logger("gateway.startup").error("Invalid configuration", error=str(e))
        sys.exit(1)
    service.run()


if __name__ == "__main__":
    main()
