"""
Authentication gate for Gateway.

Exposes two FastAPI dependencies:

- ``require``: the route needs a valid bearer token; anything else is a 401
  raised before the request body is validated or the handler runs.
- ``optional``: the identity is resolved when possible; a missing or
  rejected token leaves the request anonymous.
"""

from typing import Optional

from fastapi import Request

from shared.errors import ErrorKind, GatewayError, authentication_error
from shared.logging import get_logger, set_user_context
from shared.metrics import MetricsCollector
from ..adapters.auth_client import SupabaseAuthClient
from ..models import Identity

BEARER_PREFIX = "Bearer "


def extract_bearer_token(request: Request) -> str:
    """Return the bearer token or raise an authentication error."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        raise authentication_error("Missing or invalid authorization header")

    token = auth_header[len(BEARER_PREFIX):].strip()
    if not token:
        raise authentication_error("Missing access token")
    return token


class AuthGate:
    """Resolves bearer tokens to identities via the auth provider."""

    def __init__(self, auth_client: SupabaseAuthClient, metrics: Optional[MetricsCollector] = None):
        self.auth_client = auth_client
        self.metrics = metrics
        self.logger = get_logger("gateway.auth_gate")

    async def authenticate_request(self, request: Request) -> Identity:
        """Authenticate the request with its bearer token."""
        token = extract_bearer_token(request)
        try:
            identity = await self.auth_client.get_user(token)
        except GatewayError as e:
            if e.kind is ErrorKind.AUTHENTICATION:
                raise
            raise authentication_error("Invalid token") from e

        request.state.identity = identity
        set_user_context(identity.id)
        return identity

    async def require(self, request: Request) -> Identity:
        """Dependency for routes that need an authenticated caller."""
        try:
            identity = await self.authenticate_request(request)
        except GatewayError as e:
            self.logger.warning("Authentication failed", error=e.message, path=request.url.path)
            if self.metrics is not None:
                self.metrics.record_auth_failure("required")
            raise

        self.logger.debug("Request authenticated", user_id=identity.id)
        return identity

    async def optional(self, request: Request) -> Optional[Identity]:
        """Dependency for routes that only enrich their behaviour when authenticated."""
        request.state.identity = None
        if not request.headers.get("Authorization"):
            return None

        try:
            return await self.authenticate_request(request)
        except GatewayError as e:
            self.logger.debug("Optional auth failed", error=e.message)
            if self.metrics is not None:
                self.metrics.record_auth_failure("optional")
            return None
