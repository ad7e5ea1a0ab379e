"""
Auth provider client for Gateway.

Talks to the Supabase GoTrue REST API for email OTP sign-in, OTP
verification, token introspection and sign-out. Every failure surfaces as
an authentication error (401).
"""

from typing import Any, Dict, Optional, Tuple

import httpx

from shared.errors import ErrorKind, GatewayError, authentication_error
from shared.metrics import MetricsCollector
from ..models import Identity
from .base import UpstreamClient


class SupabaseAuthClient(UpstreamClient):
    """Client for communicating with the auth provider."""

    upstream_name = "auth"
    error_code = "AUTH_PROVIDER_ERROR"

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        service_role_key: str,
        timeout: float = 10.0,
        metrics: Optional[MetricsCollector] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            base_url,
            timeout,
            metrics=metrics,
            transport=transport,
            headers={"apikey": anon_key, "Authorization": f"Bearer {anon_key}"},
        )
        self._service_role_key = service_role_key

    async def _call(
        self,
        method: str,
        path: str,
        failure_message: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        keep_provider_message: bool = False,
    ) -> Any:
        try:
            return await self._request(method, path, params=params, json=json, headers=headers)
        except GatewayError as e:
            message = failure_message
            if keep_provider_message and e.kind in (ErrorKind.BAD_REQUEST, ErrorKind.UPSTREAM):
                message = e.message
            self.logger.warning("Auth provider call failed", path=path, kind=e.kind.value)
            raise authentication_error(message) from e

    async def sign_in_with_otp(self, email: str) -> None:
        """Ask the provider to email a one-time passcode, creating the user if needed."""
        await self._call(
            "POST",
            "/auth/v1/otp",
            "Failed to send OTP",
            json={"email": email, "create_user": True},
            keep_provider_message=True,
        )
        self.logger.info("OTP dispatched")

    async def verify_otp(self, email: str, token: str) -> Tuple[Identity, str]:
        """Exchange an emailed passcode for a session."""
        session = await self._call(
            "POST",
            "/auth/v1/verify",
            "Invalid or expired OTP",
            json={"type": "email", "email": email, "token": token},
        )
        if not isinstance(session, dict) or not session.get("access_token") or not session.get("user"):
            raise authentication_error("Invalid or expired OTP")

        identity = Identity.from_provider(session["user"])
        self.logger.info("User authenticated", user_id=identity.id)
        return identity, session["access_token"]

    async def get_user(self, token: str) -> Identity:
        """Resolve an access token to the identity it was issued for."""
        payload = await self._call(
            "GET",
            "/auth/v1/user",
            "Invalid token",
            headers={"Authorization": f"Bearer {token}"},
        )
        if not isinstance(payload, dict) or not payload.get("id"):
            raise authentication_error("Invalid token")
        return Identity.from_provider(payload)

    async def sign_out(self, token: str) -> None:
        """Revoke every session belonging to the token's user."""
        await self._call(
            "POST",
            "/auth/v1/logout",
            "Failed to sign out",
            params={"scope": "global"},
            headers={
                "apikey": self._service_role_key,
                "Authorization": f"Bearer {token}",
            },
        )
        self.logger.info("User signed out")
