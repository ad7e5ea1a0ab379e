"""
Email OTP authentication routes.
"""

from fastapi import APIRouter, Depends, Request

from shared import responses
from shared.logging import get_logger
from ..adapters.auth_client import SupabaseAuthClient
from ..domain.auth_middleware import AuthGate, extract_bearer_token
from ..models import Identity, SignInRequest, VerifyOtpRequest

logger = get_logger("gateway.routes.auth")


def build_auth_router(auth_client: SupabaseAuthClient, auth_gate: AuthGate) -> APIRouter:
    router = APIRouter(prefix="/auth", tags=["auth"])

    @router.post("/signin")
    async def sign_in(payload: SignInRequest):
        """Send a one-time passcode to the given address."""
        await auth_client.sign_in_with_otp(payload.email)
        logger.info("OTP requested")
        return responses.success({
            "message": "OTP sent to your email address",
            "email": payload.email,
        })

    @router.post("/verify")
    async def verify(payload: VerifyOtpRequest):
        """Exchange a passcode for an access token."""
        identity, access_token = await auth_client.verify_otp(payload.email, payload.token)
        return responses.success({
            "user": {
                "id": identity.id,
                "email": identity.email,
                "createdAt": identity.created_at,
            },
            "accessToken": access_token,
        })

    @router.get("/me")
    async def current_user(identity: Identity = Depends(auth_gate.require)):
        return responses.success({
            "id": identity.id,
            "email": identity.email,
            "createdAt": identity.created_at,
            "lastSignInAt": identity.last_sign_in_at,
        })

    @router.post("/signout")
    async def sign_out(request: Request, identity: Identity = Depends(auth_gate.require)):
        await auth_client.sign_out(extract_bearer_token(request))
        logger.info("User signed out", user_id=identity.id)
        return responses.success({"message": "Successfully signed out"})

    return router
