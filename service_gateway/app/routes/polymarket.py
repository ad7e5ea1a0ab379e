"""
Builder attribution routes used by the frontend CLOB client.
"""

from fastapi import APIRouter, Depends

from shared import responses
from shared.logging import get_logger
from ..adapters.builder_signing import BuilderSigner
from ..domain.auth_middleware import AuthGate
from ..models import SigningRequest

logger = get_logger("gateway.routes.polymarket")


def build_polymarket_router(signer: BuilderSigner, auth_gate: AuthGate) -> APIRouter:
    router = APIRouter(
        prefix="/polymarket",
        tags=["polymarket"],
        dependencies=[Depends(auth_gate.optional)],
    )

    @router.post("/sign")
    async def sign(payload: SigningRequest):
        """Return ``POLY_BUILDER_*`` headers for one CLOB request."""
        logger.info("Signing request received", method=payload.method, path=payload.path)
        return responses.success(signer.sign(payload))

    @router.get("/builder-info")
    async def builder_info():
        info = signer.builder_info()
        return responses.success({
            "builder": info,
            "message": (
                "Builder credentials are configured"
                if info["configured"]
                else "Builder credentials are missing or incomplete"
            ),
        })

    return router
