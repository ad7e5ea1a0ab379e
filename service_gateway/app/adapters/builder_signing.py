"""
Builder attribution signing for Polymarket CLOB requests.

The HMAC construction itself is delegated to ``py_clob_client``; this
adapter validates the request shape, stamps the timestamp and packages the
headers the frontend CLOB client attaches to its own calls.
"""

import json
import time
from typing import Any, Callable, Dict, Optional

from py_clob_client.signing.hmac import build_hmac_signature

from shared.errors import ErrorKind, GatewayError, validation_error
from shared.logging import get_logger
from ..models import SigningRequest, SigningResponse

VALID_METHODS = frozenset({"GET", "POST", "DELETE", "PUT", "PATCH"})


class BuilderSigner:
    """Produces ``POLY_BUILDER_*`` headers from the operator's builder credentials."""

    def __init__(
        self,
        api_key: Optional[str],
        secret: Optional[str],
        passphrase: Optional[str],
        sign_fn: Callable[..., str] = build_hmac_signature,
        clock: Callable[[], float] = time.time,
    ):
        self._api_key = api_key
        self._secret = secret
        self._passphrase = passphrase
        self._sign_fn = sign_fn
        self._clock = clock
        self.logger = get_logger("gateway.builder_signer")

    @property
    def configured(self) -> bool:
        return bool(self._api_key and self._secret and self._passphrase)

    def validate_request(self, request: SigningRequest) -> None:
        if not request.method or request.method.upper() not in VALID_METHODS:
            raise validation_error(f"Invalid HTTP method: {request.method}")

        if not request.path or not request.path.startswith("/"):
            raise validation_error("Invalid or missing path. Path must start with /")

        if request.body:
            try:
                json.loads(request.body)
            except ValueError:
                raise validation_error("Body must be valid JSON")

    def sign(self, request: SigningRequest) -> SigningResponse:
        """Validate the request, then build the attribution headers for it."""
        self.validate_request(request)

        if not self.configured:
            raise GatewayError(
                ErrorKind.SERVICE_UNAVAILABLE,
                "Builder credentials are not configured",
                code="BUILDER_NOT_CONFIGURED",
            )

        method = request.method.upper()
        timestamp = int(self._clock() * 1000)
        try:
            signature = self._sign_fn(self._secret, str(timestamp), method, request.path, request.body or None)
        except Exception as e:
            self.logger.error("Failed to generate signature", method=method, path=request.path, error=type(e).__name__)
            raise GatewayError(ErrorKind.INTERNAL, "Failed to generate signature", code="SIGNATURE_ERROR") from e

        self.logger.info(
            "Generated builder signature",
            method=method,
            path=request.path,
            body_length=len(request.body or ""),
        )
        return SigningResponse(
            POLY_BUILDER_API_KEY=self._api_key,
            POLY_BUILDER_SIGNATURE=signature,
            POLY_BUILDER_TIMESTAMP=timestamp,
            POLY_BUILDER_PASSPHRASE=self._passphrase,
        )

    def builder_info(self) -> Dict[str, Any]:
        """Public view of the builder configuration."""
        return {
            "apiKey": self._api_key,
            "hasSecret": bool(self._secret),
            "hasPassphrase": bool(self._passphrase),
            "configured": self.configured,
        }
