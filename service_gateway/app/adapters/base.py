"""
Base HTTP client shared by the Polymarket adapters.
"""

import time
from typing import Any, Dict, List, Mapping, Optional

import httpx

from shared.errors import ErrorKind, GatewayError
from shared.logging import get_logger
from shared.metrics import MetricsCollector


def build_query(params: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop unset values and render booleans the way the upstream expects."""
    query: Dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        query[key] = value
    return query


class UpstreamClient:
    """One long-lived ``httpx.AsyncClient`` bound to an upstream base URL.

    Exactly one request is made per call: no retries, caching or circuit
    breaking. Failures are translated into ``GatewayError`` kinds.
    """

    upstream_name = "upstream"
    error_code = "UPSTREAM_ERROR"
    not_found_message = "Resource not found"
    rate_limit_message = "Rate limit exceeded"
    server_error_message = "Upstream server error"
    timeout_message = "Request timeout"
    unavailable_message = "Service unavailable"

    def __init__(
        self,
        base_url: str,
        timeout: float,
        metrics: Optional[MetricsCollector] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.metrics = metrics
        self.logger = get_logger(f"gateway.{self.upstream_name}_client")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json", **(headers or {})},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Issue one request and return the decoded JSON body."""
        query = build_query(params or {})
        self.logger.debug("Upstream request", method=method, path=path, params=query)
        start_time = time.time()
        try:
            response = await self._client.request(method, path, params=query, json=json, headers=headers)
        except httpx.TimeoutException as e:
            self._record(ErrorKind.TIMEOUT.value, start_time)
            self.logger.error("Upstream timeout", method=method, path=path, error=str(e))
            raise GatewayError(ErrorKind.TIMEOUT, self.timeout_message) from e
        except httpx.TransportError as e:
            self._record(ErrorKind.SERVICE_UNAVAILABLE.value, start_time)
            self.logger.error("Upstream unreachable", method=method, path=path, error=str(e))
            raise GatewayError(ErrorKind.SERVICE_UNAVAILABLE, self.unavailable_message) from e

        self._record(str(response.status_code), start_time)
        self.logger.debug("Upstream response", status_code=response.status_code, path=path)
        if response.is_error:
            raise self._translate_error(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            self.logger.error("Upstream returned invalid JSON", path=path)
            raise self._invalid_response() from e

    def _invalid_response(self) -> GatewayError:
        return GatewayError(
            ErrorKind.UPSTREAM,
            f"{self.upstream_name} returned an invalid response",
            code=self.error_code,
            status_code=502,
        )

    def _expect_list(self, payload: Any, path: str) -> List[Any]:
        """Return ``payload`` if the upstream answered with a JSON array."""
        if not isinstance(payload, list):
            self.logger.error("Upstream returned an unexpected shape", path=path, expected="list")
            raise self._invalid_response()
        return payload

    def _expect_field(self, payload: Any, path: str, *keys: str) -> Any:
        """Return the first of ``keys`` present in a JSON object payload."""
        if isinstance(payload, dict):
            for key in keys:
                if payload.get(key) is not None:
                    return payload[key]
        self.logger.error("Upstream returned an unexpected shape", path=path, expected=list(keys))
        raise self._invalid_response()

    def _record(self, outcome: str, start_time: float) -> None:
        if self.metrics is not None:
            self.metrics.record_upstream_call(self.upstream_name, outcome, time.time() - start_time)

    @staticmethod
    def _upstream_message(response: httpx.Response) -> Optional[str]:
        try:
            payload = response.json()
        except ValueError:
            return None
        if isinstance(payload, dict):
            for key in ("message", "msg", "error_description", "error"):
                message = payload.get(key)
                if isinstance(message, str) and message:
                    return message
        return None

    def _translate_error(self, response: httpx.Response) -> GatewayError:
        """Map an upstream HTTP failure status onto the gateway error taxonomy."""
        status = response.status_code
        message = self._upstream_message(response) or response.reason_phrase or "Upstream error"
        self.logger.error("Upstream error response", status_code=status, message=message)

        if status == 400:
            return GatewayError(ErrorKind.BAD_REQUEST, message)
        if status == 401:
            return GatewayError(ErrorKind.UNAUTHORIZED, "Unauthorized")
        if status == 404:
            return GatewayError(ErrorKind.NOT_FOUND, self.not_found_message)
        if status == 429:
            return GatewayError(ErrorKind.RATE_LIMIT_EXCEEDED, self.rate_limit_message)
        if status == 500:
            return GatewayError(ErrorKind.SERVER_ERROR, self.server_error_message)
        if status in (502, 503):
            return GatewayError(ErrorKind.SERVICE_UNAVAILABLE, self.unavailable_message)
        return GatewayError(ErrorKind.UPSTREAM, message, code=self.error_code, status_code=status)
