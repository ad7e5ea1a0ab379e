"""
Base service class for HollyMarket Access Gateway services.
"""

import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.config import BaseConfig
from shared.errors import ERROR_KINDS, ErrorKind, GatewayError
from shared.logging import clear_context, configure_logging, get_logger, set_request_id
from shared.metrics import get_metrics_collector
from shared import responses

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}

HTTP_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "AUTHENTICATION_ERROR",
    403: "AUTHORIZATION_ERROR",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    413: "PAYLOAD_TOO_LARGE",
    429: "RATE_LIMIT_EXCEEDED",
}


class BaseService:
    """Base service class with common functionality."""

    version = "1.0.0"

    def __init__(self, service_name: str, config: BaseConfig):
        self.service_name = service_name
        self.config = config
        self.logger = get_logger(f"{service_name}.service")
        self.metrics = get_metrics_collector(service_name)
        self._start_time = time.time()

        configure_logging(service_name, self.config.log_level, json_output=not self.config.is_development)

        self.app = self._create_app()
        self._setup_middleware()
        self._setup_exception_handlers()
        self._setup_routes()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application."""

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            self.logger.info(
                "Service starting",
                environment=self.config.environment,
                api_prefix=self.config.api_prefix,
            )
            yield
            self.logger.info("Service shutting down")
            await self._on_shutdown()

        return FastAPI(
            title=f"{self.service_name.title()} Service",
            description=f"HollyMarket Access Gateway - {self.service_name.title()} Service",
            version=self.version,
            docs_url=None if self.config.is_production else "/docs",
            redoc_url=None if self.config.is_production else "/redoc",
            lifespan=lifespan,
        )

    def _cors_origins(self):
        """Origins allowed by CORS. Override in subclasses."""
        return []

    def _setup_middleware(self):
        """Set up middleware. The last one added runs first."""

        @self.app.middleware("http")
        async def log_requests(request: Request, call_next):
            request_id = set_request_id(request.headers.get("X-Request-ID"))
            request.state.request_id = request_id
            start_time = time.time()
            try:
                try:
                    response = await call_next(request)
                except Exception as e:
                    # Render inside the security and CORS middleware
                    response = self._unhandled_error_response(request, e)
                duration = time.time() - start_time
                self.metrics.record_http_request(
                    method=request.method,
                    endpoint=self._route_template(request),
                    status_code=response.status_code,
                    duration=duration
                )
                self.logger.info(
                    "HTTP request",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=round(duration * 1000, 2)
                )
                response.headers["X-Request-ID"] = request_id
                return response
            finally:
                clear_context()

        @self.app.middleware("http")
        async def add_security_headers(request: Request, call_next):
            response = await call_next(request)
            for header, value in SECURITY_HEADERS.items():
                response.headers.setdefault(header, value)
            if self.config.is_production:
                response.headers.setdefault(
                    "Strict-Transport-Security", "max-age=15552000; includeSubDomains"
                )
            return response

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self._cors_origins(),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @staticmethod
    def _route_template(request: Request) -> str:
        route = request.scope.get("route")
        return getattr(route, "path", "unmatched")

    def _setup_exception_handlers(self):
        """Install the terminal error handlers that render the error envelope."""

        @self.app.exception_handler(GatewayError)
        async def gateway_error_handler(request: Request, exc: GatewayError):
            log = self.logger.error if exc.status_code >= 500 else self.logger.warning
            log(
                "API error",
                kind=exc.kind.value,
                code=exc.code,
                status_code=exc.status_code,
                message=exc.message,
                path=request.url.path,
            )
            return responses.error(exc.message, exc.status_code, exc.code, exc.details)

        @self.app.exception_handler(RequestValidationError)
        async def validation_error_handler(request: Request, exc: RequestValidationError):
            details = responses.validation_details(exc.errors())
            self.logger.warning("Validation failed", path=request.url.path, details=details)
            info = ERROR_KINDS[ErrorKind.VALIDATION]
            return responses.error(info.message, info.status_code, info.code, details)

        @self.app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            if exc.status_code == 404:
                self.logger.warning("Route not found", method=request.method, path=request.url.path)
                message = f"Route {request.method} {request.url.path} not found"
            else:
                message = exc.detail if isinstance(exc.detail, str) else "Request failed"
            code = HTTP_STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
            response = responses.error(message, exc.status_code, code)
            if exc.headers:
                response.headers.update(exc.headers)
            return response

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            return self._unhandled_error_response(request, exc)

    def _unhandled_error_response(self, request: Request, exc: Exception) -> Response:
        """Log an unexpected exception and render it as a 500 envelope."""
        request_id = getattr(request.state, "request_id", None)
        self.logger.error(
            "Unhandled exception",
            error=str(exc),
            path=request.url.path,
            method=request.method,
            request_id=request_id,
            exc_info=exc
        )
        if self.config.is_production:
            response = responses.error("Internal server error", 500, "INTERNAL_SERVER_ERROR")
        else:
            stack = traceback.format_exception(type(exc), exc, exc.__traceback__)
            response = responses.error(str(exc) or type(exc).__name__, 500, "INTERNAL_SERVER_ERROR", stack=stack)
        if request_id:
            response.headers["X-Request-ID"] = request_id
        return response

    def _setup_routes(self):
        """Set up common routes."""

        @self.app.get(f"{self.config.api_prefix}/health")
        async def health_check():
            """Health check endpoint."""
            return responses.success({
                "status": "healthy",
                "timestamp": responses.format_iso(datetime.now(timezone.utc)),
                "version": self.config.api_version,
                "environment": self.config.environment,
                "uptime_seconds": round(self._get_uptime(), 3),
                "services": self._service_metadata(),
            })

        @self.app.get("/metrics", include_in_schema=False)
        async def metrics_endpoint():
            """Prometheus metrics endpoint."""
            from prometheus_client import CONTENT_TYPE_LATEST
            return Response(content=self.metrics.export(), media_type=CONTENT_TYPE_LATEST)

    def _service_metadata(self) -> Dict[str, Any]:
        """Upstream metadata reported by the health endpoint. Override in subclasses."""
        return {}

    async def _on_shutdown(self) -> None:
        """Release resources at shutdown. Override in subclasses."""

    def _get_uptime(self) -> float:
        """Get service uptime in seconds."""
        return time.time() - self._start_time

    def run(self):
        """Run the service until a termination signal, then drain in-flight requests."""
        import uvicorn
        uvicorn.run(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower(),
            timeout_graceful_shutdown=self.config.shutdown_grace_seconds,
        )
