"""
FastAPI application entry point for the DevSecOps Demo API.

This module provides the FastAPI application with:
- The /api endpoints of the request validation layer
- Service health and Prometheus metrics endpoints
- Request logging with correlation IDs
- CORS and security headers
- Error mapping for service failures (faithful or hardened detail)
- Startup and shutdown logging
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from api.src import __version__
from api.src.config import Settings, get_settings
from api.src.dependencies import build_services
from api.src.routers import demo, users
from api.src.services.exceptions import DemoError
from shared.logging import configure_logging, request_context
from shared.metrics import HTTPMetrics, get_demo_metrics, get_http_metrics, get_metrics_handler
from shared.models.common import HealthStatus, ServiceInfo, StrategyMode

# Initialize logger
logger = structlog.get_logger(__name__)

UNMATCHED_ROUTE = "unmatched"


# ============================================================================
# Middleware
# ============================================================================

def route_template(request: Request) -> str:
    """Path template of the route serving ``request``, e.g. ``/api/user/{user_id}``.

    Metric labels use the template so that distinct ids share one series.
    """
    partial = None
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match is Match.FULL:
            return getattr(route, "path", UNMATCHED_ROUTE)
        if match is Match.PARTIAL and partial is None:
            partial = getattr(route, "path", None)
    return partial or UNMATCHED_ROUTE


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging and metrics."""

    def __init__(self, app, http_metrics: Optional[HTTPMetrics] = None):
        super().__init__(app)
        self.http_metrics = http_metrics

    async def dispatch(self, request: Request, call_next):
        """Process request and log details."""
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"
        endpoint = route_template(request)

        with request_context(correlation_id, method=method, path=path):
            if self.http_metrics is not None:
                self.http_metrics.requests_in_progress.labels(method=method, endpoint=endpoint).inc()

            start_time = time.perf_counter()
            logger.info("request_started", client_ip=client_ip)

            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "request_failed",
                    error=str(e),
                    duration=f"{time.perf_counter() - start_time:.3f}s",
                    exc_info=True
                )
                raise
            finally:
                if self.http_metrics is not None:
                    self.http_metrics.requests_in_progress.labels(method=method, endpoint=endpoint).dec()

            duration = time.perf_counter() - start_time
            if self.http_metrics is not None:
                self.http_metrics.requests_total.labels(
                    method=method,
                    endpoint=endpoint,
                    status=response.status_code
                ).inc()
                self.http_metrics.request_duration.labels(
                    method=method,
                    endpoint=endpoint
                ).observe(duration)

            log = logger.warning if response.status_code >= 500 else logger.info
            log(
                "request_completed",
                status_code=response.status_code,
                duration=f"{duration:.3f}s",
            )

            response.headers["X-Correlation-ID"] = correlation_id
            return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


# ============================================================================
# Exception Handlers
# ============================================================================

def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Map service failures and framework errors to responses."""
    echo_detail = settings.mode_for("error_detail") is StrategyMode.FAITHFUL

    @app.exception_handler(DemoError)
    async def demo_error_handler(request: Request, exc: DemoError):
        """Surface a service failure with its category's status code."""
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "service_error",
            path=request.url.path,
            error_type=type(exc).__name__,
            error_code=exc.error_code,
            status_code=exc.status_code,
            error=exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.message if echo_detail else exc.public_message,
                "error_code": exc.error_code,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        errors = jsonable_errors(exc)
        logger.warning(
            "validation_error",
            path=request.url.path,
            errors=errors
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": errors}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        logger.warning(
            "http_exception",
            path=request.url.path,
            status_code=exc.status_code,
            detail=exc.detail
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(
            "unexpected_exception",
            path=request.url.path,
            error=str(exc),
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"}
        )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the raw input values."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


# ============================================================================
# Application Factory
# ============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Services and seed data are created here, once per application, and
    shared by every request.

    Args:
        settings: Settings to use (defaults to the cached settings)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        service_name=settings.app_name,
        environment=settings.environment,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Log startup and shutdown of the application."""
        app.state.started_at = time.time()
        logger.info(
            "application_started",
            app_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment,
            strategies={name: mode.value for name, mode in settings.strategy_summary().items()},
        )
        try:
            yield
        finally:
            logger.info("application_shutdown_complete")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Demonstration API whose endpoints validate, classify and render "
            "untrusted input. Each defect-carrying operation runs in a faithful "
            "or hardened variant selected by configuration."
        ),
        docs_url="/docs" if settings.docs_enabled else None,
        redoc_url="/redoc" if settings.docs_enabled else None,
        openapi_url="/openapi.json" if settings.docs_enabled else None,
        lifespan=lifespan,
        debug=settings.debug,
    )

    demo_metrics = get_demo_metrics() if settings.metrics_enabled else None
    http_metrics = get_http_metrics() if settings.metrics_enabled else None

    app.state.settings = settings
    app.state.started_at = time.time()
    app.state.services = build_services(settings, metrics=demo_metrics)

    # ------------------------------------------------------------------------
    # Middleware
    # ------------------------------------------------------------------------

    if settings.cors_enabled:
        logger.info("configuring_cors", origins=settings.cors_origins)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=settings.cors_allow_credentials,
            allow_methods=settings.cors_allow_methods,
            allow_headers=settings.cors_allow_headers,
        )

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware, http_metrics=http_metrics)

    if settings.security_headers_enabled:
        app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app, settings)

    # ------------------------------------------------------------------------
    # Service Health and Metrics
    # ------------------------------------------------------------------------

    @app.get("/health", tags=["Health"], response_class=JSONResponse)
    async def health_check(request: Request) -> ServiceInfo:
        """
        Health check endpoint.

        Returns basic health status and the active behavior variants.
        """
        return ServiceInfo(
            service_name=settings.app_name,
            version=settings.app_version,
            status=HealthStatus.HEALTHY,
            environment=settings.environment,
            uptime_seconds=round(time.time() - request.app.state.started_at, 3),
            strategies=settings.strategy_summary(),
        )

    metrics_handler = get_metrics_handler()

    @app.get("/metrics", tags=["Monitoring"], response_class=PlainTextResponse)
    async def metrics() -> Response:
        """Prometheus metrics endpoint."""
        if not settings.metrics_enabled:
            raise StarletteHTTPException(status_code=404, detail="Metrics disabled")
        return Response(content=metrics_handler(), media_type=CONTENT_TYPE_LATEST)

    # ------------------------------------------------------------------------
    # API Routers
    # ------------------------------------------------------------------------

    app.include_router(users.router, prefix=settings.api_prefix)
    app.include_router(demo.router, prefix=settings.api_prefix)

    logger.info("application_created", version=__version__, api_prefix=settings.api_prefix)
    return app


app = create_app()


# ============================================================================
# Application Entry Point
# ============================================================================

if __name__ == "__main__":
    settings = get_settings()
    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

    uvicorn.run(
        "api.src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
