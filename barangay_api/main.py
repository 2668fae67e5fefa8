"""Barangay API Main Entry Point.

FastAPI application wiring the request security pipeline in front of the
civic-service routes.

Middleware order (outermost first):
1. CORS
2. SecurityHeadersMiddleware
3. SecurityAuditMiddleware (blocked IPs, suspicious URL warnings, audit log)
4. RequestSizeLimitMiddleware
5. RequestSanitizationMiddleware (sanitize, then gate)

Author: Barangay Platform Team
Version: 1.0.0
"""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from barangay_api import __service_name__, __version__
from barangay_api.api import (
    admin_router,
    auth_router,
    contact_router,
    health_router,
    uploads_router,
)
from barangay_api.config.settings import Settings, split_csv
from barangay_api.config.settings import settings as default_settings
from barangay_api.middleware.request_size_limit import RequestSizeLimitMiddleware
from barangay_api.middleware.sanitization import RequestSanitizationMiddleware
from barangay_api.middleware.security_audit import SecurityAuditMiddleware
from barangay_api.middleware.security_headers import SecurityHeadersMiddleware
from barangay_api.security.config import SecurityConfig
from barangay_api.security.errors import SecurityViolation, error_response
from barangay_api.security.gate import RequestGate
from barangay_api.security.sanitizer import PayloadSanitizer
from barangay_api.services.client_ip_service import ClientIPExtractor
from barangay_api.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

# Contact form submissions are small; keep their ceiling tight
CONTACT_MAX_SIZE = 16 * 1024
# Multipart framing on top of the file itself
UPLOAD_OVERHEAD = 64 * 1024


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Handle startup and shutdown events."""
    config: SecurityConfig = app.state.security_config
    setup_logging(app.state.settings, sensitive_fields=config.sensitive_fields)

    logger.info(f"{__service_name__} {__version__} starting")
    logger.info(
        f"Limits: max_string={config.limits.max_string_length}, "
        f"max_collection={config.limits.max_array_length}, "
        f"max_depth={config.limits.max_object_depth}"
    )
    if not config.ip.admin_whitelist:
        if config.ip.allow_all_when_whitelist_empty:
            logger.warning(
                "ADMIN_IP_WHITELIST is empty and ADMIN_ALLOW_ALL_WHEN_WHITELIST_EMPTY=true: "
                "admin endpoints are reachable from any IP"
            )
        else:
            logger.info("ADMIN_IP_WHITELIST is empty: admin endpoints are closed")

    yield

    logger.info(f"{__service_name__} shutting down...")


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        app_settings: Settings to build the app from (defaults to the
            environment-derived singleton).
    """
    app_settings = app_settings or default_settings
    security_config = SecurityConfig.from_settings(app_settings)

    app = FastAPI(
        title=__service_name__,
        description="Barangay civic services API with request sanitization and validation",
        version=__version__,
        lifespan=lifespan,
    )
    ip_extractor = ClientIPExtractor(enable_proxy_headers=app_settings.enable_proxy_headers)
    app.state.settings = app_settings
    app.state.security_config = security_config
    app.state.client_ip_extractor = ip_extractor

    # Added innermost first: Starlette wraps each new middleware around the previous ones
    app.add_middleware(
        RequestSanitizationMiddleware,
        sanitizer=PayloadSanitizer(security_config.limits),
        gate=RequestGate(security_config.gate),
        ip_extractor=ip_extractor,
        max_body_size=app_settings.max_request_size,
    )

    app.add_middleware(
        RequestSizeLimitMiddleware,
        max_size=app_settings.max_request_size,
        endpoint_limits={
            "/v1/contact": CONTACT_MAX_SIZE,
            "/v1/uploads": app_settings.max_file_size + UPLOAD_OVERHEAD,
        },
    )

    app.add_middleware(
        SecurityAuditMiddleware,
        ip_policy=security_config.ip,
        ip_extractor=ip_extractor,
        enable_audit_logs=security_config.enable_audit_logs,
    )

    app.add_middleware(
        SecurityHeadersMiddleware,
        enable_hsts=True,
        enable_csp=True,
        extra_connect_src=[app_settings.supabase_url],
    )

    # SECURITY (CWE-346): only explicit http(s) origins, never a wildcard
    cors_origins = [
        origin
        for origin in split_csv(app_settings.cors_allow_origins)
        if origin.startswith(("http://", "https://"))
    ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=app_settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        max_age=app_settings.cors_max_age,
    )

    @app.exception_handler(SecurityViolation)
    async def security_violation_handler(request: Request, exc: SecurityViolation) -> Response:
        logger.warning(
            f"Request rejected: error={exc.error}, method={request.method}, "
            f"path={request.url.path}"
        )
        return error_response(exc)

    # Correlation ID middleware
    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next: Callable[[Request], Any]) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid4()))
        response: Response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response

    @app.get("/", tags=["Info"])
    async def root() -> dict[str, Any]:
        return {
            "service": __service_name__,
            "version": __version__,
            "endpoints": {
                "health": "/health",
                "password_strength": "/v1/auth/password-strength (POST)",
                "contact": "/v1/contact (POST)",
                "uploads": "/v1/uploads (POST)",
                "admin_security": "/v1/admin/security (GET)",
            },
        }

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(contact_router)
    app.include_router(uploads_router)
    app.include_router(admin_router)

    logger.info("Routers registered: /health, /v1/auth, /v1/contact, /v1/uploads, /v1/admin")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "barangay_api.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.is_debug,
        log_level=default_settings.log_level.lower(),
    )
