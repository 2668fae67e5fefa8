"""Security Audit Middleware.

Request-level security monitoring:

- Rejects requests from blocked IP addresses (403) before any processing.
- Logs a warning when the URL path or query string contains directory
  traversal or command injection markers.
- Emits one audit record per request when audit logging is enabled.

Audit records carry method, path, client IP, User-Agent, referer, content
type/length, status and duration. Request bodies are never logged.

Author: Barangay Platform Team
Version: 1.0.0
"""

import time
from collections.abc import Awaitable, Callable
from urllib.parse import unquote

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from barangay_api.security.config import IPPolicy
from barangay_api.security.errors import IPAccessDenied, error_response
from barangay_api.security.patterns import DEFAULT_REGISTRY, PatternGroup, PatternRegistry
from barangay_api.services.client_ip_service import ClientIPExtractor, is_ip_blocked
from barangay_api.utils.logging import get_logger

logger = get_logger(__name__)

SUSPICIOUS_URL_GROUPS = (PatternGroup.DIRECTORY_TRAVERSAL, PatternGroup.COMMAND_INJECTION)


class SecurityAuditMiddleware(BaseHTTPMiddleware):
    """Block denied IPs and log suspicious or audited requests."""

    def __init__(
        self,
        app: ASGIApp,
        ip_policy: IPPolicy,
        ip_extractor: ClientIPExtractor,
        enable_audit_logs: bool = False,
        registry: PatternRegistry = DEFAULT_REGISTRY,
    ):
        """Initialize security audit middleware.

        Args:
            app: ASGI application.
            ip_policy: Global deny-list (``blocked_ips``).
            ip_extractor: Client IP extraction configured for this app.
            enable_audit_logs: Log an audit record for every request.
            registry: Pattern groups used to flag suspicious URLs.
        """
        super().__init__(app)
        self.ip_policy = ip_policy
        self.ip_extractor = ip_extractor
        self.enable_audit_logs = enable_audit_logs
        self.registry = registry

        logger.info(
            f"SecurityAuditMiddleware initialized: "
            f"blocked_ips={len(ip_policy.blocked_ips)}, audit_logs={enable_audit_logs}, "
            f"proxy_headers={ip_extractor.enable_proxy_headers}"
        )

    def is_suspicious_url(self, path: str, query: str) -> bool:
        target = unquote(f"{path}?{query}" if query else path)
        return any(self.registry.matches_any(target, group) for group in SUSPICIOUS_URL_GROUPS)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        client_ip = self.ip_extractor.get_client_ip(request)

        if self.ip_policy.blocked_ips and is_ip_blocked(client_ip, self.ip_policy.blocked_ips):
            logger.warning(f"Blocked IP rejected: ip={client_ip}, path={request.url.path}")
            return error_response(IPAccessDenied())

        if self.is_suspicious_url(request.url.path, request.url.query):
            logger.warning(
                "SECURITY WARNING: Suspicious request detected",
                method=request.method,
                path=request.url.path,
                ip=client_ip,
                user_agent=request.headers.get("user-agent"),
            )

        started = time.perf_counter()
        response: Response = await call_next(request)

        if self.enable_audit_logs:
            logger.info(
                "SECURITY AUDIT",
                method=request.method,
                path=request.url.path,
                ip=client_ip,
                user_agent=request.headers.get("user-agent"),
                referer=request.headers.get("referer"),
                content_type=request.headers.get("content-type"),
                content_length=request.headers.get("content-length"),
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

        return response
