"""Middleware package for the Barangay API."""

from barangay_api.middleware.request_size_limit import RequestSizeLimitMiddleware
from barangay_api.middleware.sanitization import RequestSanitizationMiddleware
from barangay_api.middleware.security_audit import SecurityAuditMiddleware
from barangay_api.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "RequestSanitizationMiddleware",
    "RequestSizeLimitMiddleware",
    "SecurityAuditMiddleware",
    "SecurityHeadersMiddleware",
]
