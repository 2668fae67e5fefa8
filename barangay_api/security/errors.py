"""Security violation taxonomy.

Every violation is a client-input error: it terminates the current request
with a 4xx response and is never retried. Messages name the rule category
only and never echo the input that triggered them.

Author: Barangay Platform Team
Version: 1.0.0
"""

from fastapi.responses import JSONResponse


class SecurityViolation(Exception):
    """Base class for request rejections raised by the security pipeline."""

    status_code = 400
    error = "security_violation"
    default_message = "Request rejected"

    def __init__(
        self, message: str | None = None, *, field: str | None = None, rule: str | None = None
    ):
        self.message = message or self.default_message
        self.field = field
        self.rule = rule
        super().__init__(self.message)


class PayloadTooLarge(SecurityViolation):
    status_code = 413
    error = "payload_too_large"
    default_message = "Payload too large: string length exceeds maximum allowed"


class CollectionTooLarge(SecurityViolation):
    status_code = 413
    error = "collection_too_large"
    default_message = "Payload too large: collection size exceeds maximum allowed"


class DepthExceeded(SecurityViolation):
    error = "depth_exceeded"
    default_message = "Validation failed: object depth exceeds maximum allowed"


class ValidationFailed(SecurityViolation):
    error = "validation_failed"
    default_message = "Validation failed: potentially malicious input detected"


class UploadRejected(SecurityViolation):
    error = "upload_rejected"
    default_message = "File upload rejected"


class IPAccessDenied(SecurityViolation):
    status_code = 403
    error = "access_denied"
    default_message = "Access denied from this IP address"


def error_response(exc: SecurityViolation) -> JSONResponse:
    """Render a violation as the standard JSON error envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": "error" if exc.status_code >= 500 else "fail",
            "error": exc.error,
            "message": exc.message,
        },
    )
