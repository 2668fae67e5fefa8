"""Admin Routes.

Administrative endpoints, reachable only from whitelisted IP addresses.

Author: Barangay Platform Team
Version: 1.0.0
"""

from fastapi import APIRouter, Depends

from barangay_api.api.dependencies import get_security_config, require_admin_ip
from barangay_api.models.responses import ErrorResponse, SecurityLimitsResponse
from barangay_api.security.config import SecurityConfig

router = APIRouter(
    prefix="/v1/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin_ip)],
    responses={403: {"model": ErrorResponse}},
)


@router.get("/security", response_model=SecurityLimitsResponse)
async def security_limits(
    config: SecurityConfig = Depends(get_security_config),
) -> SecurityLimitsResponse:
    """Report the active request limits (no secrets, no IP lists)."""
    return SecurityLimitsResponse(
        max_string_length=config.limits.max_string_length,
        max_array_length=config.limits.max_array_length,
        max_object_depth=config.limits.max_object_depth,
        max_file_size=config.upload.max_file_size,
        allowed_file_types=sorted(config.upload.allowed_extensions),
        gate_exempt_fields=sorted(config.gate.exempt_fields),
        audit_logs_enabled=config.enable_audit_logs,
    )
