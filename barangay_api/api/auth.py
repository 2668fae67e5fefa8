"""Authentication helper routes.

Sign-in and sign-up are delegated to Supabase Auth by the frontend; this
router only exposes the server-side password policy so the registration form
and the backend agree on what "strong" means.

Author: Barangay Platform Team
Version: 1.0.0
"""

from fastapi import APIRouter, Depends

from barangay_api.api.dependencies import get_security_config
from barangay_api.models.requests import PasswordCheckRequest
from barangay_api.models.responses import PasswordStrengthResponse
from barangay_api.security.config import SecurityConfig
from barangay_api.security.policies import password_failures

router = APIRouter(prefix="/v1/auth", tags=["Auth"])


@router.post("/password-strength", response_model=PasswordStrengthResponse)
async def check_password_strength(
    payload: PasswordCheckRequest, config: SecurityConfig = Depends(get_security_config)
) -> PasswordStrengthResponse:
    """Evaluate a candidate password against the configured policy."""
    failures = password_failures(payload.password, config.password)
    return PasswordStrengthResponse(strong=not failures, failures=failures)
