"""Request and response models."""

from barangay_api.models.requests import ContactFormRequest, PasswordCheckRequest
from barangay_api.models.responses import (
    ContactAcknowledgement,
    ErrorResponse,
    PasswordStrengthResponse,
    SecurityLimitsResponse,
    UploadResponse,
)

__all__ = [
    "ContactAcknowledgement",
    "ContactFormRequest",
    "ErrorResponse",
    "PasswordCheckRequest",
    "PasswordStrengthResponse",
    "SecurityLimitsResponse",
    "UploadResponse",
]
