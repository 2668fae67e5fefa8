"""Response models.

Pydantic v2 models for HTTP response validation and documentation.

Author: Barangay Platform Team
Version: 1.0.0
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error envelope for every rejection.

    Attributes:
        status: "fail" for client errors, "error" for server errors
        error: Error code (snake_case identifier)
        message: Human-readable message naming the violated rule category
    """

    status: Literal["fail", "error"] = Field(default="fail")
    error: str = Field(..., description="Error code (e.g., 'validation_failed')")
    message: str = Field(..., description="Human-readable error message")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "fail",
                "error": "validation_failed",
                "message": "Validation failed: potentially malicious input detected",
            }
        }
    )


class PasswordStrengthResponse(BaseModel):
    strong: bool = Field(..., description="Whether the password satisfies the policy")
    failures: list[str] = Field(
        default_factory=list,
        description="Rules not satisfied: length, uppercase, lowercase, number, special",
    )


class ContactAcknowledgement(BaseModel):
    status: Literal["success"] = "success"
    message: str = Field(..., description="Acknowledgement text")
    category: str = Field(..., description="Category the submission was filed under")
    received_at: str = Field(..., description="ISO 8601 timestamp")


class UploadResponse(BaseModel):
    """Accepted upload metadata (the file itself is handed to storage)."""

    status: Literal["success"] = "success"
    filename: str = Field(..., description="Sanitized filename")
    content_type: str
    size: int = Field(ge=0, description="File size in bytes")


class SecurityLimitsResponse(BaseModel):
    """Non-sensitive view of the active request limits."""

    max_string_length: int
    max_array_length: int
    max_object_depth: int
    max_file_size: int
    allowed_file_types: list[str]
    gate_exempt_fields: list[str]
    audit_logs_enabled: bool
