"""Request models.

Pydantic v2 models for HTTP request validation and documentation. These
models do the semantic validation that the sanitization pipeline does not
(formats, lengths, enumerations).

Author: Barangay Platform Team
Version: 1.0.0
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
PH_PHONE_PATTERN = r"^(\+63|0)?9\d{9}$"
PERSON_NAME_PATTERN = r"^[a-zA-Z\s'-]+$"

ContactCategory = Literal["inquiry", "complaint", "request", "feedback", "emergency"]


class ContactFormRequest(BaseModel):
    """Resident contact form submission.

    Attributes:
        name: Sender name (letters, spaces, hyphens, apostrophes)
        email: Sender email address
        phone: Optional Philippine mobile number (+639XXXXXXXXX or 09XXXXXXXXX)
        subject: Message subject
        message: Message body
        category: Inquiry type
    """

    name: str = Field(..., min_length=2, max_length=100, pattern=PERSON_NAME_PATTERN)
    email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)
    phone: str | None = Field(None, pattern=PH_PHONE_PATTERN)
    subject: str = Field(..., min_length=5, max_length=200)
    message: str = Field(..., min_length=10, max_length=2000)
    category: ContactCategory

    @field_validator("name", "subject", "message", mode="before")
    @classmethod
    def strip_text(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Juan dela Cruz",
                "email": "juan@example.com",
                "phone": "09171234567",
                "subject": "Streetlight repair",
                "message": "The streetlight near the covered court is out.",
                "category": "request",
            }
        }
    )


class PasswordCheckRequest(BaseModel):
    """Password strength check.

    Note:
        The password is masked in every log line (``password`` is a
        sensitive field) and is never echoed back.
    """

    password: str = Field(..., min_length=1, max_length=1024)

    model_config = ConfigDict(json_schema_extra={"example": {"password": "StrongPass123!"}})
