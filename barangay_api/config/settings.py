"""Application configuration using Pydantic v2 Settings.

Manages server, CORS, request validation limits, password policy, IP
restrictions, upload limits and logging, loaded from environment variables.

Author: Barangay Platform Team
Version: 1.0.0
"""

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def split_csv(value: str) -> list[str]:
    """Split a comma-separated setting into trimmed, non-empty entries."""
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ========================================================================
    # Server Configuration
    # ========================================================================
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000, ge=1, le=65535, alias="PORT")
    environment: str = Field(default="development", alias="NODE_ENV")

    # ========================================================================
    # CORS Configuration
    # ========================================================================
    cors_allow_origins: str = Field(default="http://localhost:3000", alias="ALLOWED_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_max_age: int = Field(default=86400, ge=0, alias="CORS_MAX_AGE")

    # ========================================================================
    # Input Validation Limits
    # ========================================================================
    max_string_length: int = Field(default=5000, gt=0, alias="MAX_STRING_LENGTH")
    # Applies to every container in a payload: lists, tuples, sets and objects
    max_array_length: int = Field(default=100, gt=0, alias="MAX_ARRAY_LENGTH")
    max_object_depth: int = Field(default=10, gt=0, alias="MAX_OBJECT_DEPTH")

    # ========================================================================
    # Request Gate Policy
    # ========================================================================
    # Fields skipped by the SQL/XSS gate (still sanitized). Empty = gate every field.
    gate_exempt_fields: str = Field(default="", alias="GATE_EXEMPT_FIELDS")
    # Fields additionally checked for directory traversal and command injection
    gate_path_fields: str = Field(
        default="path,file_path,filepath,filename,directory",
        alias="GATE_PATH_FIELDS",
    )
    block_suspicious_user_agents: bool = Field(default=True, alias="BLOCK_SUSPICIOUS_USER_AGENTS")

    # ========================================================================
    # Password Policy
    # ========================================================================
    password_min_length: int = Field(default=8, ge=1, alias="PASSWORD_MIN_LENGTH")
    password_max_length: int = Field(default=128, ge=1, le=1024, alias="PASSWORD_MAX_LENGTH")
    password_require_uppercase: bool = Field(default=True, alias="PASSWORD_REQUIRE_UPPERCASE")
    password_require_lowercase: bool = Field(default=True, alias="PASSWORD_REQUIRE_LOWERCASE")
    password_require_numbers: bool = Field(default=True, alias="PASSWORD_REQUIRE_NUMBERS")
    password_require_special_chars: bool = Field(
        default=True, alias="PASSWORD_REQUIRE_SPECIAL_CHARS"
    )
    password_special_chars: str = Field(
        default="@$!%*?&", min_length=1, alias="PASSWORD_SPECIAL_CHARS"
    )

    # ========================================================================
    # Audit Logging
    # ========================================================================
    enable_audit_logs: bool = Field(default=False, alias="ENABLE_AUDIT_LOGS")
    sensitive_fields: str = Field(
        default="password,token,secret,key,authorization",
        alias="SENSITIVE_FIELDS",
        description="Key substrings whose values are masked in logs",
    )

    # ========================================================================
    # IP Restrictions
    # ========================================================================
    admin_ip_whitelist: str = Field(default="", alias="ADMIN_IP_WHITELIST")
    # An empty whitelist denies every admin request unless this is enabled
    admin_allow_all_when_whitelist_empty: bool = Field(
        default=False,
        alias="ADMIN_ALLOW_ALL_WHEN_WHITELIST_EMPTY",
        description="Treat an empty admin whitelist as 'allow all'",
    )
    blocked_ips: str = Field(default="", alias="BLOCKED_IPS")
    enable_proxy_headers: bool = Field(default=True, alias="ENABLE_PROXY_HEADERS")
    trusted_proxies: str = Field(default="", alias="TRUSTED_PROXIES")

    # ========================================================================
    # Request & File Upload Limits
    # ========================================================================
    max_request_size: int = Field(default=10 * 1024 * 1024, gt=0, alias="MAX_REQUEST_SIZE")
    max_file_size: int = Field(default=5 * 1024 * 1024, gt=0, alias="MAX_FILE_SIZE")
    allowed_file_types: str = Field(
        default="pdf,jpg,jpeg,png,doc,docx", alias="ALLOWED_FILE_TYPES"
    )
    allowed_mime_types: str = Field(
        default=(
            "application/pdf,image/jpeg,image/jpg,image/png,application/msword,"
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        ),
        alias="ALLOWED_MIME_TYPES",
    )

    # ========================================================================
    # Content Security Policy
    # ========================================================================
    supabase_url: str = Field(default="", alias="SUPABASE_URL")

    # ========================================================================
    # Logging Configuration
    # ========================================================================
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_to_file: bool = Field(default=True, alias="LOG_TO_FILE")
    log_dir: Path = Field(default=Path("logs"), alias="LOG_DIR")
    log_console_enabled: bool = Field(default=True, alias="LOG_CONSOLE_ENABLED")
    log_json_format: bool = Field(default=True, alias="LOG_JSON_FORMAT")
    log_file_max_mb: int = Field(default=10, ge=1, le=100, alias="LOG_FILE_MAX_MB")
    log_file_backup_count: int = Field(default=5, ge=1, le=20, alias="LOG_FILE_BACKUP_COUNT")

    # ========================================================================
    # Validators
    # ========================================================================

    @property
    def is_debug(self) -> bool:
        """Check if debug mode is enabled (LOG_LEVEL == DEBUG)."""
        return self.log_level == "DEBUG"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        normalized = v.upper().strip()
        if normalized not in valid_levels:
            return "INFO"
        return normalized

    @field_validator("log_dir", mode="before")
    @classmethod
    def ensure_log_dir_path(cls, v: str | Path) -> Path:
        """Ensure log_dir is a Path object."""
        return Path(v) if isinstance(v, str) else v

    @field_validator("password_max_length", mode="after")
    @classmethod
    def validate_password_lengths(cls, v: int, info: Any) -> int:
        """Validate password_max_length >= password_min_length."""
        min_length = info.data.get("password_min_length", 8)
        if v < min_length:
            raise ValueError(
                f"password_max_length ({v}) must be >= password_min_length ({min_length})"
            )
        return v

    @field_validator("supabase_url", mode="after")
    @classmethod
    def validate_supabase_url(cls, v: str) -> str:
        """Only keep an http(s) URL; anything else would corrupt the CSP header."""
        v = v.strip()
        if v and not v.startswith(("http://", "https://")):
            return ""
        return v


# Singleton instance
settings = Settings()
