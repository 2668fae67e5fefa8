"""Security configuration value objects.

The request pipeline never reads the settings singleton. A ``SecurityConfig``
is built once at startup (``SecurityConfig.from_settings``) and handed to the
sanitizer, the gate and the middlewares, so tests can run the pipeline with
arbitrary limits without touching the environment.

Author: Barangay Platform Team
Version: 1.0.0
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from barangay_api.config.settings import Settings, split_csv

MASK_LITERAL = "***MASKED***"
DEFAULT_SENSITIVE_FIELDS = ("password", "token", "secret", "key", "authorization")


class SecurityLimits(BaseModel):
    """Structural ceilings enforced on every inbound payload.

    Attributes:
        max_string_length: Longest string accepted anywhere in a payload
        max_array_length: Largest container (list, tuple, set or object)
        max_object_depth: Deepest value nesting (root = 0, leaves counted)
    """

    model_config = ConfigDict(frozen=True)

    max_string_length: int = Field(default=5000, gt=0)
    max_array_length: int = Field(default=100, gt=0)
    max_object_depth: int = Field(default=10, gt=0)


class PasswordPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_length: int = Field(default=8, ge=1)
    max_length: int = Field(default=128, ge=1)
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_numbers: bool = True
    require_special_chars: bool = True
    special_chars: str = Field(default="@$!%*?&", min_length=1)

    @model_validator(mode="after")
    def check_bounds(self) -> "PasswordPolicy":
        if self.max_length < self.min_length:
            raise ValueError("max_length must be >= min_length")
        return self


class GatePolicy(BaseModel):
    """Which fields the request gate inspects, and how.

    Attributes:
        exempt_fields: Keys skipped by the SQL/XSS checks (values still sanitized)
        path_fields: Keys also checked for traversal and command injection
        block_suspicious_user_agents: Reject known scanner User-Agents
    """

    model_config = ConfigDict(frozen=True)

    exempt_fields: frozenset[str] = frozenset()
    path_fields: frozenset[str] = frozenset(
        {"path", "file_path", "filepath", "filename", "directory"}
    )
    block_suspicious_user_agents: bool = True


class IPPolicy(BaseModel):
    """Admin allow-list and global deny-list.

    ``allow_all_when_whitelist_empty`` makes the empty-whitelist behaviour an
    explicit choice; it defaults to deny.
    """

    model_config = ConfigDict(frozen=True)

    admin_whitelist: tuple[str, ...] = ()
    allow_all_when_whitelist_empty: bool = False
    blocked_ips: tuple[str, ...] = ()


class UploadPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_file_size: int = Field(default=5 * 1024 * 1024, gt=0)
    allowed_extensions: frozenset[str] = frozenset({"pdf", "jpg", "jpeg", "png", "doc", "docx"})
    allowed_mime_types: frozenset[str] = frozenset(
        {
            "application/pdf",
            "image/jpeg",
            "image/jpg",
            "image/png",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        }
    )


class SecurityConfig(BaseModel):
    """Everything the request security pipeline needs, in one immutable bundle."""

    model_config = ConfigDict(frozen=True)

    limits: SecurityLimits = Field(default_factory=SecurityLimits)
    password: PasswordPolicy = Field(default_factory=PasswordPolicy)
    gate: GatePolicy = Field(default_factory=GatePolicy)
    ip: IPPolicy = Field(default_factory=IPPolicy)
    upload: UploadPolicy = Field(default_factory=UploadPolicy)
    sensitive_fields: tuple[str, ...] = DEFAULT_SENSITIVE_FIELDS
    enable_audit_logs: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "SecurityConfig":
        """Build the pipeline configuration from environment-derived settings."""
        return cls(
            limits=SecurityLimits(
                max_string_length=settings.max_string_length,
                max_array_length=settings.max_array_length,
                max_object_depth=settings.max_object_depth,
            ),
            password=PasswordPolicy(
                min_length=settings.password_min_length,
                max_length=settings.password_max_length,
                require_uppercase=settings.password_require_uppercase,
                require_lowercase=settings.password_require_lowercase,
                require_numbers=settings.password_require_numbers,
                require_special_chars=settings.password_require_special_chars,
                special_chars=settings.password_special_chars,
            ),
            gate=GatePolicy(
                exempt_fields=frozenset(split_csv(settings.gate_exempt_fields)),
                path_fields=frozenset(split_csv(settings.gate_path_fields)),
                block_suspicious_user_agents=settings.block_suspicious_user_agents,
            ),
            ip=IPPolicy(
                admin_whitelist=tuple(split_csv(settings.admin_ip_whitelist)),
                allow_all_when_whitelist_empty=settings.admin_allow_all_when_whitelist_empty,
                blocked_ips=tuple(split_csv(settings.blocked_ips)),
            ),
            upload=UploadPolicy(
                max_file_size=settings.max_file_size,
                allowed_extensions=frozenset(
                    ext.lower().lstrip(".") for ext in split_csv(settings.allowed_file_types)
                ),
                allowed_mime_types=frozenset(
                    mime.lower() for mime in split_csv(settings.allowed_mime_types)
                ),
            ),
            sensitive_fields=tuple(f.lower() for f in split_csv(settings.sensitive_fields)),
            enable_audit_logs=settings.enable_audit_logs,
        )
