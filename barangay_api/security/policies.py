"""Field policy utilities.

Stateless helpers used by the auth, upload and logging paths: password
strength, filename sanitization, sensitive-field masking and upload checks.

Author: Barangay Platform Team
Version: 1.0.0
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from barangay_api.security.config import (
    DEFAULT_SENSITIVE_FIELDS,
    MASK_LITERAL,
    PasswordPolicy,
    UploadPolicy,
)
from barangay_api.security.errors import UploadRejected

MAX_FILENAME_LENGTH = 255

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9.-]")
_UNDERSCORE_RUNS = re.compile(r"_{2,}")


def password_failures(password: str, policy: PasswordPolicy) -> list[str]:
    """List the policy rules ``password`` breaks (empty list = strong).

    Examples:
        >>> password_failures("StrongPass123!", PasswordPolicy())
        []

        >>> password_failures("password123", PasswordPolicy())
        ['uppercase', 'special']
    """
    if not isinstance(password, str):
        return ["length"]

    failures: list[str] = []
    if not policy.min_length <= len(password) <= policy.max_length:
        failures.append("length")
    if policy.require_uppercase and not re.search(r"[A-Z]", password):
        failures.append("uppercase")
    if policy.require_lowercase and not re.search(r"[a-z]", password):
        failures.append("lowercase")
    if policy.require_numbers and not re.search(r"\d", password):
        failures.append("number")
    if policy.require_special_chars and not any(c in policy.special_chars for c in password):
        failures.append("special")
    return failures


def is_password_strong(password: str, policy: PasswordPolicy) -> bool:
    return not password_failures(password, policy)


def sanitize_filename(name: str) -> str:
    """Make a filename safe for storage.

    Every character outside ``[A-Za-z0-9.-]`` becomes ``_``, runs of
    underscores collapse to one, the result is capped at 255 characters and
    leading/trailing underscores are removed. Truncation happens before the
    strip so the function is idempotent.

    Examples:
        >>> sanitize_filename("file with spaces.pdf")
        'file_with_spaces.pdf'

        >>> sanitize_filename("../../../etc/passwd")
        '.._.._.._etc_passwd'
    """
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", name)
    cleaned = _UNDERSCORE_RUNS.sub("_", cleaned)
    return cleaned[:MAX_FILENAME_LENGTH].strip("_")


def is_sensitive_key(key: Any, sensitive_fields: Iterable[str] = DEFAULT_SENSITIVE_FIELDS) -> bool:
    lowered = str(key).lower()
    return any(field in lowered for field in sensitive_fields)


def mask_sensitive_data(
    obj: Any, sensitive_fields: Iterable[str] = DEFAULT_SENSITIVE_FIELDS
) -> Any:
    """Return a copy of ``obj`` with sensitive values replaced by a mask.

    A key is sensitive when its lowercase form contains any configured
    substring. Lists are walked element-wise; scalars pass through.
    Only for log output: never store or return the masked copy.

    Examples:
        >>> mask_sensitive_data({"email": "a@b.ph", "newPassword": "x"})
        {'email': 'a@b.ph', 'newPassword': '***MASKED***'}
    """
    fields = tuple(sensitive_fields)

    if isinstance(obj, Mapping):
        return {
            key: MASK_LITERAL if is_sensitive_key(key, fields) else mask_sensitive_data(value, fields)
            for key, value in obj.items()
        }
    if isinstance(obj, list | tuple):
        return [mask_sensitive_data(item, fields) for item in obj]
    return obj


def validate_upload(
    filename: str | None, content_type: str | None, size: int, policy: UploadPolicy
) -> str:
    """Check an uploaded file against the upload policy.

    Args:
        filename: Client-supplied filename.
        content_type: Client-declared MIME type.
        size: File size in bytes.
        policy: Size, extension and MIME allow-lists.

    Returns:
        The sanitized filename to store the file under.

    Raises:
        UploadRejected: If size, extension or MIME type is not allowed.
    """
    if size > policy.max_file_size:
        raise UploadRejected(
            f"File size exceeds maximum allowed size of {policy.max_file_size} bytes"
        )

    name = filename or ""
    extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    if not extension or extension not in policy.allowed_extensions:
        raise UploadRejected("File type is not allowed")

    mime = (content_type or "").split(";", 1)[0].strip().lower()
    if mime not in policy.allowed_mime_types:
        raise UploadRejected("MIME type is not allowed")

    safe_name = sanitize_filename(name)
    if not safe_name or safe_name.startswith("."):
        safe_name = f"upload.{extension}"
    return safe_name
