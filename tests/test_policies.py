"""Unit tests for password, filename, masking and upload policies.

Author: Barangay Platform Team
Version: 1.0.0
"""

import pytest

from barangay_api.security.config import MASK_LITERAL, PasswordPolicy, UploadPolicy
from barangay_api.security.errors import UploadRejected
from barangay_api.security.policies import (
    MAX_FILENAME_LENGTH,
    is_password_strong,
    is_sensitive_key,
    mask_sensitive_data,
    password_failures,
    sanitize_filename,
    validate_upload,
)

# ============================================================================
# Password strength
# ============================================================================


def test_strong_password_accepted():
    assert is_password_strong("StrongPass123!", PasswordPolicy())
    assert password_failures("StrongPass123!", PasswordPolicy()) == []


@pytest.mark.parametrize(
    "password, failures",
    [
        ("password123", ["uppercase", "special"]),
        ("Ab1!", ["length"]),
        ("ABCDEFGH1!", ["lowercase"]),
        ("Abcdefgh!", ["number"]),
        ("Abcdefgh1#", ["special"]),
        ("", ["length", "uppercase", "lowercase", "number", "special"]),
    ],
)
def test_weak_passwords_report_every_failed_rule(password, failures):
    """Test each broken rule is reported, in rule order."""
    assert password_failures(password, PasswordPolicy()) == failures


def test_max_length_enforced():
    policy = PasswordPolicy(min_length=8, max_length=12)

    assert password_failures("Abcdefgh12345!", policy) == ["length"]


def test_disabled_rules_are_skipped():
    """Test switched-off requirements are not enforced."""
    policy = PasswordPolicy(
        require_uppercase=False, require_numbers=False, require_special_chars=False
    )

    assert is_password_strong("lowercaseonly", policy)


def test_custom_special_characters():
    policy = PasswordPolicy(special_chars="#")

    assert is_password_strong("Abcdefgh1#", policy)
    assert not is_password_strong("Abcdefgh1!", policy)


def test_policy_bounds_validated():
    with pytest.raises(ValueError):
        PasswordPolicy(min_length=20, max_length=10)


# ============================================================================
# Filenames
# ============================================================================


@pytest.mark.parametrize(
    "name, expected",
    [
        ("file with spaces.pdf", "file_with_spaces.pdf"),
        ("my file (1).pdf", "my_file_1_.pdf"),
        ("../../../etc/passwd", ".._.._.._etc_passwd"),
        ("___report___.docx", "report_.docx"),
        ("résumé.pdf", "r_sum_.pdf"),
        ("clearance-2024.png", "clearance-2024.png"),
        ("", ""),
    ],
)
def test_sanitize_filename(name, expected):
    assert sanitize_filename(name) == expected


def test_sanitize_filename_length_capped():
    assert len(sanitize_filename("a" * 400 + ".pdf")) == MAX_FILENAME_LENGTH


@pytest.mark.parametrize(
    "name",
    ["my file (1).pdf", "__x__", "a" * 254 + "!!b", "a" * 300, "!" * 10 + "b" * 260],
)
def test_sanitize_filename_idempotent(name):
    """Test sanitizing an already sanitized name changes nothing."""
    once = sanitize_filename(name)

    assert sanitize_filename(once) == once
    assert len(once) <= MAX_FILENAME_LENGTH


# ============================================================================
# Sensitive data masking
# ============================================================================


def test_sensitive_keys_masked_recursively():
    payload = {
        "email": "juan@example.com",
        "newPassword": "hunter2",
        "profile": {"apiKey": "k-123", "name": "Juan"},
        "sessions": [{"accessToken": "t-1", "device": "phone"}],
    }

    assert mask_sensitive_data(payload) == {
        "email": "juan@example.com",
        "newPassword": MASK_LITERAL,
        "profile": {"apiKey": MASK_LITERAL, "name": "Juan"},
        "sessions": [{"accessToken": MASK_LITERAL, "device": "phone"}],
    }


def test_sensitive_container_masked_whole():
    """Test a sensitive key masks its whole value, even a container."""
    assert mask_sensitive_data({"tokens": ["a", "b"]}) == {"tokens": MASK_LITERAL}


def test_masking_leaves_input_untouched():
    payload = {"password": "x"}

    mask_sensitive_data(payload)

    assert payload == {"password": "x"}


def test_masking_no_sensitive_value_survives():
    """Test no sensitive value appears anywhere in the masked output."""
    payload = {"a": [{"b": {"SECRET_value": "s3cr3t"}}], "Authorization": "Bearer abc"}

    masked = repr(mask_sensitive_data(payload))

    assert "s3cr3t" not in masked
    assert "Bearer abc" not in masked


def test_custom_sensitive_fields():
    assert mask_sensitive_data({"pin": "1234", "password": "x"}, ["pin"]) == {
        "pin": MASK_LITERAL,
        "password": "x",
    }


def test_is_sensitive_key_case_insensitive():
    assert is_sensitive_key("X-API-KEY")
    assert not is_sensitive_key("email")


@pytest.mark.parametrize("value", ["plain", 5, None, True])
def test_scalars_pass_through_masking(value):
    assert mask_sensitive_data(value) == value


# ============================================================================
# Upload validation
# ============================================================================


@pytest.fixture
def upload_policy():
    return UploadPolicy(max_file_size=1024)


def test_valid_upload_returns_sanitized_name(upload_policy):
    name = validate_upload("my file (1).pdf", "application/pdf", 100, upload_policy)

    assert name == "my_file_1_.pdf"


def test_mime_parameters_and_case_ignored(upload_policy):
    name = validate_upload("Report.PDF", "Application/PDF; charset=binary", 10, upload_policy)

    assert name == "Report.PDF"


def test_oversized_upload_rejected(upload_policy):
    with pytest.raises(UploadRejected, match="1024 bytes"):
        validate_upload("a.pdf", "application/pdf", 1025, upload_policy)


@pytest.mark.parametrize("filename", ["payload.exe", "noextension", None, "archive.pdf.zip"])
def test_disallowed_extension_rejected(upload_policy, filename):
    with pytest.raises(UploadRejected, match="File type"):
        validate_upload(filename, "application/pdf", 10, upload_policy)


def test_mime_mismatch_rejected(upload_policy):
    with pytest.raises(UploadRejected, match="MIME type"):
        validate_upload("photo.png", "text/html", 10, upload_policy)


@pytest.mark.parametrize("filename", [".pdf", "../../x.pdf", "___.pdf"])
def test_unusable_names_fall_back(upload_policy, filename):
    """Test names that sanitize to hidden or empty files get a generic name."""
    assert validate_upload(filename, "application/pdf", 10, upload_policy) == "upload.pdf"
