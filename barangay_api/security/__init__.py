"""Security package for the Barangay API.

Request sanitization, pattern-based request gating and field policies.

Author: Barangay Platform Team
Version: 1.0.0
"""

from barangay_api.security.config import SecurityConfig, SecurityLimits
from barangay_api.security.errors import (
    CollectionTooLarge,
    DepthExceeded,
    PayloadTooLarge,
    SecurityViolation,
    ValidationFailed,
)
from barangay_api.security.gate import RequestGate
from barangay_api.security.patterns import DEFAULT_REGISTRY, PatternGroup, PatternRegistry
from barangay_api.security.sanitizer import PayloadSanitizer

__all__ = [
    "DEFAULT_REGISTRY",
    "CollectionTooLarge",
    "DepthExceeded",
    "PatternGroup",
    "PatternRegistry",
    "PayloadSanitizer",
    "PayloadTooLarge",
    "RequestGate",
    "SecurityConfig",
    "SecurityLimits",
    "SecurityViolation",
    "ValidationFailed",
]
