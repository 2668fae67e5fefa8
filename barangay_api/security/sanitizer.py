"""Request payload sanitization.

Two layers:

1. ``sanitize_string``: strips script/iframe blocks, ``javascript:`` schemes
   and inline event-handler assignments, then trims.
2. ``sanitize_object``: applies (1) to every string value of an arbitrarily
   nested payload.

SECURITY (CWE-400): the structural ceilings (string length, container size,
nesting depth) are checked for the whole payload by an iterative pass before
any value is transformed. A rejected payload is never partially sanitized and
an adversarially deep payload can never exhaust the interpreter stack.

Author: Barangay Platform Team
Version: 1.0.0
"""

from collections.abc import Mapping
from typing import Any

from barangay_api.security.config import SecurityLimits
from barangay_api.security.errors import CollectionTooLarge, DepthExceeded, PayloadTooLarge
from barangay_api.security.patterns import STRIP_PATTERNS

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


class PayloadSanitizer:
    """Sanitize strings and nested payloads under fixed structural limits.

    Examples:
        >>> sanitizer = PayloadSanitizer(SecurityLimits())
        >>> sanitizer.sanitize_object({"name": "<script>alert(1)</script>John"})
        {'name': 'John'}
    """

    def __init__(self, limits: SecurityLimits):
        self.limits = limits

    def sanitize_string(self, value: Any) -> Any:
        """Clean one string. Non-string values are returned unchanged.

        Raises:
            PayloadTooLarge: If the string exceeds ``max_string_length``.
        """
        if not isinstance(value, str):
            return value

        if len(value) > self.limits.max_string_length:
            raise PayloadTooLarge()

        for pattern in STRIP_PATTERNS:
            value = pattern.sub("", value)

        return value.strip()

    def check_structure(self, value: Any, depth: int = 0) -> None:
        """Validate depth, container sizes and string lengths without recursion.

        The root value sits at depth ``depth``; every value held by a
        container, leaves included, is one level deeper than the container.

        Raises:
            DepthExceeded: A value sits deeper than ``max_object_depth``.
            CollectionTooLarge: A container holds more than ``max_array_length`` items.
            PayloadTooLarge: A string is longer than ``max_string_length``.
        """
        limits = self.limits
        stack: list[tuple[Any, int]] = [(value, depth)]

        while stack:
            current, level = stack.pop()

            if level > limits.max_object_depth:
                raise DepthExceeded()

            if isinstance(current, str):
                if len(current) > limits.max_string_length:
                    raise PayloadTooLarge()
                continue

            if isinstance(current, Mapping):
                children = list(current.values())
            elif isinstance(current, _SEQUENCE_TYPES):
                children = list(current)
            else:
                continue

            if len(children) > limits.max_array_length:
                raise CollectionTooLarge()

            stack.extend((child, level + 1) for child in children)

    def sanitize_object(self, value: Any, depth: int = 0) -> Any:
        """Return a sanitized copy of ``value`` with the same shape.

        Mapping keys are kept verbatim; only values are cleaned. Sequences
        come back as lists.
        """
        self.check_structure(value, depth)
        return self._sanitize(value)

    def _sanitize(self, value: Any) -> Any:
        # Depth is already bounded by check_structure
        if value is None:
            return None
        if isinstance(value, str):
            return self.sanitize_string(value)
        if isinstance(value, Mapping):
            return {key: self._sanitize(item) for key, item in value.items()}
        if isinstance(value, _SEQUENCE_TYPES):
            return [self._sanitize(item) for item in value]
        return value
