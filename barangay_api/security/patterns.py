"""Attack pattern registry.

Named groups of case-insensitive regular expressions used to flag request
content as suspicious. Matching is a substring search: a single hit anywhere
in the value classifies it.

SECURITY NOTE: this is a heuristic defense layer and is not exhaustive.
It produces false positives on benign text (any apostrophe, ``&`` or the word
"drop") and false negatives on obfuscated payloads. Parameterized queries and
context-aware output escaping remain the real protection.

Author: Barangay Platform Team
Version: 1.0.0
"""

import re
from collections.abc import Iterable, Mapping
from enum import Enum


class PatternGroup(str, Enum):
    """Detection categories."""

    SQL_INJECTION = "sql_injection"
    XSS = "xss"
    DIRECTORY_TRAVERSAL = "directory_traversal"
    COMMAND_INJECTION = "command_injection"
    SUSPICIOUS_USER_AGENT = "suspicious_user_agent"


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


# ============================================================================
# XSS building blocks (shared with the string sanitizer)
# ============================================================================
SCRIPT_BLOCK = _compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>")
IFRAME_BLOCK = _compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>")
JAVASCRIPT_SCHEME = _compile(r"javascript:")
EVENT_HANDLER = _compile(r"on\w+\s*=")

# Applied by the sanitizer, in this order
STRIP_PATTERNS: tuple[re.Pattern[str], ...] = (
    SCRIPT_BLOCK,
    IFRAME_BLOCK,
    JAVASCRIPT_SCHEME,
    EVENT_HANDLER,
)

DEFAULT_PATTERNS: dict[PatternGroup, tuple[re.Pattern[str], ...]] = {
    PatternGroup.SQL_INJECTION: (
        _compile(r"\b(SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|UNION|SCRIPT)\b"),
        _compile(r"\b(OR|AND)\s+\d+\s*=\s*\d+"),
        _compile(r"(;|\||&)"),
        _compile(r"('|\\'|''|%27|%2527)"),
        _compile(r"(--|#|/\*|\*/)"),
    ),
    PatternGroup.XSS: (
        *STRIP_PATTERNS,
        _compile(r"<img[^>]+src\s*=\s*[\"']javascript:"),
        _compile(r"<[^>]*style\s*=\s*[\"'][^\"']*expression\s*\("),
    ),
    PatternGroup.DIRECTORY_TRAVERSAL: (
        _compile(r"\.\."),
        _compile(r"/etc/passwd"),
        _compile(r"/proc/self/environ"),
        _compile(r"\\windows\\system32"),
    ),
    PatternGroup.COMMAND_INJECTION: (
        _compile(r"cmd\.exe"),
        _compile(r"powershell"),
        _compile(r"bash"),
        _compile(r"sh\s"),
        _compile(r"exec\("),
        _compile(r"system\("),
    ),
    PatternGroup.SUSPICIOUS_USER_AGENT: (
        _compile(r"sqlmap"),
        _compile(r"nikto"),
        _compile(r"nessus"),
        _compile(r"burp"),
        _compile(r"nmap"),
        _compile(r"masscan"),
    ),
}


class PatternRegistry:
    """Immutable mapping of pattern groups to ordered regex sequences.

    Examples:
        >>> DEFAULT_REGISTRY.matches_any("1 OR 1=1", PatternGroup.SQL_INJECTION)
        True

        >>> DEFAULT_REGISTRY.matches_any("Juan dela Cruz", PatternGroup.XSS)
        False
    """

    def __init__(self, groups: Mapping[PatternGroup, Iterable[re.Pattern[str] | str]]):
        compiled: dict[PatternGroup, tuple[re.Pattern[str], ...]] = {}
        for group, patterns in groups.items():
            entries = tuple(
                p if isinstance(p, re.Pattern) else _compile(p) for p in patterns
            )
            if not entries:
                raise ValueError(f"Pattern group '{group.value}' must not be empty")
            compiled[group] = entries
        self._groups = compiled

    @property
    def groups(self) -> tuple[PatternGroup, ...]:
        return tuple(self._groups)

    def patterns(self, group: PatternGroup) -> tuple[re.Pattern[str], ...]:
        try:
            return self._groups[group]
        except KeyError:
            raise KeyError(f"Pattern group '{group.value}' is not registered") from None

    def matches_any(self, value: str, group: PatternGroup) -> bool:
        """Return True if any pattern of ``group`` occurs anywhere in ``value``."""
        if not isinstance(value, str) or not value:
            return False
        return any(pattern.search(value) for pattern in self.patterns(group))


DEFAULT_REGISTRY = PatternRegistry(DEFAULT_PATTERNS)


def matches_any(
    value: str, group: PatternGroup, registry: PatternRegistry = DEFAULT_REGISTRY
) -> bool:
    """Convenience wrapper around ``PatternRegistry.matches_any``."""
    return registry.matches_any(value, group)
