"""Request gate: pattern-based rejection of sanitized payloads.

Runs after ``PayloadSanitizer`` so content that only looked dangerous because
of strippable markup passes, while content that still matches (``OR 1=1``
carries no markup) is rejected with ``ValidationFailed``.

Author: Barangay Platform Team
Version: 1.0.0
"""

from collections.abc import Iterator, Mapping
from typing import Any

from barangay_api.security.config import GatePolicy
from barangay_api.security.errors import ValidationFailed
from barangay_api.security.patterns import DEFAULT_REGISTRY, PatternGroup, PatternRegistry

CONTENT_GROUPS = (PatternGroup.SQL_INJECTION, PatternGroup.XSS)
PATH_GROUPS = (PatternGroup.DIRECTORY_TRAVERSAL, PatternGroup.COMMAND_INJECTION)


def iter_string_leaves(value: Any, key: str | None = None) -> Iterator[tuple[str | None, str]]:
    """Yield ``(nearest_key, string)`` for every string inside ``value``.

    Sequence items inherit the key of the sequence that holds them.
    """
    if isinstance(value, str):
        yield key, value
    elif isinstance(value, Mapping):
        for child_key, child in value.items():
            yield from iter_string_leaves(child, str(child_key))
    elif isinstance(value, list | tuple | set | frozenset):
        for child in value:
            yield from iter_string_leaves(child, key)


class RequestGate:
    """Classify payloads against the pattern registry.

    Attributes:
        registry: Pattern groups to test against
        policy: Field exemptions, path fields and User-Agent handling
    """

    def __init__(self, policy: GatePolicy, registry: PatternRegistry = DEFAULT_REGISTRY):
        self.policy = policy
        self.registry = registry

    def find_violation(self, payload: Any) -> tuple[PatternGroup, str | None] | None:
        """Return the first ``(group, field)`` hit in ``payload``, or None."""
        for field, text in iter_string_leaves(payload):
            groups: tuple[PatternGroup, ...] = ()
            if field not in self.policy.exempt_fields:
                groups += CONTENT_GROUPS
            if field in self.policy.path_fields:
                groups += PATH_GROUPS

            for group in groups:
                if self.registry.matches_any(text, group):
                    return group, field
        return None

    def is_malicious(self, payload: Any) -> bool:
        return self.find_violation(payload) is not None

    def inspect(self, payload: Any) -> None:
        """Raise ``ValidationFailed`` if any string leaf matches a gated group."""
        violation = self.find_violation(payload)
        if violation is None:
            return

        group, field = violation
        raise ValidationFailed(field=field, rule=group.value)

    def inspect_user_agent(self, user_agent: str | None) -> None:
        """Reject known scanner User-Agents when the policy asks for it."""
        if not user_agent or not self.policy.block_suspicious_user_agents:
            return

        if self.registry.matches_any(user_agent, PatternGroup.SUSPICIOUS_USER_AGENT):
            raise ValidationFailed(
                "Validation failed: client not allowed",
                rule=PatternGroup.SUSPICIOUS_USER_AGENT.value,
            )
