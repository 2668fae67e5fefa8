"""Unit tests for the request gate.

Author: Barangay Platform Team
Version: 1.0.0
"""

import pytest

from barangay_api.security.config import GatePolicy
from barangay_api.security.errors import ValidationFailed
from barangay_api.security.gate import RequestGate, iter_string_leaves
from barangay_api.security.patterns import PatternGroup


def test_iter_string_leaves_uses_nearest_key():
    """Test list items inherit the key of the list that holds them."""
    payload = {"name": "Ana", "tags": ["a", {"label": "b"}], "count": 3}

    assert list(iter_string_leaves(payload)) == [
        ("name", "Ana"),
        ("tags", "a"),
        ("label", "b"),
    ]


def test_top_level_string_has_no_key():
    """Test a bare string payload is yielded with key None."""
    assert list(iter_string_leaves("hello")) == [(None, "hello")]


def test_clean_payload_passes(gate):
    """Test ordinary resident data passes the gate."""
    payload = {"name": "Juan dela Cruz", "email": "juan@example.com", "tags": ["clearance"]}

    gate.inspect(payload)
    assert not gate.is_malicious(payload)


def test_sql_injection_rejected(gate):
    """Test a tautology injection in any field is rejected."""
    with pytest.raises(ValidationFailed) as exc_info:
        gate.inspect({"search": "1 OR 1=1"})

    assert exc_info.value.field == "search"
    assert exc_info.value.rule == PatternGroup.SQL_INJECTION.value
    assert exc_info.value.status_code == 400


def test_message_does_not_echo_input(gate):
    """Test the violation message never contains the offending value."""
    with pytest.raises(ValidationFailed) as exc_info:
        gate.inspect({"q": "DROP TABLE residents"})

    assert "DROP" not in exc_info.value.message
    assert exc_info.value.message == "Validation failed: potentially malicious input detected"


def test_xss_that_survives_sanitization_rejected(gate):
    """Test XSS markers left after sanitization are rejected."""
    with pytest.raises(ValidationFailed) as exc_info:
        gate.inspect({"bio": ["<p style=\"x: expression(alert(1))\">"]})

    assert exc_info.value.field == "bio"
    assert exc_info.value.rule == PatternGroup.XSS.value


def test_nested_violation_found(gate):
    """Test violations deep in the payload are found."""
    payload = {"user": {"profile": {"notes": ["fine", "x'; --"]}}}

    assert gate.find_violation(payload) == (PatternGroup.SQL_INJECTION, "notes")


def test_exempt_field_skips_content_checks():
    """Test exempt fields may carry apostrophes and ampersands."""
    gate = RequestGate(GatePolicy(exempt_fields=frozenset({"name", "message"})))

    gate.inspect({"name": "O'Brien", "message": "Tom & Jerry"})

    with pytest.raises(ValidationFailed):
        gate.inspect({"name": "O'Brien", "subject": "O'Brien"})


def test_traversal_ignored_outside_path_fields(gate):
    """Test free text mentioning '..' is not treated as traversal."""
    gate.inspect({"message": "Wait.. what happened"})


@pytest.mark.parametrize(
    "payload, group",
    [
        ({"filename": "../../etc/passwd"}, PatternGroup.DIRECTORY_TRAVERSAL),
        ({"path": "/proc/self/environ"}, PatternGroup.DIRECTORY_TRAVERSAL),
        ({"directory": "reports/../../secret"}, PatternGroup.DIRECTORY_TRAVERSAL),
        ({"filepath": "run powershell now"}, PatternGroup.COMMAND_INJECTION),
    ],
)
def test_path_fields_checked_for_traversal_and_commands(gate, payload, group):
    """Test path-like fields get the traversal and command checks."""
    violation = gate.find_violation(payload)

    assert violation is not None
    assert violation[0] == group


def test_exempt_path_field_still_checked_for_traversal():
    """Test exemption from content checks does not disable path checks."""
    gate = RequestGate(GatePolicy(exempt_fields=frozenset({"filename"})))

    with pytest.raises(ValidationFailed) as exc_info:
        gate.inspect({"filename": "../secret.pdf"})

    assert exc_info.value.rule == PatternGroup.DIRECTORY_TRAVERSAL.value


@pytest.mark.parametrize("agent", ["sqlmap/1.7.2#stable", "Mozilla/5.00 (Nikto/2.1.6)"])
def test_scanner_user_agent_rejected(gate, agent):
    """Test known scanner User-Agents are rejected."""
    with pytest.raises(ValidationFailed) as exc_info:
        gate.inspect_user_agent(agent)

    assert exc_info.value.rule == PatternGroup.SUSPICIOUS_USER_AGENT.value
    assert exc_info.value.message == "Validation failed: client not allowed"


def test_browser_and_missing_user_agent_allowed(gate):
    """Test regular and absent User-Agents pass."""
    gate.inspect_user_agent("Mozilla/5.0 (X11; Linux x86_64) Firefox/128.0")
    gate.inspect_user_agent(None)
    gate.inspect_user_agent("")


def test_user_agent_check_can_be_disabled():
    """Test the User-Agent check honours the policy switch."""
    gate = RequestGate(GatePolicy(block_suspicious_user_agents=False))

    gate.inspect_user_agent("sqlmap/1.7.2")
