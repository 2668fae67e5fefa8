"""Unit tests for string sanitization and the nested payload walker.

Author: Barangay Platform Team
Version: 1.0.0
"""

from unittest.mock import patch

import pytest

from barangay_api.security.errors import CollectionTooLarge, DepthExceeded, PayloadTooLarge


# ============================================================================
# sanitize_string
# ============================================================================


def test_script_block_removed(sanitizer):
    """Test <script> blocks are removed entirely."""
    assert sanitizer.sanitize_string("<script>alert(1)</script>John") == "John"


def test_iframe_block_removed(sanitizer):
    """Test <iframe> blocks are removed entirely."""
    value = 'Hello <iframe src="x"></iframe>'

    assert sanitizer.sanitize_string(value) == "Hello"


def test_script_removal_is_non_greedy(sanitizer):
    """Test text between two script blocks survives."""
    value = "<script>a</script>keep<script>b</script>"

    assert sanitizer.sanitize_string(value) == "keep"


def test_mixed_case_tags_removed(sanitizer):
    """Test tag matching is case-insensitive."""
    assert sanitizer.sanitize_string("<ScRiPt>x</sCrIpT>ok") == "ok"


def test_javascript_scheme_removed(sanitizer):
    """Test every javascript: marker is removed."""
    assert sanitizer.sanitize_string("JavaScript:alert(1)") == "alert(1)"


def test_event_handler_assignment_removed(sanitizer):
    """Test on<word>= is stripped but the rest of the tag stays."""
    value = '<img src="x" onerror="alert(1)">'

    assert sanitizer.sanitize_string(value) == '<img src="x" "alert(1)">'


def test_iframe_with_javascript_src_fully_removed(sanitizer):
    """Test the block strip runs before the scheme strip."""
    value = 'Hello <iframe src="javascript:alert(1)"></iframe>'

    assert sanitizer.sanitize_string(value) == "Hello"


def test_whitespace_trimmed(sanitizer):
    """Test leading and trailing whitespace is trimmed, inner kept."""
    assert sanitizer.sanitize_string("  Barangay  Hall \n") == "Barangay  Hall"


def test_unclosed_script_tag_left_alone(sanitizer):
    """Test only complete blocks are removed."""
    assert sanitizer.sanitize_string("<script>no close") == "<script>no close"


@pytest.mark.parametrize("value", [42, 3.5, True, False, None])
def test_non_strings_pass_through(sanitizer, value):
    """Test non-string values are returned unchanged."""
    assert sanitizer.sanitize_string(value) is value


def test_string_at_limit_accepted(sanitizer, limits):
    """Test a string exactly at max length is accepted."""
    value = "a" * limits.max_string_length

    assert sanitizer.sanitize_string(value) == value


def test_string_over_limit_rejected(sanitizer, limits):
    """Test a string over max length raises PayloadTooLarge."""
    with pytest.raises(PayloadTooLarge):
        sanitizer.sanitize_string("a" * (limits.max_string_length + 1))


# ============================================================================
# sanitize_object
# ============================================================================


def test_xss_strip_scenario(sanitizer):
    """Test the top-level XSS scenario."""
    result = sanitizer.sanitize_object({"name": "<script>alert(1)</script>John"})

    assert result == {"name": "John"}


def test_nested_xss_keeps_structure(sanitizer):
    """Test nested values are cleaned and keys are untouched."""
    payload = {"user": {"profile": {"bio": "<script>x</script>Safe"}}}

    assert sanitizer.sanitize_object(payload) == {"user": {"profile": {"bio": "Safe"}}}


def test_keys_never_sanitized(sanitizer):
    """Test keys are preserved verbatim even when they look dangerous."""
    payload = {" <script>k</script> ": "v", "onload=": "w"}

    assert sanitizer.sanitize_object(payload) == {" <script>k</script> ": "v", "onload=": "w"}


def test_lists_sanitized_elementwise(sanitizer):
    """Test every list element is sanitized."""
    payload = {"tags": ["<script>tag1</script>", "safe-tag", 7, None]}

    assert sanitizer.sanitize_object(payload) == {"tags": ["", "safe-tag", 7, None]}


def test_tuples_come_back_as_lists(sanitizer):
    """Test tuples are sanitized into lists."""
    assert sanitizer.sanitize_object((" a ", " b ")) == ["a", "b"]


def test_scalars_and_none_unchanged(sanitizer):
    """Test scalar payloads pass through."""
    assert sanitizer.sanitize_object(None) is None
    assert sanitizer.sanitize_object(10) == 10
    assert sanitizer.sanitize_object(False) is False
    assert sanitizer.sanitize_object({"n": 1.5, "ok": True}) == {"n": 1.5, "ok": True}


def test_input_not_mutated(sanitizer):
    """Test the walker returns a copy and leaves the input alone."""
    payload = {"bio": ["<script>x</script>hi"]}

    sanitizer.sanitize_object(payload)

    assert payload == {"bio": ["<script>x</script>hi"]}


def test_depth_at_limit_accepted(sanitizer, limits, nest):
    """Test a leaf sitting exactly at max_object_depth is accepted."""
    payload = nest(limits.max_object_depth, " ok ")

    assert sanitizer.sanitize_object(payload) == nest(limits.max_object_depth, "ok")


def test_depth_over_limit_rejected(sanitizer, limits, nest):
    """Test a payload nested max_object_depth + 1 deep raises DepthExceeded."""
    with pytest.raises(DepthExceeded):
        sanitizer.sanitize_object(nest(limits.max_object_depth + 1))


def test_leaf_one_level_too_deep_rejected(sanitizer):
    """Test the leaf counts as a level: three dicts plus a leaf exceed depth 3."""
    with pytest.raises(DepthExceeded):
        sanitizer.sanitize_object({"a": {"b": {"c": {"d": "x"}}}})


@pytest.mark.parametrize("leaf", [None, 7, True, []])
def test_depth_counts_every_leaf_type(sanitizer, limits, nest, leaf):
    """Test scalars, None and empty containers are depth-checked like strings."""
    with pytest.raises(DepthExceeded):
        sanitizer.sanitize_object(nest(limits.max_object_depth + 1, leaf))


def test_depth_rejected_before_any_string_sanitized(sanitizer, limits, nest):
    """Test no leaf is sanitized when the payload is too deep."""
    payload = {"first": "<script>x</script>", "deep": nest(limits.max_object_depth)}

    with patch.object(sanitizer, "sanitize_string", wraps=sanitizer.sanitize_string) as spy:
        with pytest.raises(DepthExceeded):
            sanitizer.sanitize_object(payload)

    spy.assert_not_called()


def test_very_deep_payload_rejected_without_recursion_error(sanitizer):
    """Test adversarial nesting is rejected cleanly, not with RecursionError."""
    payload: list = []
    for _ in range(10_000):
        payload = [payload]

    with pytest.raises(DepthExceeded):
        sanitizer.sanitize_object(payload)


def test_array_at_limit_accepted(sanitizer, limits):
    """Test a list of exactly max_array_length items is accepted."""
    payload = {"items": ["x"] * limits.max_array_length}

    assert sanitizer.sanitize_object(payload) == payload


@pytest.mark.parametrize(
    "wrap",
    [
        lambda items: items,
        lambda items: {"items": items},
        lambda items: {"a": [{"b": items}]},
        lambda items: [1, 2, {"c": items}],
    ],
)
def test_oversized_array_rejected_anywhere(sanitizer, limits, wrap):
    """Test an oversized list is rejected regardless of its position."""
    with pytest.raises(CollectionTooLarge):
        sanitizer.sanitize_object(wrap(["x"] * (limits.max_array_length + 1)))


def test_oversized_object_rejected(sanitizer, limits):
    """Test the collection ceiling also applies to objects."""
    payload = {f"k{i}": i for i in range(limits.max_array_length + 1)}

    with pytest.raises(CollectionTooLarge):
        sanitizer.sanitize_object(payload)


def test_oversized_nested_string_rejected(sanitizer, limits):
    """Test an oversized string deep in the payload raises PayloadTooLarge."""
    payload = {"a": [{"b": "z" * (limits.max_string_length + 1)}]}

    with pytest.raises(PayloadTooLarge):
        sanitizer.sanitize_object(payload)
