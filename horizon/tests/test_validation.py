"""
Tests for user text validation.

Tests cover:
1. Safety pattern categories and their severity/action
2. Length limits
3. ensure_safe_text raising the right exception
"""
import pytest

from horizon.validation import validate_user_text, ensure_safe_text, truncate_text
from horizon.exceptions import UnsafeContentException, ValidationException


class TestValidateUserText:
    """Tests for validate_user_text"""

    def test_empty_text_is_valid(self):
        assert validate_user_text("").valid is True
        assert validate_user_text(None).valid is True

    def test_ordinary_text_is_allowed(self):
        result = validate_user_text("Went for a long walk and cooked dinner")

        assert result.valid is True
        assert result.action == "allow"
        assert result.resources == []

    def test_too_long_text_is_blocked(self):
        result = validate_user_text("a" * 21, max_length=20)

        assert result.valid is False
        assert result.severity == "low"
        assert result.action == "block"
        assert result.resources == []

    def test_self_harm_escalates(self):
        result = validate_user_text("I keep thinking I want to hurt myself")

        assert result.valid is False
        assert result.severity == "critical"
        assert result.action == "escalate"
        assert len(result.resources) == 3

    def test_crisis_language_escalates(self):
        result = validate_user_text("Everything feels hopeless lately")

        assert result.severity == "critical"
        assert result.action == "escalate"

    def test_violence_is_blocked(self):
        result = validate_user_text("I want to attack someone")

        assert result.severity == "high"
        assert result.action == "block"

    def test_substance_abuse_redirects(self):
        result = validate_user_text("Struggling with alcohol addiction again")

        assert result.severity == "high"
        assert result.action == "redirect"

    def test_matching_is_case_insensitive(self):
        assert validate_user_text("WANT TO DIE").valid is False


class TestEnsureSafeText:
    """Tests for ensure_safe_text"""

    def test_returns_stripped_text(self):
        assert ensure_safe_text("note", "  felt good  ") == "felt good"

    def test_none_passes_through(self):
        assert ensure_safe_text("note", None) is None

    def test_too_long_raises_validation_error(self):
        with pytest.raises(ValidationException) as exc_info:
            ensure_safe_text("note", "x" * 11, max_length=10)

        assert not isinstance(exc_info.value, UnsafeContentException)
        assert exc_info.value.field == "note"

    def test_unsafe_raises_with_resources(self):
        with pytest.raises(UnsafeContentException) as exc_info:
            ensure_safe_text("reflections", "considering suicide")

        error = exc_info.value
        assert error.field == "reflections"
        assert error.severity == "critical"
        assert error.resources[0]["phone"] == "988"


def test_truncate_text():
    assert truncate_text("abcdef", 3) == "abc"
    assert truncate_text("abc", 3) == "abc"
