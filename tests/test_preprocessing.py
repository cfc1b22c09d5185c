"""
Tests for input preprocessing module.
"""

import pytest

from sentiment_pipeline.preprocessing import (
    MAX_RECOMMENDED_LENGTH,
    clean,
    exceeds_recommended_length,
    get_length,
    is_valid,
    length_advisory,
    normalize,
    validate_text,
)


class TestNormalization:
    """Tests for normalize and clean."""
    
    def test_normalize_trims(self):
        assert normalize("  hello world \n") == "hello world"
    
    def test_normalize_keeps_inner_whitespace(self):
        assert normalize("hello   world") == "hello   world"
    
    def test_clean_collapses_whitespace(self):
        assert clean("  hello \t\n  world  ") == "hello world"
    
    def test_clean_empty(self):
        assert clean("") == ""


class TestValidation:
    """Tests for input validation."""
    
    def test_valid_input(self):
        is_ok, error = validate_text("Valid text here")
        assert is_ok
        assert error == ""
    
    def test_none_input(self):
        is_ok, error = validate_text(None)
        assert not is_ok
        assert "None" in error
    
    def test_non_string_input(self):
        is_ok, error = validate_text(123)
        assert not is_ok
        assert "string" in error
    
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_input(self, text):
        is_ok, error = validate_text(text)
        assert not is_ok
        assert "empty" in error
    
    def test_long_text_is_valid(self):
        """The length limit is advisory only."""
        assert is_valid("a" * (MAX_RECOMMENDED_LENGTH * 10))
    
    def test_is_valid(self):
        assert is_valid("ok")
        assert not is_valid("  ")


class TestLengthAdvisory:
    """Tests for the recommended-length advisory."""
    
    def test_boundary(self):
        assert not exceeds_recommended_length("a" * MAX_RECOMMENDED_LENGTH)
        assert exceeds_recommended_length("a" * (MAX_RECOMMENDED_LENGTH + 1))
    
    def test_surrounding_whitespace_not_counted(self):
        assert not exceeds_recommended_length("  " + "a" * MAX_RECOMMENDED_LENGTH + "  ")
    
    def test_advisory_message(self):
        assert length_advisory("short") is None
        assert "too long" in length_advisory("a" * 2000)
    
    def test_get_length(self):
        assert get_length(None) == 0
        assert get_length("  abc  ") == 3
