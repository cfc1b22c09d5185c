"""
Input text preprocessing and validation.

Texts longer than MAX_RECOMMENDED_LENGTH are still analyzed; the
tokenizer truncates them. The limit is advisory only.
"""

import re
from typing import Any


MAX_RECOMMENDED_LENGTH = 1000


def normalize(text: str) -> str:
    """Trim surrounding whitespace."""
    return text.strip()


def clean(text: str) -> str:
    """Collapse runs of whitespace into single spaces and trim."""
    return re.sub(r"\s+", " ", text).strip()


def validate_text(text: Any) -> tuple[bool, str]:
    """
    Validate input text.
    
    Args:
        text: Input to validate
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    if text is None:
        return False, "Input text cannot be None"
    
    if not isinstance(text, str):
        return False, f"Input must be string, got {type(text).__name__}"
    
    if len(normalize(text)) == 0:
        return False, "Input text cannot be empty"
    
    return True, ""


def exceeds_recommended_length(text: str) -> bool:
    return len(normalize(text)) > MAX_RECOMMENDED_LENGTH


def length_advisory(text: str) -> str | None:
    """
    Advisory message for overly long input, or None.
    
    Does not make the text invalid.
    """
    if exceeds_recommended_length(text):
        return (
            f"Input text is too long "
            f"(max {MAX_RECOMMENDED_LENGTH} characters recommended)"
        )
    return None


def is_valid(text: Any) -> bool:
    is_ok, _ = validate_text(text)
    return is_ok


def get_length(text: str | None) -> int:
    """Length of the normalized text; 0 for None."""
    if text is None:
        return 0
    return len(normalize(text))
