"""
Error types raised by the sentiment pipeline.

Every failure surfaced to callers derives from SentimentError so the
kinds below can be told apart without parsing messages.
"""


class SentimentError(Exception):
    """Base class for all pipeline errors."""
    pass


class LoadError(SentimentError):
    """Vocabulary, label map or classifier asset is missing or corrupt."""
    pass


class MissingSpecialToken(SentimentError):
    """A reserved token such as [CLS] is absent from the vocabulary."""

    def __init__(self, token: str):
        super().__init__(f"Vocabulary is missing reserved token {token!r}")
        self.token = token


class NotInitialized(SentimentError, RuntimeError):
    """Pipeline used before, or while, its model is being loaded."""
    pass


class InvalidInput(SentimentError, ValueError):
    """Input text is empty, whitespace-only or not a string."""
    pass


class InternalError(SentimentError):
    """An internal invariant was violated (wrong tensor length, bad label index)."""
    pass


class InferenceError(SentimentError):
    """The numeric backend failed to execute the classifier."""
    pass
