from __future__ import annotations
from typing import Optional


class PredictionError(Exception):
    """Base class for every recoverable failure raised by the engines."""


class NotTrained(PredictionError, RuntimeError):
    def __init__(self, message: str = "Engine not trained. Call train() first.") -> None:
        super().__init__(message)


class AlreadyTrained(PredictionError, RuntimeError):
    def __init__(self, message: str = "Engine already trained. Call reset() before training again.") -> None:
        super().__init__(message)


class InvalidCorpus(PredictionError, ValueError):
    def __init__(self, message: str = "Corpus must be a non-empty string") -> None:
        super().__init__(message)


class MissingNGram(PredictionError, LookupError):
    """No successor is recorded for the queried token sequence."""
    def __init__(self, query: str) -> None:
        super().__init__(f"Failed to look up n-gram: {query!r}")
        self.query = query


class DimensionMismatch(PredictionError, ValueError):
    def __init__(self, expected: int, actual: int, context: Optional[str] = None) -> None:
        msg = f"expected a vector of length {expected}, got {actual}"
        if context:
            msg = f"{context}: {msg}"
        super().__init__(msg)
        self.expected = expected
        self.actual = actual
