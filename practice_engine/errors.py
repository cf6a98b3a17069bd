"""Exceptions raised by the practice engine."""


class PracticeEngineError(Exception):
    """Base class for practice engine errors."""
    pass


class RecordValidationError(PracticeEngineError):
    """Raised when stored bytes do not decode to a valid learner record."""
    pass


class EmptyConceptPoolError(PracticeEngineError, ValueError):
    """Raised when a concept is requested from an empty candidate pool."""

    def __init__(self, message: str = "availableConcepts must contain at least one concept id"):
        super().__init__(message)
