"""
Custom Exceptions - Sales Readiness Engine
readiness_engine/core/exceptions.py

Custom exception classes for taxonomy loading and session handling.
Data gaps during scoring are not exceptions; they default or skip.
"""


class ReadinessEngineException(Exception):
    """Base exception for the readiness engine."""

    pass


class TaxonomyException(ReadinessEngineException):
    """Base exception for taxonomy problems."""

    pass


class TaxonomyNotInitializedException(TaxonomyException):
    """Taxonomy could not be loaded on first use."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Taxonomy from {source} could not be initialized: {reason}")


class TaxonomyValidationException(TaxonomyException):
    """Taxonomy records violate an id/ownership invariant."""

    def __init__(self, message: str = "Taxonomy validation failed"):
        self.message = message
        super().__init__(message)


class SessionNotFoundException(ReadinessEngineException):
    """Conversation session does not exist."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session with ID {session_id} not found")


class SessionLimitExceededException(ReadinessEngineException):
    """Session store is full."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Session limit of {limit} reached")
