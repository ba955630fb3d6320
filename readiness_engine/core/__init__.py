"""
Core Package - Sales Readiness Engine
readiness_engine/core/__init__.py

Core infrastructure: dependencies, exceptions, logging.
"""

from readiness_engine.core.exceptions import (
    ReadinessEngineException,
    SessionLimitExceededException,
    SessionNotFoundException,
    TaxonomyException,
    TaxonomyNotInitializedException,
    TaxonomyValidationException,
)

__all__ = [
    "ReadinessEngineException",
    "SessionLimitExceededException",
    "SessionNotFoundException",
    "TaxonomyException",
    "TaxonomyNotInitializedException",
    "TaxonomyValidationException",
]
