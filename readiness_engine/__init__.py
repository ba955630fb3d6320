"""Sales call readiness scoring engine."""

__version__ = "1.0.0"
