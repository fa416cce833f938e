"""
Error taxonomy for the Salesboard commission engine.
"""


class SalesboardError(Exception):
    """Base class for all engine errors."""


class ValidationError(SalesboardError, ValueError):
    """Malformed input rejected before it reaches the calculators."""


class NotFoundError(SalesboardError, LookupError):
    """A referenced project, sale, tier level or report does not exist."""


class PersistenceError(SalesboardError, RuntimeError):
    """The storage collaborator failed to read or write a record."""
