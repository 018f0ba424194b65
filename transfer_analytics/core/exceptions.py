"""
Custom exceptions for the transfer analytics core.

Precondition violations are raised immediately. Numerically degenerate but
legitimate inputs (flat series) are handled softly by the callers of these
modules and only surface as exceptions where noted.
"""


class AnalyticsError(Exception):
    """Base exception for analytics failures."""
    pass


class InsufficientDataError(AnalyticsError):
    """Raised when a series has fewer points than a method requires."""
    pass


class InvalidParametersError(AnalyticsError):
    """Raised for invalid options (non-positive periods, mismatched lengths, unknown methods)."""
    pass


class DegenerateInputError(AnalyticsError):
    """Raised when input makes a computation undefined and no fallback exists."""
    pass


class DataValidationError(AnalyticsError):
    """Raised when raw input fails validation while building a series."""
    pass
