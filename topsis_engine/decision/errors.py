"""
Validation errors raised by the ranking engine.

Every error carries the violated invariant plus the offending row and/or
column (0-based) when one applies, so callers can report a precise message.
"""
from typing import Optional


class ValidationError(ValueError):
    """Base class for ranking engine input violations."""

    def __init__(
        self,
        message: str,
        invariant: str,
        row: Optional[int] = None,
        column: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.invariant = invariant
        self.row = row
        self.column = column


class ShapeMismatchError(ValidationError):
    """Matrix is empty or ragged, or weights/impacts disagree with its width."""


class InvalidWeightError(ValidationError):
    """Negative, non-finite or all-zero weights."""


class InvalidImpactError(ValidationError):
    """Impact symbol is neither Benefit nor Cost."""


class NonNumericEntryError(ValidationError):
    """Matrix cell is not a finite real number."""
