"""
Exceptions raised while turning records into histogram bins.
"""

from typing import Any


class HistogramError(ValueError):
    """Base class for all histogram computation errors."""


class InvalidFieldError(HistogramError):
    """A record is missing the plotted field or holds an unparseable value."""

    def __init__(self, index: int, field: str, value: Any = None, reason: str = "unparseable"):
        self.index = index
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Record {index}: field '{field}' is {reason} ({value!r})")


class InvalidBinCountError(HistogramError):
    """The requested number of bins is not a positive integer."""

    def __init__(self, bin_count: Any):
        self.bin_count = bin_count
        super().__init__(f"Bin count must be a positive integer, got {bin_count!r}")


class EmptyInputError(HistogramError):
    """There are no values left to bin."""
