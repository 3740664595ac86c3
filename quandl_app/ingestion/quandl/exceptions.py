"""
Quandl domain errors. Every failure raised by the source is a QuandlException;
the underlying cause is chained via ``raise ... from``.
"""

from typing import Any, Optional


class QuandlException(Exception):
    """Raised when a Quandl request cannot be completed."""

    def __init__(self, message: str, options: Optional[Any] = None) -> None:
        super().__init__(message)
        self.options = options


class QuandlOptionsError(QuandlException):
    """Raised before any I/O when request options are incomplete or invalid."""

    pass


class UnknownFieldError(QuandlException):
    """Raised when a provider column has no entry in the field vocabulary."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"No match for field named: {field_name}")
        self.field_name = field_name
