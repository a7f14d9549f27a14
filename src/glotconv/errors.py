"""

errors.py

Exception hierarchy for the converter. Every failure propagates to the caller
without recovery, the command line is the only place that catches them.

"""
from typing import Optional


class ConversionError(Exception):
    """
    Base class for all the converter errors.
    """


class ParseError(ConversionError):
    """
    Raised when an instrument file (or a wavelength explicit file being read
    back) does not have the expected layout.

    Attributes:
        path: The file being parsed.
        message: Description of the problem.
        line: 1-based line number of the offending line, if known.
    """

    def __init__(self, path: str, message: str, line: Optional[int] = None) -> None:
        self.path = path
        self.message = message
        self.line = line
        where = f"{path}:{line}" if line is not None else path
        super().__init__(f"{message}: {where}")


class ShapeError(ConversionError):
    """
    Raised when the rows of a table disagree on their wavelength columns.

    Attributes:
        message: Description of the inconsistency.
        row: Index of the first offending row, if known.
    """

    def __init__(self, message: str, row: Optional[int] = None) -> None:
        self.message = message
        self.row = row
        super().__init__(message if row is None else f"{message} (row {row})")


class IoError(ConversionError):
    """
    Raised when a file cannot be read or written. The underlying OSError is
    chained as the cause.

    Attributes:
        path: The file path.
        message: Description of the failure.
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


__all__ = ["ConversionError", "IoError", "ParseError", "ShapeError"]
