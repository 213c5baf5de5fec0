"""Exception types raised by the CSV and chunk translation tools."""
from typing import List, Optional


class LocalizationError(Exception):
    """Base class for every fatal error reported by the tools."""


class ParseError(LocalizationError):
    """A CSV or JSON file could not be read or parsed."""

    def __init__(self, message: str, path: Optional[str] = None):
        if path:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class EmptyInputError(ParseError):
    """A table contains no rows with a non-empty Key."""


class SchemaError(LocalizationError):
    """A table does not have the expected column layout."""


class InvalidFilenameError(LocalizationError):
    """A chunk file name does not follow the data_<N>.json pattern."""


class LengthMismatchError(LocalizationError):
    """The number of translated values does not match the number of rows."""

    def __init__(self, message: str, expected: int, actual: int):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class TokenMismatchError(LocalizationError):
    """
    One or more translated values dropped or altered protected tokens.

    Carries every failing row of the batch, not only the first one, so the
    whole source file can be fixed in a single pass.
    """

    def __init__(self, row_mismatches: List):
        self.row_mismatches = list(row_mismatches)
        lines = [row.describe() for row in self.row_mismatches]
        super().__init__(
            f"Token validation failed for {len(self.row_mismatches)} row(s):\n" + "\n".join(lines)
        )
