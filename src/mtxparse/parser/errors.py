"""
Error types raised while recognizing Matrix Market text.

Every failure is fatal to the parse: the first error encountered is raised
and no partial document is returned.
"""

from __future__ import annotations


class MatrixMarketError(ValueError):
    """Base exception for all recognizer errors."""

    def __init__(self, message: str, line: int | None = None, text: str | None = None):
        self.message = message
        self.line = line
        self.text = text
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with its source line if available."""
        if self.line is None:
            return self.message
        if self.text is None:
            return f"line {self.line}: {self.message}"
        return f"line {self.line}: {self.message}\n    {self.text!r}"


class MalformedHeader(MatrixMarketError):
    """
    Raised when the ``%%MatrixMarket`` header line cannot be recognized.

    Examples:
    - Missing ``%%MatrixMarket`` banner
    - Object type other than ``matrix``
    - Unknown sparsity, data type or storage keyword
    """


class UnsupportedEntryShape(MalformedHeader):
    """Raised for a valid header combination that defines no entry shape (``array`` + ``pattern``)."""


class MalformedShape(MatrixMarketError):
    """Raised when the size line has the wrong token count or a non-digit token."""


class MalformedEntry(MatrixMarketError):
    """Raised when a body line does not match the entry shape selected by the header."""


class TrailingGarbage(MalformedEntry):
    """
    Raised for body content that cannot be (part of) an entry.

    Examples:
    - Extra tokens after a complete entry
    - A comment or word where an entry should start
    """


class MalformedNumber(MatrixMarketError):
    """Raised when a ``Dimension`` or ``Real`` token is syntactically invalid."""


class UnexpectedEndOfInput(MatrixMarketError):
    """Raised when input ends before the header or size line has been seen."""
