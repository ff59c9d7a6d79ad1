"""Parser package."""

from .base import (
    DataType,
    DenseComplexEntry,
    DenseRealEntry,
    DenseShape,
    Document,
    Entry,
    Header,
    Shape,
    SparseComplexEntry,
    SparsePatternEntry,
    SparseRealEntry,
    SparseShape,
    Sparsity,
    StorageScheme,
)
from .errors import (
    MalformedEntry,
    MalformedHeader,
    MalformedNumber,
    MalformedShape,
    MatrixMarketError,
    TrailingGarbage,
    UnexpectedEndOfInput,
    UnsupportedEntryShape,
)
from .mm_parser import MatrixMarketParser, parse_entry, parse_header, parse_lines, parse_shape

__all__ = [
    "DataType",
    "DenseComplexEntry",
    "DenseRealEntry",
    "DenseShape",
    "Document",
    "Entry",
    "Header",
    "Shape",
    "SparseComplexEntry",
    "SparsePatternEntry",
    "SparseRealEntry",
    "SparseShape",
    "Sparsity",
    "StorageScheme",
    "MalformedEntry",
    "MalformedHeader",
    "MalformedNumber",
    "MalformedShape",
    "MatrixMarketError",
    "TrailingGarbage",
    "UnexpectedEndOfInput",
    "UnsupportedEntryShape",
    "MatrixMarketParser",
    "parse_entry",
    "parse_header",
    "parse_lines",
    "parse_shape",
]
