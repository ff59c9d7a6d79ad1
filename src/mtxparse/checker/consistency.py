"""Semantic checks applied to a recognized document before it is turned into a matrix.

The recognizer only guarantees that every line is well-formed. This module
checks what it deliberately does not: that the number of entries agrees with
the size line, that coordinates lie inside the matrix, and that entries respect
the storage scheme.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from mtxparse.parser.base import (
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
    StorageScheme,
)

logger = logging.getLogger(__name__)


class ConsistencyError(ValueError):
    """Base exception for documents that are well-formed but inconsistent."""


class ShapeMismatch(ConsistencyError):
    """Raised when the entry count disagrees with the size line."""


class IndexOutOfBounds(ConsistencyError):
    """Raised for a coordinate of 0 or beyond the declared rows/cols."""


class StorageViolation(ConsistencyError):
    """
    Raised when entries contradict the storage scheme.

    Examples:
    - Symmetric, skew-symmetric or hermitian matrix that is not square
    - Entry above the diagonal under a symmetric-family scheme
    - Stored diagonal entry under skew-symmetric storage
    """


class ValueTypeMismatch(ConsistencyError):
    """Raised when a value cannot be represented by the declared data type."""


def expected_entry_count(header: Header, shape: Shape) -> int:
    """Number of entry lines the size line promises."""
    if not isinstance(shape, DenseShape):
        return shape.nnz
    if header.storage is StorageScheme.GENERAL:
        return shape.rows * shape.cols
    # Dense symmetric-family storage lists only the lower triangle, column by column.
    n = shape.rows
    if header.storage is StorageScheme.SKEW_SYMMETRIC:
        return n * (n - 1) // 2
    return n * (n + 1) // 2


def check_document(document: Document) -> Iterator[Entry]:
    """Yield the document's entries unchanged, raising on the first inconsistency.

    The count check fires once the entries are exhausted (or as soon as there
    are too many).
    """
    header, shape = document.header, document.shape
    if header.storage is not StorageScheme.GENERAL and shape.rows != shape.cols:
        raise StorageViolation(
            f"{header.storage.value} matrix must be square, got {shape.rows}x{shape.cols}"
        )

    expected = expected_entry_count(header, shape)
    count = 0
    for entry in document.entries:
        count += 1
        if count > expected:
            raise ShapeMismatch(f"expected {expected} entries, found more")
        if isinstance(entry, (SparseRealEntry, SparseComplexEntry, SparsePatternEntry)):
            _check_coordinates(entry, header, shape)
        convert_value(entry, header.data_type)
        yield entry

    if count != expected:
        raise ShapeMismatch(f"expected {expected} entries, found {count}")
    logger.debug(f"Document consistent: {count} entries")


def convert_value(entry: Entry, data_type: DataType) -> int | float | complex | None:
    """Map an entry's payload onto the Python number for ``data_type``."""
    if isinstance(entry, SparsePatternEntry):
        return None
    if isinstance(entry, (SparseComplexEntry, DenseComplexEntry)):
        return complex(entry.re, entry.im)
    if isinstance(entry, (SparseRealEntry, DenseRealEntry)):
        if data_type is DataType.INTEGER:
            if not float(entry.value).is_integer():
                raise ValueTypeMismatch(f"integer matrix holds non-integral value {entry.value!r}")
            return int(entry.value)
        return float(entry.value)
    raise TypeError(f"not a Matrix Market entry: {entry!r}")


def _check_coordinates(entry: Entry, header: Header, shape: Shape) -> None:
    row, col = entry.row, entry.col
    if not 1 <= row <= shape.rows or not 1 <= col <= shape.cols:
        raise IndexOutOfBounds(
            f"entry ({row}, {col}) lies outside a {shape.rows}x{shape.cols} matrix (indices are 1-based)"
        )
    if header.storage is StorageScheme.GENERAL:
        return
    if row < col:
        raise StorageViolation(
            f"entry ({row}, {col}) is above the diagonal of a {header.storage.value} matrix"
        )
    if row == col and header.storage is StorageScheme.SKEW_SYMMETRIC:
        raise StorageViolation(f"skew-symmetric matrix stores diagonal entry ({row}, {col})")
