from __future__ import annotations

import pytest

from mtxparse.checker.consistency import (
    IndexOutOfBounds,
    ShapeMismatch,
    StorageViolation,
    ValueTypeMismatch,
    check_document,
    convert_value,
    expected_entry_count,
)
from mtxparse.parser.base import (
    DataType,
    DenseComplexEntry,
    DenseRealEntry,
    DenseShape,
    Header,
    SparseComplexEntry,
    SparsePatternEntry,
    SparseRealEntry,
    SparseShape,
    Sparsity,
    StorageScheme,
)
from mtxparse.parser.mm_parser import MatrixMarketParser


def _check(text: str) -> list:
    return list(check_document(MatrixMarketParser().parse_text(text)))


def test_consistent_document_passes_through() -> None:
    entries = _check("%%MatrixMarket matrix coordinate real general\n3 3 2\n1 1 4.0\n2 3 -1.5e2\n")
    assert entries == [SparseRealEntry(1, 1, 4.0), SparseRealEntry(2, 3, -150.0)]


def test_too_few_entries() -> None:
    with pytest.raises(ShapeMismatch):
        _check("%%MatrixMarket matrix coordinate real general\n3 3 3\n1 1 4.0\n")


def test_too_many_entries() -> None:
    with pytest.raises(ShapeMismatch):
        _check("%%MatrixMarket matrix array real general\n1 2\n1\n2\n3\n")


def test_dense_general_count() -> None:
    assert len(_check("%%MatrixMarket matrix array real general\n2 3\n1\n2\n3\n4\n5\n6\n")) == 6


def test_expected_counts_for_packed_dense_storage() -> None:
    shape = DenseShape(4, 4)
    assert expected_entry_count(Header(Sparsity.ARRAY, DataType.REAL, StorageScheme.SYMMETRIC), shape) == 10
    assert expected_entry_count(Header(Sparsity.ARRAY, DataType.COMPLEX, StorageScheme.HERMITIAN), shape) == 10
    assert expected_entry_count(Header(Sparsity.ARRAY, DataType.REAL, StorageScheme.SKEW_SYMMETRIC), shape) == 6
    assert expected_entry_count(Header(Sparsity.COORDINATE, DataType.REAL, StorageScheme.SYMMETRIC), SparseShape(4, 4, 3)) == 3


@pytest.mark.parametrize("line", ["0 1 1.0", "1 0 1.0", "3 1 1.0", "1 4 1.0"])
def test_index_out_of_bounds(line: str) -> None:
    with pytest.raises(IndexOutOfBounds):
        _check(f"%%MatrixMarket matrix coordinate real general\n2 3 1\n{line}\n")


def test_symmetric_must_be_square() -> None:
    with pytest.raises(StorageViolation):
        _check("%%MatrixMarket matrix coordinate real symmetric\n2 3 0\n")


def test_symmetric_rejects_upper_triangle() -> None:
    with pytest.raises(StorageViolation):
        _check("%%MatrixMarket matrix coordinate pattern symmetric\n2 2 1\n1 2\n")


def test_skew_symmetric_rejects_diagonal() -> None:
    with pytest.raises(StorageViolation):
        _check("%%MatrixMarket matrix coordinate real skew-symmetric\n2 2 1\n1 1 1.0\n")
    assert _check("%%MatrixMarket matrix coordinate real skew-symmetric\n2 2 1\n2 1 1.0\n")


def test_integer_values_must_be_integral() -> None:
    with pytest.raises(ValueTypeMismatch):
        _check("%%MatrixMarket matrix coordinate integer general\n1 1 1\n1 1 1.5\n")


def test_convert_value() -> None:
    assert convert_value(SparseRealEntry(1, 1, 3.0), DataType.INTEGER) == 3
    assert isinstance(convert_value(DenseRealEntry(3.0), DataType.INTEGER), int)
    assert convert_value(DenseRealEntry(2.5), DataType.REAL) == 2.5
    assert convert_value(SparseComplexEntry(1, 1, 1.0, -2.0), DataType.COMPLEX) == complex(1, -2)
    assert convert_value(DenseComplexEntry(0.0, 1.0), DataType.COMPLEX) == 1j
    assert convert_value(SparsePatternEntry(1, 1), DataType.PATTERN) is None
    with pytest.raises(ValueTypeMismatch):
        convert_value(DenseRealEntry(float("inf")), DataType.INTEGER)
