"""Core intermediate representation (IR) for parsed Matrix Market files."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Protocol


class Sparsity(str, Enum):
    COORDINATE = "coordinate"
    ARRAY = "array"


class DataType(str, Enum):
    REAL = "real"
    COMPLEX = "complex"
    PATTERN = "pattern"
    INTEGER = "integer"


class StorageScheme(str, Enum):
    GENERAL = "general"
    SYMMETRIC = "symmetric"
    SKEW_SYMMETRIC = "skew-symmetric"
    HERMITIAN = "hermitian"


@dataclass(frozen=True, slots=True)
class Header:
    sparsity: Sparsity
    data_type: DataType
    storage: StorageScheme


@dataclass(frozen=True, slots=True)
class SparseShape:
    rows: int
    cols: int
    nnz: int


@dataclass(frozen=True, slots=True)
class DenseShape:
    rows: int
    cols: int


Shape = SparseShape | DenseShape


@dataclass(frozen=True, slots=True)
class SparseRealEntry:
    row: int
    col: int
    value: float


@dataclass(frozen=True, slots=True)
class SparseComplexEntry:
    row: int
    col: int
    re: float
    im: float


@dataclass(frozen=True, slots=True)
class SparsePatternEntry:
    row: int
    col: int


@dataclass(frozen=True, slots=True)
class DenseRealEntry:
    value: float


@dataclass(frozen=True, slots=True)
class DenseComplexEntry:
    re: float
    im: float


Entry = SparseRealEntry | SparseComplexEntry | SparsePatternEntry | DenseRealEntry | DenseComplexEntry


@dataclass(frozen=True, slots=True)
class Document:
    """A recognized file: header and shape up front, entries as a (possibly lazy) iterable.

    ``entries`` is a one-shot iterator when produced by the parser. Use
    :meth:`collect` to get a copy that can be iterated more than once and
    compared with ``==``.
    """

    header: Header
    shape: Shape
    entries: Iterable[Entry] = ()

    def collect(self) -> Document:
        return replace(self, entries=tuple(self.entries))


class Parser(Protocol):
    def parse(self, input_path: Path) -> Document:  # pragma: no cover - structural protocol
        """Parse an input file into Document IR."""
