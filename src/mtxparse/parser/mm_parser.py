"""Matrix Market recognizer: header, comments, size line and entry lines."""

from __future__ import annotations

import gzip
import logging
import re
from collections.abc import Callable, Generator, Iterable, Iterator
from pathlib import Path
from typing import IO, NamedTuple

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
    TrailingGarbage,
    UnexpectedEndOfInput,
    UnsupportedEntryShape,
)
from .lexemes import can_start_entry, parse_dimension, parse_real

logger = logging.getLogger(__name__)

_SEPARATOR_RE = re.compile(r"[ \t]+")

_BANNER = "%%matrixmarket"
_OBJECT_TYPE = "matrix"

_SHAPE_FIELDS = {
    Sparsity.COORDINATE: ("rows", "cols", "nnz"),
    Sparsity.ARRAY: ("rows", "cols"),
}


class _EntryLayout(NamedTuple):
    entry_type: type
    fields: tuple[tuple[str, Callable[[str], int | float]], ...]

    def describe(self) -> str:
        return " ".join(name for name, _ in self.fields)


_ROW = ("row", parse_dimension)
_COL = ("col", parse_dimension)

# Keyed directly by the header so a line is never tried against several arities.
_ENTRY_LAYOUTS: dict[tuple[Sparsity, DataType], _EntryLayout] = {
    (Sparsity.COORDINATE, DataType.REAL): _EntryLayout(SparseRealEntry, (_ROW, _COL, ("value", parse_real))),
    (Sparsity.COORDINATE, DataType.INTEGER): _EntryLayout(SparseRealEntry, (_ROW, _COL, ("value", parse_real))),
    (Sparsity.COORDINATE, DataType.COMPLEX): _EntryLayout(
        SparseComplexEntry, (_ROW, _COL, ("re", parse_real), ("im", parse_real))
    ),
    (Sparsity.COORDINATE, DataType.PATTERN): _EntryLayout(SparsePatternEntry, (_ROW, _COL)),
    (Sparsity.ARRAY, DataType.REAL): _EntryLayout(DenseRealEntry, (("value", parse_real),)),
    (Sparsity.ARRAY, DataType.INTEGER): _EntryLayout(DenseRealEntry, (("value", parse_real),)),
    (Sparsity.ARRAY, DataType.COMPLEX): _EntryLayout(DenseComplexEntry, (("re", parse_real), ("im", parse_real))),
}


class MatrixMarketParser:
    """Parse Matrix Market text (plain or gzip-compressed) into Document IR."""

    def __init__(self, normalize_newlines: bool = True) -> None:
        self.normalize_newlines = normalize_newlines

    def parse(self, input_path: Path) -> Document:
        """Recognize header and size line now; stream entries as the result is iterated.

        The file stays open until the entry iterator is exhausted or closed, or
        the document is discarded.
        """
        lines = self._read_lines(Path(input_path))
        try:
            return _drive(lines, on_close=lines.close)
        except BaseException:
            lines.close()
            raise

    def parse_text(self, text: str) -> Document:
        if self.normalize_newlines:
            text = text.replace("\r\n", "\n").replace("\r", "\n")
        return _drive(text.split("\n"))

    def _read_lines(self, input_path: Path) -> Generator[str, None, None]:
        # Closing (or collecting) this generator exits the with block.
        with self._open(input_path) as handle:
            yield from handle

    def _open(self, input_path: Path) -> IO[str]:
        # newline=None translates \r\n and \r; "\n" leaves them in the line.
        newline = None if self.normalize_newlines else "\n"
        if input_path.suffix.lower() == ".gz":
            return gzip.open(input_path, "rt", encoding="utf-8", newline=newline)
        return input_path.open("r", encoding="utf-8", newline=newline)


def parse_lines(lines: Iterable[str]) -> Document:
    """Recognize a document from an iterable of ``\\n``-terminated (or bare) lines."""
    return _drive(lines)


# ---------------------------------------------------------------------------
# Document driver
# ---------------------------------------------------------------------------

def _drive(lines: Iterable[str], on_close: Callable[[], None] | None = None) -> Document:
    rows = enumerate((_chomp(line) for line in lines), start=1)

    line_no = 0
    for line_no, text in rows:
        if _is_blank(text):
            continue
        header = parse_header(text, line_no)
        layout = _layout_for(header, line_no, text)
        break
    else:
        raise UnexpectedEndOfInput("no %%MatrixMarket header found", line_no or None)
    logger.debug(f"Recognized header on line {line_no}: {header}")

    for line_no, text in rows:
        if _is_blank(text) or is_comment(text):
            continue
        shape = parse_shape(text, header.sparsity, line_no)
        break
    else:
        raise UnexpectedEndOfInput("input ended before the size line", line_no)
    logger.debug(f"Recognized shape on line {line_no}: {shape}")

    return Document(header=header, shape=shape, entries=_iter_entries(rows, layout, on_close))


def _iter_entries(
    rows: Iterator[tuple[int, str]],
    layout: _EntryLayout,
    on_close: Callable[[], None] | None,
) -> Iterator[Entry]:
    count = 0
    try:
        for line_no, text in rows:
            tokens = _tokens(text)
            if not tokens:
                continue
            yield _build_entry(tokens, layout, line_no, text)
            count += 1
        logger.debug(f"Entry stream exhausted after {count} entries")
    finally:
        if on_close is not None:
            on_close()


# ---------------------------------------------------------------------------
# Line recognizers
# ---------------------------------------------------------------------------

def parse_header(text: str, line_no: int | None = None) -> Header:
    """Recognize ``%%MatrixMarket matrix <sparsity> <datatype> <storage>`` (case-insensitive)."""
    tokens = _tokens(text)
    if not tokens or _fold(tokens[0]) != _BANNER:
        raise MalformedHeader("expected a '%%MatrixMarket' header line", line_no, text)
    if len(tokens) < 2:
        raise MalformedHeader("missing object type after '%%MatrixMarket'", line_no, text)
    if _fold(tokens[1]) != _OBJECT_TYPE:
        raise MalformedHeader(
            f"unsupported object type {tokens[1]!r}: only 'matrix' is recognized", line_no, text
        )
    if len(tokens) != 5:
        raise MalformedHeader(
            f"expected sparsity, data type and storage scheme after 'matrix', got {len(tokens) - 2} keyword(s)",
            line_no,
            text,
        )
    return Header(
        sparsity=_keyword(Sparsity, tokens[2], "sparsity", line_no, text),
        data_type=_keyword(DataType, tokens[3], "data type", line_no, text),
        storage=_keyword(StorageScheme, tokens[4], "storage scheme", line_no, text),
    )


def is_comment(text: str) -> bool:
    return text.lstrip(" \t").startswith("%")


def parse_shape(text: str, sparsity: Sparsity, line_no: int | None = None) -> Shape:
    """Recognize the size line; its arity is fixed by ``sparsity``, never by the line itself."""
    fields = _SHAPE_FIELDS[sparsity]
    tokens = _tokens(text)
    if len(tokens) != len(fields):
        raise MalformedShape(
            f"expected {len(fields)} dimensions ({' '.join(fields)}) for a {sparsity.value} matrix, "
            f"got {len(tokens)} token(s)",
            line_no,
            text,
        )
    try:
        dims = [parse_dimension(token) for token in tokens]
    except MalformedNumber as exc:
        raise MalformedShape(exc.message, line_no, text) from exc

    if sparsity is Sparsity.COORDINATE:
        return SparseShape(*dims)
    return DenseShape(*dims)


def parse_entry(text: str, header: Header, line_no: int | None = None) -> Entry:
    """Recognize one non-blank body line as the entry shape selected by ``header``."""
    layout = _layout_for(header, line_no)
    tokens = _tokens(text)
    if not tokens:
        raise MalformedEntry(f"expected an entry ({layout.describe()}), got a blank line", line_no, text)
    return _build_entry(tokens, layout, line_no, text)


def entry_type_for(header: Header) -> type:
    """Entry record class that ``header`` selects for its body lines."""
    return _layout_for(header).entry_type


def _layout_for(header: Header, line_no: int | None = None, text: str | None = None) -> _EntryLayout:
    layout = _ENTRY_LAYOUTS.get((header.sparsity, header.data_type))
    if layout is None:
        raise UnsupportedEntryShape(
            f"no entry shape is defined for {header.sparsity.value} {header.data_type.value} matrices",
            line_no,
            text,
        )
    return layout


def _build_entry(tokens: list[str], layout: _EntryLayout, line_no: int | None, text: str) -> Entry:
    arity = len(layout.fields)
    if not can_start_entry(tokens[0]):
        raise TrailingGarbage(f"expected an entry ({layout.describe()}), got {tokens[0]!r}", line_no, text)
    if len(tokens) > arity:
        raise TrailingGarbage(
            f"unexpected content {' '.join(tokens[arity:])!r} after entry ({layout.describe()})",
            line_no,
            text,
        )
    if len(tokens) < arity:
        raise MalformedEntry(
            f"expected {arity} token(s) ({layout.describe()}), got {len(tokens)}", line_no, text
        )

    try:
        values = [convert(token) for (_, convert), token in zip(layout.fields, tokens)]
    except MalformedNumber as exc:
        raise MalformedEntry(exc.message, line_no, text) from exc
    return layout.entry_type(*values)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _chomp(line: str) -> str:
    return line[:-1] if line.endswith("\n") else line


def _is_blank(text: str) -> bool:
    return not text.strip(" \t")


def _tokens(text: str) -> list[str]:
    stripped = text.strip(" \t")
    if not stripped:
        return []
    return _SEPARATOR_RE.split(stripped)


def _fold(token: str) -> str:
    # Keywords are ASCII; avoid str.lower() mapping e.g. KELVIN SIGN onto "k".
    return token.lower() if token.isascii() else token


def _keyword(enum_type, token: str, what: str, line_no: int | None, text: str):
    try:
        return enum_type(_fold(token))
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise MalformedHeader(f"unknown {what} {token!r}: expected one of {choices}", line_no, text) from None
