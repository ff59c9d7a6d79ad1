"""Render Document IR back into Matrix Market text."""

from __future__ import annotations

import gzip
import math
from collections.abc import Iterable, Iterator
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

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
    SparseShape,
    Sparsity,
)
from mtxparse.parser.mm_parser import entry_type_for


class MatrixMarketWriter:
    """Serialize documents through the Matrix Market template.

    Output is accepted by :class:`~mtxparse.parser.mm_parser.MatrixMarketParser`
    and re-parses to an equal document.
    """

    def __init__(self, template_path: Path | None = None) -> None:
        if template_path is None:
            template_path = Path(__file__).resolve().parent.parent / "template" / "matrix_market.mtx.j2"

        loader = FileSystemLoader(str(template_path.parent))
        self._env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._env.filters["mm_shape"] = format_shape
        self._env.filters["mm_entry"] = format_entry
        self._template_name = template_path.name

    def iter_render(self, document: Document, comments: Iterable[str] = ()) -> Iterator[str]:
        comments = list(comments)
        for comment in comments:
            if "\n" in comment or "\r" in comment:
                raise ValueError(f"comment must fit on one line: {comment!r}")

        header = document.header
        entry_type_for(header)
        shape_type = SparseShape if header.sparsity is Sparsity.COORDINATE else DenseShape
        if not isinstance(document.shape, shape_type):
            raise TypeError(
                f"{header.sparsity.value} header needs a {shape_type.__name__}, got {document.shape!r}"
            )

        template = self._env.get_template(self._template_name)
        return template.generate(
            header=document.header,
            shape=document.shape,
            comments=comments,
            entries=document.entries,
        )

    def render(self, document: Document, comments: Iterable[str] = ()) -> str:
        return "".join(self.iter_render(document, comments))

    def write(self, document: Document, output_path: Path, comments: Iterable[str] = ()) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        chunks = self.iter_render(document, comments)
        if output_path.suffix.lower() == ".gz":
            with gzip.open(output_path, "wt", encoding="utf-8", newline="\n") as fh:
                fh.writelines(chunks)
            return
        with output_path.open("w", encoding="utf-8", newline="\n") as fh:
            fh.writelines(chunks)


def format_real(value: float, data_type: DataType = DataType.REAL) -> str:
    """Format a value so it matches the ``Real`` grammar (``NaN``/``inf`` spelled exactly)."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if data_type is DataType.INTEGER and float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_shape(shape: Shape) -> str:
    if isinstance(shape, DenseShape):
        return f"{shape.rows} {shape.cols}"
    return f"{shape.rows} {shape.cols} {shape.nnz}"


def format_entry(entry: Entry, header: Header) -> str:
    """Format one body line; ``entry`` must be the record class ``header`` selects."""
    expected = entry_type_for(header)
    if type(entry) is not expected:
        raise TypeError(
            f"{header.sparsity.value} {header.data_type.value} documents hold {expected.__name__}, "
            f"got {entry!r}"
        )

    data_type = header.data_type
    if isinstance(entry, SparseRealEntry):
        return f"{entry.row} {entry.col} {format_real(entry.value, data_type)}"
    if isinstance(entry, SparseComplexEntry):
        return f"{entry.row} {entry.col} {format_real(entry.re)} {format_real(entry.im)}"
    if isinstance(entry, SparsePatternEntry):
        return f"{entry.row} {entry.col}"
    if isinstance(entry, DenseRealEntry):
        return format_real(entry.value, data_type)
    if isinstance(entry, DenseComplexEntry):
        return f"{format_real(entry.re)} {format_real(entry.im)}"
    raise TypeError(f"not a Matrix Market entry: {entry!r}")
