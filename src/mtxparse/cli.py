"""mtxparse CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from mtxparse.checker.consistency import ConsistencyError, check_document
from mtxparse.parser.base import Document
from mtxparse.parser.errors import MatrixMarketError
from mtxparse.parser.mm_parser import MatrixMarketParser
from mtxparse.writer.mm_writer import MatrixMarketWriter, format_shape


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--check", is_flag=True, help="Check entry count, indices and storage scheme")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Re-serialize to this path")
@click.option("--raw-newlines", is_flag=True, help="Do not translate \\r\\n line endings before parsing")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(input_path: Path, check: bool, output: Path | None, raw_newlines: bool, verbose: bool) -> None:
    """Recognize a Matrix Market file and summarize it."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    parser = MatrixMarketParser(normalize_newlines=not raw_newlines)
    try:
        document = parser.parse(input_path)
        entries = check_document(document) if check else document.entries
        document = Document(header=document.header, shape=document.shape, entries=tuple(entries))
    except (MatrixMarketError, ConsistencyError) as exc:
        raise click.ClickException(f"{input_path.name}: {exc}") from exc

    header = document.header
    click.echo(f"header: {header.sparsity.value} {header.data_type.value} {header.storage.value}")
    click.echo(f"shape: {format_shape(document.shape)}")
    click.echo(f"entries: {len(document.entries)}")
    if check:
        click.echo("check: ok")

    if output is not None:
        MatrixMarketWriter().write(document, output)
        click.echo(f"Written: {output}")


if __name__ == "__main__":  # pragma: no cover
    main()
