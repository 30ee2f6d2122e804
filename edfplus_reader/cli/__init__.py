from pathlib import Path

import click

from edfplus_reader.errors import EdfError
from edfplus_reader.model import EdfReaderConfig
from edfplus_reader.parser.edf import EdfHeaderReader, open_edf


def open_or_fail(path: Path, config: EdfReaderConfig) -> EdfHeaderReader:
    try:
        return open_edf(path, config)
    except EdfError as e:
        raise click.ClickException(f"{e} [{e.status.name}]") from e


def report_warnings(reader: EdfHeaderReader) -> None:
    for warning in reader.warnings:
        click.echo(f"Warning: {warning}", err=True)
