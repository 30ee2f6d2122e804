from pathlib import Path

import click

from edfplus_reader.cli import open_or_fail, report_warnings
from edfplus_reader.errors import EdfError, FileContentsError
from edfplus_reader.locator import SampleLocator
from edfplus_reader.model import EdfReaderConfig


@click.command()
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def inspect(config: EdfReaderConfig, path: Path):
    """
    Print the start of recording, the record layout and, for every signal, its label and first sample from the
    EDF+ file located at PATH.
    """
    with open_or_fail(path, config or EdfReaderConfig()) as reader:
        locator = SampleLocator(reader)
        start_time, _ = reader.start_time_or_placeholder()
        start_date, _ = reader.start_date_or_placeholder()
        try:
            duration = f"{reader.duration_seconds():g}"
        except FileContentsError:
            duration = reader.general_header.duration
        click.echo(f"File = {path}")
        click.echo(f"Start Time = {start_time}")
        click.echo(f"Start Date = {start_date}")
        click.echo(f"Number of signals = {reader.number_of_signals()}")
        click.echo(f"Number of data records = {reader.number_of_data_records()}")
        click.echo(f"Duration of a data record = {duration} seconds")
        for i in range(reader.number_of_signals()):
            click.echo(f"Signal {i + 1} Label = {reader.signal_label(i)}")
            try:
                click.echo(f"First Sample = {locator.sample(i, 0)}")
            except EdfError as e:
                click.echo(f"First Sample = n/a ({e})")
        report_warnings(reader)
