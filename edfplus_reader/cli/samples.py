from pathlib import Path
from typing import Optional

import click

from edfplus_reader.cli import open_or_fail, report_warnings
from edfplus_reader.errors import EdfError, FileContentsError
from edfplus_reader.locator import SampleLocator
from edfplus_reader.model import EdfReaderConfig
from edfplus_reader.scaling import Calibration


@click.command()
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("signal", type=click.INT)
@click.option("--start", default=0, type=click.IntRange(min=0), help="First sample index.")
@click.option(
    "--count",
    default=None,
    type=click.IntRange(min=0),
    help="Number of samples to print. If not specified, all remaining samples are printed.",
)
@click.option(
    "--physical",
    is_flag=True,
    default=False,
    help="Convert digital values using the physical/digital range of the signal.",
)
@click.pass_obj
def samples(
    config: EdfReaderConfig,
    path: Path,
    signal: int,
    start: int,
    count: Optional[int],
    physical: bool,
):
    """
    Print the samples of the 0-based SIGNAL of the EDF+ file located at PATH, one per line.
    """
    with open_or_fail(path, config or EdfReaderConfig()) as reader:
        report_warnings(reader)
        locator = SampleLocator(reader)
        try:
            total = reader.total_samples(signal)
            calibration = (
                Calibration.from_signal_header(reader.signal_header(signal))
                if physical
                else None
            )
        except EdfError as e:
            raise click.ClickException(f"{e} [{e.status.name}]") from e
        end = total if count is None else start + count
        if total is not None and end is not None:
            end = min(end, total)
        index = start
        while end is None or index < end:
            try:
                value = locator.sample(signal, index)
            except FileContentsError as e:
                # Unknown record count: the data region ends where reading fails
                if total is None:
                    return
                raise click.ClickException(f"{e} [{e.status.name}]") from e
            click.echo(calibration.to_physical(value) if calibration is not None else value)
            index += 1
