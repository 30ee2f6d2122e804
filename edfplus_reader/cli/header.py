import json
from pathlib import Path

import click

from edfplus_reader.cli import open_or_fail, report_warnings
from edfplus_reader.model import EdfReaderConfig


@click.command()
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.argument(
    "output-path", type=click.Path(writable=True, dir_okay=False, path_type=Path)
)
@click.pass_obj
def header(config: EdfReaderConfig, path: Path, output_path: Path):
    """
    Decode the header record of the EDF+ file located at PATH and store the general and per-signal headers as
    JSON in OUTPUT_PATH.
    """
    output_path.parent.mkdir(exist_ok=True, parents=True)
    with open_or_fail(path, config or EdfReaderConfig()) as reader:
        summary = reader.summary()
        report_warnings(reader)
    with open(output_path, "w") as f:
        json.dump(summary.to_dict(), f, indent=4)
