import os

import click

from edfplus_reader.cli.header import header
from edfplus_reader.cli.inspect import inspect
from edfplus_reader.cli.samples import samples
from edfplus_reader.model import EdfReaderConfig
from edfplus_reader.utils import LOGGER, is_truthy


@click.group()
@click.option(
    "--max-signals",
    default=EdfReaderConfig.max_signals,
    show_default=True,
    type=click.IntRange(min=1),
    help="Reject files declaring more signals than this.",
)
@click.option(
    "--no-consistency-check",
    is_flag=True,
    default=False,
    help="Skip comparing declared header and data sizes against the file.",
)
@click.pass_context
def cli(ctx: click.Context, max_signals: int, no_consistency_check: bool):
    LOGGER.set_debug(is_truthy(os.getenv("DEBUG")))
    LOGGER.debug("Debug mode enabled")
    ctx.obj = EdfReaderConfig(
        max_signals=max_signals, check_consistency=not no_consistency_check
    )


cli.add_command(inspect)
cli.add_command(header)
cli.add_command(samples)
