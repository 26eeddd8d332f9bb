"""Main CLI entry point"""

import logging
import sys

import click
from pydantic import ValidationError

from heatlog.__version__ import __version__
from heatlog.errors import ConfigurationError, HeatlogError
from heatlog.filter_sort import SortOrder
from heatlog.matcher import compile_pattern
from heatlog.models import PipelineConfig
from heatlog.pipeline import emit, run_pipeline
from heatlog.prometheus import RunMetrics
from heatlog.reader import read_sources
from heatlog.utils import get_chunk_lines, get_default_workers, resolve_color, setup_logging


logger = logging.getLogger(__name__)


@click.command('heatlog')
@click.version_option(version=__version__, prog_name='heatlog')
@click.argument('pattern', type=str)
@click.argument('paths', nargs=-1, type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option(
    '--highlight',
    is_flag=True,
    help='Highlight every extracted value with one color instead of coloring by percentile rank',
)
@click.option('--bold', '-b', is_flag=True, help='Make the extracted value bold')
@click.option('--matching-only', '-m', is_flag=True, help='Only print lines with an extracted value')
@click.option(
    '--sort',
    'sort_order',
    type=click.Choice([order.value for order in SortOrder]),
    default=SortOrder.ORIGINAL.value,
    show_default=True,
    help='Output order. asc/desc sort by value and drop lines without one',
)
@click.option('--debug', '-d', is_flag=True, help='Print match count and percentiles after the lines')
@click.option('--json', 'json_output', is_flag=True, help='Print the --debug summary as JSON')
@click.option(
    '--color',
    'color_mode',
    type=click.Choice(['auto', 'always', 'never']),
    default='auto',
    show_default=True,
    help='When to emit ANSI colors (auto: only when stdout is a terminal)',
)
@click.option('--workers', '-w', type=click.IntRange(min=1), default=None, help='Classification worker threads')
@click.option(
    '--metrics-file',
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help='Write Prometheus metrics for this run to a textfile',
)
@click.option('--verbose', '-v', is_flag=True, help='Log progress to stderr')
def heatlog_command(
    pattern: str,
    paths: tuple[str, ...],
    highlight: bool,
    bold: bool,
    matching_only: bool,
    sort_order: str,
    debug: bool,
    json_output: bool,
    color_mode: str,
    workers: int | None,
    metrics_file: str | None,
    verbose: bool,
):
    """Color log lines by the percentile rank of a number extracted with PATTERN.

    The first capturing group of PATTERN must match a non-negative integer.
    Lines are read from each PATH in order, or from standard input when no
    PATH (or '-') is given. Values at or above p99 are red, p90 yellow, p50
    green; the rest are left plain.

    \b
    Examples:
      heatlog 'took (\\d+)ms' app.log
      heatlog 'status=(\\d+)' --sort desc -m app.log
      tail -n 100000 app.log | heatlog 'size=(\\d+)' --debug
    """
    setup_logging(verbose)

    try:
        config = PipelineConfig(
            pattern=pattern,
            highlight=highlight,
            bold=bold,
            matching_only=matching_only,
            order=SortOrder(sort_order),
            debug=debug,
            json_summary=json_output,
            color=resolve_color(color_mode, sys.stdout.isatty()),
            workers=workers if workers is not None else get_default_workers(),
            chunk_lines=get_chunk_lines(),
        )
    except ValidationError as e:
        click.echo(f'Error: invalid configuration: {e}', err=True)
        sys.exit(1)

    logger.debug(f'Run configuration: {config.model_dump()}')

    # A bad pattern fails before any input is read
    try:
        compiled = compile_pattern(config.pattern)
    except ConfigurationError as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)

    metrics = RunMetrics() if metrics_file else None

    try:
        lines = read_sources(paths)
        result = run_pipeline(lines, config, metrics, pattern=compiled)
    except HeatlogError as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)
    except OSError as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)

    emit(result, config)

    if metrics is not None:
        try:
            metrics.write(metrics_file)
        except OSError as e:
            click.echo(f'Error: cannot write metrics to {metrics_file}: {e}', err=True)
            sys.exit(1)


def main():
    """Entry point for the CLI"""
    heatlog_command()


if __name__ == '__main__':
    main()
