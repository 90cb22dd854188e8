"""Main CLI entry point"""

import sys

import click
from prometheus_client import REGISTRY, write_to_textfile

from chatty.__version__ import __version__
from chatty.files import list_files
from chatty.reducer import FileReadError
from chatty.report import CHATTY_MAX, build_report
from chatty.scheduler import FailurePolicy, run
from chatty.utils import setup_logging


def _write_metrics(metrics_file: str | None) -> None:
    if not metrics_file:
        return
    try:
        write_to_textfile(metrics_file, REGISTRY)
    except OSError as e:
        click.echo(f'Error: cannot write metrics to {metrics_file}: {e}', err=True)
        sys.exit(1)


@click.command('chatty')
@click.argument('path', type=click.Path(exists=True))
@click.option(
    '--workers',
    '-w',
    type=click.IntRange(min=1),
    default=None,
    help='Files processed in parallel (default: CHATTY_WORKERS or CPU count)',
)
@click.option(
    '--inner-workers',
    '-i',
    type=click.IntRange(min=1),
    default=None,
    help='Threads per file processing its lines (default: CHATTY_INNER_WORKERS or CPU count)',
)
@click.option('--best-effort', is_flag=True, help='Skip unreadable files instead of aborting the run')
@click.option('--recursive', '-r', is_flag=True, help='Recursively process directories')
@click.option('--compact', is_flag=True, help='Print JSON on a single line')
@click.option(
    '--chatty-max',
    type=click.IntRange(min=0),
    default=CHATTY_MAX,
    show_default=True,
    help='Number of sites/tags in each chatty ranking',
)
@click.option('--metrics-file', type=click.Path(dir_okay=False), default=None, help='Write Prometheus metrics here')
@click.version_option(version=__version__, prog_name='Chatty')
def cli(
    path: str,
    workers: int | None,
    inner_workers: int | None,
    best_effort: bool,
    recursive: bool,
    compact: bool,
    chatty_max: int,
    metrics_file: str | None,
):
    """Summarize a directory of Stack Exchange dumps.

    PATH is a directory of <site>.jsonl files (or a single file), one
    question per line: {"texts": [...], "tags": [...]}. The JSON report is
    printed to stdout once every file has been processed.

    \b
    Examples:
      chatty ./data
      chatty ./data -w 4 -i 8
      chatty ./data --best-effort --compact
      chatty ./data --metrics-file /var/lib/node_exporter/chatty.prom

    \b
    Environment:
      CHATTY_WORKERS          Default for --workers
      CHATTY_INNER_WORKERS    Default for --inner-workers
      CHATTY_LINE_BATCH_SIZE  Lines handed to an inner worker at a time (default: 256)
      CHATTY_LOG_LEVEL        Logging level on stderr (default: WARNING)
    """
    setup_logging()

    try:
        files = list_files(path, recursive=recursive)
    except OSError as e:
        click.echo(f'Error: {path}: {e}', err=True)
        sys.exit(1)
    policy = FailurePolicy.BEST_EFFORT if best_effort else FailurePolicy.FAIL_FAST

    try:
        aggregate = run(files, outer_workers=workers, inner_workers=inner_workers, policy=policy)
    except FileReadError as e:
        _write_metrics(metrics_file)
        click.echo(f'Error: {e.path}: {e.cause}', err=True)
        sys.exit(1)

    report = build_report(aggregate, chatty_max=chatty_max)
    click.echo(report.to_json(compact=compact))
    _write_metrics(metrics_file)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
