"""
Command-line interface for nutgraph.
Loads a subject table, builds the subject/allergy graph and prints degree
centrality averaged by demographic value and per allergy category.
"""

import click
import logging
import pathlib
import sys
import typing

from stairval.notepad import Notepad, create_notepad

from .allergy import AllergyCategory
from .centrality import CentralityAnalyzer, CentralityReport
from .errors import IngestionError
from .graph import GraphBuilder
from .loader import load_records_table
from .mapper import RecordMapper
from .record import Record
from .report import format_report, report_to_frame


@click.group()
def main():
    """nutgraph: degree centrality of nut-allergy diagnoses across demographics."""
    pass


def _parse_categories(ctx, param, value: tuple[str, ...]) -> typing.Optional[tuple[AllergyCategory, ...]]:
    # accepts repeated options and comma separated lists (the env var form)
    labels = [label for item in value for label in item.split(",") if label.strip()]
    if not labels:
        return None
    try:
        return tuple(AllergyCategory.from_label(label) for label in labels)
    except ValueError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)


@main.command(name="analyze")
@click.argument(
    "input_path",
    envvar="NUTGRAPH_INPUT",
    type=click.Path(dir_okay=False),
)
@click.option(
    "-c",
    "--category",
    "categories",
    multiple=True,
    envvar="NUTGRAPH_CATEGORIES",
    callback=_parse_categories,
    help="allergy category to report degree for; repeatable (default: all but Brazil and Hazelnut)",
)
@click.option("--per-individual", is_flag=True, help="Also print the degree of every individual")
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, writable=True),
    help="write the report as CSV to this file",
)
@click.option("--verbose-logging", is_flag=True, help="Also emit debug logs to stderr")
@click.option(
    "--log-file-path",
    type=click.Path(dir_okay=False, writable=True),
    help="Append timestamped logs to this file",
)
def analyze(
    input_path: str,
    categories: typing.Optional[tuple[AllergyCategory, ...]],
    per_individual: bool,
    output_path: typing.Optional[str],
    verbose_logging: bool,
    log_file_path: typing.Optional[str],
):
    """
    Read INPUT_PATH (CSV or Excel), build the graph and report degree centrality.
    """
    _configure_logging(verbose_logging, log_file_path)

    # 1) Ingest; any failure aborts the run before anything is reported
    notepad = create_notepad("records")
    try:
        records = _load_records(input_path, notepad)
    except IngestionError as e:
        _report_issues(notepad)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    _report_issues(notepad)

    # 2) Build and analyze
    graph = GraphBuilder().build(records)
    report = CentralityAnalyzer(categories).analyze(graph)

    # 3) Present
    for line in format_report(report, per_individual=per_individual):
        click.echo(line)

    if output_path:
        _write_report(report, pathlib.Path(output_path))
        click.echo(f"Wrote report to {output_path}")


def _configure_logging(verbose_logging: bool, log_file_path: typing.Optional[str]) -> None:
    handlers: list[logging.Handler] = []
    if log_file_path:
        handlers.append(logging.FileHandler(log_file_path, mode="a", encoding="utf-8"))
    if verbose_logging:
        handlers.append(logging.StreamHandler(sys.stderr))
    if handlers:
        logging.basicConfig(
            level=logging.DEBUG if verbose_logging else logging.INFO,
            format="%(asctime)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=handlers,
            force=True,
        )


def _load_records(input_path: str, notepad: Notepad) -> list[Record]:
    logging.info(f"Beginning parse of '{input_path}'")
    table = load_records_table(input_path)
    return RecordMapper().apply_mapping(table, notepad)


def _report_issues(notepad: Notepad) -> None:
    # if there were errors, show them
    if notepad.has_errors(include_subsections=True):
        click.echo("Errors found in record table:")
        for err in notepad.errors():
            click.echo(f"- {err}")
    # show any warnings but keep going
    if notepad.has_warnings(include_subsections=True):
        click.echo("Warnings found in record table:")
        for w in notepad.warnings():
            click.echo(f"- {w}")


def _write_report(report: CentralityReport, output_path: pathlib.Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    report_to_frame(report).to_csv(output_path, index=False)


if __name__ == "__main__":
    main()
