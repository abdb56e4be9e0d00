"""
Command-line interface for healthcharts.

Every option defaults to the locations in healthcharts.config, so each command
runs without arguments:

    healthcharts process-abs
    healthcharts process-oecd
    healthcharts render-abs
    healthcharts render-oecd
    healthcharts build          # all four, in that order
"""

import logging
import pathlib
import sys
import typing

import click
from stairval.notepad import Notepad, create_notepad

from . import config
from .abs_extractor import AbsConditionsExtractor
from .charts import render_heatmap_page, render_line_chart_page
from .errors import ChartLoadFailure, HealthChartsError, MissingColumnsError
from .oecd_extractor import OecdLifeExpectancyExtractor
from .tidy_io import (
    keyed_diff,
    read_condition_records,
    read_life_expectancy_records,
    write_condition_records,
    write_life_expectancy_records,
)

logger = logging.getLogger(__name__)

SORT_CHOICES = {"descending": True, "ascending": False, "none": None}


@click.group()
@click.option("--verbose-logging", is_flag=True, help="Also emit debug logs to stderr")
@click.option(
    "--log-file-path",
    type=click.Path(dir_okay=False, writable=True),
    help="Append timestamped logs to this file",
)
def main(verbose_logging: bool, log_file_path: typing.Optional[str]):
    """healthcharts: tidy ABS / OECD health exports and chart them."""
    _configure_logging(verbose_logging, log_file_path)


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


def _fail(error: Exception) -> typing.NoReturn:
    logger.error(str(error))
    click.echo(click.style(f"Error: {error}", fg="red"), err=True)
    sys.exit(1)


def _report_issues(notepad: Notepad) -> None:
    if notepad.has_errors(include_subsections=True):
        click.echo("Errors found in extraction:")
        for err in notepad.errors():
            click.echo(click.style(f"- {err}", fg="red"))
    if notepad.has_warnings(include_subsections=True):
        click.echo("Warnings found in extraction:")
        for w in notepad.warnings():
            click.echo(click.style(f"- {w}", fg="yellow"))


def _log_changes(out_path: pathlib.Path, reader: typing.Callable, records: list) -> None:
    # compare against the tidy file we are about to replace, if there is a readable one
    if not out_path.is_file():
        return
    try:
        previous = reader(out_path)
    except (ChartLoadFailure, MissingColumnsError) as e:
        logger.debug(f"Not diffing against unreadable '{out_path}': {e}")
        return
    diff = keyed_diff(previous, records)
    logger.info(f"'{out_path}': {diff.summary()}")


@main.command(name="process-abs")
@click.option("-i", "--input-path", "raw_path", default=str(config.ABS_RAW), show_default=True,
              type=click.Path(dir_okay=False), help="raw ABS workbook")
@click.option("-o", "--output-path", "out_path", default=str(config.ABS_TIDY), show_default=True,
              type=click.Path(dir_okay=False), help="tidy CSV to write")
@click.option("--strict-sheet/--no-strict-sheet", default=False,
              help="Fail instead of falling back to the first sheet when 'Table 3.3' is missing (default: warn).")
def process_abs(raw_path: str, out_path: str, strict_sheet: bool):
    """Extract age_group,condition_group,proportion rows from the ABS workbook."""
    notepad = create_notepad("abs")
    extractor = AbsConditionsExtractor(strict_sheet=strict_sheet)
    try:
        records = extractor.extract(raw_path, notepad)
    except HealthChartsError as e:
        _fail(e)

    _report_issues(notepad)
    out = pathlib.Path(out_path)
    _log_changes(out, read_condition_records, records)
    write_condition_records(records, out)
    click.echo(f"ABS processed -> {out} ({len(records)} rows) [sheet={extractor.selected_sheet}]")


@main.command(name="process-oecd")
@click.option("-i", "--input-path", "raw_path", default=str(config.OECD_RAW), show_default=True,
              type=click.Path(dir_okay=False), help="raw OECD CSV")
@click.option("-o", "--output-path", "out_path", default=str(config.OECD_TIDY), show_default=True,
              type=click.Path(dir_okay=False), help="tidy CSV to write")
@click.option("--region", default=config.OECD_REGION, show_default=True, help="REF_AREA code to keep")
def process_oecd(raw_path: str, out_path: str, region: str):
    """Extract year,value rows for one region from the OECD CSV."""
    notepad = create_notepad("oecd")
    try:
        records = OecdLifeExpectancyExtractor(region=region).extract(raw_path, notepad)
    except HealthChartsError as e:
        _fail(e)

    _report_issues(notepad)
    out = pathlib.Path(out_path)
    _log_changes(out, read_life_expectancy_records, records)
    write_life_expectancy_records(records, out)
    click.echo(f"OECD processed -> {out} ({len(records)} rows)")


@main.command(name="render-abs")
@click.option("-i", "--input-path", "csv_path", default=str(config.ABS_TIDY), show_default=True,
              type=click.Path(dir_okay=False), help="tidy ABS CSV")
@click.option("-o", "--output-path", "out_path", default=str(config.ABS_PAGE), show_default=True,
              type=click.Path(dir_okay=False), help="HTML page to write")
@click.option("--sort", "sort", type=click.Choice(list(SORT_CHOICES)), default="none", show_default=True,
              help="initial ordering of condition groups by total proportion")
def render_abs(csv_path: str, out_path: str, sort: str):
    """Render the condition heatmap page."""
    status = render_heatmap_page(csv_path, out_path, sort_descending=SORT_CHOICES[sort])
    _echo_render_result("Heatmap", out_path, status)


@main.command(name="render-oecd")
@click.option("-i", "--input-path", "csv_path", default=str(config.OECD_TIDY), show_default=True,
              type=click.Path(dir_okay=False), help="tidy OECD CSV")
@click.option("-o", "--output-path", "out_path", default=str(config.OECD_PAGE), show_default=True,
              type=click.Path(dir_okay=False), help="HTML page to write")
@click.option("--start-year", type=int, default=None, help="first year shown (inclusive)")
@click.option("--end-year", type=int, default=None, help="last year shown (inclusive)")
@click.option("--focus-year", type=float, default=None, help="highlight the point nearest this year")
def render_oecd(csv_path: str, out_path: str, start_year: typing.Optional[int],
                end_year: typing.Optional[int], focus_year: typing.Optional[float]):
    """Render the life expectancy line chart page."""
    status = render_line_chart_page(csv_path, out_path, start_year, end_year, focus_year)
    _echo_render_result("Line chart", out_path, status)


def _echo_render_result(name: str, out_path: str, status: typing.Optional[str]) -> None:
    if status is None:
        click.echo(f"{name} written -> {out_path}")
    else:
        click.echo(click.style(f"{name} written -> {out_path} with status: {status}", fg="yellow"))


@main.command(name="build")
@click.pass_context
def build(ctx: click.Context):
    """Process both raw files, then render both pages, all with default paths."""
    ctx.invoke(process_abs)
    ctx.invoke(process_oecd)
    ctx.invoke(render_abs)
    ctx.invoke(render_oecd)


if __name__ == "__main__":
    main()
