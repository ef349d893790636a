from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from click.core import ParameterSource
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from junit_to_ctrf.config.loader import load_options, merge_options
from junit_to_ctrf.config.models import ConvertOptions
from junit_to_ctrf.convert import convert_junit_to_ctrf
from junit_to_ctrf.ctrf.models import Report

DEFAULT_OUTPUT_PATH = "ctrf/ctrf-report.json"

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


def _given(ctx: typer.Context, name: str, value: bool) -> bool | None:
    if ctx.get_parameter_source(name) in (None, ParameterSource.DEFAULT):
        return None
    return value


def _resolve_options(
    config: Optional[str],
    *,
    env: Optional[List[str]],
    output_path: Optional[str],
    tool_name: Optional[str],
    use_suite_name: Optional[bool],
    log: Optional[bool],
) -> ConvertOptions:
    options = ConvertOptions(output_path=DEFAULT_OUTPUT_PATH, use_suite_name=True, log=True)
    if config is not None:
        file_options = load_options(Path(config))
        options = options.model_copy(
            update=file_options.model_dump(include=file_options.model_fields_set)
        )
    return merge_options(
        options,
        env=env,
        output_path=output_path,
        tool_name=tool_name,
        use_suite_name=use_suite_name,
        log=log,
    )


def _print_summary(report: Report) -> None:
    summary = report.results.summary
    table = Table(title="CTRF Summary", show_lines=False)
    table.add_column("Tests", justify="right")
    table.add_column("Passed", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Flaky", justify="right")
    table.add_row(
        str(summary.tests),
        f"[green]{summary.passed}[/green]",
        f"[red]{summary.failed}[/red]" if summary.failed else "0",
        str(summary.skipped),
        f"[yellow]{summary.flaky}[/yellow]" if summary.flaky else "0",
    )
    console.print(table)


@app.command()
def convert(
    ctx: typer.Context,
    pattern: str = typer.Argument(
        ...,
        help="Path to a JUnit XML file or a glob pattern such as 'reports/**/*.xml'",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help=f"Output path for the CTRF report (default: {DEFAULT_OUTPUT_PATH})",
    ),
    tool_name: Optional[str] = typer.Option(
        None,
        "--tool-name",
        "-t",
        help="Tool name recorded in the report",
    ),
    env: Optional[List[str]] = typer.Option(
        None,
        "--env",
        "-e",
        help="Environment property as key=value (repeatable)",
    ),
    use_suite_name: bool = typer.Option(
        True,
        "--use-suite-name/--no-use-suite-name",
        help="Prefix test names with their suite name",
    ),
    log: bool = typer.Option(
        True,
        "--log/--quiet",
        help="Print progress messages",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML file with conversion options; command line flags take precedence",
    ),
) -> None:
    """Convert JUnit XML report(s) to a CTRF JSON report."""
    try:
        options = _resolve_options(
            config,
            env=env,
            output_path=output,
            tool_name=tool_name,
            use_suite_name=_given(ctx, "use_suite_name", use_suite_name),
            log=_given(ctx, "log", log),
        )
    except Exception as exc:
        console.print(f"[red]Invalid options:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    try:
        report = convert_junit_to_ctrf(pattern, options, console=console)
    except Exception as exc:
        console.print(f"[red]Failed to convert JUnit report:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    if report is not None and options.log:
        _print_summary(report)
    raise typer.Exit(code=0)
