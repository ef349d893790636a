from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from junit_to_ctrf.artifacts.writer import write_report
from junit_to_ctrf.config.models import ConvertOptions
from junit_to_ctrf.ctrf.models import Report
from junit_to_ctrf.ctrf.report import build_report
from junit_to_ctrf.junit.reader import read_junit_reports
from junit_to_ctrf.util.console import err_console


def convert_junit_to_ctrf(
    pattern: str,
    options: ConvertOptions | None = None,
    *,
    console: Console | None = None,
) -> Report | None:
    """Convert the JUnit report(s) matching ``pattern`` to a CTRF report.

    Returns ``None`` and writes nothing when no test cases are found. The
    report is written only when ``options.output_path`` is set.
    """
    if options is None:
        options = ConvertOptions()
    if console is None:
        console = err_console

    test_cases = read_junit_reports(pattern, console=console, log=options.log)
    if not test_cases:
        console.print(
            "[yellow]Warning:[/yellow] No test cases found in the provided path. "
            "No CTRF report generated."
        )
        return None

    if options.log:
        console.print(f"Converting {len(test_cases)} test cases to CTRF format")
    report = build_report(
        test_cases,
        tool_name=options.tool_name,
        env_props=options.env,
        use_suite_name=options.use_suite_name,
    )

    if options.output_path:
        output_path = write_report(options.output_path, report, console=console)
        if options.log:
            console.print(f"CTRF report written to: {escape(str(output_path))}")
    return report
