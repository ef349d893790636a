from __future__ import annotations

from dataclasses import dataclass
import glob
from pathlib import Path
from typing import Iterator
import xml.etree.ElementTree as ET

from rich.console import Console
from rich.markup import escape

from junit_to_ctrf.util.console import err_console

from .models import RawTestCase, RetryRecord

# Surefire/Failsafe retry elements nested inside <testcase>.
_RETRY_TAGS = {
    "flakyFailure": "flaky_failures",
    "flakyError": "flaky_errors",
    "rerunFailure": "rerun_failures",
    "rerunError": "rerun_errors",
}


@dataclass(frozen=True)
class JUnitParseError(Exception):
    path: Path
    message: str

    def __str__(self) -> str:
        return f"Invalid JUnit XML in {self.path}: {self.message}"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> ET.Element | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _text(element: ET.Element | None) -> str | None:
    if element is None:
        return None
    return "".join(element.itertext())


def _retry_record(element: ET.Element) -> RetryRecord:
    stack_trace = _child(element, "stackTrace")
    return RetryRecord(
        message=element.get("message"),
        type=element.get("type"),
        trace=_text(stack_trace) if stack_trace is not None else element.text,
        system_out=_text(_child(element, "system-out")),
        system_err=_text(_child(element, "system-err")),
    )


def _parse_testcase(element: ET.Element, suite_name: str | None) -> RawTestCase:
    failure = _child(element, "failure")
    error = _child(element, "error")
    retries: dict[str, list[RetryRecord]] = {field: [] for field in _RETRY_TAGS.values()}
    for child in element:
        field = _RETRY_TAGS.get(_local_name(child.tag))
        if field is not None:
            retries[field].append(_retry_record(child))

    classname = element.get("classname")
    return RawTestCase(
        suite=suite_name if suite_name is not None else classname,
        classname=classname,
        name=element.get("name"),
        time=element.get("time"),
        has_failure=failure is not None,
        failure_message=None if failure is None else failure.get("message"),
        failure_trace=_text(failure),
        failure_type=None if failure is None else failure.get("type"),
        has_error=error is not None,
        error_message=None if error is None else error.get("message"),
        error_trace=_text(error),
        error_type=None if error is None else error.get("type"),
        file=element.get("file"),
        lineno=element.get("line") or element.get("lineno"),
        skipped=_child(element, "skipped") is not None,
        system_out=_text(_child(element, "system-out")),
        system_err=_text(_child(element, "system-err")),
        flaky_failures=tuple(retries["flaky_failures"]),
        flaky_errors=tuple(retries["flaky_errors"]),
        rerun_failures=tuple(retries["rerun_failures"]),
        rerun_errors=tuple(retries["rerun_errors"]),
    )


def _iter_testcases(element: ET.Element, suite_name: str | None) -> Iterator[RawTestCase]:
    tag = _local_name(element.tag)
    if tag == "testcase":
        yield _parse_testcase(element, suite_name)
        return
    if tag == "testsuite":
        suite_name = element.get("name", suite_name)
    for child in element:
        yield from _iter_testcases(child, suite_name)


def discover_reports(pattern: str) -> list[Path]:
    """Resolve a file path or glob pattern (``**`` allowed) to report files."""
    candidate = Path(pattern)
    if candidate.is_file():
        return [candidate]
    matches = {Path(match) for match in glob.glob(pattern, recursive=True)}
    return sorted(path for path in matches if path.is_file())


def parse_junit_file(path: Path) -> list[RawTestCase]:
    try:
        tree = ET.parse(path)
    except ET.ParseError as exc:
        raise JUnitParseError(path=path, message=str(exc)) from exc
    return list(_iter_testcases(tree.getroot(), None))


def read_junit_reports(
    pattern: str,
    *,
    console: Console | None = None,
    log: bool = False,
) -> list[RawTestCase]:
    """Parse every JUnit report matching ``pattern``, in path order.

    Files that are not well-formed XML are reported and skipped so one broken
    artifact does not hide the results of the others.
    """
    if console is None:
        console = err_console
    paths = discover_reports(pattern)
    if log:
        console.print(f"Found {len(paths)} JUnit report(s) matching: {escape(pattern)}")

    test_cases: list[RawTestCase] = []
    for path in paths:
        try:
            parsed = parse_junit_file(path)
        except JUnitParseError as exc:
            console.print(f"[yellow]Warning:[/yellow] {escape(str(exc))}")
            continue
        if log:
            console.print(f"Parsed {len(parsed)} test case(s) from {escape(str(path))}")
        test_cases.extend(parsed)
    return test_cases
