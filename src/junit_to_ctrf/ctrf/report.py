from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
import math
import re
from typing import Iterable, Mapping

from junit_to_ctrf.junit.models import RawTestCase

from .models import CtrfTest, Report, Results, Summary, Tool
from .retries import reconcile
from .sanitize import sanitize_string, to_lines

GENERATED_BY = "junit-to-ctrf"
DEFAULT_TOOL_NAME = GENERATED_BY
SPEC_VERSION = "0.0.0"
UNNAMED_TEST = "Unnamed Test"

# Leading-number prefixes, so "1.5s" reads as 1.5 and "12.0" as 12.
_LEADING_FLOAT = re.compile(r"\s*([+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def _duration_ms(time_text: str | None) -> int:
    if time_text is None:
        return 0
    match = _LEADING_FLOAT.match(time_text)
    if match is None:
        return 0
    # Half-up rounding; round() would round half to even.
    millis = float(match.group(1)) * 1000 + 0.5
    if not math.isfinite(millis) or millis < 0:
        return 0
    return math.floor(millis)


def _line_number(lineno: str | None) -> int | None:
    if lineno is None:
        return None
    match = _LEADING_INT.match(lineno)
    if match is None:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # Past the interpreter's integer string conversion limit.
        return None


def _test_name(test_case: RawTestCase, use_suite_name: bool) -> str:
    name = sanitize_string(test_case.name)
    if use_suite_name:
        suite = sanitize_string(test_case.suite)
        if suite is not None and name is not None:
            return f"{suite}: {name}"
    return name or UNNAMED_TEST


def convert_test(test_case: RawTestCase, *, use_suite_name: bool = False) -> CtrfTest:
    reconciled = reconcile(test_case)
    retried = reconciled.retry_count > 0
    return CtrfTest(
        name=_test_name(test_case, use_suite_name),
        status=reconciled.final_status,
        duration=_duration_ms(test_case.time),
        file_path=test_case.file,
        line=_line_number(test_case.lineno),
        message=sanitize_string(test_case.failure_message or test_case.error_message),
        trace=sanitize_string(test_case.failure_trace or test_case.error_trace),
        suite=sanitize_string(test_case.suite),
        retries=reconciled.retry_count if retried else None,
        retry_attempts=list(reconciled.retry_attempts) if retried else None,
        flaky=True if reconciled.is_flaky else None,
        stdout=to_lines(test_case.system_out),
        stderr=to_lines(test_case.system_err),
    )


def format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_summary(tests: list[CtrfTest]) -> Summary:
    statuses = Counter(test.status for test in tests)
    flaky = sum(1 for test in tests if test.flaky is True)
    return Summary(
        tests=len(tests),
        passed=statuses["passed"],
        failed=statuses["failed"],
        skipped=statuses["skipped"],
        pending=statuses["pending"],
        other=statuses["other"],
        start=0,
        stop=0,
        flaky=flaky if flaky > 0 else None,
    )


def build_report(
    test_cases: Iterable[RawTestCase],
    tool_name: str | None = None,
    env_props: Mapping[str, str] | None = None,
    use_suite_name: bool = False,
    *,
    generated_at: datetime | None = None,
) -> Report:
    """Assemble a CTRF report from parsed JUnit test cases.

    An empty input still yields a valid report with an all-zero summary.
    """
    tests = [convert_test(test_case, use_suite_name=use_suite_name) for test_case in test_cases]

    if generated_at is None:
        generated_at = datetime.now(timezone.utc)

    return Report(
        report_format="CTRF",
        spec_version=SPEC_VERSION,
        generated_by=GENERATED_BY,
        timestamp=format_timestamp(generated_at),
        results=Results(
            tool=Tool(name=tool_name or DEFAULT_TOOL_NAME),
            summary=build_summary(tests),
            tests=tests,
            environment=dict(env_props) if env_props else None,
        ),
    )
