from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

from junit_to_ctrf.junit.models import RawTestCase, RetryRecord

from .models import RetryAttempt
from .sanitize import sanitize_string, to_lines

FinalStatus = Literal["passed", "failed", "skipped"]


@dataclass(frozen=True)
class ReconciledResult:
    retry_attempts: tuple[RetryAttempt, ...]
    retry_count: int
    final_status: FinalStatus
    is_flaky: bool


def _convert_attempts(records: Sequence[RetryRecord], start: int) -> list[RetryAttempt]:
    return [
        RetryAttempt(
            attempt=start + index,
            status="failed",
            message=sanitize_string(record.message),
            trace=sanitize_string(record.trace),
            stdout=to_lines(record.system_out),
            stderr=to_lines(record.system_err),
        )
        for index, record in enumerate(records)
    ]


def reconcile(test_case: RawTestCase) -> ReconciledResult:
    """Derive retry history, final status and flakiness for one test case.

    Flaky attempts (Surefire ``flakyFailure``/``flakyError``) are numbered from
    1. Without them, rerun attempts are numbered from 2 because the original
    run occupies slot 1. A flaky test passed in the end; a rerun test never did.
    """
    attempts: list[RetryAttempt] = []
    attempt_number = 1

    for records in (test_case.flaky_failures, test_case.flaky_errors):
        if records:
            attempts.extend(_convert_attempts(records, attempt_number))
            attempt_number += len(records)

    has_flaky = bool(test_case.flaky_failures) or bool(test_case.flaky_errors)
    if not has_flaky:
        attempt_number = 2

    for records in (test_case.rerun_failures, test_case.rerun_errors):
        if records:
            attempts.extend(_convert_attempts(records, attempt_number))
            attempt_number += len(records)

    has_rerun = bool(test_case.rerun_failures) or bool(test_case.rerun_errors)

    final_status: FinalStatus
    if has_flaky:
        final_status = "passed"
    elif has_rerun:
        final_status = "failed"
    elif test_case.has_failure or test_case.has_error:
        final_status = "failed"
    elif test_case.skipped:
        final_status = "skipped"
    else:
        final_status = "passed"

    return ReconciledResult(
        retry_attempts=tuple(attempts),
        retry_count=len(attempts),
        final_status=final_status,
        is_flaky=has_flaky,
    )
