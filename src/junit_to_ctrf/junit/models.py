from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryRecord:
    """One observed attempt of a retried test (Surefire flaky/rerun elements)."""

    message: str | None = None
    type: str | None = None
    trace: str | None = None
    system_out: str | None = None
    system_err: str | None = None


@dataclass(frozen=True)
class RawTestCase:
    suite: str | None
    classname: str | None
    name: str | None
    time: str | None = None
    has_failure: bool = False
    failure_message: str | None = None
    failure_trace: str | None = None
    failure_type: str | None = None
    has_error: bool = False
    error_message: str | None = None
    error_trace: str | None = None
    error_type: str | None = None
    file: str | None = None
    lineno: str | None = None
    skipped: bool = False
    system_out: str | None = None
    system_err: str | None = None
    flaky_failures: tuple[RetryRecord, ...] = ()
    flaky_errors: tuple[RetryRecord, ...] = ()
    rerun_failures: tuple[RetryRecord, ...] = ()
    rerun_errors: tuple[RetryRecord, ...] = ()
