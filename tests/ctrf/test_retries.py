from __future__ import annotations

from junit_to_ctrf.ctrf.retries import reconcile
from junit_to_ctrf.junit.models import RawTestCase, RetryRecord


def _record(label: str) -> RetryRecord:
    return RetryRecord(
        message=f"{label} failed",
        type="java.lang.AssertionError",
        trace=f"{label} trace",
        system_out=f"{label} output",
        system_err=f"{label} error",
    )


def _test_case(**overrides: object) -> RawTestCase:
    data: dict[str, object] = {
        "suite": "com.example.MyTest",
        "classname": "com.example.MyTest",
        "name": "testFeature",
        "time": "0.1",
    }
    data.update(overrides)
    return RawTestCase(**data)  # type: ignore[arg-type]


def test_plain_passing_test_has_no_retries() -> None:
    result = reconcile(_test_case())

    assert result.final_status == "passed"
    assert result.retry_count == 0
    assert result.retry_attempts == ()
    assert result.is_flaky is False


def test_base_flags_decide_status_without_retries() -> None:
    assert reconcile(_test_case(has_failure=True)).final_status == "failed"
    assert reconcile(_test_case(has_error=True)).final_status == "failed"
    assert reconcile(_test_case(skipped=True)).final_status == "skipped"
    assert reconcile(_test_case(has_failure=True, skipped=True)).final_status == "failed"


def test_flaky_attempts_are_numbered_from_one_and_pass() -> None:
    result = reconcile(
        _test_case(
            flaky_failures=(_record("Run 1"), _record("Run 2")),
            flaky_errors=(_record("Run 3"),),
        )
    )

    assert result.final_status == "passed"
    assert result.is_flaky is True
    assert result.retry_count == 3
    assert [attempt.attempt for attempt in result.retry_attempts] == [1, 2, 3]
    assert [attempt.message for attempt in result.retry_attempts] == [
        "Run 1 failed",
        "Run 2 failed",
        "Run 3 failed",
    ]
    first = result.retry_attempts[0]
    assert first.status == "failed"
    assert first.trace == "Run 1 trace"
    assert first.stdout == ["Run 1 output"]
    assert first.stderr == ["Run 1 error"]


def test_flaky_errors_alone_start_at_one() -> None:
    result = reconcile(_test_case(flaky_errors=(_record("Run 1"),)))

    assert [attempt.attempt for attempt in result.retry_attempts] == [1]
    assert result.final_status == "passed"


def test_rerun_attempts_start_at_two_and_fail() -> None:
    result = reconcile(
        _test_case(
            has_failure=True,
            rerun_failures=(_record("Run 2"),),
            rerun_errors=(_record("Run 3"),),
        )
    )

    assert result.final_status == "failed"
    assert result.is_flaky is False
    assert result.retry_count == 2
    assert [attempt.attempt for attempt in result.retry_attempts] == [2, 3]
    assert result.retry_attempts[1].message == "Run 3 failed"


def test_rerun_fails_even_without_base_failure_flags() -> None:
    result = reconcile(_test_case(rerun_errors=(_record("Run 2"),)))

    assert result.final_status == "failed"
    assert [attempt.attempt for attempt in result.retry_attempts] == [2]


def test_flaky_wins_over_rerun_and_numbering_continues() -> None:
    result = reconcile(
        _test_case(
            has_failure=True,
            flaky_failures=(_record("Run 1"),),
            rerun_failures=(_record("Run 2"), _record("Run 3")),
        )
    )

    assert result.final_status == "passed"
    assert result.is_flaky is True
    assert result.retry_count == 3
    assert [attempt.attempt for attempt in result.retry_attempts] == [1, 2, 3]


def test_attempt_text_is_sanitized() -> None:
    record = RetryRecord(message="\ufeffbad\x00msg", trace="   ", system_out=" \n ", system_err=None)
    result = reconcile(_test_case(flaky_failures=(record,)))

    attempt = result.retry_attempts[0]
    assert attempt.message == "bad msg"
    assert attempt.trace is None
    assert attempt.stdout is None
    assert attempt.stderr is None
