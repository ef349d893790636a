from __future__ import annotations

import io
import json
from datetime import datetime, timezone
from pathlib import Path

import pytest
from rich.console import Console

from junit_to_ctrf.artifacts.writer import serialize_payload, serialize_report, write_report
from junit_to_ctrf.ctrf.models import Report
from junit_to_ctrf.ctrf.report import build_report
from junit_to_ctrf.junit.models import RawTestCase, RetryRecord


def _report() -> Report:
    return build_report(
        [
            RawTestCase(suite="Suite", classname="Class", name="ok", time="0.2"),
            RawTestCase(
                suite="Suite",
                classname="Class",
                name="flaky",
                time="1",
                flaky_failures=(RetryRecord(message="first", system_out="out 1\nout 2"),),
            ),
        ],
        env_props={"os": "linux"},
        generated_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )


def _payload() -> dict:
    return {
        "reportFormat": "CTRF",
        "results": {
            "tool": {"name": "junit-to-ctrf"},
            "summary": {"tests": 2, "passed": 2},
            "tests": [{"name": "fine", "duration": 1}, {"name": "broken", "duration": float("nan")}],
            "environment": {"os": "linux"},
        },
    }


def test_write_report_creates_parent_dirs(tmp_path: Path) -> None:
    output = tmp_path / "nested" / "dir" / "ctrf-report.json"

    written = write_report(output, _report())

    assert written == output.resolve()
    text = written.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    data = json.loads(text)
    assert data["reportFormat"] == "CTRF"
    assert data["specVersion"] == "0.0.0"
    assert data["generatedBy"] == "junit-to-ctrf"
    assert data["timestamp"] == "2025-01-01T00:00:00.000Z"
    assert data["results"]["environment"] == {"os": "linux"}
    assert data["results"]["summary"]["flaky"] == 1
    flaky = data["results"]["tests"][1]
    assert flaky["retryAttempts"] == [
        {"attempt": 1, "status": "failed", "message": "first", "stdout": ["out 1", "out 2"]}
    ]


def test_serialize_report_is_indented() -> None:
    text = serialize_report(_report())
    assert text.startswith('{\n  "reportFormat": "CTRF"')


def test_serialize_failure_reports_offending_test() -> None:
    buffer = io.StringIO()
    console = Console(file=buffer, width=200)

    with pytest.raises(ValueError):
        serialize_payload(_payload(), console=console)

    output = buffer.getvalue()
    assert "Failed to serialize CTRF report to JSON" in output
    assert "Summary serialization: OK" in output
    assert "Tool serialization: OK" in output
    assert "Environment serialization: OK" in output
    assert "Test at index 1 contains invalid data: broken" in output
    assert "index 0" not in output


def test_serialize_failure_reports_unencodable_environment() -> None:
    payload = _payload()
    payload["results"]["tests"] = []
    payload["results"]["environment"] = {"os": "bad\ud800"}
    buffer = io.StringIO()
    console = Console(file=buffer, width=200)

    with pytest.raises(UnicodeEncodeError):
        serialize_payload(payload, console=console)

    assert "Environment contains invalid data" in buffer.getvalue()
