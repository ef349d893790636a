from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from junit_to_ctrf.ctrf.models import Report
from junit_to_ctrf.util.console import err_console

_SECTIONS = ("summary", "tool", "environment")


def _dumps(payload: Any) -> str:
    text = json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False)
    # Lone surrogates pass json.dumps but cannot be written as UTF-8.
    text.encode("utf-8")
    return text


def _is_serializable(value: Any) -> bool:
    try:
        _dumps(value)
    except (TypeError, ValueError):
        return False
    return True


def _diagnose(payload: dict[str, Any], exc: Exception, console: Console) -> None:
    console.print(f"[red]Failed to serialize CTRF report to JSON:[/red] {escape(str(exc))}")
    results = payload.get("results")
    if not isinstance(results, dict):
        console.print("[red]Results block is missing or invalid[/red]")
        return

    for section in _SECTIONS:
        label = section.capitalize()
        if _is_serializable(results.get(section)):
            console.print(f"{label} serialization: OK")
        else:
            console.print(f"[red]{label} contains invalid data[/red]")

    tests = results.get("tests")
    if not isinstance(tests, list):
        return
    for index, test in enumerate(tests):
        if _is_serializable(test):
            continue
        name = test.get("name") if isinstance(test, dict) else None
        console.print(
            f"[red]Test at index {index} contains invalid data:[/red] {escape(str(name))}"
        )


def report_payload(report: Report) -> dict[str, Any]:
    return report.model_dump(by_alias=True, exclude_none=True)


def serialize_payload(payload: dict[str, Any], *, console: Console | None = None) -> str:
    """Serialize a report payload to indented JSON.

    When serialization fails, each section and each test is checked on its
    own and the offending parts are reported before the error propagates.
    """
    try:
        return _dumps(payload)
    except (TypeError, ValueError) as exc:
        _diagnose(payload, exc, console or err_console)
        raise


def serialize_report(report: Report, *, console: Console | None = None) -> str:
    return serialize_payload(report_payload(report), console=console)


def write_report(path: Path | str, report: Report, *, console: Console | None = None) -> Path:
    output_path = Path(path).resolve()
    text = serialize_report(report, console=console)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text + "\n", encoding="utf-8")
    return output_path
