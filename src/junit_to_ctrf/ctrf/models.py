from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TestStatus = Literal["passed", "failed", "skipped", "pending", "other"]


class CtrfModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )


class RetryAttempt(CtrfModel):
    attempt: int = Field(ge=1)
    status: Literal["failed"] = "failed"
    message: str | None = None
    trace: str | None = None
    stdout: list[str] | None = None
    stderr: list[str] | None = None


class CtrfTest(CtrfModel):
    name: str
    status: TestStatus
    duration: int = Field(ge=0)
    file_path: str | None = None
    line: int | None = None
    message: str | None = None
    trace: str | None = None
    suite: str | None = None
    retries: int | None = None
    retry_attempts: list[RetryAttempt] | None = None
    flaky: bool | None = None
    stdout: list[str] | None = None
    stderr: list[str] | None = None


class Summary(CtrfModel):
    tests: int
    passed: int
    failed: int
    skipped: int
    pending: int
    other: int
    start: int = 0
    stop: int = 0
    flaky: int | None = None


class Tool(CtrfModel):
    name: str


class Results(CtrfModel):
    tool: Tool
    summary: Summary
    tests: list[CtrfTest]
    environment: dict[str, str] | None = None


class Report(CtrfModel):
    report_format: Literal["CTRF"] = "CTRF"
    spec_version: str
    generated_by: str
    timestamp: str
    results: Results
