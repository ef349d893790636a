from .models import RawTestCase, RetryRecord
from .reader import JUnitParseError, discover_reports, parse_junit_file, read_junit_reports

__all__ = [
    "JUnitParseError",
    "RawTestCase",
    "RetryRecord",
    "discover_reports",
    "parse_junit_file",
    "read_junit_reports",
]
