from .models import CtrfTest, Report, Results, RetryAttempt, Summary, Tool
from .report import build_report, build_summary, convert_test
from .retries import ReconciledResult, reconcile
from .sanitize import sanitize_string, to_lines

__all__ = [
    "CtrfTest",
    "ReconciledResult",
    "Report",
    "Results",
    "RetryAttempt",
    "Summary",
    "Tool",
    "build_report",
    "build_summary",
    "convert_test",
    "reconcile",
    "sanitize_string",
    "to_lines",
]
