from .writer import report_payload, serialize_payload, serialize_report, write_report

__all__ = [
    "report_payload",
    "serialize_payload",
    "serialize_report",
    "write_report",
]
