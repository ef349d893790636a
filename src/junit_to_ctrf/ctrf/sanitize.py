"""Text normalization for every free-text field placed in a CTRF report.

The output is JSON-safe and loggable: no byte-order marks, no C0 control
characters other than tab/newline/carriage return, no DEL, no unpaired
surrogates, and NFC-normalized. ``sanitize_string`` is idempotent on its own
output.
"""

from __future__ import annotations

import re
import unicodedata

_BOM = "\ufeff"
# Tab (U+0009), LF (U+000A) and CR (U+000D) are kept.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_SURROGATE_PAIR = re.compile(r"[\ud800-\udbff][\udc00-\udfff]")
_SURROGATE = re.compile(r"[\ud800-\udfff]")
_REPLACEMENT_CHAR = "\ufffd"
# ECMAScript whitespace; str.strip() would also drop U+0085.
_WS = r"\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
_BLANK = re.compile(f"[{_WS}]*")
_EDGE_WS = re.compile(f"^[{_WS}]+|[{_WS}]+$")


def _join_pair(match: re.Match[str]) -> str:
    high, low = match.group()
    return chr(0x10000 + ((ord(high) - 0xD800) << 10) + (ord(low) - 0xDC00))


def _trim(text: str) -> str:
    return _EDGE_WS.sub("", text)


def sanitize_string(text: str | None) -> str | None:
    if text is None:
        return None

    cleaned = text.replace(_BOM, "")
    cleaned = _CONTROL_CHARS.sub(" ", cleaned)
    cleaned = _SURROGATE_PAIR.sub(_join_pair, cleaned)
    cleaned = _SURROGATE.sub(_REPLACEMENT_CHAR, cleaned)
    try:
        normalized = unicodedata.normalize("NFC", cleaned)
    except ValueError:
        normalized = cleaned

    if _BLANK.fullmatch(normalized):
        return None
    return normalized


def to_lines(text: str | None) -> list[str] | None:
    """Split captured output into sanitized, non-empty lines.

    Returns ``None`` rather than an empty list when nothing is left, so absent
    output and whitespace-only output look the same to callers.
    """
    if text is None or _BLANK.fullmatch(text):
        return None
    lines: list[str] = []
    for line in text.split("\n"):
        sanitized = sanitize_string(_trim(line))
        if sanitized:
            lines.append(sanitized)
    return lines or None
