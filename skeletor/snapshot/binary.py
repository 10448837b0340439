"""Binary classifier — decide whether captured bytes can be stored as text."""

from __future__ import annotations

import codecs

DEFAULT_SAMPLE_SIZE = 8192

# Control characters that legitimately appear in text files
_TEXT_CONTROLS = frozenset("\t\n\r\f\b\x1b")
_CONTROL_RATIO_LIMIT = 0.30


def is_binary(data: bytes, sample_size: int = DEFAULT_SAMPLE_SIZE) -> bool:
    """Return ``True`` if ``data`` should be treated as binary.

    Only the first ``sample_size`` bytes are inspected. Empty input is text. A
    NUL byte or an invalid UTF-8 sequence marks the data as binary, except for
    a multi-byte character cut in half by the sample boundary. Otherwise the
    data is binary when more than 30% of the decoded characters are control
    characters other than common whitespace and escape.
    """
    if not data:
        return False
    sample = data[:sample_size]
    if b"\x00" in sample:
        return True

    truncated = len(data) > len(sample)
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        text = decoder.decode(sample, final=not truncated)
    except UnicodeDecodeError:
        return True
    if not text:
        return False

    controls = sum(1 for char in text if _is_control(char) and char not in _TEXT_CONTROLS)
    return controls / len(text) > _CONTROL_RATIO_LIMIT


def _is_control(char: str) -> bool:
    code = ord(char)
    return code < 0x20 or 0x7F <= code < 0xA0


def decode_text(data: bytes) -> str:
    """Decode captured text content; a leading byte order mark is kept as content."""
    return data.decode("utf-8")
