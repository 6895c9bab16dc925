"""Line-oriented ``key = value`` parser."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator

from propconfig.errors import MalformedEntryError

logger = logging.getLogger(__name__)

__all__ = ["parse_entries"]

_COMMENT_CHARS = ("#", "!")
_SEPARATORS = ("=", ":")
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_HEX4 = re.compile(r"[0-9A-Fa-f]{4}")


def parse_entries(stream: Iterable[str] | str, source_name: str = "<string>") -> list[tuple[str, str]]:
    """Parse a character stream into ordered ``(key, raw_value)`` pairs.

    Blank lines and lines starting with ``#`` or ``!`` are ignored. The first
    unescaped ``=`` or ``:`` separates key from value, and whitespace around
    both is trimmed. A trailing backslash continues the entry on the next line.

    Duplicate keys: the last value wins, kept at the position of the first
    occurrence.

    Raises:
        MalformedEntryError: If a line has no separator, an empty key, or an invalid
            unicode escape (a surrogate pair must be complete).
    """
    if isinstance(stream, str):
        stream = stream.splitlines()

    result: dict[str, str] = {}
    for line_number, line in _logical_lines(stream):
        parts = _split(line)
        if parts is None:
            raise MalformedEntryError(source=source_name, line_number=line_number, line=line)

        key_raw, value_raw = parts
        try:
            key = _unescape(_strip(key_raw))
            value = _unescape(_strip(value_raw))
        except ValueError as e:
            raise MalformedEntryError(source=source_name, line_number=line_number, line=line, cause=e) from e

        if not key:
            raise MalformedEntryError(source=source_name, line_number=line_number, line=line)

        if key in result:
            logger.debug("Duplicate key '%s' in %s at line %d, last value wins", key, source_name, line_number)
        result[key] = value

    return list(result.items())


def _logical_lines(stream: Iterable[str]) -> Iterator[tuple[int, str]]:
    """Yield ``(first_line_number, text)`` with comments dropped and continuations joined."""
    buffer: str | None = None
    start = 0
    for number, raw in enumerate(stream, start=1):
        line = raw.rstrip("\r\n")
        if buffer is None:
            stripped = line.lstrip()
            if not stripped or stripped[0] in _COMMENT_CHARS:
                continue
            start = number
            buffer = stripped
        else:
            buffer += line.lstrip()

        if _trailing_backslashes(buffer) % 2 == 1:
            buffer = buffer[:-1]
            continue
        yield start, buffer
        buffer = None

    if buffer is not None:
        yield start, buffer


def _split(line: str) -> tuple[str, str] | None:
    i = 0
    while i < len(line):
        c = line[i]
        if c == "\\":
            i += 2
            continue
        if c in _SEPARATORS:
            return line[:i], line[i + 1 :]
        i += 1
    return None


def _strip(text: str) -> str:
    """Trim whitespace, keeping a trailing space that is escaped."""
    stripped = text.strip()
    if _trailing_backslashes(stripped) % 2 == 1 and len(stripped) < len(text.lstrip()):
        stripped += " "
    return stripped


def _trailing_backslashes(text: str) -> int:
    return len(text) - len(text.rstrip("\\"))


def _unescape(text: str) -> str:
    if "\\" not in text:
        return text

    out: list[str] = []
    i = 0
    while i < len(text):
        c = text[i]
        if c != "\\":
            out.append(c)
            i += 1
            continue
        if i + 1 >= len(text):
            break
        nxt = text[i + 1]
        if nxt == "u":
            code = _hex4(text, i + 2)
            i += 6
            if 0xD800 <= code <= 0xDBFF:
                low = _hex4(text, i + 2) if text.startswith("\\u", i) else None
                if low is None or not 0xDC00 <= low <= 0xDFFF:
                    raise ValueError(f"Unpaired surrogate: \\u{code:04X}")
                code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                i += 6
            elif 0xDC00 <= code <= 0xDFFF:
                raise ValueError(f"Unpaired surrogate: \\u{code:04X}")
            out.append(chr(code))
            continue
        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _hex4(text: str, start: int) -> int:
    digits = text[start : start + 4]
    if not _HEX4.fullmatch(digits):
        raise ValueError(f"Invalid unicode escape: \\u{digits}")
    return int(digits, 16)
