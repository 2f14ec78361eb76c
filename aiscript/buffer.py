"""Immutable, line-addressable text snapshots.

The editor core never edits text. It reads a TextSnapshot by line or by offset
and hands back spans (and edits) that the caller applies to its own buffer.

Offsets are 0-based character offsets into the whole text. A line's `end` is the
offset of its line break (or of the document end for the last line), so the line
break itself belongs to no line's text.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from typing import NamedTuple, Union

LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


class Span(NamedTuple):
    """Half-open offset range [start, end)."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def __contains__(self, offset: object) -> bool:
        return isinstance(offset, int) and self.start <= offset < self.end


class Line(NamedTuple):
    number: int
    start: int
    end: int
    text: str

    @property
    def length(self) -> int:
        return self.end - self.start


class TextSnapshot:
    __slots__ = ("text", "_starts", "_ends", "line_break")

    def __init__(self, text: str):
        self.text = text
        self._starts: list[int] = [0]
        self._ends: list[int] = []
        self.line_break = "\n"
        first = True
        for m in LINE_BREAK_RE.finditer(text):
            if first:
                self.line_break = m.group(0)
                first = False
            self._ends.append(m.start())
            self._starts.append(m.end())
        self._ends.append(len(text))

    def __len__(self) -> int:
        return len(self.text)

    def __repr__(self):
        return f"TextSnapshot(lines={self.line_count}, length={len(self.text)})"

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def get_line(self, number: int) -> Line:
        if number < 0 or number >= len(self._starts):
            raise IndexError(f"line {number} out of range (0..{len(self._starts) - 1})")
        start, end = self._starts[number], self._ends[number]
        return Line(number, start, end, self.text[start:end])

    def line_number_of(self, offset: int) -> int:
        """Number of the line containing `offset`; line breaks belong to the line they end."""
        if offset < 0 or offset > len(self.text):
            raise IndexError(f"offset {offset} out of range (0..{len(self.text)})")
        return bisect_right(self._starts, offset) - 1

    def line_from_offset(self, offset: int) -> Line:
        return self.get_line(self.line_number_of(offset))

    def char_at(self, offset: int) -> str:
        return self.text[offset]

    def get_text(self, start: int, end: int) -> str:
        return self.text[start:end]

    def position_of(self, offset: int) -> tuple[int, int]:
        """(line, column), 0-based."""
        number = self.line_number_of(offset)
        return number, offset - self._starts[number]

    def offset_of(self, line: int, column: int) -> int:
        """Offset of (line, column), with the column clamped to the line's text."""
        if line >= len(self._starts):
            return len(self.text)
        ln = self.get_line(max(line, 0))
        return ln.start + min(max(column, 0), ln.length)

    def indentation_of(self, number: int) -> int:
        """Width of the leading whitespace of a line, one per character."""
        text = self.get_line(number).text
        return len(text) - len(text.lstrip())


BufferLike = Union[TextSnapshot, str]


def as_snapshot(buffer: BufferLike) -> TextSnapshot:
    if isinstance(buffer, TextSnapshot):
        return buffer
    return TextSnapshot(buffer)
