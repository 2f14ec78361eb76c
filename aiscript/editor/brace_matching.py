"""Matching brace lookup on raw characters.

Works on the text directly instead of tokens so it can stop the moment the
match is found. Strings are jumped over as a whole and comments are skipped, so
braces inside either never change the depth. The walk stays within
`viewport_lines` lines of the cursor line; no match there is a normal outcome.
"""

from __future__ import annotations

from typing import Optional

from aiscript.buffer import BufferLike, Span, TextSnapshot, as_snapshot


def _comment_start(text: str) -> int:
    """Index of the first ';' outside a string, or -1."""
    in_string = False
    for i, c in enumerate(text):
        if c == '"':
            in_string = not in_string
        elif c == ";" and not in_string:
            return i
    return -1


def _search_forward(snapshot: TextSnapshot, brace: int, viewport_lines: int) -> Optional[int]:
    line = snapshot.line_from_offset(brace)
    last = min(snapshot.line_count - 1, line.number + viewport_lines)
    i = brace - line.start + 1
    depth = 0
    while True:
        text = line.text
        while i < len(text):
            c = text[i]
            if c == "(":
                depth += 1
            elif c == ")":
                if depth == 0:
                    return line.start + i
                depth -= 1
            elif c == '"':
                close = text.find('"', i + 1)
                i = len(text) if close < 0 else close
            elif c == ";":
                break
            i += 1
        if line.number >= last:
            return None
        line = snapshot.get_line(line.number + 1)
        i = 0


def _search_backward(snapshot: TextSnapshot, brace: int, viewport_lines: int) -> Optional[int]:
    line = snapshot.line_from_offset(brace)
    first = max(0, line.number - viewport_lines)
    i = brace - line.start - 1
    depth = 0
    while True:
        text = line.text
        comment = _comment_start(text)
        if comment >= 0:
            i = min(i, comment - 1)
        while i >= 0:
            c = text[i]
            if c == ")":
                depth += 1
            elif c == "(":
                if depth == 0:
                    return line.start + i
                depth -= 1
            elif c == '"':
                # jump to the opening quote; none means the rest of the line is string
                i = text.rfind('"', 0, i)
            i -= 1
        if line.number <= first:
            return None
        line = snapshot.get_line(line.number - 1)
        i = len(line.text) - 1


def find_matching_brace(
    buffer: BufferLike,
    cursor: int,
    viewport_lines: int,
) -> Optional[tuple[Span, Span]]:
    """Spans of the brace next to `cursor` and of its partner, or None.

    A '(' at the cursor is matched forward; otherwise a ')' just before the
    cursor is matched backward. The first span is always the brace at the cursor.
    """
    snapshot = as_snapshot(buffer)
    if cursor < 0 or cursor > len(snapshot):
        return None
    text = snapshot.text

    if cursor < len(text) and text[cursor] == "(":
        found = _search_forward(snapshot, cursor, viewport_lines)
        if found is None:
            return None
        return Span(cursor, cursor + 1), Span(found, found + 1)

    if cursor > 0 and text[cursor - 1] == ")":
        found = _search_backward(snapshot, cursor - 1, viewport_lines)
        if found is None:
            return None
        return Span(cursor - 1, cursor), Span(found, found + 1)

    return None
