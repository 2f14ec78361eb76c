"""Whitespace normalisation.

The formatter only decides what goes into the gap between two consecutive
tokens; token text is never touched. Each gap gets one of four treatments:

    NEW_LINE   line break plus the current indentation
    SPACE      exactly one space
    NO_SPACE   nothing
    KEEP       leave as is (the gap before a comment)

The decision depends on the current token and the tokens before it. The result
is a list of disjoint edits in document order, so it can be applied as one batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional

from aiscript import config
from aiscript.buffer import BufferLike, Span, as_snapshot
from aiscript.reader.tokens import Token, TokenKind, TOP_LEVEL_KINDS, VALUE_KINDS
from aiscript.reader.scanner import scan_tokens
from aiscript.definitions.symbol_table import SymbolTable
from aiscript.definitions.loader import resolve_symbols

log = logging.getLogger(__name__)

# An opening brace after one of these starts a nested list
NESTING_KINDS = frozenset({
    TokenKind.OPENING_BRACE, TokenKind.DEFRULE, TokenKind.BOOLEAN_FACT_NAME, TokenKind.RULE_ARROW,
})

NAME_KINDS = frozenset({TokenKind.BOOLEAN_FACT_NAME, TokenKind.FACT_NAME, TokenKind.ACTION_NAME})


class Decision(Enum):
    NEW_LINE = auto()
    SPACE = auto()
    NO_SPACE = auto()
    KEEP = auto()


@dataclass(frozen=True)
class FormatEdit:
    span: Span
    replacement: str


def decide(token: Token, last: Token, last_code: Token) -> tuple[Decision, Optional[int]]:
    """Gap treatment before `token` and the indentation change in steps.

    `last` is the previous token, `last_code` the previous non-comment token.
    A step of None means "back to column 0".
    """
    kind = token.kind

    if kind is TokenKind.COMMENT:
        return Decision.KEEP, 0

    if kind is TokenKind.OPENING_BRACE:
        return Decision.NEW_LINE, (1 if last_code.kind in NESTING_KINDS else 0)

    if kind is TokenKind.CLOSING_BRACE:
        if last_code.kind is TokenKind.CLOSING_BRACE:
            return Decision.NEW_LINE, -1
        if last.kind is not TokenKind.COMMENT:
            return Decision.NO_SPACE, 0
        return Decision.NEW_LINE, 0

    if kind in TOP_LEVEL_KINDS:
        # top-level statements start at column 0, even after unbalanced braces
        if last_code.kind is TokenKind.OPENING_BRACE:
            return Decision.NO_SPACE, None
        return Decision.NEW_LINE, None

    if kind in NAME_KINDS:
        if last_code.kind is TokenKind.OPENING_BRACE:
            return Decision.NO_SPACE, 0
        if last_code.kind is TokenKind.FACT_NAME:
            # juxtaposed facts, as UserPatch allows
            return Decision.SPACE, 0
        return Decision.NEW_LINE, 0

    if kind is TokenKind.RULE_ARROW:
        return Decision.NEW_LINE, None

    if kind in VALUE_KINDS:
        if last.kind is TokenKind.COMMENT:
            return Decision.NEW_LINE, 0
        if last.kind is TokenKind.OPENING_BRACE:
            return Decision.NO_SPACE, 0
        return Decision.SPACE, 0

    return Decision.KEEP, 0


def _runs_to_line_end(token: Token) -> bool:
    if token.kind is TokenKind.COMMENT:
        return True
    return token.kind is TokenKind.STRING and (token.length == 1 or not token.text.endswith('"'))


def format_tokens(
    tokens: Iterable[Token],
    text: str,
    indent: int,
    indent_size: int,
    newline: str,
) -> list[FormatEdit]:
    """Edits for the gaps between `tokens`. The gap before the first one is left alone."""
    edits: list[FormatEdit] = []
    it = iter(tokens)
    last = next(it, None)
    if last is None:
        return edits
    last_code = last

    for token in it:
        decision, step = decide(token, last, last_code)
        if _runs_to_line_end(last) and decision in (Decision.SPACE, Decision.NO_SPACE):
            # nothing may join a comment or an unterminated string
            decision = Decision.NEW_LINE

        indent = 0 if step is None else max(0, indent + step * indent_size)
        if decision is Decision.NEW_LINE:
            replacement = newline + " " * indent
        elif decision is Decision.SPACE:
            replacement = " "
        elif decision is Decision.NO_SPACE:
            replacement = ""
        else:
            replacement = None

        gap = Span(last.end, token.start)
        if replacement is not None and text[gap.start:gap.end] != replacement:
            edits.append(FormatEdit(gap, replacement))

        if token.kind is not TokenKind.COMMENT:
            last_code = token
        last = token

    return edits


def compute_format_edits(
    buffer: BufferLike,
    span: Optional[Span] = None,
    indent_size: Optional[int] = None,
    newline: Optional[str] = None,
    symbols: Optional[SymbolTable] = None,
) -> list[FormatEdit]:
    """Edits that normalise whitespace over the lines touched by `span`.

    `span=None` formats the whole document. Indentation starts from the
    indentation of the line before the span.
    """
    symbols = resolve_symbols(symbols)
    snapshot = as_snapshot(buffer)
    if indent_size is None:
        indent_size = config.get_indent_size()
    if newline is None:
        newline = snapshot.line_break
    if span is None:
        span = Span(0, len(snapshot))

    first_line = snapshot.line_from_offset(max(0, min(span.start, len(snapshot))))
    last_line = snapshot.line_from_offset(max(0, min(span.end, len(snapshot))))
    indent = snapshot.indentation_of(first_line.number - 1) if first_line.number > 0 else 0

    tokens = scan_tokens(snapshot, first_line.start, symbols=symbols)
    edits = format_tokens(_until(tokens, last_line.end), snapshot.text, indent, indent_size, newline)
    log.debug("Formatting lines %d-%d: %d edits", first_line.number, last_line.number, len(edits))
    return edits


def _until(tokens: Iterable[Token], end: int):
    for token in tokens:
        if token.start >= end:
            return
        yield token


def apply_edits(text: str, edits: Iterable[FormatEdit]) -> str:
    """Apply a batch of disjoint edits computed against `text`."""
    parts = []
    pos = 0
    for edit in sorted(edits, key=lambda e: e.span.start):
        parts.append(text[pos:edit.span.start])
        parts.append(edit.replacement)
        pos = edit.span.end
    parts.append(text[pos:])
    return "".join(parts)
