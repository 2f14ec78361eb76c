from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from aiscript.buffer import BufferLike, Span, as_snapshot
from aiscript.reader.tokens import Token, TokenKind
from aiscript.reader.scanner import scan_tokens
from aiscript.definitions.symbol_table import SymbolTable
from aiscript.definitions.loader import resolve_symbols


class Classification(Enum):
    COMMENT = "comment"
    DEFAULT = "default"
    KEYWORD = "keyword"
    STRING = "string"
    NUMBER = "number"
    OPERATOR = "operator"
    DELIMITER = "delimiter"
    IDENTIFIER = "identifier"
    FACT_NAME = "fact-name"
    ACTION_NAME = "action-name"


@dataclass(frozen=True)
class ClassifiedSpan:
    span: Span
    classification: Classification


_BY_KIND = {
    TokenKind.COMMENT: Classification.COMMENT,
    TokenKind.DEFRULE: Classification.KEYWORD,
    TokenKind.BOOLEAN_FACT_NAME: Classification.KEYWORD,
    TokenKind.RULE_ARROW: Classification.KEYWORD,
    TokenKind.DEFCONST: Classification.KEYWORD,
    TokenKind.LOAD: Classification.KEYWORD,
    TokenKind.LOAD_RANDOM: Classification.KEYWORD,
    TokenKind.OPENING_BRACE: Classification.DELIMITER,
    TokenKind.CLOSING_BRACE: Classification.DELIMITER,
    TokenKind.STRING: Classification.STRING,
    TokenKind.NUMBER: Classification.NUMBER,
    TokenKind.FACT_NAME: Classification.FACT_NAME,
    TokenKind.ACTION_NAME: Classification.ACTION_NAME,
}


def classify_token(token: Token, symbols: SymbolTable) -> Classification:
    if token.kind is TokenKind.WORD:
        if token.text in symbols.operators:
            return Classification.OPERATOR
        if token.text in symbols.identifiers:
            return Classification.IDENTIFIER
        return Classification.DEFAULT
    return _BY_KIND.get(token.kind, Classification.DEFAULT)


def classify(
    buffer: BufferLike,
    span: Optional[Span] = None,
    symbols: Optional[SymbolTable] = None,
) -> list[ClassifiedSpan]:
    """Labelled token spans for highlighting `span` (default: the whole document).

    Scanning starts at the beginning of the first line so a span starting in the
    middle of a word still classifies that word as a whole.
    """
    symbols = resolve_symbols(symbols)
    snapshot = as_snapshot(buffer)
    if span is None:
        span = Span(0, len(snapshot))
    result: list[ClassifiedSpan] = []
    line = snapshot.line_from_offset(max(0, min(span.start, len(snapshot))))
    for token in scan_tokens(snapshot, line.start, symbols=symbols):
        if token.start >= span.end:
            break
        result.append(ClassifiedSpan(Span(token.start, token.end), classify_token(token, symbols)))
    return result
