"""
  AI script scanner

- Line based: every line is scanned left to right in one pass, whatever the
  direction, so forward and backward scans agree on every token.
- Lazy: lines are scanned only when the consumer pulls their tokens.
- Tolerant: never raises on malformed text. Unterminated strings run to the line
  end, a stray '=' or '-' still becomes a token.

Token rules, per character:

    (  )          braces
    "             string up to the next '"' on the line (or the line end)
    ;             comment up to the line end
    =             '=>' rule arrow, '==' word, lone '=' word
    - or digit    number: the leading char plus a run of digits ('-' alone included)
    other         word: run of letters, digits, '-' and '='; then reclassified by
                  the symbol table (keyword, boolean fact, fact, action or word)
"""

from __future__ import annotations

from typing import Iterator, Optional

from aiscript.buffer import BufferLike, as_snapshot
from aiscript.reader.tokens import Token, TokenKind
from aiscript.definitions.symbol_table import SymbolTable
from aiscript.definitions.loader import resolve_symbols


def _is_word_char(c: str) -> bool:
    return c.isalpha() or c.isdecimal() or c == "-" or c == "="


def scan_line(text: str, line_start: int, symbols: SymbolTable) -> list[Token]:
    """Tokens of one line in document order. `line_start` is the line's offset."""
    tokens: list[Token] = []
    n = len(text)
    pos = 0

    def add(kind: TokenKind, start: int, end: int) -> None:
        tokens.append(Token(kind, text[start:end], line_start + start, end - start))

    while pos < n:
        c = text[pos]

        if c == "(":
            add(TokenKind.OPENING_BRACE, pos, pos + 1)
        elif c == ")":
            add(TokenKind.CLOSING_BRACE, pos, pos + 1)

        elif c == '"':
            close = text.find('"', pos + 1)
            if close < 0:
                # unterminated, the rest of the line is the string
                add(TokenKind.STRING, pos, n)
                break
            add(TokenKind.STRING, pos, close + 1)
            pos = close

        elif c == ";":
            add(TokenKind.COMMENT, pos, n)
            break

        elif c == "=":
            nxt = text[pos + 1] if pos + 1 < n else ""
            if nxt == ">":
                add(TokenKind.RULE_ARROW, pos, pos + 2)
                pos += 1
            elif nxt == "=":
                add(TokenKind.WORD, pos, pos + 2)
                pos += 1
            else:
                add(TokenKind.WORD, pos, pos + 1)

        elif c == "-" or c.isdecimal():
            end = pos + 1
            while end < n and text[end].isdecimal():
                end += 1
            add(TokenKind.NUMBER, pos, end)
            pos = end - 1

        elif not c.isspace():
            end = pos + 1
            while end < n and _is_word_char(text[end]):
                end += 1
            word = text[pos:end]
            tokens.append(Token(symbols.classify_word(word), word, line_start + pos, end - pos))
            pos = end - 1

        pos += 1

    return tokens


def scan_tokens(
    buffer: BufferLike,
    offset: int,
    backward: bool = False,
    symbols: Optional[SymbolTable] = None,
) -> Iterator[Token]:
    """Token generator starting at the line containing `offset`.

    The whole starting line is always produced, then the following (or, when
    `backward`, the preceding) lines up to the document boundary. Backward scans
    yield each line's tokens in reverse order.
    """
    symbols = resolve_symbols(symbols)
    snapshot = as_snapshot(buffer)
    number = snapshot.line_number_of(offset)
    last = 0 if backward else snapshot.line_count - 1
    step = -1 if backward else 1

    while True:
        line = snapshot.get_line(number)
        tokens = scan_line(line.text, line.start, symbols)
        if backward:
            tokens.reverse()
        yield from tokens
        if number == last:
            return
        number += step
