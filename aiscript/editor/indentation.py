from __future__ import annotations

from typing import Optional

from aiscript import config
from aiscript.buffer import BufferLike, as_snapshot
from aiscript.reader.tokens import TokenKind
from aiscript.reader.scanner import scan_tokens
from aiscript.definitions.symbol_table import SymbolTable
from aiscript.definitions.loader import resolve_symbols


def desired_indentation(
    buffer: BufferLike,
    line_number: int,
    indent_size: Optional[int] = None,
    symbols: Optional[SymbolTable] = None,
) -> int:
    """Indentation for a freshly started line.

    One step deeper than the previous line, unless the code before the line ends
    with a closing brace (then the same depth).
    """
    snapshot = as_snapshot(buffer)
    if line_number <= 0 or line_number >= snapshot.line_count:
        return 0
    if indent_size is None:
        indent_size = config.get_indent_size()

    previous = snapshot.indentation_of(line_number - 1)
    start = snapshot.get_line(line_number).start
    last = next(scan_tokens(snapshot, start - 1, backward=True, symbols=resolve_symbols(symbols)), None)
    if last is None:
        return 0
    if last.kind is TokenKind.CLOSING_BRACE:
        return previous
    return previous + indent_size
