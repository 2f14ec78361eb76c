from __future__ import annotations

"""
A pygls-based Language Server for AI scripts.

Features:
- Text synchronization (full) and document store
- Completion: top-level commands, facts, actions, enumerated parameter values
- Document highlight: the brace matching the one at the cursor
- Formatting: whole document and ranges
- Semantic tokens: keywords, facts, actions, operators, identifiers, ...
- Hover: parameter lists of facts and actions

Note: handlers only translate between LSP positions and offsets; all of the
work happens in the aiscript core.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional

from pygls.server import LanguageServer
from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_HIGHLIGHT,
    TEXT_DOCUMENT_FORMATTING,
    TEXT_DOCUMENT_HOVER,
    TEXT_DOCUMENT_RANGE_FORMATTING,
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentFormattingParams,
    DocumentHighlight,
    DocumentHighlightKind,
    DocumentHighlightParams,
    DocumentRangeFormattingParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
    SemanticTokens,
    SemanticTokensLegend,
    SemanticTokensParams,
    TextDocumentSyncKind,
    TextEdit,
)

from aiscript import config
from aiscript.buffer import Span, TextSnapshot
from aiscript.reader.tokens import Token, TokenKind
from aiscript.reader.scanner import scan_tokens
from aiscript.definitions.symbol_table import SymbolTable
from aiscript.definitions.loader import default_symbol_table
from aiscript.editor.brace_matching import find_matching_brace
from aiscript.editor.classification import Classification, classify
from aiscript.editor.completion import (
    BOOLEAN_FACT_DESCRIPTIONS,
    TOP_LEVEL_DESCRIPTIONS,
    ItemKind,
    resolve_completion_context,
)
from aiscript.editor.formatting import compute_format_edits

log = logging.getLogger(__name__)

# Order matters: the index is the token type sent to the client
TOKEN_TYPES = ["comment", "keyword", "string", "number", "operator", "enumMember", "function", "method"]

SEMANTIC_TYPES: Dict[Classification, int] = {
    Classification.COMMENT: 0,
    Classification.KEYWORD: 1,
    Classification.STRING: 2,
    Classification.NUMBER: 3,
    Classification.OPERATOR: 4,
    Classification.IDENTIFIER: 5,
    Classification.FACT_NAME: 6,
    Classification.ACTION_NAME: 7,
}

ITEM_KINDS: Dict[ItemKind, CompletionItemKind] = {
    ItemKind.KEYWORD: CompletionItemKind.Keyword,
    ItemKind.BOOLEAN_FACT: CompletionItemKind.Operator,
    ItemKind.FACT: CompletionItemKind.Function,
    ItemKind.ACTION: CompletionItemKind.Method,
    ItemKind.PARAMETER_VALUE: CompletionItemKind.EnumMember,
}


@dataclass
class DocumentState:
    snapshot: TextSnapshot
    symbols: SymbolTable

    @classmethod
    def from_text(cls, text: str, symbols: Optional[SymbolTable] = None) -> DocumentState:
        return cls(TextSnapshot(text), symbols if symbols is not None else default_symbol_table())


class AiScriptLanguageServer(LanguageServer):
    CMD_NAME = "aiscript-ls"
    VERSION = "0.1.0"

    def __init__(self):
        super().__init__(self.CMD_NAME, self.VERSION, text_document_sync_kind=TextDocumentSyncKind.Full)
        self.documents: Dict[str, DocumentState] = {}


ls = AiScriptLanguageServer()


# --- Position helpers ---
def to_offset(state: DocumentState, pos: Position) -> int:
    return state.snapshot.offset_of(pos.line, pos.character)


def to_position(state: DocumentState, offset: int) -> Position:
    line, col = state.snapshot.position_of(offset)
    return Position(line=line, character=col)


def to_range(state: DocumentState, span: Span) -> Range:
    return Range(start=to_position(state, span.start), end=to_position(state, span.end))


# --- Feature helpers ---
def completion_list(state: DocumentState, pos: Position) -> CompletionList:
    result = resolve_completion_context(state.snapshot, to_offset(state, pos), symbols=state.symbols)
    items: List[CompletionItem] = []
    if result.completions is not None:
        rng = to_range(state, result.anchor)
        for item in result.completions.items:
            items.append(
                CompletionItem(
                    label=item.label,
                    kind=ITEM_KINDS[item.kind],
                    detail=item.description,
                    text_edit=TextEdit(range=rng, new_text=item.label),
                )
            )
    return CompletionList(is_incomplete=False, items=items)


def brace_highlights(state: DocumentState, pos: Position, viewport_lines: int) -> List[DocumentHighlight]:
    pair = find_matching_brace(state.snapshot, to_offset(state, pos), viewport_lines)
    if pair is None:
        return []
    return [DocumentHighlight(range=to_range(state, span), kind=DocumentHighlightKind.Text) for span in pair]


def format_text_edits(state: DocumentState, rng: Optional[Range] = None) -> List[TextEdit]:
    span = None
    if rng is not None:
        span = Span(to_offset(state, rng.start), to_offset(state, rng.end))
    edits = compute_format_edits(state.snapshot, span, symbols=state.symbols)
    return [TextEdit(range=to_range(state, e.span), new_text=e.replacement) for e in edits]


def semantic_token_data(state: DocumentState) -> List[int]:
    data: List[int] = []
    prev_line = prev_col = 0
    for cs in classify(state.snapshot, symbols=state.symbols):
        token_type = SEMANTIC_TYPES.get(cs.classification)
        if token_type is None:
            continue
        line, col = state.snapshot.position_of(cs.span.start)
        delta_col = col - prev_col if line == prev_line else col
        data.extend((line - prev_line, delta_col, cs.span.length, token_type, 0))
        prev_line, prev_col = line, col
    return data


def token_at(state: DocumentState, offset: int) -> Optional[Token]:
    found = None
    for token in scan_tokens(state.snapshot, offset, symbols=state.symbols):
        if token.start > offset:
            break
        if offset <= token.end:
            found = token
    return found


def hover_text(state: DocumentState, pos: Position) -> Optional[str]:
    token = token_at(state, to_offset(state, pos))
    if token is None:
        return None
    spec = state.symbols.command_spec(token)
    if spec is not None:
        kind = "fact" if token.kind is TokenKind.FACT_NAME else "action"
        return f"{token.text} ({kind}) {spec.description}"
    if token.kind is TokenKind.BOOLEAN_FACT_NAME:
        return BOOLEAN_FACT_DESCRIPTIONS.get(token.text)
    return TOP_LEVEL_DESCRIPTIONS.get(token.text)


# --- Text sync ---
@ls.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(params: DidOpenTextDocumentParams):
    uri = params.text_document.uri
    ls.documents[uri] = DocumentState.from_text(params.text_document.text or "")


@ls.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    if params.content_changes:
        text = params.content_changes[-1].text
    else:
        state = ls.documents.get(uri)
        text = state.snapshot.text if state else ""
    ls.documents[uri] = DocumentState.from_text(text)


@ls.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: DidCloseTextDocumentParams):
    ls.documents.pop(params.text_document.uri, None)


# --- Completion ---
@ls.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(trigger_characters=["(", " ", "-"]))
def on_completion(params: CompletionParams) -> CompletionList:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return CompletionList(is_incomplete=False, items=[])
    return completion_list(state, params.position)


# --- Brace matching ---
@ls.feature(TEXT_DOCUMENT_DOCUMENT_HIGHLIGHT)
def on_document_highlight(params: DocumentHighlightParams) -> Optional[List[DocumentHighlight]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    return brace_highlights(state, params.position, config.get_viewport_lines())


# --- Formatting ---
@ls.feature(TEXT_DOCUMENT_FORMATTING)
def on_formatting(params: DocumentFormattingParams) -> Optional[List[TextEdit]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    return format_text_edits(state)


@ls.feature(TEXT_DOCUMENT_RANGE_FORMATTING)
def on_range_formatting(params: DocumentRangeFormattingParams) -> Optional[List[TextEdit]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    return format_text_edits(state, params.range)


# --- Semantic tokens ---
@ls.feature(TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, SemanticTokensLegend(token_types=TOKEN_TYPES, token_modifiers=[]))
def on_semantic_tokens(params: SemanticTokensParams) -> SemanticTokens:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return SemanticTokens(data=[])
    return SemanticTokens(data=semantic_token_data(state))


# --- Hover ---
@ls.feature(TEXT_DOCUMENT_HOVER)
def on_hover(params: HoverParams) -> Optional[Hover]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    contents = hover_text(state, params.position)
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="[aiscript-ls] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    # fail at startup, not on the first request, if the definitions are broken
    table = default_symbol_table()
    log.info("Serving %d facts and %d actions over stdio", len(table.facts), len(table.actions))
    ls.start_io()


if __name__ == "__main__":
    main()
