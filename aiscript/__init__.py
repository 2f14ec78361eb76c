"""Editor tooling for AI scripts (defrule / defconst / load rule files).

The core is a bidirectional line scanner plus four consumers:

- brace matching on the raw text,
- completion context inference on the backward token stream,
- whitespace formatting on the forward token stream,
- classification and smart indentation for highlighting and typing.

Every operation is a plain function of a text snapshot (or string) and an
offset or span. Nothing is kept between calls except the symbol table, which is
loaded once per process.
"""

from aiscript.buffer import TextSnapshot, Span
from aiscript.reader.tokens import Token, TokenKind
from aiscript.reader.scanner import scan_tokens
from aiscript.definitions.symbol_table import SymbolTable, ParamSpec
from aiscript.definitions.loader import load_definitions, load_definitions_file, default_symbol_table
from aiscript.editor.brace_matching import find_matching_brace
from aiscript.editor.completion import resolve_completion_context, ContextKind, CompletionResult
from aiscript.editor.formatting import compute_format_edits, apply_edits, FormatEdit
from aiscript.editor.classification import classify, Classification
from aiscript.editor.indentation import desired_indentation

__all__ = [
    "TextSnapshot",
    "Span",
    "Token",
    "TokenKind",
    "scan_tokens",
    "SymbolTable",
    "ParamSpec",
    "load_definitions",
    "load_definitions_file",
    "default_symbol_table",
    "find_matching_brace",
    "resolve_completion_context",
    "ContextKind",
    "CompletionResult",
    "compute_format_edits",
    "apply_edits",
    "FormatEdit",
    "classify",
    "Classification",
    "desired_indentation",
]
