"""Context-sensitive completion.

The context at the cursor is inferred from the tokens before it, read backward:

    (defrule (|              -> facts
    (defrule (foo) => (|     -> actions
    (|                       -> top-level commands
    (train |                 -> values of train's first parameter

Only the shallow structure is looked at. Anything that does not fit (a closing
brace where a call was expected, a parameter of the wrong type) ends in the
ERROR context, which offers nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from itertools import chain
from typing import NamedTuple, Optional

from aiscript.buffer import BufferLike, Span, as_snapshot
from aiscript.reader.tokens import Token, TokenKind, VALUE_KINDS
from aiscript.reader.scanner import scan_tokens
from aiscript.definitions.symbol_table import SymbolTable, ParamSpec
from aiscript.definitions.loader import resolve_symbols

log = logging.getLogger(__name__)


class ContextKind(Enum):
    UNKNOWN = auto()
    ERROR = auto()
    NOT_SUPPORTED = auto()
    TOP_LEVEL = auto()
    RULE_FACTS = auto()
    RULE_ACTIONS = auto()
    PARAMETERS = auto()


class ItemKind(Enum):
    KEYWORD = auto()
    BOOLEAN_FACT = auto()
    FACT = auto()
    ACTION = auto()
    PARAMETER_VALUE = auto()


@dataclass(frozen=True)
class CompletionItem:
    label: str
    description: str
    kind: ItemKind


@dataclass(frozen=True)
class CompletionList:
    name: str
    display_name: str
    items: tuple[CompletionItem, ...]

    @property
    def labels(self) -> list[str]:
        return [item.label for item in self.items]


@dataclass(frozen=True)
class CompletionContext:
    kind: ContextKind
    command: Optional[str] = None  # fact/action whose parameters are being typed
    spec: Optional[ParamSpec] = None
    parameter_index: Optional[int] = None


class CompletionResult(NamedTuple):
    context: CompletionContext
    completions: Optional[CompletionList]
    anchor: Span


TOP_LEVEL_DESCRIPTIONS = {
    "defconst": "Constant",
    "defrule": "Rule",
    "load": "Load file",
    "load-random": "Load file with chance",
}

BOOLEAN_FACT_DESCRIPTIONS = {
    "or": "Boolean OR operation",
    "and": "Boolean AND operation",
    "xor": "Boolean XOR operation",
    "nor": "Boolean NOR operation",
    "nand": "Boolean NAND operation",
    "xnor": "Boolean XNOR operation",
    "not": "Boolean NOT operation",
}


def command_items(symbols: SymbolTable) -> CompletionList:
    items = [CompletionItem(k, TOP_LEVEL_DESCRIPTIONS.get(k, k), ItemKind.KEYWORD) for k in symbols.keywords]
    return CompletionList("Commands", "Commands", tuple(sorted(items, key=lambda i: i.label)))


def fact_items(symbols: SymbolTable) -> CompletionList:
    items = [CompletionItem(name, spec.description, ItemKind.FACT) for name, spec in symbols.facts.items()]
    items += [CompletionItem(b, BOOLEAN_FACT_DESCRIPTIONS.get(b, b), ItemKind.BOOLEAN_FACT)
              for b in symbols.boolean_facts]
    return CompletionList("Facts", "Facts", tuple(sorted(items, key=lambda i: i.label)))


def action_items(symbols: SymbolTable) -> CompletionList:
    items = [CompletionItem(name, spec.description, ItemKind.ACTION) for name, spec in symbols.actions.items()]
    return CompletionList("Actions", "Actions", tuple(sorted(items, key=lambda i: i.label)))


def parameter_items(values: tuple[str, ...]) -> CompletionList:
    items = tuple(CompletionItem(v, v, ItemKind.PARAMETER_VALUE) for v in values)
    return CompletionList("Parameter", "Parameter values", items)


def _infer_context(tokens, symbols: SymbolTable) -> tuple[ContextKind, Optional[Token], list[Token]]:
    """Walk backward until the context is known.

    Returns the context, the fact/action token for PARAMETERS, and the value
    tokens typed after it (most recent first).
    """
    context = ContextKind.UNKNOWN
    command: Optional[Token] = None
    typed: list[Token] = []
    seen_open = False
    closing_braces = 0

    for token in tokens:
        kind = token.kind
        if kind is TokenKind.OPENING_BRACE:
            if not seen_open:
                seen_open = True
            else:
                closing_braces -= 1
        elif kind is TokenKind.CLOSING_BRACE:
            if seen_open:
                closing_braces += 1
            else:
                context = ContextKind.ERROR
        elif kind in (TokenKind.DEFCONST, TokenKind.LOAD, TokenKind.LOAD_RANDOM):
            # completion inside these is not offered
            context = ContextKind.TOP_LEVEL if seen_open else ContextKind.NOT_SUPPORTED
        elif kind in (TokenKind.DEFRULE, TokenKind.BOOLEAN_FACT_NAME):
            context = ContextKind.RULE_FACTS if seen_open else ContextKind.ERROR
        elif kind is TokenKind.RULE_ARROW:
            if seen_open and closing_braces == 0:
                context = ContextKind.RULE_ACTIONS
            elif seen_open and closing_braces == 1:
                context = ContextKind.TOP_LEVEL
            else:
                context = ContextKind.ERROR
        elif kind in (TokenKind.FACT_NAME, TokenKind.ACTION_NAME):
            if not seen_open:
                command = token
                context = ContextKind.PARAMETERS
        elif kind in VALUE_KINDS:
            if not seen_open:
                typed.append(token)

        if context is not ContextKind.UNKNOWN:
            break

    # ran into the document start
    if context is ContextKind.UNKNOWN and seen_open:
        context = ContextKind.TOP_LEVEL
    return context, command, typed


def _parameter_completion(
    command: Token,
    typed: list[Token],
    symbols: SymbolTable,
    anchor: Span,
) -> CompletionResult:
    spec = symbols.command_spec(command)
    if spec is None:
        return CompletionResult(CompletionContext(ContextKind.ERROR), None, anchor)
    typed = list(reversed(typed))
    context = CompletionContext(ContextKind.PARAMETERS, command.text, spec, len(typed))
    if len(typed) > spec.arity:
        return CompletionResult(context, None, anchor)

    for index, parameter_type in enumerate(spec.parameter_types):
        if index == len(typed):
            values = symbols.allowed_values(parameter_type)
            completions = parameter_items(values) if values is not None else None
            return CompletionResult(context, completions, anchor)
        if not symbols.accepts(parameter_type, typed[index]):
            log.debug("Argument %r does not fit parameter %d (%s) of %s",
                      typed[index].text, index, parameter_type, command.text)
            return CompletionResult(CompletionContext(ContextKind.ERROR), None, anchor)
    # every parameter is already given
    return CompletionResult(context, None, anchor)


def resolve_completion_context(
    buffer: BufferLike,
    cursor: int,
    symbols: Optional[SymbolTable] = None,
) -> CompletionResult:
    """Context, completion list and anchor span for a completion request at `cursor`.

    The anchor runs from the start of the word being typed to the cursor; it is
    empty when the cursor does not touch a word. Only TOP_LEVEL, RULE_FACTS,
    RULE_ACTIONS and (enumerated) PARAMETERS contexts carry a list.
    """
    symbols = resolve_symbols(symbols)
    snapshot = as_snapshot(buffer)
    empty = Span(cursor, cursor)
    if cursor <= 0 or cursor > len(snapshot):
        return CompletionResult(CompletionContext(ContextKind.UNKNOWN), None, empty)

    tokens = (t for t in scan_tokens(snapshot, cursor - 1, backward=True, symbols=symbols)
              if t.start < cursor)
    first = next(tokens, None)
    if first is None:
        return CompletionResult(CompletionContext(ContextKind.UNKNOWN), None, empty)

    anchor = empty
    if first.end >= cursor:
        if first.kind in (TokenKind.COMMENT, TokenKind.STRING):
            return CompletionResult(CompletionContext(ContextKind.NOT_SUPPORTED), None, empty)
        if first.kind is not TokenKind.OPENING_BRACE:
            # the word being typed is replaced, not part of the context
            anchor = Span(first.start, cursor)
            first = None
    walk = tokens if first is None else chain((first,), tokens)

    context, command, typed = _infer_context(walk, symbols)
    log.debug("Completion context at %d: %s", cursor, context.name)

    if context is ContextKind.TOP_LEVEL:
        return CompletionResult(CompletionContext(context), command_items(symbols), anchor)
    if context is ContextKind.RULE_FACTS:
        return CompletionResult(CompletionContext(context), fact_items(symbols), anchor)
    if context is ContextKind.RULE_ACTIONS:
        return CompletionResult(CompletionContext(context), action_items(symbols), anchor)
    if context is ContextKind.PARAMETERS:
        return _parameter_completion(command, typed, symbols, anchor)
    return CompletionResult(CompletionContext(context), None, anchor)
