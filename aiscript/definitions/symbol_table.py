"""Process-wide symbol table for the AI script language.

Holds the fixed literals (keywords, operators, delimiters, boolean facts) and the
data-driven registry of facts, actions and enumerated parameter values. A table
is built once from a definitions document (see loader.py) and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from aiscript.reader.tokens import Token, TokenKind

KEYWORDS = frozenset({"defrule", "defconst", "load", "load-random"})

# Combinators composing other facts; they take no typed parameters
BOOLEAN_FACTS = frozenset({"or", "and", "xor", "nor", "nand", "xnor", "not"})

OPERATORS = frozenset({
    "less-than", "less-or-equal", "greater-than", "greater-or-equal", "equal", "not-equal",
    "<", "<=", ">", ">=", "==", "!=",
})

DELIMITERS = frozenset("()")

KEYWORD_KINDS: Mapping[str, TokenKind] = MappingProxyType({
    "defrule": TokenKind.DEFRULE,
    "defconst": TokenKind.DEFCONST,
    "load": TokenKind.LOAD,
    "load-random": TokenKind.LOAD_RANDOM,
})

# Parameter types checked against the token kind instead of a value set
STRING_TYPE = "string"
VALUE_TYPE = "value"


@dataclass(frozen=True)
class ParamSpec:
    parameter_types: tuple[str, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    @property
    def description(self) -> str:
        return "Parameters: " + "  ".join(f"<{p}>" for p in self.parameter_types)


@dataclass(frozen=True, eq=False)
class SymbolTable:
    facts: Mapping[str, ParamSpec] = field(default_factory=dict)
    actions: Mapping[str, ParamSpec] = field(default_factory=dict)
    parameter_values: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    keywords: frozenset = KEYWORDS
    boolean_facts: frozenset = BOOLEAN_FACTS
    operators: frozenset = OPERATORS
    delimiters: frozenset = DELIMITERS
    # derived lookups, filled in __post_init__
    commands: frozenset = field(init=False)
    identifiers: frozenset = field(init=False)
    _value_sets: Mapping[str, frozenset] = field(init=False, repr=False)

    def __post_init__(self):
        # freeze the registries so a shared table cannot drift
        object.__setattr__(self, "facts", MappingProxyType(dict(self.facts)))
        object.__setattr__(self, "actions", MappingProxyType(dict(self.actions)))
        object.__setattr__(self, "parameter_values", MappingProxyType(
            {k: tuple(v) for k, v in self.parameter_values.items()}))
        object.__setattr__(self, "commands", frozenset(self.facts) | frozenset(self.actions))
        object.__setattr__(self, "_value_sets", MappingProxyType(
            {k: frozenset(v) for k, v in self.parameter_values.items()}))
        object.__setattr__(self, "identifiers", frozenset().union(*self._value_sets.values()))

    def classify_word(self, word: str) -> TokenKind:
        """Token kind of a bare word: keyword, boolean fact, fact, action or plain word."""
        kind = KEYWORD_KINDS.get(word)
        if kind is not None:
            return kind
        if word in self.boolean_facts:
            return TokenKind.BOOLEAN_FACT_NAME
        if word in self.facts:
            return TokenKind.FACT_NAME
        if word in self.actions:
            return TokenKind.ACTION_NAME
        return TokenKind.WORD

    def command_spec(self, token: Token) -> ParamSpec | None:
        if token.kind is TokenKind.FACT_NAME:
            return self.facts.get(token.text)
        if token.kind is TokenKind.ACTION_NAME:
            return self.actions.get(token.text)
        return None

    def allowed_values(self, parameter_type: str) -> tuple[str, ...] | None:
        return self.parameter_values.get(parameter_type)

    def accepts(self, parameter_type: str, token: Token) -> bool:
        """Whether `token` is a legal argument for a parameter of `parameter_type`.

        'string' needs a String token, 'value' needs a Number token, an enumerated
        type needs one of its registered values. Any other type is unconstrained.
        """
        if parameter_type == STRING_TYPE:
            return token.kind is TokenKind.STRING
        if parameter_type == VALUE_TYPE:
            return token.kind is TokenKind.NUMBER
        values = self._value_sets.get(parameter_type)
        if values is not None:
            return token.text in values
        return True
