from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    COMMENT = auto()  # ';' up to the line end
    DEFRULE = auto()
    RULE_ARROW = auto()  # '=>'
    DEFCONST = auto()
    LOAD = auto()
    LOAD_RANDOM = auto()
    OPENING_BRACE = auto()
    CLOSING_BRACE = auto()
    STRING = auto()  # '"' up to the next '"' or the line end
    NUMBER = auto()  # optional leading '-' and digits
    BOOLEAN_FACT_NAME = auto()
    FACT_NAME = auto()
    ACTION_NAME = auto()
    WORD = auto()


# Kinds that start a top-level statement
TOP_LEVEL_KINDS = frozenset({TokenKind.DEFRULE, TokenKind.DEFCONST, TokenKind.LOAD, TokenKind.LOAD_RANDOM})

# Plain value kinds, i.e. what can fill a fact/action parameter slot
VALUE_KINDS = frozenset({TokenKind.WORD, TokenKind.NUMBER, TokenKind.STRING})


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def __repr__(self):
        return f"Token({self.kind.name}, {self.text!r}, {self.start}, {self.length})"
