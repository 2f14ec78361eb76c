import pytest
from lsprotocol.types import CompletionItemKind, Position, Range

from aiscript_lsp.server import (
    TOKEN_TYPES,
    DocumentState,
    brace_highlights,
    completion_list,
    format_text_edits,
    hover_text,
    semantic_token_data,
    to_offset,
    to_position,
)


@pytest.fixture
def state(symbols):
    def make(text):
        return DocumentState.from_text(text, symbols)
    return make


def test_positions_round_trip(state):
    doc = state("(defrule\r\n    (foo)\r\n)")
    assert to_offset(doc, Position(line=1, character=4)) == 14
    assert to_position(doc, 14) == Position(line=1, character=4)
    # columns past the line end are clamped
    assert to_offset(doc, Position(line=0, character=50)) == 8


def test_completion_items(state):
    result = completion_list(state("(train "), Position(line=0, character=7))
    assert [i.label for i in result.items] == ["villager", "archer", "knight"]
    assert all(i.kind == CompletionItemKind.EnumMember for i in result.items)
    edit = result.items[0].text_edit
    assert edit.range == Range(start=Position(line=0, character=7), end=Position(line=0, character=7))
    assert edit.new_text == "villager"


def test_completion_replaces_partial_word(state):
    result = completion_list(state("(defrule (fo"), Position(line=0, character=12))
    labels = [i.label for i in result.items]
    assert "food-amount" in labels
    item = next(i for i in result.items if i.label == "food-amount")
    assert item.detail == "Parameters: <compareOp>  <value>"
    assert item.text_edit.range.start == Position(line=0, character=10)


def test_no_completion_in_error_context(state):
    assert completion_list(state("(defrule "), Position(line=0, character=9)).items == []


def test_brace_highlights(state):
    doc = state("(foo\n)")
    highlights = brace_highlights(doc, Position(line=0, character=0), 10)
    assert [h.range for h in highlights] == [
        Range(start=Position(line=0, character=0), end=Position(line=0, character=1)),
        Range(start=Position(line=1, character=0), end=Position(line=1, character=1)),
    ]
    assert brace_highlights(doc, Position(line=0, character=2), 10) == []


def test_format_text_edits(state, monkeypatch):
    monkeypatch.setenv("AISCRIPT_INDENT_SIZE", "4")
    doc = state("(defrule (foo) => (bar))")
    edits = format_text_edits(doc)
    assert edits[0].range == Range(start=Position(line=0, character=8), end=Position(line=0, character=9))
    assert edits[0].new_text == "\n    "
    assert len(edits) == 4


def test_range_formatting_stays_in_range(state, monkeypatch):
    monkeypatch.setenv("AISCRIPT_INDENT_SIZE", "4")
    doc = state("(foo  5)\n(foo  6)")
    rng = Range(start=Position(line=1, character=0), end=Position(line=1, character=1))
    edits = format_text_edits(doc, rng)
    assert [e.range.start.line for e in edits] == [1]
    assert edits[0].new_text == " "


def test_semantic_token_data(state):
    # '(' is not reported; foo is a function, 5 a number
    assert semantic_token_data(state("(foo 5)")) == [0, 1, 3, 6, 0, 0, 4, 1, 3, 0]
    assert TOKEN_TYPES[6] == "function"


def test_semantic_tokens_across_lines(state):
    data = semantic_token_data(state("; hi\n  (bar)"))
    assert data == [0, 0, 4, 0, 0, 1, 3, 3, 7, 0]


@pytest.mark.parametrize(
    "text,character,expected",
    [
        ("(train villager)", 2, "train (action) Parameters: <unit>"),
        ("(food-amount < 5)", 1, "food-amount (fact) Parameters: <compareOp>  <value>"),
        ("(and (foo))", 2, "Boolean AND operation"),
        ("(defrule", 3, "Rule"),
        ("(foo)   ", 7, None),
        ("(train villager)", 10, None),
    ]
)
def test_hover_text(state, text, character, expected):
    assert hover_text(state(text), Position(line=0, character=character)) == expected
