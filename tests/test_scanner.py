import pytest
from hypothesis import given, strategies as st

from aiscript.buffer import TextSnapshot
from aiscript.reader.tokens import Token, TokenKind as K
from aiscript.reader.scanner import scan_tokens, scan_line


def _kinds(source, symbols):
    return [(t.kind, t.text) for t in scan_tokens(source, 0, symbols=symbols)]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(a b)", [(K.OPENING_BRACE, "("), (K.WORD, "a"), (K.WORD, "b"), (K.CLOSING_BRACE, ")")]),
        ("a(b)c", [(K.WORD, "a"), (K.OPENING_BRACE, "("), (K.WORD, "b"), (K.CLOSING_BRACE, ")"), (K.WORD, "c")]),
        ('"hello world"', [(K.STRING, '"hello world"')]),
        ('"a""b"', [(K.STRING, '"a"'), (K.STRING, '"b"')]),
        ('(chat-to-all "unterminated (x', [(K.OPENING_BRACE, "("), (K.ACTION_NAME, "chat-to-all"),
                                           (K.STRING, '"unterminated (x')]),
        ("; comment (x) \"y\"", [(K.COMMENT, '; comment (x) "y"')]),
        ("x ; c", [(K.WORD, "x"), (K.COMMENT, "; c")]),
        ('"a ; b" ; c', [(K.STRING, '"a ; b"'), (K.COMMENT, "; c")]),
        ("=> == = =x", [(K.RULE_ARROW, "=>"), (K.WORD, "=="), (K.WORD, "="), (K.WORD, "="), (K.WORD, "x")]),
        ("a =", [(K.WORD, "a"), (K.WORD, "=")]),
        ("-5 12 -x", [(K.NUMBER, "-5"), (K.NUMBER, "12"), (K.NUMBER, "-"), (K.WORD, "x")]),
        ("5abc 7)", [(K.NUMBER, "5"), (K.WORD, "abc"), (K.NUMBER, "7"), (K.CLOSING_BRACE, ")")]),
        ("abc5-x=y", [(K.WORD, "abc5-x=y")]),
        ("<= >= != <", [(K.WORD, "<="), (K.WORD, ">="), (K.WORD, "!="), (K.WORD, "<")]),
        ("defrule defconst load load-random", [(K.DEFRULE, "defrule"), (K.DEFCONST, "defconst"),
                                               (K.LOAD, "load"), (K.LOAD_RANDOM, "load-random")]),
        ("and or xor nor nand xnor not", [(K.BOOLEAN_FACT_NAME, w) for w in
                                          ("and", "or", "xor", "nor", "nand", "xnor", "not")]),
        ("foo bar move-to train villager", [(K.FACT_NAME, "foo"), (K.ACTION_NAME, "bar"),
                                            (K.FACT_NAME, "move-to"), (K.ACTION_NAME, "train"),
                                            (K.WORD, "villager")]),
        ("Defrule loads", [(K.WORD, "Defrule"), (K.WORD, "loads")]),
    ]
)
def test_scanner_basic(source, expected, symbols):
    assert _kinds(source, symbols) == expected


def test_lone_minus_is_a_number_token(symbols):
    # A '-' without digits is kept as a one-character number, as the scanner always did.
    tokens = list(scan_tokens("(set-goal - 1)", 0, symbols=symbols))
    assert tokens[2] == Token(K.NUMBER, "-", 10, 1)


def test_rule_scenario_kinds(symbols):
    source = "(defrule\n  (foo)\n  =>\n  (bar)\n)"
    kinds = [t.kind for t in scan_tokens(source, 0, symbols=symbols)]
    assert kinds == [
        K.OPENING_BRACE, K.DEFRULE,
        K.OPENING_BRACE, K.FACT_NAME, K.CLOSING_BRACE,
        K.RULE_ARROW,
        K.OPENING_BRACE, K.ACTION_NAME, K.CLOSING_BRACE,
        K.CLOSING_BRACE,
    ]


def test_offsets_span_lines(symbols):
    tokens = list(scan_tokens("(x\n  y)", 0, symbols=symbols))
    assert [(t.start, t.length) for t in tokens] == [(0, 1), (1, 1), (5, 1), (6, 1)]


def test_crlf_offsets(symbols):
    tokens = list(scan_tokens("(x\r\ny)", 0, symbols=symbols))
    assert [(t.text, t.start) for t in tokens] == [("(", 0), ("x", 1), ("y", 4), (")", 5)]


def test_whole_line_is_produced_from_mid_line(symbols):
    source = "(a b)\n(c d)\n(e f)"
    offset = source.index("d")
    forward = [t.text for t in scan_tokens(source, offset, symbols=symbols)]
    backward = [t.text for t in scan_tokens(source, offset, backward=True, symbols=symbols)]
    assert forward == ["(", "c", "d", ")", "(", "e", "f", ")"]
    assert backward == [")", "d", "c", "(", ")", "b", "a", "("]


def test_scanner_is_lazy(symbols):
    # Only the first line is scanned when only its first token is pulled.
    source = "(a)\n" + "(b)\n" * 1000
    it = scan_tokens(TextSnapshot(source), 0, symbols=symbols)
    assert next(it).text == "("


def test_scan_line_uses_line_offset(symbols):
    tokens = scan_line("(foo 5)", 100, symbols)
    assert [t.start for t in tokens] == [100, 101, 105, 106]


@pytest.mark.parametrize(
    "source",
    [
        "",
        "    ",
        "\n\n",
        "; comment only",
        '"',
        "=",
        "-",
        "((((",
        "))))",
    ]
)
def test_scanner_edge_cases_no_crash(source, symbols):
    try:
        list(scan_tokens(source, 0, symbols=symbols))
        list(scan_tokens(source, len(source), backward=True, symbols=symbols))
    except Exception as e:
        assert False, f"Scanner crashed on {source!r}: {e}"


# -------------------------------
# Strategies
# -------------------------------
source_strat = st.text(alphabet='() ";=->5a-zfo\n\r\t', max_size=80)


# -------------------------------
# Hypothesis tests
# -------------------------------
@given(source_strat)
def test_backward_scan_mirrors_forward_scan(symbols, source):
    forward = list(scan_tokens(source, 0, symbols=symbols))
    backward = list(scan_tokens(source, len(source), backward=True, symbols=symbols))
    assert list(reversed(backward)) == forward


@given(source_strat, st.data())
def test_scan_from_any_offset_covers_its_line(symbols, source, data):
    offset = data.draw(st.integers(min_value=0, max_value=len(source)))
    everything = list(scan_tokens(source, 0, symbols=symbols))
    before = list(scan_tokens(source, offset, backward=True, symbols=symbols))
    after = list(scan_tokens(source, offset, symbols=symbols))
    line = TextSnapshot(source).line_from_offset(offset)
    on_line = [t for t in everything if line.start <= t.start <= line.end]
    # the starting line is produced completely in both directions
    assert [t for t in after if t in on_line] == on_line
    assert [t for t in before if t in on_line] == list(reversed(on_line))


@given(source_strat)
def test_tokens_are_gap_free(symbols, source):
    tokens = list(scan_tokens(source, 0, symbols=symbols))
    covered = set()
    pos = -1
    for t in tokens:
        assert t.start > pos
        assert source[t.start:t.end] == t.text
        covered.update(range(t.start, t.end))
        pos = t.start
    for i, c in enumerate(source):
        if i not in covered:
            assert c.isspace()
