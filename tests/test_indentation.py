import pytest

from aiscript.editor.indentation import desired_indentation


@pytest.mark.parametrize(
    "source,line,expected",
    [
        ("(defrule\n", 1, 4),
        ("(defrule\n    (foo)\n", 2, 4),
        ("(defrule\n    (and\n", 2, 8),
        ("    (foo\n", 1, 8),
        ("(defrule\n\n", 2, 4),
        ("(defrule ; why\n", 1, 4),
        ("(foo)\n", 1, 0),
        ("\n\n", 2, 0),
        ("(foo)", 0, 0),
        ("(foo)", 7, 0),
    ]
)
def test_desired_indentation(source, line, expected, symbols):
    assert desired_indentation(source, line, indent_size=4, symbols=symbols) == expected


def test_indent_size(symbols):
    assert desired_indentation("(defrule\n", 1, indent_size=2, symbols=symbols) == 2


def test_crlf(symbols):
    assert desired_indentation("(defrule\r\n    (foo)\r\n", 2, indent_size=4, symbols=symbols) == 4


def test_indent_size_from_environment(symbols, monkeypatch):
    monkeypatch.setenv("AISCRIPT_INDENT_SIZE", "8")
    assert desired_indentation("(defrule\n", 1, symbols=symbols) == 8
