"""Tests for the index literal lexer and parser."""

import pytest

from script_values.indexing import IndexRange
from script_values.parsing import IndexParser, parse_index
from script_values.parsing.index_lexer import IndexLexer
from script_values.parsing.index_parser import OPEN_END


class TestIndexLexer:
    """Tests for the index lexer."""

    def test_tokenize_position(self):
        lexer = IndexLexer()
        lexer.build()

        tokens = lexer.tokenize("-12")

        assert [t.type for t in tokens] == ["INTEGER"]
        assert tokens[0].value == -12

    def test_tokenize_inclusive_range(self):
        lexer = IndexLexer()
        lexer.build()

        tokens = lexer.tokenize("4..=11")

        assert [t.type for t in tokens] == ["INTEGER", "DOTDOTEQ", "INTEGER"]

    def test_tokenize_exclusive_range_with_spaces(self):
        lexer = IndexLexer()
        lexer.build()

        tokens = lexer.tokenize("4 .. 11")

        assert [t.type for t in tokens] == ["INTEGER", "DOTDOT", "INTEGER"]

    def test_tokenize_empty(self):
        lexer = IndexLexer()
        lexer.build()

        assert lexer.tokenize("") == []

    def test_illegal_character(self):
        lexer = IndexLexer()
        lexer.build()

        with pytest.raises(SyntaxError, match="Illegal character 'x'"):
            lexer.tokenize("4..x")


class TestIndexParser:
    """Tests for the index parser."""

    def test_position(self):
        parser = IndexParser()
        assert parser.parse("3") == 3
        assert parser.parse("-1") == -1

    def test_exclusive_range(self):
        assert IndexParser().parse("4..11") == IndexRange(4, 11)

    def test_inclusive_range(self):
        assert IndexParser().parse("4..=11") == IndexRange(4, 11, inclusive=True)

    def test_open_ranges(self):
        parser = IndexParser()
        assert parser.parse("..5") == IndexRange(0, 5)
        assert parser.parse("..=5") == IndexRange(0, 5, inclusive=True)
        assert parser.parse("2..") == IndexRange(2, OPEN_END)
        assert parser.parse("..") == IndexRange(0, OPEN_END)

    def test_parser_is_reusable(self):
        parser = IndexParser()
        assert parser.parse("1..2") == IndexRange(1, 2)
        assert parser.parse("7") == 7

    def test_shared_parser(self):
        assert parse_index("0..=3") == IndexRange(0, 3, inclusive=True)

    def test_empty(self):
        with pytest.raises(SyntaxError, match="Empty index"):
            parse_index("  ")

    def test_syntax_error(self):
        with pytest.raises(SyntaxError, match="Syntax error"):
            parse_index("1..2..3")

    def test_dangling_inclusive(self):
        with pytest.raises(SyntaxError):
            parse_index("3..=")
