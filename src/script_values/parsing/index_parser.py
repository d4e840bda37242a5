"""Parser for index and range literals.

Accepted forms::

    7        single position (may be negative)
    4..11    exclusive range
    4..=11   inclusive range
    ..5      range from the start
    2..      range to the end
    ..       everything
"""

from __future__ import annotations

import sys
from typing import Any

import ply.yacc as yacc

from script_values.indexing import IndexRange, IndexSpec
from script_values.parsing.index_lexer import IndexLexer

# Open-ended ranges run to a bound no container reaches; resolution clamps it.
OPEN_END = sys.maxsize


class IndexParser:
    """Parser for index literals."""

    tokens = IndexLexer.tokens

    def __init__(self) -> None:
        self.lexer = IndexLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_spec_position(self, p: yacc.YaccProduction) -> None:
        """spec : INTEGER"""
        p[0] = p[1]

    def p_spec_range(self, p: yacc.YaccProduction) -> None:
        """spec : INTEGER DOTDOT INTEGER"""
        p[0] = IndexRange(p[1], p[3])

    def p_spec_inclusive_range(self, p: yacc.YaccProduction) -> None:
        """spec : INTEGER DOTDOTEQ INTEGER"""
        p[0] = IndexRange(p[1], p[3], inclusive=True)

    def p_spec_range_to(self, p: yacc.YaccProduction) -> None:
        """spec : DOTDOT INTEGER"""
        p[0] = IndexRange(0, p[2])

    def p_spec_inclusive_range_to(self, p: yacc.YaccProduction) -> None:
        """spec : DOTDOTEQ INTEGER"""
        p[0] = IndexRange(0, p[2], inclusive=True)

    def p_spec_range_from(self, p: yacc.YaccProduction) -> None:
        """spec : INTEGER DOTDOT"""
        p[0] = IndexRange(p[1], OPEN_END)

    def p_spec_full_range(self, p: yacc.YaccProduction) -> None:
        """spec : DOTDOT"""
        p[0] = IndexRange(0, OPEN_END)

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error in index at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of index")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> IndexSpec:
        """Parse an index literal into a position or an ``IndexRange``."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)
        if not data.strip():
            raise SyntaxError("Empty index")
        return self.parser.parse(data, lexer=self.lexer.lexer)


_shared_parser: IndexParser | None = None


def parse_index(data: str) -> IndexSpec:
    """Parse an index literal with a shared parser instance."""
    global _shared_parser
    if _shared_parser is None:
        _shared_parser = IndexParser()
    return _shared_parser.parse(data)
