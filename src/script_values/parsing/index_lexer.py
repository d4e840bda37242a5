"""Lexer for index and range literals such as ``-1``, ``4..11`` and ``4..=11``."""

import ply.lex as lex


class IndexLexer:
    """Lexer for tokenizing index literals."""

    # Token list
    tokens = [
        "INTEGER",
        "DOTDOTEQ",
        "DOTDOT",
    ]

    # Simple tokens (ply tries longer string patterns first)
    t_DOTDOTEQ = r"\.\.="
    t_DOTDOT = r"\.\."

    # Ignored characters
    t_ignore = " \t"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def t_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
        r"[-+]?\d+"
        t.value = int(t.value)
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' in index at position {t.lexpos}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Split an index literal into tokens."""
        self.lexer.input(data)
        return list(iter(self.lexer.token, None))
