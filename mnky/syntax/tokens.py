"""Token definitions for the mnky language.

Token kinds double as the names printed in parser diagnostics, so their values are kept short and readable
("IDENT", "INT", ")", ...).
"""

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # identifiers and literals
    IDENT = "IDENT"
    INT = "INT"
    STRING = "STRING"

    # operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    SLASH = "/"
    BANG = "!"
    LT = "<"
    GT = ">"
    EQ = "=="
    NEQ = "!="
    LEQ = "<="
    GEQ = ">="
    PLUS_ASSIGN = "+="
    MINUS_ASSIGN = "-="
    TIMES_ASSIGN = "*="
    SLASH_ASSIGN = "/="

    # delimiters
    COMMA = ","
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"
    TRUE = "TRUE"
    FALSE = "FALSE"

    def __str__(self):
        return self.value


KEYWORDS = {
    "fn": TokenKind.FUNCTION,
    "let": TokenKind.LET,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "return": TokenKind.RETURN,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
}

# every operator/delimiter spelling, one and two characters long
OPERATORS = {kind.value: kind for kind in TokenKind if not kind.value.isalpha()}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    literal: str

    def __str__(self):
        return f"{self.kind}({self.literal!r})"


def lookup_ident(text):
    """Returns the keyword kind of text, or IDENT if text isn't a keyword."""
    return KEYWORDS.get(text, TokenKind.IDENT)
