"""Lexical scanner for the mnky language. Turns raw source text into Tokens, one at a time, so that the parser never
needs the whole token list in memory.

```
<whitespace> ::= " " | "\\t" | "\\r" | "\\n"            ; skipped
<operator>   ::= "==" | "!=" | "<=" | ">=" | "+=" | "-=" | "*=" | "/="
               | "=" | "+" | "-" | "*" | "/" | "!" | "<" | ">"
               | "," | ";" | "(" | ")" | "{" | "}" | "[" | "]"
<ident>      ::= (<letter> | "_")+                       ; keywords are classified afterwards, letters are ASCII
<int>        ::= <digit>+                                ; no sign: "-" is a prefix operator
<string>     ::= '"' <char>* ('"' | <end of input>)      ; unterminated strings are accepted
```

Anything else is returned as an ILLEGAL token holding the offending character.
"""

import string

from mnky.syntax.tokens import OPERATORS, Token, TokenKind, lookup_ident


EOF_CHAR = ""
WHITESPACE = " \t\r\n"


def is_letter(char):
    return char in string.ascii_letters or char == "_"


def is_digit(char):
    return "0" <= char <= "9"


class Scanner:
    """Single-pass scanner with one character of lookahead."""

    def __init__(self, source):
        self._src = source
        self._pos = 0

    def next_token(self):
        """Returns the next token. Once the end of input is reached, every further call returns an EOF token."""
        self._skip_whitespace()
        char = self._current_char()

        if char == EOF_CHAR:
            return Token(TokenKind.EOF, "")

        elif len(char + self._peek_char()) == 2 and char + self._peek_char() in OPERATORS:
            return self._emit(OPERATORS[char + self._peek_char()], 2)

        elif char in OPERATORS:
            return self._emit(OPERATORS[char], 1)

        elif is_letter(char):
            text = self._read_while(is_letter)
            return Token(lookup_ident(text), text)

        elif is_digit(char):
            return Token(TokenKind.INT, self._read_while(is_digit))

        elif char == "\"":
            return Token(TokenKind.STRING, self._read_string())

        return self._emit(TokenKind.ILLEGAL, 1)

    def _emit(self, kind, length):
        literal = self._src[self._pos:self._pos + length]
        self._pos += length
        return Token(kind, literal)

    def _read_while(self, predicate):
        start = self._pos
        while self._current_char() != EOF_CHAR and predicate(self._current_char()):
            self._advance()
        return self._src[start:self._pos]

    def _read_string(self):
        self._advance()  # opening quote
        content = self._read_while(lambda char: char != "\"")
        if self._current_char() == "\"":
            self._advance()
        return content

    def _skip_whitespace(self):
        while self._current_char() != EOF_CHAR and self._current_char() in WHITESPACE:
            self._advance()

    def _advance(self):
        self._pos += 1

    def _current_char(self):
        if self._pos < len(self._src):
            return self._src[self._pos]
        return EOF_CHAR

    def _peek_char(self):
        if self._pos + 1 < len(self._src):
            return self._src[self._pos + 1]
        return EOF_CHAR

    def __iter__(self):
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                break


def tokenize(source):
    """Scans all of source with a fresh Scanner and returns the tokens, ending with EOF."""
    return list(Scanner(source))
