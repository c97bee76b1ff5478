"""Operator-precedence (Pratt) parser for the mnky language.

Grammar, loosely:

```
<program>    ::= <statement>*
<statement>  ::= "let" <ident> "=" <expr> [";"]
               | "return" <expr> [";"]
               | <expr> [";"]
<block>      ::= "{" <statement>* ("}" | <end of input>)
<expr>       ::= <prefix> (<infix> <expr>)*              ; resolved by precedence, see PRECEDENCES
<prefix>     ::= <ident> | <int> | <string> | "true" | "false" | "!" <expr> | "-" <expr>
               | "(" <expr> ")" | "[" <exprs> "]"
               | "if" "(" <expr> ")" <block> ["else" <block>]
               | "fn" "(" <idents> ")" <block>
<call>       ::= <expr> "(" <exprs> ")"
```

Every token kind that can start an expression has a prefix rule, every token kind that can continue one has an infix
rule. An infix rule is only applied while its precedence is higher than the precedence the caller is parsing at,
which is what makes `a + b * c` group as `(a + (b * c))` and `a - b - c` as `((a - b) - c)`.

The parser never stops at the first mistake: diagnostics are collected in `errors` and the statement that failed is
skipped, so a single pass reports everything that is wrong with the input.
"""

import logging

from mnky.syntax import nodes
from mnky.syntax.scanner import Scanner
from mnky.syntax.tokens import TokenKind


logger = logging.getLogger(__name__)

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


class Precedence:
    LOWEST = 1
    EQUALS = 2       # == !=
    LESSGREATER = 3  # < > <= >=
    SUM = 4          # + -
    PRODUCT = 5      # * /
    PREFIX = 6       # -x !x
    CALL = 7         # f(x)


PRECEDENCES = {
    TokenKind.EQ: Precedence.EQUALS,
    TokenKind.NEQ: Precedence.EQUALS,
    TokenKind.LT: Precedence.LESSGREATER,
    TokenKind.GT: Precedence.LESSGREATER,
    TokenKind.LEQ: Precedence.LESSGREATER,
    TokenKind.GEQ: Precedence.LESSGREATER,
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.TIMES: Precedence.PRODUCT,
    TokenKind.SLASH: Precedence.PRODUCT,
    TokenKind.LPAREN: Precedence.CALL,
}

INFIX_OPERATORS = [
    TokenKind.PLUS, TokenKind.MINUS, TokenKind.TIMES, TokenKind.SLASH,
    TokenKind.EQ, TokenKind.NEQ, TokenKind.LT, TokenKind.GT, TokenKind.LEQ, TokenKind.GEQ,
]


class Parser:
    """Builds a Program from the tokens of a Scanner, keeping one token of lookahead."""

    def __init__(self, scanner):
        self.scanner = scanner
        self.errors = []

        self.current = None
        self.peek = None

        self.prefix_rules = {
            TokenKind.IDENT: self._parse_identifier,
            TokenKind.INT: self._parse_integer_literal,
            TokenKind.STRING: self._parse_string_literal,
            TokenKind.TRUE: self._parse_boolean,
            TokenKind.FALSE: self._parse_boolean,
            TokenKind.BANG: self._parse_prefix_expression,
            TokenKind.MINUS: self._parse_prefix_expression,
            TokenKind.LPAREN: self._parse_grouped_expression,
            TokenKind.LBRACKET: self._parse_array_literal,
            TokenKind.IF: self._parse_if_expression,
            TokenKind.FUNCTION: self._parse_function_literal,
        }

        self.infix_rules = {kind: self._parse_infix_expression for kind in INFIX_OPERATORS}
        self.infix_rules[TokenKind.LPAREN] = self._parse_call_expression

        # populate both current and peek
        self.advance()
        self.advance()

    def advance(self):
        self.current = self.peek
        self.peek = self.scanner.next_token()

    def parse_program(self):
        """Parses the whole input. Returns (Program, errors); errors is empty if the input is valid."""
        program = nodes.Program()

        while not self._current_is(TokenKind.EOF):
            stmt = self._parse_statement()
            if stmt is not None:
                logger.debug("parsed statement: %s", stmt)
                program.statements.append(stmt)
            self.advance()

        return program, self.errors

    # ==================== STATEMENTS ====================

    def _parse_statement(self):
        if self._current_is(TokenKind.LET):
            return self._parse_let_statement()
        elif self._current_is(TokenKind.RETURN):
            return self._parse_return_statement()
        return self._parse_expression_statement()

    def _parse_let_statement(self):
        token = self.current

        if not self.expect_peek(TokenKind.IDENT):
            return None
        name = nodes.Identifier(self.current, self.current.literal)

        if not self.expect_peek(TokenKind.ASSIGN):
            return None
        self.advance()

        value = self.parse_expression(Precedence.LOWEST)
        self._skip_semicolon()

        if value is None:
            return None
        return nodes.LetStatement(token, name, value)

    def _parse_return_statement(self):
        token = self.current
        self.advance()

        value = self.parse_expression(Precedence.LOWEST)
        self._skip_semicolon()

        if value is None:
            return None
        return nodes.ReturnStatement(token, value)

    def _parse_expression_statement(self):
        token = self.current

        expression = self.parse_expression(Precedence.LOWEST)
        self._skip_semicolon()

        if expression is None:
            return None
        return nodes.ExpressionStatement(token, expression)

    def _parse_block_statement(self):
        """Assumes current is "{". Leaves the parser on the closing "}" (or EOF)."""
        token = self.current
        statements = []
        self.advance()

        while not self._current_is(TokenKind.RBRACE) and not self._current_is(TokenKind.EOF):
            stmt = self._parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.advance()

        return nodes.BlockStatement(token, statements)

    # ==================== EXPRESSIONS ====================

    def parse_expression(self, precedence):
        """Precedence climbing: parses a prefix expression, then folds in infix operators that bind tighter than
        precedence. Returns None (and records an error) if the expression is malformed.
        """
        prefix = self.prefix_rules.get(self.current.kind)
        if prefix is None:
            self.errors.append(f"no prefix parse function for {self.current.kind} found")
            return None

        left = prefix()

        while left is not None and not self._peek_is(TokenKind.SEMICOLON) and precedence < self._peek_precedence():
            infix = self.infix_rules.get(self.peek.kind)
            if infix is None:
                return left

            self.advance()
            left = infix(left)

        return left

    def _parse_identifier(self):
        return nodes.Identifier(self.current, self.current.literal)

    def _parse_integer_literal(self):
        literal = self.current.literal

        # more significant digits than INT64_MAX has can never fit, and would be slow (or refused) to convert
        digits = literal.lstrip("0") or "0"
        value = int(digits) if len(digits) <= len(str(INT64_MAX)) else None

        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self.errors.append(f"could not parse \"{literal}\" as an integer: value out of range")
            return None
        return nodes.IntegerLiteral(self.current, value)

    def _parse_string_literal(self):
        return nodes.StringLiteral(self.current, self.current.literal)

    def _parse_boolean(self):
        return nodes.BooleanLiteral(self.current, self._current_is(TokenKind.TRUE))

    def _parse_prefix_expression(self):
        token = self.current
        self.advance()

        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return nodes.PrefixExpression(token, token.literal, right)

    def _parse_infix_expression(self, left):
        token = self.current
        precedence = self._current_precedence()
        self.advance()

        right = self.parse_expression(precedence)
        if right is None:
            return None
        return nodes.InfixExpression(token, token.literal, left, right)

    def _parse_grouped_expression(self):
        self.advance()

        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None or not self.expect_peek(TokenKind.RPAREN):
            return None
        return expression

    def _parse_array_literal(self):
        token = self.current

        elements = self._parse_expression_list(TokenKind.RBRACKET)
        if elements is None:
            return None
        return nodes.ArrayLiteral(token, elements)

    def _parse_if_expression(self):
        token = self.current

        if not self.expect_peek(TokenKind.LPAREN):
            return None
        self.advance()

        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None

        if not self.expect_peek(TokenKind.RPAREN) or not self.expect_peek(TokenKind.LBRACE):
            return None
        consequence = self._parse_block_statement()

        alternative = None
        if self._peek_is(TokenKind.ELSE):
            self.advance()
            if not self.expect_peek(TokenKind.LBRACE):
                return None
            alternative = self._parse_block_statement()

        return nodes.IfExpression(token, condition, consequence, alternative)

    def _parse_function_literal(self):
        token = self.current

        if not self.expect_peek(TokenKind.LPAREN):
            return None

        parameters = self._parse_function_parameters()
        if parameters is None or not self.expect_peek(TokenKind.LBRACE):
            return None

        body = self._parse_block_statement()
        return nodes.FunctionLiteral(token, parameters, body)

    def _parse_function_parameters(self):
        """Assumes current is "(". Returns the list of parameter Identifiers, or None on a malformed list."""
        parameters = []

        if self._peek_is(TokenKind.RPAREN):
            self.advance()
            return parameters

        if not self.expect_peek(TokenKind.IDENT):
            return None
        parameters.append(nodes.Identifier(self.current, self.current.literal))

        while self._peek_is(TokenKind.COMMA):
            self.advance()
            if not self.expect_peek(TokenKind.IDENT):
                return None
            parameters.append(nodes.Identifier(self.current, self.current.literal))

        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return parameters

    def _parse_call_expression(self, callee):
        token = self.current

        arguments = self._parse_expression_list(TokenKind.RPAREN)
        if arguments is None:
            return None
        return nodes.CallExpression(token, callee, arguments)

    def _parse_expression_list(self, end):
        """Parses comma-separated expressions up to the end token. Assumes current is the opening delimiter."""
        expressions = []

        if self._peek_is(end):
            self.advance()
            return expressions

        self.advance()
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        expressions.append(expression)

        while self._peek_is(TokenKind.COMMA):
            self.advance()
            self.advance()
            expression = self.parse_expression(Precedence.LOWEST)
            if expression is None:
                return None
            expressions.append(expression)

        if not self.expect_peek(end):
            return None
        return expressions

    # ==================== HELPERS ====================

    def expect_peek(self, kind):
        """Advances if the next token is of the given kind. Otherwise records an error and stays put."""
        if self._peek_is(kind):
            self.advance()
            return True

        self.errors.append(f"expected next token to be {kind}, got {self.peek.kind} instead")
        return False

    def _skip_semicolon(self):
        if self._peek_is(TokenKind.SEMICOLON):
            self.advance()

    def _current_is(self, kind):
        return self.current.kind is kind

    def _peek_is(self, kind):
        return self.peek.kind is kind

    def _current_precedence(self):
        return PRECEDENCES.get(self.current.kind, Precedence.LOWEST)

    def _peek_precedence(self):
        return PRECEDENCES.get(self.peek.kind, Precedence.LOWEST)


def parse_program(source):
    """Scans and parses source. Returns (Program, errors)."""
    return Parser(Scanner(source)).parse_program()
