"""Abstract syntax tree for the mnky language.

Every node keeps the token that started it and can reconstruct its source with str(). Reconstruction fully
parenthesizes operator expressions, which makes precedence visible:

```
parse("-a * b + c")  ->  "(((-a) * b) + c)"
```

Nodes are built once by the parser and never mutated; the evaluator only reads them.
"""

from abc import ABC, abstractmethod


class Node(ABC):
    """Superclass of every AST node."""

    def __init__(self, token):
        self.token = token
        self._cls = type(self).__name__

    def token_literal(self):
        return self.token.literal if self.token is not None else ""

    @abstractmethod
    def __str__(self):
        """Source reconstruction of this node."""

    def __repr__(self):
        return f"{self._cls}('{self}')"

    def __eq__(self, other):
        return isinstance(other, type(self)) and str(other) == str(self)

    def __hash__(self):
        return hash((self._cls, str(self)))


class Statement(Node, ABC):
    """A node that appears in a statement list."""


class Expression(Node, ABC):
    """A node that produces a value."""


class Program(Node):
    """Root of every parse: an ordered list of top-level statements."""

    def __init__(self, statements=None):
        super().__init__(None)
        self.statements = statements if statements is not None else []

    def token_literal(self):
        return self.statements[0].token_literal() if self.statements else ""

    def __str__(self):
        return "".join(str(stmt) for stmt in self.statements)


# ==================== STATEMENTS ====================

class LetStatement(Statement):

    def __init__(self, token, name, value):
        super().__init__(token)
        self.name = name
        self.value = value

    def __str__(self):
        return f"{self.token_literal()} {self.name} = {self.value};"


class ReturnStatement(Statement):

    def __init__(self, token, value):
        super().__init__(token)
        self.value = value

    def __str__(self):
        return f"{self.token_literal()} {self.value};"


class ExpressionStatement(Statement):
    """A bare expression used as a statement, e.g. `x + 1;`."""

    def __init__(self, token, expression):
        super().__init__(token)
        self.expression = expression

    def __str__(self):
        return str(self.expression)


class BlockStatement(Statement):
    """Brace-delimited statement list: function bodies and if/else branches."""

    def __init__(self, token, statements):
        super().__init__(token)
        self.statements = statements

    def __str__(self):
        return "".join(str(stmt) for stmt in self.statements)


# ==================== EXPRESSIONS ====================

class Identifier(Expression):

    def __init__(self, token, name):
        super().__init__(token)
        self.name = name

    def __str__(self):
        return self.name


class IntegerLiteral(Expression):

    def __init__(self, token, value):
        super().__init__(token)
        self.value = value

    def __str__(self):
        return self.token_literal()


class BooleanLiteral(Expression):

    def __init__(self, token, value):
        super().__init__(token)
        self.value = value

    def __str__(self):
        return self.token_literal()


class StringLiteral(Expression):

    def __init__(self, token, value):
        super().__init__(token)
        self.value = value

    def __str__(self):
        return f"\"{self.value}\""


class ArrayLiteral(Expression):

    def __init__(self, token, elements):
        super().__init__(token)
        self.elements = elements

    def __str__(self):
        return "[" + ", ".join(str(elem) for elem in self.elements) + "]"


class PrefixExpression(Expression):
    """Unary operator applied to the expression on its right: `!x`, `-x`."""

    def __init__(self, token, operator, right):
        super().__init__(token)
        self.operator = operator
        self.right = right

    def __str__(self):
        return f"({self.operator}{self.right})"


class InfixExpression(Expression):
    """Binary operator expression: `left <operator> right`."""

    def __init__(self, token, operator, left, right):
        super().__init__(token)
        self.operator = operator
        self.left = left
        self.right = right

    def __str__(self):
        return f"({self.left} {self.operator} {self.right})"


class IfExpression(Expression):
    """`if (<condition>) { <consequence> } else { <alternative> }`, alternative is optional (None)."""

    def __init__(self, token, condition, consequence, alternative=None):
        super().__init__(token)
        self.condition = condition
        self.consequence = consequence
        self.alternative = alternative

    def __str__(self):
        condition = str(self.condition)
        if not isinstance(self.condition, (PrefixExpression, InfixExpression)):  # those print their own parens
            condition = f"({condition})"

        result = f"if {condition} {{ {self.consequence} }}"
        if self.alternative is not None:
            result += f" else {{ {self.alternative} }}"
        return result


class FunctionLiteral(Expression):
    """`fn(<parameters>) { <body> }`. parameters is a list of Identifiers."""

    def __init__(self, token, parameters, body):
        super().__init__(token)
        self.parameters = parameters
        self.body = body

    def __str__(self):
        params = ", ".join(str(param) for param in self.parameters)
        return f"{self.token_literal()}({params}) {{ {self.body} }}"


class CallExpression(Expression):
    """`<callee>(<arguments>)`. callee is any expression that evaluates to a function."""

    def __init__(self, token, callee, arguments):
        super().__init__(token)
        self.callee = callee
        self.arguments = arguments

    def __str__(self):
        args = ", ".join(str(arg) for arg in self.arguments)
        return f"{self.callee}({args})"
