"""Tree-walking evaluator for the mnky language.

evaluate(node, env) walks the AST recursively and always returns a runtime Value. Runtime errors are Error values,
not Python exceptions: every step that evaluates a sub-node checks for an Error and hands it back unchanged, so the
first error short-circuits the whole evaluation and reaches the caller as the result.

`return` works the same way: a ReturnStatement yields a ReturnValue, and every step that would use it as an operand,
element, argument, condition or binding passes it up still wrapped instead. It is unwrapped exactly once, either at
the function call that is returning or at the top level of the program.
"""

import logging

from mnky.lang.error import GenericException
from mnky.runtime.value import (Array, Error, FALSE, Function, Integer, NULL, Null, ReturnValue, String, TRUE,
                                is_control, is_error, native_bool)
from mnky.syntax import nodes


logger = logging.getLogger(__name__)

UNKNOWN_PREFIX_OPERATOR = "unknown operator: {}{}"
UNKNOWN_INFIX_OPERATOR = "unknown operator: {} {} {}"
TYPE_MISMATCH = "type mismatch: {} {} {}"
DIVISION_BY_ZERO = "division by 0"
IDENT_NOT_FOUND = "identifier not found: {}"
NOT_A_FUNCTION = "not a function: {}"


def new_error(msg, *args):
    return Error(msg.format(*args))


# ==================== OPERATORS ====================

def _int_operands(operator, left, right):
    """Returns an Error unless both operands are Integers."""
    if isinstance(left, Integer) and isinstance(right, Integer):
        return None
    if left.type == right.type:
        return new_error(UNKNOWN_INFIX_OPERATOR, left.type, operator, right.type)
    return new_error(TYPE_MISMATCH, left.type, operator, right.type)


def infix_plus(left, right):
    if left.type != right.type:
        return new_error(TYPE_MISMATCH, left.type, "+", right.type)
    if isinstance(left, Integer):
        return Integer(left.value + right.value)
    if isinstance(left, String):
        return String(left.value + right.value)
    return new_error(UNKNOWN_INFIX_OPERATOR, left.type, "+", right.type)


def infix_minus(left, right):
    return _int_operands("-", left, right) or Integer(left.value - right.value)


def infix_times(left, right):
    return _int_operands("*", left, right) or Integer(left.value * right.value)


def infix_slash(left, right):
    error = _int_operands("/", left, right)
    if error:
        return error
    if right.value == 0:
        return new_error(DIVISION_BY_ZERO)

    # integer division truncates toward zero
    quotient = abs(left.value) // abs(right.value)
    return Integer(quotient if (left.value < 0) == (right.value < 0) else -quotient)


def _equality(operator, left, right):
    """Returns whether left and right are equal, or an Error if they can't be compared."""
    if isinstance(left, Null) or isinstance(right, Null):
        return isinstance(left, Null) and isinstance(right, Null)

    if left.type == right.type and left.type in (Integer.type, TRUE.type):
        return left.value == right.value
    return new_error(UNKNOWN_INFIX_OPERATOR, left.type, operator, right.type)


def infix_eq(left, right):
    result = _equality("==", left, right)
    return result if is_error(result) else native_bool(result)


def infix_neq(left, right):
    result = _equality("!=", left, right)
    return result if is_error(result) else native_bool(not result)


def _ordering(operator, compare):
    def infix_ordering(left, right):
        if isinstance(left, Integer) and isinstance(right, Integer):
            return native_bool(compare(left.value, right.value))
        return new_error(UNKNOWN_INFIX_OPERATOR, left.type, operator, right.type)
    return infix_ordering


INFIX_OPERATORS = {
    "+": infix_plus,
    "-": infix_minus,
    "*": infix_times,
    "/": infix_slash,
    "==": infix_eq,
    "!=": infix_neq,
    "<": _ordering("<", lambda a, b: a < b),
    "<=": _ordering("<=", lambda a, b: a <= b),
    ">": _ordering(">", lambda a, b: a > b),
    ">=": _ordering(">=", lambda a, b: a >= b),
}


# ==================== EVALUATOR ====================

class Evaluator:
    """Evaluates AST nodes against an Environment. Stateless: one instance can be shared by any number of programs."""

    def __init__(self):
        self._dispatch = {
            nodes.Program: self._eval_program,
            nodes.ExpressionStatement: self._eval_expression_statement,
            nodes.LetStatement: self._eval_let_statement,
            nodes.ReturnStatement: self._eval_return_statement,
            nodes.BlockStatement: self._eval_block_statement,
            nodes.Identifier: self._eval_identifier,
            nodes.IntegerLiteral: self._eval_integer_literal,
            nodes.BooleanLiteral: self._eval_boolean_literal,
            nodes.StringLiteral: self._eval_string_literal,
            nodes.ArrayLiteral: self._eval_array_literal,
            nodes.PrefixExpression: self._eval_prefix_expression,
            nodes.InfixExpression: self._eval_infix_expression,
            nodes.IfExpression: self._eval_if_expression,
            nodes.FunctionLiteral: self._eval_function_literal,
            nodes.CallExpression: self._eval_call_expression,
        }

    def evaluate(self, node, env):
        try:
            method = self._dispatch[type(node)]
        except KeyError:
            raise GenericException("cannot evaluate '{}'", repr(node), internal=True)
        return method(node, env)

    # ==================== STATEMENTS ====================

    def _eval_sequence(self, statements, env):
        """Evaluates statements in order and returns the last value produced. Stops at the first Error or
        ReturnValue and returns it as is. `let` statements bind names but don't produce the sequence's value.
        """
        result = NULL
        for stmt in statements:
            value = self.evaluate(stmt, env)

            if is_control(value):
                return value
            if not isinstance(stmt, nodes.LetStatement):
                result = value
        return result

    def _eval_program(self, program, env):
        result = self._eval_sequence(program.statements, env)
        if isinstance(result, ReturnValue):
            return result.value
        return result

    def _eval_block_statement(self, block, env):
        return self._eval_sequence(block.statements, env)

    def _eval_expression_statement(self, stmt, env):
        return self.evaluate(stmt.expression, env)

    def _eval_let_statement(self, stmt, env):
        value = self.evaluate(stmt.value, env)
        if is_control(value):
            return value
        return env.set(stmt.name.name, value)

    def _eval_return_statement(self, stmt, env):
        value = self.evaluate(stmt.value, env)
        if is_control(value):
            return value
        return ReturnValue(value)

    # ==================== EXPRESSIONS ====================

    def _eval_identifier(self, ident, env):
        value = env.get(ident.name)
        if value is None:
            return new_error(IDENT_NOT_FOUND, ident.name)
        return value

    def _eval_integer_literal(self, literal, env):
        return Integer(literal.value)

    def _eval_boolean_literal(self, literal, env):
        return native_bool(literal.value)

    def _eval_string_literal(self, literal, env):
        return String(literal.value)

    def _eval_array_literal(self, literal, env):
        elements = self._eval_expressions(literal.elements, env)
        if is_control(elements):
            return elements
        return Array(elements)

    def _eval_prefix_expression(self, expr, env):
        right = self.evaluate(expr.right, env)
        if is_control(right):
            return right

        if expr.operator == "!":
            return FALSE if right.truthy else TRUE
        elif expr.operator == "-":
            if not isinstance(right, Integer):
                return new_error(UNKNOWN_PREFIX_OPERATOR, "-", right.type)
            return Integer(-right.value)
        return new_error(UNKNOWN_PREFIX_OPERATOR, expr.operator, right.type)

    def _eval_infix_expression(self, expr, env):
        left = self.evaluate(expr.left, env)
        if is_control(left):
            return left

        right = self.evaluate(expr.right, env)
        if is_control(right):
            return right

        operator = INFIX_OPERATORS.get(expr.operator)
        if operator is None:
            return new_error(UNKNOWN_INFIX_OPERATOR, left.type, expr.operator, right.type)
        return operator(left, right)

    def _eval_if_expression(self, expr, env):
        condition = self.evaluate(expr.condition, env)
        if is_control(condition):
            return condition

        # branches get their own scope so that their lets don't leak
        if condition.truthy:
            return self.evaluate(expr.consequence, env.enclosed())
        elif expr.alternative is not None:
            return self.evaluate(expr.alternative, env.enclosed())
        return NULL

    def _eval_function_literal(self, literal, env):
        return Function(literal.parameters, literal.body, env)

    def _eval_call_expression(self, call, env):
        function = self.evaluate(call.callee, env)
        if is_control(function):
            return function

        args = self._eval_expressions(call.arguments, env)
        if is_control(args):
            return args

        return self.apply_function(function, args)

    def _eval_expressions(self, exprs, env):
        """Evaluates exprs left to right. Returns the list of values, or the first Error or ReturnValue encountered."""
        values = []
        for expr in exprs:
            value = self.evaluate(expr, env)
            if is_control(value):
                return value
            values.append(value)
        return values

    def apply_function(self, function, args):
        """Calls function with args. Parameters are bound by position: missing arguments leave their parameter
        unbound and extra arguments are ignored.
        """
        if not isinstance(function, Function):
            return new_error(NOT_A_FUNCTION, function.type)

        logger.debug("applying function with parameters %s to %d argument(s)", function.parameters, len(args))

        call_env = function.env.enclosed()
        for param, arg in zip(function.parameters, args):
            call_env.set(param.name, arg)

        result = self.evaluate(function.body, call_env)
        if isinstance(result, ReturnValue):
            return result.value
        return result


def evaluate(node, env):
    """Evaluates node in env with a fresh Evaluator."""
    return Evaluator().evaluate(node, env)
