import unittest

from mnky.lang.error import GenericException
from mnky.runtime.environment import Environment
from mnky.runtime.evaluator import Evaluator, evaluate
from mnky.runtime.value import Array, Error, FALSE, Function, Integer, NULL, ReturnValue, String, TRUE
from mnky.syntax.parser import parse_program


class EvaluatorTestCase(unittest.TestCase):

    def run_source(self, source, env=None):
        program, errors = parse_program(source)
        self.assertEqual([], errors, source)
        return evaluate(program, env if env is not None else Environment())

    def assert_results(self, cases):
        for case, expected in cases.items():
            self.assertEqual(expected, self.run_source(case), case)


class ArithmeticTestCase(EvaluatorTestCase):

    def test_integers(self):
        self.assert_results({
            "5": Integer(5),
            "10": Integer(10),
            "-5": Integer(-5),
            "-10": Integer(-10),
            "5 + 5 + 5 + 5 - 10": Integer(10),
            "2 * 2 * 2 * 2 * 2": Integer(32),
            "-50 + 100 + -50": Integer(0),
            "5 * 2 + 10": Integer(20),
            "5 + 2 * 10": Integer(25),
            "20 + 2 * -10": Integer(0),
            "50 / 2 * 2 + 10": Integer(60),
            "2 * (5 + 10)": Integer(30),
            "3 * 3 * 3 + 10": Integer(37),
            "(5 + 10 * 2 + 15 / 3) * 2 + -10": Integer(50),
        })

    def test_division_truncates(self):
        self.assert_results({
            "7 / 2": Integer(3),
            "-7 / 2": Integer(-3),
            "7 / -2": Integer(-3),
            "-7 / -2": Integer(3),
        })

    def test_overflow_wraps(self):
        self.assert_results({
            "9223372036854775807 + 1": Integer(-9223372036854775807 - 1),
            "-9223372036854775807 - 2": Integer(9223372036854775807),
        })

    def test_strings(self):
        self.assert_results({
            "\"Hello World!\"": String("Hello World!"),
            "\"Hello\" + \" \" + \"World!\"": String("Hello World!"),
        })

    def test_arrays(self):
        self.assert_results({
            "[1, 2 * 2, 3 + 3]": Array([Integer(1), Integer(4), Integer(6)]),
            "[]": Array(),
            "[[true], \"a\"]": Array([Array([TRUE]), String("a")]),
        })


class BooleanTestCase(EvaluatorTestCase):

    def test_comparisons(self):
        self.assert_results({
            "true": TRUE,
            "false": FALSE,
            "1 < 2": TRUE,
            "1 > 2": FALSE,
            "1 < 1": FALSE,
            "1 <= 1": TRUE,
            "2 >= 3": FALSE,
            "1 == 1": TRUE,
            "1 != 1": FALSE,
            "1 == 2": FALSE,
            "true == true": TRUE,
            "false == false": TRUE,
            "true != false": TRUE,
            "(1 < 2) == true": TRUE,
            "(1 > 2) == true": FALSE,
        })

    def test_null_equality(self):
        self.assert_results({
            "if (false) { 1 } == if (false) { 2 }": TRUE,
            "if (false) { 1 } != if (false) { 2 }": FALSE,
            "if (false) { 1 } == 1": FALSE,
            "if (false) { 1 } != 1": TRUE,
        })

    def test_bang_operator(self):
        self.assert_results({
            "!true": FALSE,
            "!false": TRUE,
            "!5": FALSE,
            "!0": TRUE,
            "!!true": TRUE,
            "!!5": TRUE,
            "!if (false) { 1 }": TRUE,
        })


class ControlFlowTestCase(EvaluatorTestCase):

    def test_if_else(self):
        self.assert_results({
            "if (true) { 10 }": Integer(10),
            "if (false) { 10 }": NULL,
            "if (1) { 10 }": Integer(10),
            "if (0) { 10 } else { 20 }": Integer(20),
            "if (1 < 2) { 10 }": Integer(10),
            "if (1 > 2) { 10 }": NULL,
            "if (1 > 2) { 10 } else { 20 }": Integer(20),
            "if (1 < 2) { 10 } else { 20 }": Integer(10),
            "if (true) { }": NULL,
        })

    def test_return(self):
        self.assert_results({
            "return 10;": Integer(10),
            "return 10; 9;": Integer(10),
            "return 2 * 5; 9;": Integer(10),
            "9; return 2 * 5; 9;": Integer(10),
            "if (10 > 1) { if (10 > 1) { return 10; } return 1; }": Integer(10),
            "let f = fn(x) { return x; x + 10; }; f(10);": Integer(10),
            "let f = fn(x) { let result = x + 10; return result; return 10; }; f(10);": Integer(20),
            "let f = fn() { if (true) { return 1; } 2 }; f() + 10": Integer(11),
        })

    def test_return_inside_expressions(self):
        self.assert_results({
            "let f = fn() { 1 + if (true) { return 2 } }; f()": Integer(2),
            "let f = fn() { if (true) { return 2 } + 1 }; f()": Integer(2),
            "let f = fn() { -if (true) { return 2 } }; f()": Integer(2),
            "let f = fn() { [1, if (true) { return 2 }, 3] }; f()": Integer(2),
            "let g = fn(a) { a * 100 }; let f = fn() { g(if (true) { return 2 }) }; f()": Integer(2),
            "let f = fn() { if (if (true) { return 2 }) { 3 } else { 4 } }; f()": Integer(2),
            "let f = fn() { let x = if (true) { return 2 }; x * 10 }; f()": Integer(2),
            "let f = fn() { return if (true) { return 2 } }; f()": Integer(2),
        })

    def test_return_is_never_a_value(self):
        cases = [
            "let f = fn() { [if (true) { return 2 }] }; f()",
            "let f = fn() { 1 + if (true) { return 2 } }; f()",
            "[if (true) { return 2 }]",
            "1 + if (true) { return 2 }",
        ]
        for case in cases:
            result = self.run_source(case)
            self.assertEqual(Integer(2), result, case)
            self.assertNotIsInstance(result, (ReturnValue, Array), case)

    def test_return_is_not_bound(self):
        env = Environment()
        self.assertEqual(Integer(5), self.run_source("let x = if (true) { return 5 };", env))
        self.assertIsNone(env.get("x"))
        self.assertEqual(Error("identifier not found: x"), self.run_source("x", env))

    def test_return_is_unwrapped_once(self):
        result = self.run_source("let f = fn() { return fn() { return 5; }; }; f()()")
        self.assertEqual(Integer(5), result)


class ErrorTestCase(EvaluatorTestCase):

    def test_error_messages(self):
        self.assert_results({
            "5 + true;": Error("type mismatch: INTEGER + BOOLEAN"),
            "5 + true; 5;": Error("type mismatch: INTEGER + BOOLEAN"),
            "5 * false": Error("type mismatch: INTEGER * BOOLEAN"),
            "\"a\" - 1": Error("type mismatch: STRING - INTEGER"),
            "-true": Error("unknown operator: -BOOLEAN"),
            "-\"a\"": Error("unknown operator: -STRING"),
            "true + false;": Error("unknown operator: BOOLEAN + BOOLEAN"),
            "5; true + false; 5": Error("unknown operator: BOOLEAN + BOOLEAN"),
            "if (10 > 1) { true + false; }": Error("unknown operator: BOOLEAN + BOOLEAN"),
            "if (10 > 1) { if (10 > 1) { return true + false; } return 1; }":
                Error("unknown operator: BOOLEAN + BOOLEAN"),
            "\"a\" - \"b\"": Error("unknown operator: STRING - STRING"),
            "\"a\" == \"a\"": Error("unknown operator: STRING == STRING"),
            "1 == true": Error("unknown operator: INTEGER == BOOLEAN"),
            "1 < true": Error("unknown operator: INTEGER < BOOLEAN"),
            "true >= false": Error("unknown operator: BOOLEAN >= BOOLEAN"),
            "foobar": Error("identifier not found: foobar"),
            "10 / 0": Error("division by 0"),
            "5(1)": Error("not a function: INTEGER"),
            "[1, foo, bar]": Error("identifier not found: foo"),
            "if (missing) { 1 }": Error("identifier not found: missing"),
            "let f = fn(a, b) { a }; f(missing, other)": Error("identifier not found: missing"),
        })

    def test_error_stops_evaluation(self):
        env = Environment()
        result = self.run_source("let a = 1; 5 + true; let a = 2; let b = 3;", env)

        self.assertEqual(Error("type mismatch: INTEGER + BOOLEAN"), result)
        self.assertEqual(Integer(1), env.get("a"))
        self.assertIsNone(env.get("b"))

    def test_error_is_not_bound(self):
        env = Environment()
        self.assertEqual(Error("identifier not found: y"), self.run_source("let x = y; x", env))
        self.assertIsNone(env.get("x"))

    def test_argument_error_stops_call(self):
        env = Environment()
        source = "let called = 0; let f = fn(a) { let called = 1; a }; f(1 / 0)"
        self.assertEqual(Error("division by 0"), self.run_source(source, env))
        self.assertEqual(Integer(0), env.get("called"))

    def test_unknown_node(self):
        with self.assertRaises(GenericException):
            Evaluator().evaluate(object(), Environment())


class BindingTestCase(EvaluatorTestCase):

    def test_let(self):
        self.assert_results({
            "let a = 5; a;": Integer(5),
            "let a = 5 * 5; a;": Integer(25),
            "let a = 5; let b = a; b;": Integer(5),
            "let a = 5; let b = a; let c = a + b + 5; c;": Integer(15),
            "let a = 5; let a = a + 1; a;": Integer(6),
        })

    def test_let_has_no_value(self):
        self.assert_results({
            "let a = 5;": NULL,
            "5; let a = 1;": Integer(5),
        })

    def test_bindings_persist_in_env(self):
        env = Environment()
        self.run_source("let a = 5;", env)
        self.assertEqual(Integer(10), self.run_source("a * 2", env))

    def test_block_lets_do_not_leak(self):
        env = Environment()
        self.assertEqual(Integer(1), self.run_source("if (true) { let inner = 1; inner }", env))
        self.assertIsNone(env.get("inner"))
        self.assertEqual(Error("identifier not found: inner"), self.run_source("inner", env))

    def test_block_sees_outer_bindings(self):
        self.assert_results({"let a = 3; if (a > 1) { let b = a * 2; b }": Integer(6)})


class FunctionTestCase(EvaluatorTestCase):

    def test_function_literal(self):
        function = self.run_source("fn(x) { x + 2; };")
        self.assertIsInstance(function, Function)
        self.assertEqual(["x"], [param.name for param in function.parameters])
        self.assertEqual("(x + 2)", str(function.body))

    def test_application(self):
        self.assert_results({
            "let identity = fn(x) { x; }; identity(5);": Integer(5),
            "let identity = fn(x) { return x; }; identity(5);": Integer(5),
            "let double = fn(x) { x * 2; }; double(5);": Integer(10),
            "let add = fn(x, y) { x + y; }; add(5, 5);": Integer(10),
            "let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));": Integer(20),
            "fn(x) { x; }(5)": Integer(5),
            "let noop = fn() { }; noop()": NULL,
        })

    def test_closures(self):
        self.assert_results({
            "let newAdder = fn(x) { fn(y) { x + y } }; let addTwo = newAdder(2); addTwo(2);": Integer(4),
            "let newAdder = fn(x) { fn(y) { x + y } }; let a = newAdder(1); let b = newAdder(10); a(1) + b(1)":
                Integer(13),
        })

    def test_closure_captures_live_environment(self):
        self.assert_results({"let f = fn() { later }; let later = 7; f()": Integer(7)})

    def test_parameters_shadow(self):
        self.assert_results({"let x = 10; let f = fn(x) { x }; f(1) + x": Integer(11)})

    def test_arity_is_not_checked(self):
        self.assert_results({
            "let f = fn(a, b) { a }; f(1)": Integer(1),
            "let f = fn(a, b) { b }; f(1)": Error("identifier not found: b"),
            "let f = fn(a) { a }; f(1, 2, 3)": Integer(1),
        })

    def test_recursion(self):
        source = "let fib = fn(n) { if (n < 2) { return n; } fib(n - 1) + fib(n - 2) }; fib(10)"
        self.assertEqual(Integer(55), self.run_source(source))

    def test_higher_order(self):
        source = "let twice = fn(f, x) { f(f(x)) }; twice(fn(n) { n * 3 }, 2)"
        self.assertEqual(Integer(18), self.run_source(source))


if __name__ == '__main__':
    unittest.main()
