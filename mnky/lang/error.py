"""Error reporting for the mnky interpreter.

The language core never raises for mistakes in the user's program: the parser collects error strings and the
evaluator returns Error values. Session turns those into GenericExceptions, and ErrorHandler is the one place they
are caught and printed. Any other exception that reaches ErrorHandler is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be thrown by ErrorHandler. exprs are formatted (in bold) into msg."""

    def __init__(self, msg, exprs=None, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.plain_msg = msg.format(*exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))
        self.exprs = exprs
        self.internal = internal

        super().__init__(self.plain_msg)


class ParseException(GenericException):
    """Raised when a program could not be parsed. errors holds every parser error, in the order they were found."""

    def __init__(self, errors):
        super().__init__("{} parser error(s)", str(len(errors)))
        self.errors = list(errors)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and print mnky errors instead."""
    ERROR = "red"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    def throw(self, error):
        """Prints error (a GenericException) along with the lines registered in self.traceback. Exits if fatal."""
        error_msg = ""
        for file, (line, line_num) in self.traceback.items():
            if line and line.strip():
                first, *rest = line.strip().splitlines()
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {first}{' ...' if rest else ''}\n"

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if isinstance(error, ParseException):
            for parse_error in error.errors:
                print(f"\t{parse_error}")

        if self.fatal:
            sys.exit(1)
        self.traceback = {path: (None, None) for path in self.traceback}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}: {}'", [exc_type.__name__, str(exc_val)], internal=True))
            do_exit = True

        return not do_exit
