"""Session control for the mnky interpreter: runs source text from a file or from the interactive shell against one
long-lived environment, so that `let` bindings persist from one input to the next.

A session can echo three things for each program it runs (see Session.MODES):
    - "eval": the inspect string of the program's value (default)
    - "ast": the reconstructed source of the parsed program
    - "tokens": the scanned tokens
"""

import logging

from mnky.lang.error import GenericException, ParseException
from mnky.runtime.environment import Environment
from mnky.runtime.evaluator import Evaluator
from mnky.runtime.value import Error
from mnky.syntax import nodes
from mnky.syntax.parser import parse_program
from mnky.syntax.scanner import tokenize
from mnky.syntax.tokens import TokenKind


logger = logging.getLogger(__name__)


class Session:
    """Governs a mnky session, with control over the global environment."""
    SH_FILE = "<in>"  # command-line interpreter filename
    MODES = ("eval", "ast", "tokens")
    BRACKETS = ((TokenKind.LPAREN, TokenKind.RPAREN), (TokenKind.LBRACE, TokenKind.RBRACE),
                (TokenKind.LBRACKET, TokenKind.RBRACKET))

    def __init__(self, error_handler, path, cmd_line, mode="eval"):
        if mode not in Session.MODES:
            raise GenericException("unknown mode '{}'", mode)

        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.mode = mode

        self.env = Environment()
        self.evaluator = Evaluator()

        self.to_exec = {}  # dict of line num: (source, Program) to execute
        self.results = []  # printable results, oldest first

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path)

            if source.strip():
                self.add(source, 1)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, prev_line=""):
        """Joins line onto prev_line (an unfinished input). Returns the joined line and whether the input is still
        unfinished, i.e. whether it has more opening than closing brackets. Brackets inside string literals don't
        count.
        """
        line = f"{prev_line}\n{line}" if prev_line else line
        kinds = [token.kind for token in tokenize(line)]
        unfinished = any(kinds.count(open_) > kinds.count(close) for open_, close in Session.BRACKETS)
        return line, unfinished

    def add(self, source, line_num=1):
        """Parses source and queues it for execution. Raises a ParseException listing every parser error if source is
        not a valid program.
        """
        self.error_handler.register_line(self.path, source, line_num)  # in case error is raised

        program, errors = parse_program(source)
        if errors:
            logger.debug("%d parser error(s) in line %d", len(errors), line_num)
            raise ParseException(errors)

        self.to_exec[line_num] = (source, program)
        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Runs this session's queued programs in order and stores their results. Raises a GenericException for the
        first program that evaluates to an error.
        """
        for line_num, (source, program) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, source, line_num)
            del self.to_exec[line_num]

            if self.mode == "tokens":
                self.results.append("\n".join(str(token) for token in tokenize(source)))
            elif self.mode == "ast":
                self.results.append(str(program))
            else:
                self._evaluate(program)

            self.error_handler.remove_line(self.path)

    def _evaluate(self, program):
        logger.debug("evaluating %d statement(s)", len(program.statements))
        result = self.evaluator.evaluate(program, self.env)

        if isinstance(result, Error):
            raise GenericException("{}", result.message)

        # a line that only binds names has nothing to show
        if not all(isinstance(stmt, nodes.LetStatement) for stmt in program.statements):
            self.results.append(result.inspect())

    def pop(self):
        """Removes and returns the latest result."""
        return self.results.pop()
