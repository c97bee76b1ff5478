"""Handles interactive/command-line mode for the mnky interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """mnky interpreter shell.

    Only a line that is exactly a shell command ("exit" or "help", surrounding whitespace aside) is dispatched as
    one. Everything else is mnky source, so `exit(4)` calls a mnky function named exit. An input with unclosed
    brackets is held back and continued on the next line, under secondary_prompt.
    """
    intro = "mnky interpreter :: Python backend\nType 'help' for more information, 'exit' to quit."
    primary_prompt = ">> "
    secondary_prompt = ".. "
    prompt = primary_prompt
    COMMANDS = ("exit", "help")

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self.pending = ""  # unfinished input, waiting for its closing brackets
        self.line_num = 0

    def parseline(self, line):
        command = line.strip()
        if command == "EOF" or (command in Shell.COMMANDS and not self.pending):
            return command, "", command
        if not command and not self.pending:
            return None, None, ""
        return None, None, line

    def default(self, line):
        """Runs mnky source once its brackets are balanced."""
        with self.sess.error_handler:  # cmd.Cmd would exit on any exception
            self.line_num += 1

            source, unfinished = self.sess.preprocess_line(line, self.pending)
            self.pending = source if unfinished else ""
            self.prompt = self.secondary_prompt if unfinished else self.primary_prompt
            if unfinished:
                return

            self.sess.add(source, self.line_num)
            self.sess.run()

            if self.sess.results:
                print(self.sess.pop())

    def do_help(self, arg):
        """Prints a short intro to the language."""
        print("Welcome to the mnky interpreter!\n\n"
              "mnky is a small language with integers, booleans, strings, arrays and first-class \n"
              "functions. Try 'let add = fn(a, b) { a + b };' and then 'add(1, 2)'. Bindings \n"
              "made with 'let' are kept for the rest of the session.\n\n"
              "Inputs with unclosed brackets continue on the next line.")

    def emptyline(self):
        return False

    def do_EOF(self, arg):
        print()
        return True

    def do_exit(self, arg):
        return True
