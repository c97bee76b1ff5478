"""Runs mnky source files, or the interactive shell when no file is given. Installed as the `mnky` script."""

import argparse
import logging

from mnky.lang.error import ErrorHandler
from mnky.lang.session import Session
from mnky.lang.shell import Shell


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="mnky", description="mnky language interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--mode", choices=Session.MODES, default="eval",
                        help="what to print for each program: its value, its syntax tree or its tokens")
    parser.add_argument("-v", "--verbose", action="store_true", help="log parsing and evaluation steps")
    return parser.parse_args(argv)


def main(argv=None):
    """Runs mnky interpreter. Called from mnky executable script."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    with ErrorHandler() as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, mode=args.mode)
            sess.run()

            for result in sess.results:
                print(result)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, mode=args.mode)).cmdloop()


if __name__ == "__main__":
    main()
