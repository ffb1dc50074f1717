"""Command-line entry point: run an optional script, then an interactive loop.

Commands at the prompt:
    :exit          leave the loop
    :load <file>   evaluate a file into the current session
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, TextIO

from microlisp.config import get_log_level, resolve_source_path
from microlisp.errors import MicroLispError
from microlisp.interpreter import Interpreter
from microlisp.printer import to_printed

logger = logging.getLogger(__name__)

PROMPT = ">>> "
RESET = "\033[0m"
COLOR_ERROR = "\033[91m"


def format_error(e: BaseException) -> str:
    return f"{COLOR_ERROR}Error: {e}{RESET}"


def _load(itp: Interpreter, name: str, out: TextIO) -> None:
    try:
        itp.load_file(name)
    except FileNotFoundError as e:
        print(format_error(e), file=out)


def handle_line(itp: Interpreter, line: str, out: Optional[TextIO] = None) -> bool:
    """Evaluate one line of input and print its result.

    Returns False when the session should end.
    """
    out = out or sys.stdout
    line = line.strip()
    if not line:
        return True
    if line == ":exit":
        return False
    try:
        if line.startswith(":load"):
            _load(itp, line[len(":load"):].strip(), out)
        else:
            print(to_printed(itp.eval(line)), file=out)
    except MicroLispError as e:
        print(format_error(e), file=out)
    except RecursionError:
        print(format_error("maximum recursion depth exceeded"), file=out)
    return True


def repl(itp: Interpreter, stdin: Optional[TextIO] = None, out: Optional[TextIO] = None) -> None:
    stdin = stdin or sys.stdin
    out = out or sys.stdout
    while True:
        out.write(PROMPT)
        out.flush()
        line = stdin.readline()
        if not line:
            out.write("\n")
            return
        if not handle_line(itp, line, out):
            return


def run_script(itp: Interpreter, name: str) -> None:
    """Evaluate a script. Evaluation errors are not caught here."""
    path = resolve_source_path(name)
    if path is None:
        raise FileNotFoundError(f"No such file: {name}")
    logger.debug("running script %s", path)
    itp.eval(path.read_text(encoding="utf-8"))


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="microlisp", description="MicroLisp interpreter")
    parser.add_argument("path", nargs="?", help="script to evaluate before the interactive loop")
    parser.add_argument("--no-prelude", action="store_true", help="do not load the core prelude")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=get_log_level(),
        stream=sys.stderr,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    itp = Interpreter(prelude=None if args.no_prelude else "auto")
    if args.path:
        try:
            run_script(itp, args.path)
        except (MicroLispError, FileNotFoundError, RecursionError) as e:
            print(format_error(e), file=sys.stderr)
            return 1
    repl(itp)
    return 0


if __name__ == "__main__":
    sys.exit(main())
