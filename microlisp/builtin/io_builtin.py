"""File and console I/O primitives.

Failures here are reported as values (``#f``, ``()`` or the string
``"IO failed"``) rather than raised, so scripts can test for them. Paths are
strings or the :class:`pathlib.Path` handles returned by ``make-file``.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

from microlisp import LispValue
from microlisp.config import resolve_source_path
from microlisp.errors import MicroLispError, MicroLispTypeError
from microlisp.evaluation.evaluator import evaluate
from microlisp.reader.parser import parse_all
from microlisp.types.cons import (
    LispString,
    char_list_to_string,
    is_list,
    list_to_raw_string,
    make_list,
)
from microlisp.types.environment import Environment
from microlisp.types.nil import Nil
from microlisp.types.primitive import Primitive
from microlisp.types.symbol import FALSE, TRUE, Symbol, boolean

logger = logging.getLogger(__name__)

IO_FAILED = "IO failed"
SOURCE_SUFFIX = ".mlisp"


def _path(name: str, value: LispValue) -> Path:
    if isinstance(value, Path):
        return value
    text = char_list_to_string(value)
    if text is None or not text.text:
        raise MicroLispTypeError(f"{name}: expected a file name, got {value}")
    return Path(text.text)


def read(env: Environment, args: list[LispValue]) -> LispValue:
    """(read) reads one line from stdin and evaluates it."""
    line = sys.stdin.readline()
    result: LispValue = Nil
    for node in parse_all(line):
        result = evaluate(node, env)
    return result


def read_from_file(env: Environment, args: list[LispValue]) -> LispValue:
    """Whole file contents as a string, each line terminated by a newline."""
    try:
        path = _path("read-from-file", args[0])
    except MicroLispTypeError:
        return LispString("Error unknown")
    try:
        with path.open(encoding="utf-8") as f:
            return LispString("".join(line.rstrip("\r\n") + "\n" for line in f))
    except OSError as e:
        logger.debug("read-from-file %s failed: %s", path, e)
        return LispString(IO_FAILED)


def make_file(env: Environment, args: list[LispValue]) -> LispValue:
    """Create the file if needed and return its path handle, or #f."""
    path = _path("make-file", args[0])
    try:
        path.touch(exist_ok=True)
    except OSError as e:
        logger.debug("make-file %s failed: %s", path, e)
        return FALSE
    return path


def make_directory(env: Environment, args: list[LispValue]) -> LispValue:
    path = _path("make-directory", args[0])
    if path.exists():
        return boolean(path.is_dir())
    try:
        path.mkdir(parents=True)
    except OSError as e:
        logger.debug("make-directory %s failed: %s", path, e)
        return FALSE
    return TRUE


def write_to_file(env: Environment, args: list[LispValue]) -> LispValue:
    """(write-to-file handle text) replaces the file's contents with ``text``."""
    path = _path("write-to-file", args[0])
    try:
        path.write_text(list_to_raw_string(args[1]), encoding="utf-8")
    except OSError as e:
        logger.debug("write-to-file %s failed: %s", path, e)
        return FALSE
    return TRUE


def write_lines(env: Environment, args: list[LispValue]) -> LispValue:
    path = _path("write-lines", args[0])
    rows = args[1]
    if not is_list(rows):
        raise MicroLispTypeError(f"write-lines expects a list of lines, got {rows}")
    try:
        with path.open("w", encoding="utf-8") as f:
            for row in rows:
                f.write(list_to_raw_string(row))
                f.write("\n")
    except OSError as e:
        logger.debug("write-lines %s failed: %s", path, e)
        return FALSE
    return TRUE


def read_lines(env: Environment, args: list[LispValue]) -> LispValue:
    """List of the file's lines as strings; () when the file can't be read."""
    try:
        path = _path("read-lines", args[0])
        with path.open(encoding="utf-8") as f:
            return make_list(LispString(line.rstrip("\r\n")) for line in f)
    except (OSError, MicroLispTypeError) as e:
        logger.debug("read-lines failed: %s", e)
        return Nil


def split_by_comma(env: Environment, args: list[LispValue]) -> LispValue:
    text = list_to_raw_string(args[0])
    return make_list(LispString(cell) for cell in text.split(","))


def import_source(env: Environment, args: list[LispValue]) -> LispValue:
    """(import name) evaluates ``name.mlisp`` from the load path into the environment."""
    target = args[0]
    name = target.id if isinstance(target, Symbol) else list_to_raw_string(target)
    if not name.endswith(SOURCE_SUFFIX):
        name += SOURCE_SUFFIX
    path = resolve_source_path(name)
    if path is None:
        raise MicroLispError(f"import: cannot find {name}")
    logger.debug("importing %s", path)
    for node in parse_all(path.read_text(encoding="utf-8")):
        evaluate(node, Environment(env.root))
    return TRUE


def register(env: Environment) -> None:
    """Register the file and console I/O primitives."""
    env.update(
        {
            Symbol("read"): Primitive("read", read, 0),
            Symbol("read-from-file"): Primitive("read-from-file", read_from_file, 1),
            Symbol("make-file"): Primitive("make-file", make_file, 1),
            Symbol("make-directory"): Primitive("make-directory", make_directory, 1),
            Symbol("write-to-file"): Primitive("write-to-file", write_to_file, 2),
            Symbol("write-lines"): Primitive("write-lines", write_lines, 2),
            Symbol("read-lines"): Primitive("read-lines", read_lines, 1),
            Symbol("split-by-comma"): Primitive("split-by-comma", split_by_comma, 1),
            Symbol("import"): Primitive("import", import_source, 1),
        }
    )
