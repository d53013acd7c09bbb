#!/usr/bin/env python3
"""
Command line driver for Kody.

Usage:
    kody program.kd [--verbose] [--ignore-extensions] [--recursion-limit N]
"""

import argparse
import logging
import os
import sys
import time
from typing import List, Optional

from . import __version__
from .lexer import tokenize, format_tokens, LexerError
from .parser import parse, format_tree, ParseError
from .runtime import execute, ExecutionError

logger = logging.getLogger(__name__)

SOURCE_EXTENSION = ".kd"
DEFAULT_RECURSION_LIMIT = 10000


class CommandError(Exception):
    """A failure of the driver itself, outside lexing, parsing and execution."""


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kody",
        description="Run a Kody program",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  kody hello.kd                  # Run a program
  kody hello.kd --verbose        # Also log source, tokens and syntax tree
  kody script.txt -e             # Run a file without the .kd extension
        """
    )

    parser.add_argument("source", nargs="?",
                        help="Path of the source file to run")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log the file contents, tokens and syntax tree")
    parser.add_argument("-e", "--ignore-extensions", action="store_true",
                        help=f"Accept source files without the {SOURCE_EXTENSION} extension")
    parser.add_argument("--recursion-limit", type=int, default=DEFAULT_RECURSION_LIMIT,
                        help="Python recursion limit used while running (default: %(default)s)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def read_source(path: str, ignore_extensions: bool = False) -> str:
    """Read a UTF-8 source file, enforcing the source extension unless told not to."""
    if not ignore_extensions and os.path.splitext(path)[1] != SOURCE_EXTENSION:
        raise CommandError(
            f"Incorrect source file extension. Use {SOURCE_EXTENSION} extension "
            f"or the --ignore-extensions flag."
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError:
        raise CommandError(f"The data in file {path} was not valid UTF-8 text!") from None
    except OSError:
        raise CommandError(f"Unable to read the contents of file {path} !") from None


def run_file(path: str, verbose: bool = False, ignore_extensions: bool = False) -> None:
    """Run one source file through the whole pipeline."""
    source = read_source(path, ignore_extensions)
    if verbose:
        logger.info("File contents:\n%s", source)

    tokens = tokenize(source, path)
    if verbose:
        logger.info("Tokens:\n%s", format_tokens(tokens))

    program = parse(tokens)
    if verbose:
        logger.info("Syntax tree:\n%s", format_tree(program))

    result = execute(program.functions, program.main)
    logger.debug("Program result: %s", result.debug())


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the ``kody`` command; returns the exit status."""
    args = build_argument_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="[%(levelname)s]: %(message)s",
    )

    if args.source is None:
        print("ERROR: Please provide a source file as a program argument!")
        return 1

    start = time.perf_counter_ns()
    previous_limit = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous_limit, args.recursion_limit))

    try:
        run_file(args.source, args.verbose, args.ignore_extensions)
    except (CommandError, LexerError, ParseError, ExecutionError) as e:
        logger.info("%s", e)
        message = e.args[0] if e.args else str(e)
        location = getattr(e, "location", None)
        if location is not None:
            message = f"{message} ({location})"
        print(f"ERROR: {message}")
        return 1
    finally:
        sys.setrecursionlimit(previous_limit)

    elapsed = (time.perf_counter_ns() - start) // 1000
    print(f"Time elapsed: {elapsed} µs")
    return 0


if __name__ == "__main__":
    sys.exit(main())
