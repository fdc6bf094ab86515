from __future__ import annotations

import logging
import sys
import traceback
from typing import Optional, TextIO

from .parser_rd import ParseError, parse
from .tree import Expr
from .types import MsdRuntimeError
from .utils import debug_py_trace_enabled

logger = logging.getLogger(__name__)

# CLI flag => mode name used by the runner and the REPL.
MODES = {
    "--interp": "interp",
    "--print": "print",
    "--pretty-print": "pretty",
}

USAGE = """\
usage: msdscript MODE [--debug]

Reads one expression per line from standard input. Blank lines are skipped.
When standard input is a terminal an interactive session starts instead.

modes:
  --interp        evaluate each expression and print its value
  --print         print each expression in canonical form
  --pretty-print  print each expression in pretty form

options:
  --debug         log each parsed expression to stderr
  --help          show this message and exit
"""

# Failures reported to the user rather than raised out of the CLI.
REPORTED_ERRORS = (ParseError, MsdRuntimeError, RecursionError)


def render(expr: Expr, mode: str) -> str:
    match mode:
        case "interp":
            return expr.evaluate().to_string()
        case "print":
            return expr.to_canonical_string()
        case "pretty":
            return expr.to_pretty_string()
        case _:
            raise ValueError(f"Unknown mode: {mode}")


def run_source(source: str, mode: str) -> str:
    """Parse source and render it according to mode."""
    expr = parse(source)
    logger.debug("AST: %r", expr)
    return render(expr, mode)


def report_error(exc: BaseException, err: TextIO) -> None:
    print(f"Error: {exc}", file=err)

    if debug_py_trace_enabled() and exc.__traceback__ is not None:
        print("\nPython traceback:", file=err)
        print("".join(traceback.format_tb(exc.__traceback__)), file=err, end="")


def run_lines(stream: TextIO, mode: str, out: TextIO, err: TextIO) -> int:
    """Run every non-blank line of stream; stop at the first failing line.

    Returns the process exit status.
    """
    for lineno, line in enumerate(stream, start=1):
        if not line.strip():
            continue

        try:
            result = run_source(line, mode)
        except REPORTED_ERRORS as exc:
            logger.debug("line %d failed", lineno, exc_info=True)
            report_error(exc, err)
            return 1

        print(result, file=out)

    return 0


def parse_args(argv: list[str]) -> tuple[Optional[str], bool, bool]:
    """Return (mode, debug, show_help) for the given arguments."""
    mode: Optional[str] = None
    debug = False
    show_help = False

    for token in argv:
        if token == "--help":
            show_help = True
            continue

        if token == "--debug":
            debug = True
            continue

        if token in MODES:
            if mode is not None:
                raise SystemExit(f"Error: more than one mode given ({token})")
            mode = MODES[token]
            continue

        if token.startswith("-"):
            raise SystemExit(f"Error: unknown option {token}; try --help")

        raise SystemExit(f"Error: unexpected argument {token}; try --help")

    return mode, debug, show_help


def main(argv: Optional[list[str]] = None) -> None:
    mode, debug, show_help = parse_args(sys.argv[1:] if argv is None else argv)

    if show_help:
        sys.stdout.write(USAGE)
        return

    if mode is None:
        raise SystemExit("Error: missing mode; try --help")

    if debug:
        logging.basicConfig(level=logging.DEBUG)

    if sys.stdin.isatty():
        from .repl import repl  # prompt_toolkit is only needed interactively
        repl(mode)
        return

    status = run_lines(sys.stdin, mode, sys.stdout, sys.stderr)
    if status:
        raise SystemExit(status)


if __name__ == "__main__":
    main()
