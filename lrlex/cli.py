"""Command line tool: lex a file with a ``.l`` specification and print the lexemes."""

from __future__ import annotations

import getopt
import os
import sys
from typing import Sequence

from .errors import LexBuildError
from .lexemes import LexError
from .lexer import LRNonStreamingLexerDef


class _ReadError(Exception):
    pass


def _usage(msg: str = "") -> int:
    prog = sys.argv[0] if sys.argv else ""
    leaf = os.path.basename(prog) or "lrpar"
    if msg:
        print(msg, file=sys.stderr)
    print(f"Usage: {leaf} <lexer.l> <input file>", file=sys.stderr)
    return 1


def _read_file(path: str) -> str:
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except OSError as e:
        raise _ReadError(f"Can't open file {path}: {e}") from e


def main(argv: Sequence[str] | None = None) -> int:
    """Run the tool; returns the process exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        opts, free = getopt.gnu_getopt(args, "h", ["help"])
    except getopt.GetoptError as e:
        return _usage(str(e))
    if opts or len(free) != 2:
        return _usage()

    lex_path, input_path = free
    try:
        lexerdef = LRNonStreamingLexerDef.from_str(_read_file(lex_path))
    except _ReadError as e:
        print(e, file=sys.stderr)
        return 1
    except LexBuildError as e:
        print(f"{lex_path}: {e}", file=sys.stderr)
        return 1

    try:
        text = _read_file(input_path)
    except _ReadError as e:
        print(e, file=sys.stderr)
        return 1

    try:
        for lexeme in lexerdef.lexer(text):
            span = lexeme.span()
            name = lexerdef.get_rule_by_id(lexeme.tok_id).name
            print(f"{name} {text[span.start:span.end]}")
    except LexError as e:
        print(repr(e))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())