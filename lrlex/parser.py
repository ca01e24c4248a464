"""Parser for ``.l`` lexer specifications."""

from __future__ import annotations

import re

from .errors import LexBuildError, LexErrorKind
from .lexemes import Span
from .rule import Rule

DEFAULT_MAX_TOK_ID = 2**32 - 1

_SECTION_MARK = "%%"


class _LexParser:
    """Recursive-descent reader for the declarations and rules of a lexer file."""

    def __init__(self, src: str, max_tok_id: int | None) -> None:
        self.src = src
        self.max_tok_id = max_tok_id
        self.newlines: list[int] = [0]
        self.rules: list[Rule] = []

    def error(self, kind: LexErrorKind, off: int) -> LexBuildError:
        line, col = self._off_to_line_col(off)
        return LexBuildError(kind, line, col)

    def _off_to_line_col(self, off: int) -> tuple[int, int]:
        if off >= len(self.src):
            line_off = self.newlines[-1]
            return len(self.newlines), len(self.src) - line_off + 1
        for line_m1 in reversed(range(len(self.newlines))):
            line_off = self.newlines[line_m1]
            if line_off <= off:
                return line_m1 + 1, off - line_off + 1
        return 1, off + 1

    def parse(self) -> None:
        i = self._parse_declarations(0)
        i = self._parse_rules(i)
        after = self._lookahead_is(_SECTION_MARK, i)
        if after is not None:
            if self._parse_ws(after) != len(self.src):
                raise self.error(LexErrorKind.ROUTINES_NOT_SUPPORTED, i)

    def _parse_declarations(self, i: int) -> int:
        i = self._parse_ws(i)
        after = self._lookahead_is(_SECTION_MARK, i)
        if after is not None:
            return after
        if i < len(self.src):
            raise self.error(LexErrorKind.UNKNOWN_DECLARATION, i)
        raise self.error(LexErrorKind.PREMATURE_END, max(i - 1, 0))

    def _parse_rules(self, i: int) -> int:
        while True:
            i = self._parse_ws(i)
            if i == len(self.src) or self._lookahead_is(_SECTION_MARK, i) is not None:
                return i
            i = self._parse_rule(i)

    def _parse_rule(self, i: int) -> int:
        end = self.src.find("\n", i)
        line_len = (len(self.src) if end == -1 else end) - i
        line = self.src[i : i + line_len].rstrip()
        rspace = line.rfind(" ")
        if rspace == -1:
            raise self.error(LexErrorKind.MISSING_SPACE, i)

        orig_name = line[rspace + 1 :]
        name_off = i + rspace + 1
        if orig_name == ";":
            name = None
            name_span = Span(name_off, name_off)
        else:
            quoted = len(orig_name) >= 2 and orig_name[0] in "'\"" and orig_name[-1] == orig_name[0]
            if not quoted:
                raise self.error(LexErrorKind.INVALID_NAME, name_off)
            name = orig_name[1:-1]
            name_span = Span(i + rspace + 2, i + rspace + len(orig_name))
            if any(r.name == name for r in self.rules):
                raise self.error(LexErrorKind.DUPLICATE_NAME, name_off)

        re_str = line[:rspace].rstrip()
        tok_id = len(self.rules)
        if self.max_tok_id is not None and tok_id > self.max_tok_id:
            raise OverflowError(
                f"token ID {tok_id} exceeds the maximum permitted value {self.max_tok_id}"
            )
        try:
            rule = Rule(tok_id, name, name_span, re_str)
        except re.error:
            raise self.error(LexErrorKind.REGEX_ERROR, i) from None
        self.rules.append(rule)
        return i + line_len

    def _parse_ws(self, i: int) -> int:
        j = i
        for c in self.src[i:]:
            if c in " \t":
                pass
            elif c in "\n\r":
                self.newlines.append(j + 1)
            else:
                break
            j += 1
        return j

    def _lookahead_is(self, s: str, i: int) -> int | None:
        return i + len(s) if self.src.startswith(s, i) else None


def parse_lex(src: str, max_tok_id: int | None = DEFAULT_MAX_TOK_ID) -> list[Rule]:
    """Parse a lexer specification into its rules, in order.

    Each rule's ``tok_id`` is its index. Raises ``LexBuildError`` for a
    malformed specification and ``OverflowError`` if there are more rules than
    ``max_tok_id`` allows (``None`` means no limit).
    """
    parser = _LexParser(src, max_tok_id)
    parser.parse()
    return parser.rules