"""Lexer definitions and the non-streaming lexer they produce."""

from __future__ import annotations

import bisect
from typing import Hashable, Iterable, Iterator, Mapping

from .lexemes import DefaultLexeme, LexError, Span
from .parser import DEFAULT_MAX_TOK_ID, parse_lex
from .rule import Rule


class LRNonStreamingLexerDef:
    """An in-memory lexer specification from which lexers are instantiated."""

    def __init__(self, rules: Iterable[Rule]) -> None:
        self._rules: list[Rule] = list(rules)

    @classmethod
    def from_rules(cls, rules: Iterable[Rule]) -> "LRNonStreamingLexerDef":
        """Build a definition directly from already constructed rules."""
        return cls(rules)

    @classmethod
    def from_str(
        cls, src: str, max_tok_id: int | None = DEFAULT_MAX_TOK_ID
    ) -> "LRNonStreamingLexerDef":
        """Build a definition from the text of a ``.l`` file.

        Raises ``LexBuildError`` if the specification is malformed.
        """
        return cls(parse_lex(src, max_tok_id))

    def get_rule(self, idx: int) -> Rule | None:
        """The rule at index ``idx``, or ``None`` if there is none."""
        if 0 <= idx < len(self._rules):
            return self._rules[idx]
        return None

    def get_rule_by_id(self, tok_id: Hashable) -> Rule:
        """The rule whose token ID is ``tok_id``; raises ``KeyError`` if absent."""
        for rule in self._rules:
            if rule.tok_id is not None and rule.tok_id == tok_id:
                return rule
        raise KeyError(f"no rule with token ID {tok_id!r}")

    def get_rule_by_name(self, name: str) -> Rule | None:
        """The rule called ``name``, or ``None`` if there is none."""
        return next((r for r in self._rules if r.name == name), None)

    def set_rule_ids(
        self, rule_ids_map: Mapping[str, Hashable]
    ) -> tuple[set[str] | None, set[str] | None]:
        """Assign token IDs to named rules from ``rule_ids_map``.

        Returns ``(missing_from_lexer, missing_from_parser)``: names in the map
        that no rule defines, and named rules absent from the map. Each is
        ``None`` when empty. Rules absent from the map get a ``tok_id`` of
        ``None``, so input they match is reported as a lexing error.
        """
        missing_from_parser: set[str] = set()
        missing_count = 0
        rules_with_names = 0
        for rule in self._rules:
            if rule.name is None:
                continue
            rules_with_names += 1
            if rule.name in rule_ids_map:
                rule.tok_id = rule_ids_map[rule.name]
            else:
                rule.tok_id = None
                missing_from_parser.add(rule.name)
                missing_count += 1

        if rules_with_names - missing_count == len(rule_ids_map):
            missing_from_lexer = None
        else:
            defined = {r.name for r in self._rules if r.name is not None}
            missing_from_lexer = set(rule_ids_map) - defined

        return missing_from_lexer, (missing_from_parser or None)

    def iter_rules(self) -> Iterator[Rule]:
        """Iterate over the rules in order."""
        return iter(self._rules)

    def lexer(self, s: str) -> "LRNonStreamingLexer":
        """Lex ``s`` using longest match, earlier rules winning ties."""
        lexemes: list[DefaultLexeme | LexError] = []
        newlines: list[int] = []
        i = 0
        while i < len(s):
            longest = 0
            best: Rule | None = None
            for rule in self._rules:
                length = rule.match_len(s, i)
                if length is not None and length > longest:
                    longest = length
                    best = rule
            if best is None:
                lexemes.append(LexError(Span(i, i)))
                break
            newlines.extend(
                i + off + 1 for off, c in enumerate(s[i : i + longest]) if c == "\n"
            )
            if best.name is not None:
                if best.tok_id is None:
                    lexemes.append(LexError(Span(i, i)))
                    break
                lexemes.append(DefaultLexeme(best.tok_id, i, longest))
            i += longest
        return LRNonStreamingLexer(s, lexemes, newlines)


class LRNonStreamingLexer:
    """The lexemes of one input string, with span and line/column queries.

    ``newlines`` is the sorted list of offsets at which each following line
    starts, e.g. ``[3, 5]`` for ``" a\\nb\\n  c d"``.
    """

    def __init__(
        self,
        s: str,
        lexemes: Iterable[DefaultLexeme | LexError],
        newlines: Iterable[int],
    ) -> None:
        self._s = s
        self._lexemes = list(lexemes)
        self._newlines = list(newlines)

    def __iter__(self) -> Iterator[DefaultLexeme]:
        """Yield the lexemes in order, raising ``LexError`` where lexing failed."""
        for item in self._lexemes:
            if isinstance(item, LexError):
                raise LexError(item.span)
            yield item

    def _check_span(self, span: Span) -> None:
        if span.end > len(self._s):
            raise IndexError(f"Span {span!r} exceeds known input length {len(self._s)}")

    def span_str(self, span: Span) -> str:
        """The input text covered by ``span``."""
        self._check_span(span)
        return self._s[span.start : span.end]

    def span_lines_str(self, span: Span) -> str:
        """The full lines of input that ``span`` touches, without the final newline."""
        self._check_span(span)
        nl = self._newlines

        j = bisect.bisect_left(nl, span.start)
        if j < len(nl) and nl[j] == span.start:
            st, st_line = nl[j], j + 1
        elif j == 0:
            st, st_line = 0, 0
        else:
            st, st_line = nl[j - 1], j

        k = bisect.bisect_left(nl, span.end, lo=st_line)
        if k < len(nl) and nl[k] == span.end:
            en = nl[k + 1] - 1
        elif k == len(nl):
            en = len(self._s)
        else:
            en = nl[k] - 1
        return self._s[st:en]

    def _line_start(self, i: int) -> tuple[int, int]:
        """``(offset of the line's start, 1-based line number)`` for offset ``i``."""
        nl = self._newlines
        j = bisect.bisect_left(nl, i)
        if j < len(nl) and nl[j] == i:
            return nl[j], j + 2
        if j == 0:
            return 0, 1
        return nl[j - 1], j + 1

    def _line_col_at(self, i: int) -> tuple[int, int]:
        line_off, line = self._line_start(i)
        return line, i - line_off + 1

    def line_col(self, span: Span) -> tuple[tuple[int, int], tuple[int, int]]:
        """1-based ``((line, col), (line, col))`` of the span's start and end."""
        self._check_span(span)
        return self._line_col_at(span.start), self._line_col_at(span.end)