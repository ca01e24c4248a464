"""Spans, lexemes and lexing errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable


@dataclass(frozen=True)
class Span:
    """A half-open range ``[start, end)`` of offsets into an input string."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span {self.start}..{self.end}")

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class DefaultLexeme:
    """A token of kind ``tok_id`` covering ``length`` characters from ``start``."""

    tok_id: Hashable
    start: int
    length: int
    faulty: bool = False

    @classmethod
    def new_faulty(cls, tok_id: Hashable, start: int, length: int) -> "DefaultLexeme":
        """Create a lexeme marked as faulty (e.g. inserted by error recovery)."""
        return cls(tok_id, start, length, faulty=True)

    def span(self) -> Span:
        return Span(self.start, self.start + self.length)

    def __str__(self) -> str:
        span = self.span()
        return f"DefaultLexeme[{span.start}..{span.end}]"


class LexError(Exception):
    """Raised or reported when the input cannot be lexed at ``span``."""

    def __init__(self, span: Span) -> None:
        super().__init__(span)
        self.span = span

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LexError):
            return NotImplemented
        return self.span == other.span

    def __hash__(self) -> int:
        return hash(self.span)

    def __str__(self) -> str:
        return f"Lexing error at {self.span.start}..{self.span.end}"

    def __repr__(self) -> str:
        return f"LexError(span={self.span!r})"