"""A single lexing rule: a regular expression with an optional token name."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Hashable

from .lexemes import Span


@dataclass(eq=False)
class Rule:
    """A lexing rule.

    ``tok_id`` is the ID given to lexemes matched by this rule; ``None`` means
    such text must not appear in the input. A ``name`` of ``None`` means the
    matched text is skipped. Raises ``re.error`` if ``re_str`` is invalid.
    """

    tok_id: Hashable | None
    name: str | None
    name_span: Span
    re_str: str
    _regex: re.Pattern = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._regex = re.compile(f"(?:{self.re_str})", re.MULTILINE | re.DOTALL)

    def match_len(self, s: str, pos: int) -> int | None:
        """Length of this rule's match starting exactly at ``pos``, or ``None``."""
        m = self._regex.match(s[pos:])
        return None if m is None else m.end()