"""Errors raised while reading a lexer specification."""

from __future__ import annotations

import enum


class LexErrorKind(enum.Enum):
    """The kinds of problem that can be found in a lexer specification."""

    PREMATURE_END = "File ends prematurely"
    ROUTINES_NOT_SUPPORTED = "Routines not currently supported"
    UNKNOWN_DECLARATION = "Unknown declaration"
    MISSING_SPACE = "Rule is missing a space"
    INVALID_NAME = "Invalid rule name"
    DUPLICATE_NAME = "Rule name already exists"
    REGEX_ERROR = "Invalid regular expression"

    @property
    def message(self) -> str:
        return self.value


class LexBuildError(Exception):
    """A problem in a lexer specification, located by 1-based line and column."""

    def __init__(self, kind: LexErrorKind, line: int, col: int) -> None:
        super().__init__(kind, line, col)
        self.kind = kind
        self.line = line
        self.col = col

    def __str__(self) -> str:
        return f"{self.kind.message} at line {self.line} column {self.col}"

    def __repr__(self) -> str:
        return f"LexBuildError(kind={self.kind.name}, line={self.line}, col={self.col})"