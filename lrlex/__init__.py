"""Lex-style lexer definitions, longest-match lexing and token module generation."""

__version__ = "0.1.0"