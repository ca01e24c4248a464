"""Generate, at build time, a source module that recreates a lexer definition."""

from __future__ import annotations

import enum
import os
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Hashable, Mapping

from .codegen import Visibility, _resolve_out_dir, _storage_type_name, _write_if_changed
from .lexer import LRNonStreamingLexerDef

_GENERATED_FILE_EXT = "rs"
_TOKEN_ID_RE = re.compile(r"[a-zA-Z_][a-zA-Z_0-9]*")

_generated_paths: set[Path] = set()
_generated_lock = threading.Lock()


class LexerKind(enum.Enum):
    """The kinds of lexer that can be generated."""

    LR_NON_STREAMING_LEXER = "LRNonStreamingLexer"


@dataclass(frozen=True)
class CTLexer:
    """The result of ``CTLexerBuilder.build``.

    ``missing_from_lexer`` holds token names the parser uses that the lexer
    does not define; ``missing_from_parser`` holds names the lexer defines that
    the parser does not use. Each is ``None`` when empty or not computed.
    """

    missing_from_lexer: frozenset[str] | None = None
    missing_from_parser: frozenset[str] | None = None


def _debug_str(s: str) -> str:
    """Quote ``s`` as a string literal in the generated code."""
    out = []
    for c in s:
        if c == "\\":
            out.append("\\\\")
        elif c == '"':
            out.append('\\"')
        elif c == "\n":
            out.append("\\n")
        elif c == "\r":
            out.append("\\r")
        elif c == "\t":
            out.append("\\t")
        elif c == "\0":
            out.append("\\0")
        elif ord(c) < 0x20 or ord(c) == 0x7F:
            out.append(f"\\u{{{ord(c):x}}}")
        else:
            out.append(c)
    return '"' + "".join(out) + '"'


def _default_mod_name(lexer_path: Path) -> str:
    stem = str(lexer_path)
    while True:
        new_stem = Path(stem).stem
        if new_stem == stem:
            break
        stem = new_stem
    return f"{stem}_l"


class CTLexerBuilder:
    """Collects the settings for generating a lexer module, then builds it."""

    def __init__(self) -> None:
        self._lexer_path: Path | None = None
        self._output_path: Path | None = None
        self._lexerkind = LexerKind.LR_NON_STREAMING_LEXER
        self._mod_name: str | None = None
        self._visibility = Visibility.private()
        self._rule_ids_map: dict[str, Hashable] | None = None
        self._allow_missing_terms_in_lexer = False
        self._allow_missing_tokens_in_parser = True

    def lexer_in_src_dir(
        self, srcp: str | os.PathLike, out_dir: str | os.PathLike | None = None
    ) -> "CTLexerBuilder":
        """Use ``src/<srcp>`` as input and ``<out_dir>/<srcp>.rs`` as output.

        ``out_dir`` defaults to the ``OUT_DIR`` environment variable. Raises
        ``ValueError`` if ``srcp`` is not a relative path.
        """
        src = Path(srcp)
        if src.is_absolute():
            raise ValueError(f"Lexer path '{src}' must be a relative path.")
        self._lexer_path = Path.cwd() / "src" / src
        outp = _resolve_out_dir(out_dir) / src.parent
        outp.mkdir(parents=True, exist_ok=True)
        return self.output_path(outp / f"{src.name}.{_GENERATED_FILE_EXT}")

    def lexer_path(self, inp: str | os.PathLike) -> "CTLexerBuilder":
        self._lexer_path = Path(inp)
        return self

    def output_path(self, outp: str | os.PathLike) -> "CTLexerBuilder":
        self._output_path = Path(outp)
        return self

    def lexerkind(self, lexerkind: LexerKind) -> "CTLexerBuilder":
        self._lexerkind = lexerkind
        return self

    def mod_name(self, mod_name: str) -> "CTLexerBuilder":
        self._mod_name = mod_name
        return self

    def visibility(self, vis: Visibility) -> "CTLexerBuilder":
        self._visibility = vis
        return self

    def rule_ids_map(self, rule_ids_map: Mapping[str, Hashable]) -> "CTLexerBuilder":
        """Set the token IDs of named rules, synchronising lexer and parser."""
        self._rule_ids_map = dict(rule_ids_map)
        return self

    def allow_missing_terms_in_lexer(self, allow: bool) -> "CTLexerBuilder":
        self._allow_missing_terms_in_lexer = allow
        return self

    def allow_missing_tokens_in_parser(self, allow: bool) -> "CTLexerBuilder":
        self._allow_missing_tokens_in_parser = allow
        return self

    def build(self) -> CTLexer:
        """Generate the module for the lexer file and write it to the output path.

        Raises ``ValueError`` if paths are unset, if the output path was already
        used, or if tokens are missing where that is not allowed;
        ``LexBuildError`` if the lexer file is malformed.
        """
        if self._lexer_path is None:
            raise ValueError("lexer_path must be specified before processing.")
        if self._output_path is None:
            raise ValueError("output_path must be specified before processing.")
        lexerp = self._lexer_path
        outp = self._output_path

        key = outp.absolute()
        with _generated_lock:
            if key in _generated_paths:
                raise ValueError(
                    f"Generating two lexers to the same path ('{outp}') is not allowed: "
                    "use CTLexerBuilder.output_path (and, optionally, "
                    "CTLexerBuilder.mod_name) to differentiate them."
                )
            _generated_paths.add(key)

        lexerdef = LRNonStreamingLexerDef.from_str(lexerp.read_text(encoding="utf-8"))

        missing_from_lexer: set[str] | None = None
        missing_from_parser: set[str] | None = None
        if self._rule_ids_map is not None:
            missing_from_lexer, missing_from_parser = lexerdef.set_rule_ids(self._rule_ids_map)

        if not self._allow_missing_terms_in_lexer and missing_from_lexer:
            outp.unlink(missing_ok=True)
            raise ValueError(
                "the following tokens are used in the grammar but are not defined "
                "in the lexer: " + ", ".join(sorted(missing_from_lexer))
            )
        if not self._allow_missing_tokens_in_parser and missing_from_parser:
            outp.unlink(missing_ok=True)
            raise ValueError(
                "the following tokens are defined in the lexer but not used in the "
                "grammar: " + ", ".join(sorted(missing_from_parser))
            )

        mod_name = self._mod_name if self._mod_name is not None else _default_mod_name(lexerp)
        text = self._render(lexerdef, mod_name)
        _write_if_changed(outp, text)
        return CTLexer(
            frozenset(missing_from_lexer) if missing_from_lexer else None,
            frozenset(missing_from_parser) if missing_from_parser else None,
        )

    def _render(self, lexerdef: LRNonStreamingLexerDef, mod_name: str) -> str:
        if self._rule_ids_map is not None:
            storage = _storage_type_name(self._rule_ids_map.values())
        else:
            storage = _storage_type_name(
                r.tok_id for r in lexerdef.iter_rules() if r.tok_id is not None
            )
        lexerdef_name = "LRNonStreamingLexerDef"
        lexerdef_type = (
            f"{lexerdef_name}<lrlex::lexemes::DefaultLexeme<{storage}>, {storage}>"
        )

        parts = [
            f"{self._visibility.render()} mod {mod_name} {{\n"
            "use lrlex::{LexerDef, LRNonStreamingLexerDef, Rule};\n"
            "\n"
            "#[allow(dead_code)]\n"
            f"pub fn lexerdef() -> {lexerdef_type} {{\n"
            "    let rules = vec!["
        ]
        for rule in lexerdef.iter_rules():
            tok_id = "None" if rule.tok_id is None else f"Some({rule.tok_id})"
            name = "None" if rule.name is None else f"Some({_debug_str(rule.name)}.to_string())"
            span = f"::cfgrammar::Span::new({rule.name_span.start}, {rule.name_span.end})"
            re_lit = rule.re_str.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(
                f'\n        Rule::new({tok_id}, {name}, {span}, "{re_lit}".to_string()).unwrap(),'
            )
        parts.append(f"\n    ];\n    {lexerdef_name}::from_rules(rules)\n}}\n\n")

        for name, tok_id in (self._rule_ids_map or {}).items():
            if _TOKEN_ID_RE.fullmatch(name):
                parts.append(
                    f"#[allow(dead_code)]\npub const T_{name.upper()}: {storage} = {tok_id};\n"
                )
        parts.append("}")
        return "".join(parts)