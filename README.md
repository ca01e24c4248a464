# lrlex

`lrlex` reads lexer definitions written in a subset of the `.l` format used by
lex and flex, and turns input text into a sequence of lexemes. Matching works
by longest match: among the rules that match at the current position, the
longest one wins, and if two rules match text of the same length, the earlier
rule wins. It has no dependencies beyond the standard library.

## Installing

```
pip install .
```

## The `.l` format

A definition file has an empty declarations section (only whitespace), then
`%%`, then one rule per line. Each rule is a regular expression, a space, and
then either a token name in single or double quotes, or `;` to skip whatever
the rule matches:

```
%%
[0-9]+ "INT"
[a-zA-Z_]+ "ID"
\+ "+"
[ \t\n]+ ;
```

Regular expressions use Python's `re` syntax, compiled with `MULTILINE` and
`DOTALL`. A second `%%` may end the rules section, but only whitespace may
follow it: a routines section is not supported.

Problems in a definition raise `lrlex.errors.LexBuildError`. Its `kind` is a
`LexErrorKind` (`PREMATURE_END`, `ROUTINES_NOT_SUPPORTED`,
`UNKNOWN_DECLARATION`, `MISSING_SPACE`, `INVALID_NAME`, `DUPLICATE_NAME`,
`REGEX_ERROR`), and `line` and `col` locate it, 1-based; `str()` gives a
message such as `Rule is missing a space at line 2 column 1`.

## Command line

```
lrlex <lexer.l> <input file>
```

This prints one line per lexeme to standard output: the rule name followed by
the matched text. `-h`/`--help` or a wrong number of arguments prints a usage
line to standard error. A file that cannot be read or a malformed definition
is reported on standard error; a lexing failure prints the `LexError` to
standard output. In each of those cases the exit status is 1.

## Library use

```python
from lrlex.lexer import LRNonStreamingLexerDef

lexerdef = LRNonStreamingLexerDef.from_str('%%\n[0-9]+ "INT"\n[a-z]+ "ID"\n[ ] ;\n')
lexerdef.set_rule_ids({"INT": 0, "ID": 1})

lexer = lexerdef.lexer("abc 123")
for lexeme in lexer:
    print(lexeme.tok_id, lexer.span_str(lexeme.span()))

print(lexer.line_col(next(iter(lexer)).span()))  # ((1, 1), (1, 4))
```

- `LRNonStreamingLexerDef.from_str(src, max_tok_id=2**32 - 1)` parses a
  definition. Each rule's `tok_id` starts as its index; more rules than
  `max_tok_id` allows raise `OverflowError` (`None` means no limit).
  `from_rules` builds a definition from `lrlex.rule.Rule` objects directly.
- `get_rule(idx)` and `get_rule_by_name(name)` return a `Rule` or `None`;
  `get_rule_by_id(tok_id)` raises `KeyError` if no rule has that ID.
  `iter_rules()` iterates over the rules in order.
- `set_rule_ids(mapping)` assigns token IDs to named rules and returns
  `(missing_from_lexer, missing_from_parser)`: names in the mapping that no
  rule defines, and named rules absent from the mapping. Each is `None` when
  empty. A named rule absent from the mapping gets `tok_id` `None`, and input
  it matches becomes a lexing error.
- `lexer(s)` returns an `LRNonStreamingLexer`. Iterating over it yields
  `lrlex.lexemes.DefaultLexeme` objects and raises `lrlex.lexemes.LexError`
  (carrying a zero-length `span`) where the input could not be lexed.
- `span_str(span)`, `span_lines_str(span)` (the whole lines a span touches)
  and `line_col(span)` (1-based line and column of both ends) answer queries
  about `lrlex.lexemes.Span` values; a span past the end of the input raises
  `IndexError`.

## Generating token modules

Two helpers write source files for another build step to include. The
generated text is in the style of that build system's `.rs` modules, and an
existing output file is left untouched when its contents would not change.

- `lrlex.ctbuilder.CTLexerBuilder` is configured by chained calls
  (`lexer_path`, `output_path`, or `lexer_in_src_dir(srcp, out_dir=None)`
  which reads `src/<srcp>` and writes `<out_dir>/<srcp>.rs`; `mod_name`,
  `visibility`, `rule_ids_map`, `lexerkind`, `allow_missing_terms_in_lexer`,
  `allow_missing_tokens_in_parser`). `build()` writes a module that recreates
  the rules, plus a `T_<NAME>` constant for each identifier-like name in the
  rule-ID map, and returns a `CTLexer` with the missing token sets. It raises
  `ValueError` if paths are unset, if an output path is used twice in one
  process, or if tokens are missing where that is not allowed. Without
  `mod_name`, the module is named after the lexer file's stem plus `_l`.
- `lrlex.codegen.ct_token_map(mod_name, token_map, rename_map=None,
  out_dir=None)` writes `<mod_name>.rs` with one `T_<name>` constant per token
  and returns its path. `out_dir` defaults to the `OUT_DIR` environment
  variable.
- `lrlex.codegen.Visibility` (`private()`, `public()`, `public_super()`,
  `public_self()`, `public_crate()`, `public_in(path)`) sets the generated
  module's visibility qualifier.

## What it does not do

`lrlex` contains no parser generator: token IDs that should agree with a
grammar must be supplied by the caller through `set_rule_ids` or
`CTLexerBuilder.rule_ids_map`. Generated modules are plain text files; this
package does not load or run them. Only the non-streaming lexer kind
(`LexerKind.LR_NON_STREAMING_LEXER`) exists, so the whole input is lexed up
front.