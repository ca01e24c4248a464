"""Helpers for generating source modules from lexer data.

The generated text is meant to be included by a build step, so files are
only rewritten when their contents actually change.
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

_UNSIGNED_TYPES = (("u32", 2**32 - 1), ("u64", 2**64 - 1))


class VisibilityKind(enum.Enum):
    """The kinds of visibility a generated module can have."""

    PRIVATE = "private"
    PUBLIC = "public"
    PUBLIC_SUPER = "public_super"
    PUBLIC_SELF = "public_self"
    PUBLIC_CRATE = "public_crate"
    PUBLIC_IN = "public_in"


_FIXED_RENDERINGS = {
    VisibilityKind.PRIVATE: "",
    VisibilityKind.PUBLIC: "pub",
    VisibilityKind.PUBLIC_SUPER: "pub(super)",
    VisibilityKind.PUBLIC_SELF: "pub(self)",
    VisibilityKind.PUBLIC_CRATE: "pub(crate)",
}


@dataclass(frozen=True)
class Visibility:
    """The visibility of a generated module.

    ``path`` is required for, and only allowed with, ``VisibilityKind.PUBLIC_IN``.
    """

    kind: VisibilityKind = VisibilityKind.PRIVATE
    path: str | None = None

    def __post_init__(self) -> None:
        if (self.kind is VisibilityKind.PUBLIC_IN) != (self.path is not None):
            raise ValueError("a path must be given exactly when the kind is PUBLIC_IN")

    @classmethod
    def private(cls) -> "Visibility":
        return cls(VisibilityKind.PRIVATE)

    @classmethod
    def public(cls) -> "Visibility":
        return cls(VisibilityKind.PUBLIC)

    @classmethod
    def public_super(cls) -> "Visibility":
        return cls(VisibilityKind.PUBLIC_SUPER)

    @classmethod
    def public_self(cls) -> "Visibility":
        return cls(VisibilityKind.PUBLIC_SELF)

    @classmethod
    def public_crate(cls) -> "Visibility":
        return cls(VisibilityKind.PUBLIC_CRATE)

    @classmethod
    def public_in(cls, path: str) -> "Visibility":
        return cls(VisibilityKind.PUBLIC_IN, path)

    def render(self) -> str:
        """The visibility qualifier as it appears in generated code."""
        if self.kind is VisibilityKind.PUBLIC_IN:
            return f"pub(in {self.path})"
        return _FIXED_RENDERINGS[self.kind]


def _storage_type_name(values) -> str:
    """The narrowest unsigned storage type (u32 by default) holding all ``values``."""
    values = list(values)
    if any(v < 0 for v in values):
        raise ValueError("token IDs must be non-negative")
    top = max(values, default=0)
    for name, limit in _UNSIGNED_TYPES:
        if top <= limit:
            return name
    raise OverflowError(f"token ID {top} is too large for any storage type")


def _build_stamp() -> str:
    mtime = Path(__file__).stat().st_mtime
    return datetime.fromtimestamp(mtime, tz=timezone.utc).isoformat()


def _write_if_changed(path: Path, text: str) -> bool:
    """Write ``text`` to ``path`` unless it already holds exactly that; report a write."""
    try:
        if path.read_text(encoding="utf-8") == text:
            return False
    except (OSError, UnicodeDecodeError):
        pass
    path.write_text(text, encoding="utf-8", newline="")
    return True


def _resolve_out_dir(out_dir: str | os.PathLike | None) -> Path:
    if out_dir is not None:
        return Path(out_dir)
    env = os.environ.get("OUT_DIR")
    if env is None:
        raise RuntimeError("OUT_DIR is not set and no output directory was given")
    return Path(env)


def ct_token_map(
    mod_name: str,
    token_map: Mapping[str, int],
    rename_map: Mapping[str, str] | None = None,
    out_dir: str | os.PathLike | None = None,
) -> Path:
    """Write a module named ``mod_name`` with one ``T_<name>`` constant per token.

    Names can be changed through ``rename_map``. The file is written to
    ``out_dir`` (or the ``OUT_DIR`` environment variable) as ``<mod_name>.rs``
    and left untouched if it already has the same contents. Returns its path.
    """
    type_name = _storage_type_name(token_map.values())
    renames = rename_map or {}
    lines = [
        f"    #[allow(dead_code)] pub const T_{renames.get(name, name)}: {type_name} = {value};"
        for name, value in token_map.items()
    ]
    text = (
        f'// lrlex build time: "{_build_stamp()}"\n\nmod {mod_name} {{\n'
        + "\n".join(lines)
        + "\n}"
    )
    outp = (_resolve_out_dir(out_dir) / mod_name).with_suffix(".rs")
    _write_if_changed(outp, text)
    return outp