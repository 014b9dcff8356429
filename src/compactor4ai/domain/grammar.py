from __future__ import annotations

"""
Comment Grammar Registry.

Maps lowercase file extensions to the comment syntax of the language they
denote. Each grammar bundles up to three compiled patterns (single-line,
block, docstring) plus a flag telling the stripper whether string and
template literals must be shielded before any pattern is applied.

The table is assembled once at import time and exposed through a read-only
mapping, so concurrent lookups need no coordination.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

# -----------------------------------------------------------------------------
# RAW SYNTAX PATTERNS
# -----------------------------------------------------------------------------

_C_STYLE_SINGLE = r"//[^\n]*"
_C_STYLE_BLOCK = r"/\*[^*]*\*+(?:[^/*][^*]*\*+)*/"
_HASH_SINGLE = r"#[^\n]*"
_DASH_SINGLE = r"--[^\n]*"
_MARKUP_BLOCK = r"<!--[\s\S]*?-->"
_TRIPLE_QUOTED = r'"""[\s\S]*?"""|\'\'\'[\s\S]*?\'\'\''


# -----------------------------------------------------------------------------
# DATA MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CommentGrammar:
    """
    Immutable comment syntax descriptor for one language family.

    Attributes:
        single_line: Pattern matching a single-line comment up to the newline.
        block: Pattern matching a delimited (possibly multi-line) comment.
        docstring: Pattern matching a documentation literal.
        protect_literals: Whether literals must be shielded before stripping.
        triple_quoted: Whether ''' and \"\"\" open multi-line literals.
    """
    single_line: Optional[re.Pattern] = None
    block: Optional[re.Pattern] = None
    docstring: Optional[re.Pattern] = None
    protect_literals: bool = False
    triple_quoted: bool = False


def _build(
        single: Optional[str] = None,
        block: Optional[str] = None,
        docstring: Optional[str] = None,
        protect: bool = False,
        triple: bool = False,
) -> CommentGrammar:
    """Compile raw pattern strings into a grammar instance."""
    return CommentGrammar(
        single_line=re.compile(single) if single else None,
        block=re.compile(block) if block else None,
        docstring=re.compile(docstring) if docstring else None,
        protect_literals=protect,
        triple_quoted=triple,
    )


def _register(table: Dict[str, CommentGrammar], extensions: Iterable[str], grammar: CommentGrammar) -> None:
    for ext in extensions:
        table[ext] = grammar


def _build_table() -> Mapping[str, CommentGrammar]:
    """Assemble the extension table grouped by comment family."""
    table: Dict[str, CommentGrammar] = {}

    c_style = _build(_C_STYLE_SINGLE, _C_STYLE_BLOCK, protect=True)
    _register(table, ("js", "mjs", "cjs", "ts", "mts", "tsx", "jsx"), c_style)
    _register(table, ("c", "h", "cpp", "hpp", "cc", "cs", "java", "go", "rs"), c_style)
    _register(table, ("swift", "kt", "kts", "dart", "scala", "groovy"),
              _build(_C_STYLE_SINGLE, _C_STYLE_BLOCK, protect=True, triple=True))

    _register(table, ("py", "pyw"),
              _build(_HASH_SINGLE, docstring=_TRIPLE_QUOTED, protect=True, triple=True))
    table["pyx"] = _build(_HASH_SINGLE, protect=True, triple=True)

    table["rb"] = _build(_HASH_SINGLE, r"=begin[^=]*=end", protect=True)

    _register(table, ("sh", "bash", "zsh", "fish", "r", "yaml", "yml", "toml", "conf"),
              _build(_HASH_SINGLE, protect=True))
    table["ini"] = _build(r"[;#][^\n]*")
    _register(table, ("pl", "pm"), _build(_HASH_SINGLE, protect=True))

    _register(table, ("html", "htm", "xml", "svg", "xhtml"), _build(block=_MARKUP_BLOCK))
    _register(table, ("vue", "svelte"),
              _build(_C_STYLE_SINGLE, f"{_C_STYLE_BLOCK}|{_MARKUP_BLOCK}", protect=True))

    table["css"] = _build(block=_C_STYLE_BLOCK)
    _register(table, ("scss", "less"), _build(_C_STYLE_SINGLE, _C_STYLE_BLOCK, protect=True))
    table["sass"] = _build(_C_STYLE_SINGLE, protect=True)

    table["sql"] = _build(_DASH_SINGLE, _C_STYLE_BLOCK, protect=True)
    table["lua"] = _build(_DASH_SINGLE, r"--\[(=*)\[[\s\S]*?\]\1\]", protect=True)
    table["hs"] = _build(_DASH_SINGLE, r"\{-[\s\S]*?-\}")

    table["php"] = _build(r"(?://|#)[^\n]*", _C_STYLE_BLOCK, protect=True)

    _register(table, ("clj", "cljs", "lisp", "el", "scm"), _build(r";[^\n]*"))
    _register(table, ("ps1", "psm1"), _build(_HASH_SINGLE, r"<#[^#]*#>"))
    _register(table, ("bat", "cmd"), _build(r"(?m)^[ \t]*(?:REM|rem|::)[^\n]*"))

    table["jsonc"] = _build(_C_STYLE_SINGLE, _C_STYLE_BLOCK, protect=True)

    return MappingProxyType(table)


GRAMMARS: Mapping[str, CommentGrammar] = _build_table()


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def normalize_extension(extension: Optional[str]) -> str:
    """
    Reduce an extension to its lookup key.

    Args:
        extension: Raw extension, with or without a leading dot.

    Returns:
        str: Lowercase extension without the leading dot.
    """
    ext = (extension or "").strip()
    if ext.startswith("."):
        ext = ext[1:]
    return ext.lower()


def lookup(extension: Optional[str]) -> Optional[CommentGrammar]:
    """
    Resolve the comment grammar for a file extension.

    Args:
        extension: File extension (case-insensitive, optional leading dot).

    Returns:
        Optional[CommentGrammar]: The grammar, or None when the syntax is unknown.
    """
    return GRAMMARS.get(normalize_extension(extension))


def supported_extensions() -> FrozenSet[str]:
    """Return every extension with a registered grammar."""
    return frozenset(GRAMMARS)
