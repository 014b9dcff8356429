from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Provides centralized access to application-wide limits, placeholder
delimiters used by the literal shield, extension families consumed by
the minifier, and the text-file classification tables used by the
filesystem enumerator.
"""

from typing import FrozenSet, Tuple

CURRENT_CONFIG_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# SIZE GUARDS
# -----------------------------------------------------------------------------

# Inputs outside [MIN_PROCESS_SIZE, MAX_PROCESS_SIZE] bytes are returned as-is
MIN_PROCESS_SIZE: int = 2
MAX_PROCESS_SIZE: int = 500 * 1024

# Per-file read ceiling for the filesystem enumerator
MAX_FILE_SIZE: int = 5 * 1024 * 1024

# -----------------------------------------------------------------------------
# LITERAL SHIELD PLACEHOLDERS
# -----------------------------------------------------------------------------

PLACEHOLDER_TAG: str = "STR"
PLACEHOLDER_END_TAG: str = "END"
DEFAULT_SENTINEL: str = "\0"

# Candidate sentinels, tried in order when the input already contains NUL.
# 0x09-0x0D and 0x1C-0x1F are skipped: regex \s and str.split() treat them as whitespace.
SENTINEL_CANDIDATES: Tuple[str, ...] = (
    "\0",
    *(chr(c) for c in range(0x01, 0x09)),
    *(chr(c) for c in range(0x0E, 0x1C)),
)

# -----------------------------------------------------------------------------
# MINIFICATION FAMILIES
# -----------------------------------------------------------------------------

WHITESPACE_SIGNIFICANT_EXTENSIONS: FrozenSet[str] = frozenset({
    "py", "pyw", "pyx", "yaml", "yml", "coffee", "sass", "pug", "haml",
})

JSON_EXTENSIONS: FrozenSet[str] = frozenset({"json", "jsonc"})

MARKUP_EXTENSIONS: FrozenSet[str] = frozenset({"html", "htm", "xml", "svg", "xhtml"})

DEFAULT_EXTENSION: str = "txt"

# -----------------------------------------------------------------------------
# TEXT FILE CLASSIFICATION
# -----------------------------------------------------------------------------

TEXT_EXTENSIONS: FrozenSet[str] = frozenset({
    "txt", "md", "json", "jsonc", "xml", "html", "htm", "css", "scss", "sass", "less",
    "js", "mjs", "cjs", "ts", "mts", "tsx", "jsx", "vue", "svelte", "astro",
    "py", "pyw", "pyx", "rb", "php", "java", "c", "h", "cpp", "hpp", "cc",
    "cs", "go", "rs", "swift", "kt", "kts", "scala", "groovy", "clj", "cljs",
    "ex", "exs", "erl", "hrl", "hs", "elm", "lua", "r", "jl", "pl", "pm",
    "sh", "bash", "zsh", "fish", "ps1", "psm1", "bat", "cmd",
    "sql", "graphql", "gql", "prisma", "proto",
    "yaml", "yml", "toml", "ini", "conf", "env", "cfg",
    "dockerfile", "containerfile", "makefile", "cmake",
    "gitignore", "gitattributes", "npmrc", "nvmrc", "editorconfig",
    "lock", "log", "csv", "tsv", "svg", "xhtml", "dart", "lisp", "el", "scm",
})

TEXT_DOTFILES: FrozenSet[str] = frozenset({
    ".gitignore", ".gitattributes", ".npmrc", ".nvmrc",
    ".editorconfig", ".prettierrc", ".eslintrc", ".babelrc",
    ".env", ".env.local", ".env.development", ".env.production",
})

# -----------------------------------------------------------------------------
# PROCESSING MODE TAGS
# -----------------------------------------------------------------------------

MODE_RAW = "raw"
MODE_REMOVE_COMMENTS = "remove-comments"
MODE_MINIFY = "minify"

MODE_TAGS: Tuple[str, ...] = (MODE_RAW, MODE_REMOVE_COMMENTS, MODE_MINIFY)
