from __future__ import annotations

"""
Unit tests for the Minification Engine.

Ensures that each extension family gets its compaction strategy:
indentation-sensitive code keeps its structure, JSON is re-serialized,
markup loses inter-tag whitespace and generic code is compacted line by line.
"""

import json

import pytest

from compactor4ai.core.processing.minifier import MinifyFamily, minify, minify_family
from compactor4ai.domain.constants import MAX_PROCESS_SIZE


@pytest.mark.parametrize("ext, family", [
    ("py", MinifyFamily.WHITESPACE_SIGNIFICANT),
    (".YAML", MinifyFamily.WHITESPACE_SIGNIFICANT),
    ("json", MinifyFamily.JSON),
    ("jsonc", MinifyFamily.JSON),
    ("svg", MinifyFamily.MARKUP),
    ("js", MinifyFamily.GENERIC),
    ("unknown", MinifyFamily.GENERIC),
])
def test_minify_family_classification(ext, family):
    assert minify_family(ext) is family


# -----------------------------------------------------------------------------
# Whitespace-significant family
# -----------------------------------------------------------------------------

def test_python_indentation_preserved():
    code = "\n\ndef f():   \n    # note\n    x = 1\n\n\n\n    return x\n\n"
    assert minify(code, "py") == "def f():\n\n    x = 1\n\n    return x"


def test_yaml_comments_removed_and_values_kept():
    code = "key: 'a # b'  # why\nlist:\n  - 1\n"
    assert minify(code, "yaml") == "key: 'a # b'\nlist:\n  - 1"


# -----------------------------------------------------------------------------
# JSON family
# -----------------------------------------------------------------------------

def test_json_reserialized_compactly():
    code = '{\n  "a": 1,\n  "b": [1, 2],\n  "c": {"d": null}\n}\n'
    assert minify(code, "json") == '{"a":1,"b":[1,2],"c":{"d":null}}'


def test_json_key_order_preserved():
    code = '{"z": 1, "a": 2}'
    assert minify(code, "json") == '{"z":1,"a":2}'


def test_jsonc_comments_removed_but_string_content_kept():
    code = '{\n  // setting\n  "url": "http://example.com", /* x */\n  "n": 1\n}'
    result = minify(code, "jsonc")

    assert json.loads(result) == {"url": "http://example.com", "n": 1}
    assert result == '{"url":"http://example.com","n":1}'


def test_json_comment_residue_stripped_for_plain_json():
    code = '{"a": "x // y"} // trailing'
    assert minify(code, "json") == '{"a":"x // y"}'


def test_malformed_json_falls_back_to_whitespace_collapse():
    code = "{a: 1,\n    b: 2}\n"
    assert minify(code, "json") == "{a: 1, b: 2}"


def test_non_standard_json_constants_take_fallback():
    code = '{"a": NaN,\n "b": 1}'
    assert minify(code, "json") == '{"a": NaN, "b": 1}'


def test_overflowing_json_number_takes_fallback():
    code = '{"a": 1e400,\n "b": 1}'
    assert minify(code, "json") == '{"a": 1e400, "b": 1}'


def test_sql_minify_keeps_quoted_apostrophes_and_string_spacing():
    code = "SELECT '''',\n    '  -- kept' AS x; -- note\n"
    assert minify(code, "sql") == "SELECT '''',\n '  -- kept' AS x;"


def test_json_non_ascii_kept_literally():
    code = '{"name": "caf\\u00e9"}'
    assert minify(code, "json") == '{"name":"café"}'


# -----------------------------------------------------------------------------
# Markup family
# -----------------------------------------------------------------------------

def test_markup_whitespace_between_tags_removed():
    assert minify("<div>   </div>", "html") == "<div></div>"


def test_markup_comments_and_whitespace():
    code = "<div>\n  <!-- c -->\n  <p>  hello   world </p>\n</div>\n"
    assert minify(code, "html") == "<div><p> hello world </p></div>"


# -----------------------------------------------------------------------------
# Generic family
# -----------------------------------------------------------------------------

def test_generic_compaction_keeps_string_whitespace():
    code = "function f() {\n    // c\n    return 'a  b';\n\n\n}\n"
    assert minify(code, "js") == "function f() {\n return 'a  b';\n}"


def test_generic_template_literal_lines_untouched():
    code = "const s = `\n    indented\n\n    text`;\n"
    assert minify(code, "js") == code.strip()


def test_unknown_extension_still_compacted():
    code = "  alpha  \n\n\n    beta\n"
    assert minify(code, "xyz") == "alpha\n beta"


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

def test_empty_and_tiny_inputs_returned_unchanged():
    assert minify("", "js") == ""
    assert minify(" ", "js") == " "


def test_oversized_input_returned_unchanged():
    code = "a  \n" * (MAX_PROCESS_SIZE // 4 + 1)
    assert minify(code, "js") == code
