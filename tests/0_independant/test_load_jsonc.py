# tests/0_independant/test_load_jsonc.py
"""Tests for libsmith.utils.load_jsonc."""

from pathlib import Path

import pytest

import libsmith.utils as mod_utils


def test_load_jsonc_strips_comments_and_trailing_commas(tmp_path: Path) -> None:
    # --- setup ---
    path = tmp_path / "tsconfig.json"
    path.write_text(
        """
        // line comment
        {
          /* block
             comment */
          "compilerOptions": {
            "jsx": "react",  # hash comment
            "paths": {"@/*": ["src/*"]},
          },
        }
        """,
        encoding="utf-8",
    )

    # --- execute ---
    data = mod_utils.load_jsonc(path)

    # --- verify ---
    assert data == {"compilerOptions": {"jsx": "react", "paths": {"@/*": ["src/*"]}}}


def test_load_jsonc_keeps_comment_markers_inside_strings(tmp_path: Path) -> None:
    # --- setup ---
    path = tmp_path / "cfg.jsonc"
    path.write_text('{"url": "http://example.com/#x", "glob": "src/**/*.ts"}')

    # --- execute ---
    data = mod_utils.load_jsonc(path)

    # --- verify ---
    assert data == {"url": "http://example.com/#x", "glob": "src/**/*.ts"}


def test_load_jsonc_empty_file_returns_none(tmp_path: Path) -> None:
    # --- setup ---
    path = tmp_path / "empty.jsonc"
    path.write_text("// nothing here\n")

    # --- execute and verify ---
    assert mod_utils.load_jsonc(path) is None


def test_load_jsonc_invalid_syntax_raises_value_error(tmp_path: Path) -> None:
    # --- setup ---
    path = tmp_path / "bad.jsonc"
    path.write_text('{"esm": }')

    # --- execute and verify ---
    with pytest.raises(ValueError, match="Invalid JSONC syntax"):
        mod_utils.load_jsonc(path)


def test_load_jsonc_rejects_scalar_root(tmp_path: Path) -> None:
    # --- setup ---
    path = tmp_path / "scalar.jsonc"
    path.write_text("42")

    # --- execute and verify ---
    with pytest.raises(ValueError, match="root type"):
        mod_utils.load_jsonc(path)


def test_load_jsonc_missing_file(tmp_path: Path) -> None:
    # --- execute and verify ---
    with pytest.raises(FileNotFoundError):
        mod_utils.load_jsonc(tmp_path / "missing.json")
