# tests/50_core/test_load_config.py

from pathlib import Path

import pytest

import libsmith.config as mod_config


def test_load_config_json(tmp_path: Path) -> None:
    # --- setup ---
    cfg = tmp_path / ".libsmithrc.json"
    cfg.write_text('{"esm": "per-file", "target": "node"}')

    # --- execute ---
    result = mod_config.load_config(cfg)

    # --- verify ---
    assert result == {"esm": "per-file", "target": "node"}


def test_load_config_jsonc_with_comments(tmp_path: Path) -> None:
    # --- setup ---
    cfg = tmp_path / ".libsmithrc.jsonc"
    cfg.write_text('{\n  // per-file output\n  "cjs": "babel",\n}\n')

    # --- execute and verify ---
    assert mod_config.load_config(cfg) == {"cjs": "babel"}


def test_load_config_toml_with_builds(tmp_path: Path) -> None:
    # --- setup ---
    cfg = tmp_path / ".libsmithrc.toml"
    cfg.write_text(
        'target = "node"\n'
        "\n"
        "[[builds]]\n"
        'esm = "per-file"\n'
        "\n"
        "[[builds]]\n"
        'umd = "MyLib"\n',
    )

    # --- execute ---
    result = mod_config.load_config(cfg)

    # --- verify ---
    assert result == {
        "target": "node",
        "builds": [{"esm": "per-file"}, {"umd": "MyLib"}],
    }


def test_load_config_python_defines_config(tmp_path: Path) -> None:
    # --- setup ---
    cfg = tmp_path / ".libsmithrc.py"
    cfg.write_text('name = "MyLib"\nconfig = {"umd": {"name": name}}\n')

    # --- execute and verify ---
    assert mod_config.load_config(cfg) == {"umd": {"name": "MyLib"}}


def test_load_config_python_without_config_raises(tmp_path: Path) -> None:
    # --- setup ---
    cfg = tmp_path / ".libsmithrc.py"
    cfg.write_text("x = 1\n")

    # --- execute and verify ---
    with pytest.raises(ValueError, match="did not define"):
        mod_config.load_config(cfg)


def test_load_config_python_error_is_runtime_error(tmp_path: Path) -> None:
    # --- setup ---
    cfg = tmp_path / ".libsmithrc.py"
    cfg.write_text("raise KeyError('boom')\n")

    # --- execute and verify ---
    with pytest.raises(RuntimeError, match="Error while executing Python config"):
        mod_config.load_config(cfg)


def test_load_config_invalid_json_hides_path(tmp_path: Path) -> None:
    # --- setup ---
    cfg = tmp_path / ".libsmithrc.json"
    cfg.write_text('{"esm": ')

    # --- execute ---
    with pytest.raises(ValueError, match="Error while loading configuration file") as e:
        mod_config.load_config(cfg)

    # --- verify ---
    assert str(tmp_path) not in str(e.value)


# ---------------------------------------------------------------------------
# parse_config()
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("raw", [None, {}, []])
def test_parse_config_empty_is_one_variant(raw: object) -> None:
    # --- execute and verify ---
    assert mod_config.parse_config(raw) == [{}]  # type: ignore[arg-type]


def test_parse_config_list_is_one_variant_each() -> None:
    # --- execute ---
    result = mod_config.parse_config([{"esm": "bundle"}, {"cjs": "per-file"}])

    # --- verify ---
    assert result == [{"esm": "bundle"}, {"cjs": "per-file"}]


def test_parse_config_builds_share_top_level_keys() -> None:
    # --- execute ---
    result = mod_config.parse_config(
        {"target": "node", "builds": [{"esm": "bundle"}, {"target": "browser"}]}
    )

    # --- verify ---
    assert result == [
        {"target": "node", "esm": "bundle"},
        {"target": "browser"},
    ]


def test_parse_config_rejects_non_object_items() -> None:
    # --- execute and verify ---
    with pytest.raises(TypeError, match="every build variant"):
        mod_config.parse_config([{"esm": "bundle"}, "cjs"])


def test_parse_config_rejects_bad_builds() -> None:
    # --- execute and verify ---
    with pytest.raises(TypeError, match="builds"):
        mod_config.parse_config({"builds": {"esm": "bundle"}})
