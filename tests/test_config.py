from __future__ import annotations

from pathlib import Path
import pytest

from count_corpus_characters.config import chars_of, load_config


def _write(tmp_path: Path, lines: list[str], name: str = "cfg.yml") -> Path:
    cfg_path = tmp_path / name
    cfg_path.write_text("\n".join(lines + [""]), encoding="utf-8")
    return cfg_path


def test_load_config_accepts_filter_and_groups(tmp_path: Path):
    cfg_path = _write(
        tmp_path,
        [
            "groups:",
            "  src:",
            "    files:",
            "      - src/**/*.rs",
            "filter:",
            "  kind: regex",
            "  pattern: '[0-9!@#$%^&*()_+-=]'",
            "out_dir: output",
            "workers: 2",
            "top: 5",
            "lookup: '('",
        ],
    )

    cfg = load_config(cfg_path)

    assert cfg["groups"]["src"]["files"] == ["src/**/*.rs"]
    assert cfg["filter"]["kind"] == "regex"
    assert cfg["filter"]["pattern"] == "[0-9!@#$%^&*()_+-=]"
    assert cfg["workers"] == 2
    assert cfg["top"] == 5
    assert cfg["lookup"] == "("


def test_load_config_normalizes_group_to_groups(tmp_path: Path):
    cfg_path = _write(
        tmp_path,
        [
            "group:",
            "  name: text",
            "  files:",
            "    - input/*.txt",
            "out_dir: output",
        ],
    )

    cfg = load_config(cfg_path)

    assert "groups" in cfg
    assert cfg["groups"]["text"]["files"] == ["input/*.txt"]


def test_load_config_group_name_defaults_to_text(tmp_path: Path):
    cfg_path = _write(tmp_path, ["group:", "  files: ['*.txt']"])
    assert list(load_config(cfg_path)["groups"]) == ["text"]


def test_load_config_rejects_missing_groups_and_group(tmp_path: Path):
    cfg_path = _write(tmp_path, ["out_dir: output"], name="invalid.yml")

    with pytest.raises(ValueError, match=r"define 'groups' or 'group'"):
        load_config(cfg_path)


def test_load_config_rejects_reserved_group_name(tmp_path: Path):
    cfg_path = _write(tmp_path, ["groups:", "  ALL:", "    files: ['*.txt']"])

    with pytest.raises(ValueError, match="reserved"):
        load_config(cfg_path)


def test_load_config_rejects_invalid_regex_before_scanning(tmp_path: Path):
    cfg_path = _write(
        tmp_path,
        ["groups:", "  t:", "    files: ['*.txt']", "filter:", "  kind: regex", "  pattern: '[a-'"],
    )

    with pytest.raises(ValueError, match="Invalid filter pattern"):
        load_config(cfg_path)


def test_load_config_rejects_unknown_filter_kind(tmp_path: Path):
    cfg_path = _write(tmp_path, ["groups:", "  t:", "    files: ['*.txt']", "filter:", "  kind: fuzzy"])

    with pytest.raises(ValueError, match=r"Unsupported filter\.kind"):
        load_config(cfg_path)


@pytest.mark.parametrize("value", ["0", "-3", "true", "two"])
def test_load_config_rejects_non_positive_workers(tmp_path: Path, value: str):
    cfg_path = _write(tmp_path, ["groups:", "  t:", "    files: ['*.txt']", f"workers: {value}"])

    with pytest.raises(ValueError, match="'workers' must be a positive integer"):
        load_config(cfg_path)


def test_load_config_rejects_non_yaml_suffix(tmp_path: Path):
    cfg_path = _write(tmp_path, ["groups: {}"], name="cfg.json")

    with pytest.raises(ValueError, match="YAML"):
        load_config(cfg_path)


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yml")


def test_chars_of_dedupes_and_keeps_order():
    assert chars_of("abca") == ["a", "b", "c"]
    assert chars_of(["(", ")"]) == ["(", ")"]
    assert chars_of(None) == []


def test_load_config_rejects_unknown_encoding(tmp_path: Path):
    cfg_path = _write(tmp_path, ["groups:", "  t:", "    files: ['*.txt']", "encoding: no-such-codec"])

    with pytest.raises(ValueError, match="'encoding' is unknown"):
        load_config(cfg_path)


def test_load_config_accepts_known_encoding(tmp_path: Path):
    cfg_path = _write(tmp_path, ["groups:", "  t:", "    files: ['*.txt']", "encoding: latin-1"])
    assert load_config(cfg_path)["encoding"] == "latin-1"
