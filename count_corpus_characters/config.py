from __future__ import annotations

import codecs
from pathlib import Path
from typing import Any, Dict, List, Optional, TypedDict, Union

import yaml

from count_corpus_characters.filters import build_filter


class GroupDef(TypedDict):
    files: list[str]


class FilterDef(TypedDict, total=False):
    kind: str            # "all" | "regex" | "set"
    pattern: str         # kind: regex
    chars: Union[str, List[str]]  # kind: set


class Config(TypedDict, total=False):
    # One of these may be provided in YAML; internally we normalize to "groups".
    group: Dict[str, Any]
    groups: Dict[str, GroupDef]

    filter: FilterDef

    out_dir: str
    workers: int
    encoding: str
    top: int

    lookup: Union[str, List[str]]
    exclude: Union[str, List[str]]
    exclude_file: Optional[str]


def normalize_groups(cfg: dict) -> dict:
    """
    Normalize single-group sugar 'group' into 'groups'.
    After normalization, cfg['groups'] must exist and be a mapping.
    """
    if "groups" in cfg and cfg["groups"] is not None:
        return cfg

    if "group" in cfg and cfg["group"]:
        g = cfg["group"]
        if not isinstance(g, dict):
            raise ValueError("'group' must be a mapping.")
        name = g.get("name", "text")
        files = g.get("files")

        if not files:
            raise ValueError("'group.files' is required.")
        if not isinstance(files, list) or not all(isinstance(x, str) for x in files):
            raise ValueError("'group.files' must be list[str].")

        cfg["groups"] = {name: {"files": files}}
        return cfg

    raise ValueError("Config must define 'groups' or 'group'.")


def _validate_groups(groups: Any) -> None:
    if not isinstance(groups, dict):
        raise ValueError("Config 'groups' must be a mapping.")
    for k, v in groups.items():
        if not isinstance(k, str) or not k:
            raise ValueError("Group name must be a non-empty string.")
        if k == "ALL":
            raise ValueError("Group name 'ALL' is reserved for the merged total.")
        if not isinstance(v, dict) or "files" not in v:
            raise ValueError(f"Group '{k}' must have 'files' list.")
        files = v["files"]
        if not isinstance(files, list) or not all(isinstance(x, str) for x in files):
            raise ValueError(f"Group '{k}' must have 'files' as list[str].")


def _validate_filter(spec: Any) -> None:
    if spec is None:
        return
    if not isinstance(spec, dict):
        raise ValueError("'filter' must be a mapping.")
    # compiles the pattern, so a bad regex fails here rather than mid-scan
    build_filter(spec)


def _validate_positive_int(cfg: dict, key: str) -> None:
    v = cfg.get(key)
    if v is None:
        return
    if isinstance(v, bool) or not isinstance(v, int) or v < 1:
        raise ValueError(f"'{key}' must be a positive integer.")


def _validate_chars(cfg: dict, key: str) -> None:
    v = cfg.get(key)
    if v is None:
        return
    if isinstance(v, str):
        return
    if isinstance(v, list) and all(isinstance(x, str) and len(x) == 1 for x in v):
        return
    raise ValueError(f"'{key}' must be a string or a list of single characters.")


def chars_of(value: Union[str, List[str], None]) -> list[str]:
    """Config character list ('ab' or ['a', 'b']) as unique chars in given order."""
    if not value:
        return []
    return list(dict.fromkeys(value))


def load_config(path: Path) -> Config:
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    if path.suffix.lower() not in {".yml", ".yaml"}:
        raise ValueError("Config file must be YAML (.yml / .yaml)")

    text = path.read_text(encoding="utf-8")
    config_data = yaml.safe_load(text) or {}
    if not isinstance(config_data, dict):
        raise ValueError("Top-level YAML must be a mapping.")

    config_data = normalize_groups(config_data)
    _validate_groups(config_data["groups"])

    validate_options(config_data)
    return config_data  # type: ignore[return-value]


def validate_options(config_data: dict) -> None:
    """Checks everything except groups; also used for CLI-built configs."""
    _validate_filter(config_data.get("filter"))
    _validate_positive_int(config_data, "workers")
    _validate_positive_int(config_data, "top")
    _validate_chars(config_data, "lookup")
    _validate_chars(config_data, "exclude")

    enc = config_data.get("encoding")
    if enc is not None and (not isinstance(enc, str) or not enc.strip()):
        raise ValueError("'encoding' must be a non-empty string.")
    if enc is not None:
        try:
            codecs.lookup(enc)
        except LookupError as e:
            raise ValueError(f"'encoding' is unknown: {enc!r}") from e
    out_dir = config_data.get("out_dir")
    if out_dir is not None and (not isinstance(out_dir, str) or not out_dir.strip()):
        raise ValueError("'out_dir' must be a non-empty string path.")
    ex_file = config_data.get("exclude_file")
    if ex_file is not None and (not isinstance(ex_file, str) or not ex_file.strip()):
        raise ValueError("'exclude_file' must be a non-empty string path.")
