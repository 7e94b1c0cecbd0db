#!/usr/bin/env python3
from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional
from collections import Counter

import argparse

from count_corpus_characters.config import chars_of, load_config, validate_options
from count_corpus_characters.counters import filter_counter, load_exclude_list
from count_corpus_characters.filters import build_filter
from count_corpus_characters.io_utils import expand_globs, save_counter_csv, write_summary
from count_corpus_characters.report import group_lines, lookup_lines
from count_corpus_characters.scan import count_files, fold

DEFAULT_TOP = 20


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Count per-character frequencies over files matched by glob patterns.")
    p.add_argument("patterns", nargs="*", help="Glob patterns (** is recursive). If omitted, groups come from --config.")
    p.add_argument("--config", type=Path, help="YAML config (default: groups.config.yml next to this script)")
    flt = p.add_mutually_exclusive_group()
    flt.add_argument("--regex", help="Count only characters matching this regular expression")
    flt.add_argument("--chars", help="Count only these characters")
    p.add_argument("--workers", type=int, help="Worker processes (default: CPU count)")
    p.add_argument("--out-dir", help="Output directory (default: output)")
    p.add_argument("--top", type=int, help=f"Ranked characters per group in summary.txt (default: {DEFAULT_TOP})")
    p.add_argument("--lookup", help="Characters to report per file in summary.txt")
    p.add_argument("--encoding", help="Text encoding of input files (default: utf-8)")
    return p


def _apply_overrides(cfg: dict, args: argparse.Namespace) -> dict:
    if args.regex is not None:
        cfg["filter"] = {"kind": "regex", "pattern": args.regex}
    elif args.chars is not None:
        cfg["filter"] = {"kind": "set", "chars": args.chars}
    for key in ("workers", "out_dir", "top", "lookup", "encoding"):
        v = getattr(args, key)
        if v is not None:
            cfg[key] = v
    return cfg


def _resolve_exclude(cfg: dict, base_dir: Path) -> set[str]:
    exclude = set(chars_of(cfg.get("exclude")))
    ex_file = cfg.get("exclude_file")
    if ex_file:
        p = Path(ex_file)
        if not p.is_absolute():
            p = base_dir / p
        exclude |= load_exclude_list(p)
    return exclude


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.patterns and args.config is not None:
        parser.error("glob patterns and --config are mutually exclusive")

    if args.patterns:
        cfg: dict = {"groups": {"text": {"files": list(args.patterns)}}}
        base_dir = Path.cwd()
    else:
        script_dir = Path(__file__).resolve().parent
        config_path = args.config or script_dir / "groups.config.yml"
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        cfg = dict(load_config(config_path))
        base_dir = config_path.resolve().parent

    cfg = _apply_overrides(cfg, args)
    validate_options(cfg)

    out_dir = Path(cfg.get("out_dir") or "output")
    out_dir.mkdir(parents=True, exist_ok=True)

    char_filter = build_filter(cfg.get("filter"))
    workers = cfg.get("workers")
    encoding = cfg.get("encoding", "utf-8")
    top = cfg.get("top", DEFAULT_TOP)
    exclude = _resolve_exclude(cfg, base_dir)

    group_counts: Dict[str, Counter] = {}
    group_files: Dict[str, int] = {}
    per_file_all: Dict[Path, Counter] = {}

    for gname, gdef in cfg["groups"].items():
        files = expand_globs(gdef["files"])
        if not files:
            print(f"[WARN] group '{gname}' matched no files; skipping")
            continue
        print(f"[Processing] {gname}: {len(files)} files ({char_filter.kind} filter)")
        per_file = count_files(files, char_filter, workers=workers, encoding=encoding)
        total = fold(per_file)
        if exclude:
            total = filter_counter(total, exclude=exclude)
        group_counts[gname] = total
        group_files[gname] = len(per_file)
        per_file_all.update(per_file)
        save_counter_csv(out_dir / f"char_frequency_{gname}.csv", total)

    if len(group_counts) >= 2:
        # each file once, even if several groups matched it
        all_counts = fold(per_file_all)
        if exclude:
            all_counts = filter_counter(all_counts, exclude=exclude)
        group_counts["ALL"] = all_counts
        group_files["ALL"] = len(per_file_all)
        save_counter_csv(out_dir / "char_frequency_ALL.csv", all_counts)

    lines = ["=== Summary ==="]
    for k in sorted(group_counts.keys()):
        lines.extend(group_lines(k, group_counts[k], group_files[k], top))
    lookup = chars_of(cfg.get("lookup"))
    if lookup:
        lines.append("")
        lines.extend(lookup_lines(per_file_all, lookup))
    write_summary(out_dir / "summary.txt", lines)

    print("[Done] Saved to", out_dir)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
