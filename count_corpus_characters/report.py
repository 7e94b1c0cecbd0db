from __future__ import annotations
from collections import Counter
from pathlib import Path
from typing import Dict, List

from count_corpus_characters.io_utils import char_label


def group_lines(name: str, cnt: Counter, n_files: int, top: int) -> list[str]:
    lines = [f"{name}: files={n_files} unique={len(cnt)} total={sum(cnt.values())}"]
    for rank, (ch, c) in enumerate(cnt.most_common(top), start=1):
        lines.append(f"  {rank:>3}. {char_label(ch)}\t{c}")
    return lines


def lookup_lines(per_file: Dict[Path, Counter], lookup: List[str]) -> list[str]:
    """One line per file with the count of each lookup character (absent = 0)."""
    if not lookup or not per_file:
        return []
    header = "=== Lookup: " + " ".join(char_label(ch) for ch in lookup) + " ==="
    lines = [header]
    for p in sorted(per_file):
        cnt = per_file[p]
        cells = ", ".join(f"{char_label(ch)}: {cnt.get(ch, 0)}" for ch in lookup)
        lines.append(f"{p}: {cells}")
    return lines
