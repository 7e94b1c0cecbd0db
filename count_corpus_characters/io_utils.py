from __future__ import annotations
from pathlib import Path
from typing import List, Optional
from collections import Counter
import csv, glob, sys

def expand_globs(patterns: List[str]) -> List[Path]:
    files = []
    for pat in patterns:
        files.extend(Path(p) for p in glob.glob(pat, recursive=True))
    return sorted({p.resolve() for p in files if p.is_file()})

def read_text(path: Path, encoding: str = "utf-8") -> Optional[str]:
    """Decoded file content, or None (with a warning) if it cannot be read."""
    try:
        # newline="": count CR and CRLF exactly as stored
        with path.open(encoding=encoding, newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"[WARN] failed to read {path}: {e}", file=sys.stderr)
        return None

def char_label(ch: str) -> str:
    """Printable label for a character in text reports: 'a', ' ', '\\n'."""
    if ch.isprintable() and not ch.isspace():
        return ch
    return repr(ch)

def save_counter_csv(path: Path, cnt: Counter):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.writer(f)
        w.writerow(["char", "frequency"])
        for ch, c in cnt.most_common():
            w.writerow([ch, c])

def write_summary(path: Path, lines: list[str]):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines), encoding="utf-8")
