from __future__ import annotations

import os
from collections import Counter
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from count_corpus_characters.counters import count_chars, merge_counters
from count_corpus_characters.filters import CharFilter
from count_corpus_characters.io_utils import read_text


def default_workers() -> int:
    return os.cpu_count() or 1


def count_file(path: Path, char_filter: CharFilter, encoding: str = "utf-8") -> Tuple[Path, Optional[Counter]]:
    """Worker entry point: (path, counter), or (path, None) if the file was unreadable."""
    text = read_text(path, encoding=encoding)
    if text is None:
        return path, None
    return path, count_chars(text, char_filter)


def count_files(
    paths: List[Path],
    char_filter: CharFilter,
    *,
    workers: Optional[int] = None,
    encoding: str = "utf-8",
) -> Dict[Path, Counter]:
    """
    Count each file into its own counter.

    Files are spread over at most `workers` processes (default: CPU count).
    With workers == 1, or a single file, everything runs in-process.
    Unreadable files are left out of the result.
    """
    n = default_workers() if workers is None else workers
    if n < 1:
        raise ValueError(f"workers must be a positive integer, got {workers!r}")

    results: Dict[Path, Counter] = {}
    if n == 1 or len(paths) <= 1:
        for p in paths:
            _, cnt = count_file(p, char_filter, encoding)
            if cnt is not None:
                results[p] = cnt
        return results

    with ProcessPoolExecutor(max_workers=min(n, len(paths))) as executor:
        futures = [executor.submit(count_file, p, char_filter, encoding) for p in paths]
        for future in as_completed(futures):
            p, cnt = future.result()
            if cnt is not None:
                results[p] = cnt
    return results


def fold(per_file: Dict[Path, Counter]) -> Counter:
    """Merge per-file counters into one, in sorted path order."""
    total = Counter()
    for p in sorted(per_file):
        merge_counters(total, per_file[p])
    return total
