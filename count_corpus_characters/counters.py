from __future__ import annotations
from collections import Counter
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

from count_corpus_characters.filters import CharFilter


def count_chars(text: str, char_filter: Optional[CharFilter] = None) -> Counter:
    """Return a counter of the characters in `text` accepted by `char_filter`."""
    if char_filter is None:
        return Counter(text)
    return Counter(c for c in text if char_filter.evaluate(c))


def merge_counters(dst: Counter, src: Mapping[str, int]) -> Counter:
    """Add every count of `src` into `dst` in place and return `dst`."""
    for ch, n in src.items():
        if n > 0:
            dst[ch] += n
    return dst


def sum_all(counters: Union[Mapping[str, Counter], Iterable[Counter]]) -> Counter:
    if isinstance(counters, Mapping):
        counters = counters.values()
    total = Counter()
    for c in counters:
        merge_counters(total, c)
    return total


def load_exclude_list(path: str | Path) -> set[str]:
    """Every character on every line is excluded; lines starting with `#` are comments."""
    p = Path(path)
    items: set[str] = set()
    for line in p.read_text(encoding="utf-8").splitlines():
        if not line or line.startswith("#"):
            continue
        items.update(line)
    return items


def filter_counter(counter: Counter, *, exclude: Iterable[str]) -> Counter:
    ex = set(exclude)
    return Counter({k: v for k, v in counter.items() if k not in ex})
