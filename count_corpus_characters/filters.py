from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Pattern, Union

FILTER_KINDS = ("all", "regex", "set")

_FILTER_KEYS = {
    "all": {"kind"},
    "regex": {"kind", "pattern"},
    "set": {"kind", "chars"},
}


def compile_pattern(pattern: Union[str, Pattern[str]]) -> Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    if not isinstance(pattern, str):
        raise ValueError(f"Filter pattern must be a string, got {type(pattern).__name__}.")
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ValueError(f"Invalid filter pattern {pattern!r}: {e}") from e


def _char_set(chars: Iterable[str]) -> frozenset[str]:
    out: set[str] = set()
    for c in chars:
        if not isinstance(c, str) or len(c) != 1:
            raise ValueError(f"Filter set entries must be single characters, got {c!r}.")
        out.add(c)
    return frozenset(out)


class CharFilter(ABC):
    """
    Decides whether a single character is counted.

    Exactly one strategy is active per value. The builder methods return a
    new filter and leave the receiver untouched, so the last call wins:

        CharFilter.default().with_chars("ar")        -> SetMembership
        CharFilter.default().with_pattern(r"\\w")     -> PatternMatch
    """

    kind = ""

    @staticmethod
    def default() -> "CharFilter":
        return AcceptAll()

    def with_pattern(self, pattern: Union[str, Pattern[str]]) -> "CharFilter":
        return PatternMatch(compile_pattern(pattern))

    def with_chars(self, chars: Iterable[str]) -> "CharFilter":
        return SetMembership(_char_set(chars))

    @abstractmethod
    def evaluate(self, c: str) -> bool:
        ...

    def __call__(self, c: str) -> bool:
        return self.evaluate(c)


@dataclass(frozen=True)
class AcceptAll(CharFilter):
    kind = "all"

    def evaluate(self, c: str) -> bool:
        return True


@dataclass(frozen=True)
class PatternMatch(CharFilter):
    pattern: Pattern[str]
    kind = "regex"

    def evaluate(self, c: str) -> bool:
        # search, not match: the expression may match anywhere in the string
        return self.pattern.search(c) is not None


@dataclass(frozen=True)
class SetMembership(CharFilter):
    chars: frozenset[str]
    kind = "set"

    def evaluate(self, c: str) -> bool:
        return c in self.chars


def _chars_from_config(value: Any, key: str) -> str:
    """Accept either a plain string or a list of one-character strings."""
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(x, str) and len(x) == 1 for x in value):
        return "".join(value)
    raise ValueError(f"'{key}' must be a string or a list of single characters.")


def build_filter(spec: Optional[Mapping[str, Any]]) -> CharFilter:
    """
    Build a filter from the `filter` config mapping.

      {kind: all}
      {kind: regex, pattern: "\\w"}
      {kind: set, chars: "ar"}      # or chars: ["a", "r"]
    """
    f = CharFilter.default()
    if not spec:
        return f
    kind = spec.get("kind", "all")
    if isinstance(kind, str) and kind in _FILTER_KEYS:
        stray = sorted(set(spec) - _FILTER_KEYS[kind])
        if stray:
            raise ValueError(f"Unexpected filter key(s) for kind {kind!r}: {', '.join(stray)}.")
    if kind == "all":
        return f
    if kind == "regex":
        pattern = spec.get("pattern")
        if not isinstance(pattern, str) or not pattern:
            raise ValueError("'filter.pattern' must be a non-empty string when kind is 'regex'.")
        return f.with_pattern(pattern)
    if kind == "set":
        chars = spec.get("chars")
        if not chars:
            raise ValueError("'filter.chars' is required when kind is 'set'.")
        return f.with_chars(_chars_from_config(chars, "filter.chars"))
    raise ValueError(f"Unsupported filter.kind: {kind!r} (expected one of {', '.join(FILTER_KINDS)}).")
