"""Levenshtein (edit) distance over grapheme clusters."""

from typing import Iterable, Optional

import regex

_GRAPHEME = regex.compile(r"\X")


def graphemes(text: str) -> list[str]:
    """Split text into user-perceived characters."""
    return _GRAPHEME.findall(text)


def distance(a: str, b: str) -> int:
    """
    Edit distance between two strings.

    Insertions, deletions and substitutions all cost one, and each
    grapheme cluster counts as a single unit, so "é" written with a
    combining accent is one character, not two.
    """
    if a == b:
        return 0

    source = graphemes(a)
    target = graphemes(b)
    if not source:
        return len(target)
    if not target:
        return len(source)

    row = list(range(len(target) + 1))
    for i, sc in enumerate(source, 1):
        up_left = row[0]
        row[0] = i
        for j, tc in enumerate(target, 1):
            up = row[j]
            cost = 0 if sc == tc else 1
            row[j] = min(row[j - 1] + 1, up + 1, up_left + cost)
            up_left = up

    return row[-1]


def closest_match(
    word: str,
    vocabulary: Iterable[str],
    max_distance: int = 3,
) -> Optional[str]:
    """
    Find the vocabulary entry nearest to word.

    Only entries within max_distance are considered. When several
    share the smallest distance, the one listed first wins.
    """
    best = None
    best_distance = max_distance + 1

    for candidate in vocabulary:
        d = distance(word, candidate)
        if d < best_distance:
            best = candidate
            best_distance = d

    return best
