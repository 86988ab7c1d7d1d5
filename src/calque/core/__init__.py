"""Pure comparison logic: line diffs and edit distance."""

from .diff import DiffKind, DiffLine, DiffStats, line_by_line, longest_common_chain
from .levenshtein import closest_match, distance

__all__ = [
    "DiffKind",
    "DiffLine",
    "DiffStats",
    "line_by_line",
    "longest_common_chain",
    "closest_match",
    "distance",
]
