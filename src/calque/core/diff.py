"""
Line-by-line diff between an accepted snapshot and a new one.

The alignment is built from a histogram based longest common
subsequence: after trimming the common prefix and suffix, the rarest
line present on both sides is used as an anchor and the ranges before
and after it are aligned the same way. Anchoring on rare lines keeps
repeated lines (blank lines, closing braces) from pulling the diff out
of shape.

The result is a flat list of tagged lines with no colouring; the
viewer decides how each kind is drawn.
"""

from bisect import bisect_left
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Union
import heapq


class DiffKind(Enum):
    """Which side of the diff a line belongs to."""

    SHARED = "shared"
    OLD = "old"
    NEW = "new"


@dataclass(frozen=True)
class DiffLine:
    """
    A single line of a diff.

    Attributes:
        number: 1-based position in the old text for OLD lines, in the
            new text for SHARED and NEW lines
        text: The line without its newline
        kind: SHARED, OLD or NEW
    """
    number: int
    text: str
    kind: DiffKind


@dataclass
class DiffStats:
    """How many lines a diff adds and removes."""

    additions: int = 0
    deletions: int = 0
    shared: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.additions or self.deletions)


class _Span(NamedTuple):
    old_lo: int
    old_hi: int
    new_lo: int
    new_hi: int


class _LineIndex:
    """Where every line occurs in both texts, for counting within a span."""

    def __init__(self, old: list[str], new: list[str]):
        self.old = old
        self.new = new
        self.old_positions: dict[str, list[int]] = defaultdict(list)
        self.new_positions: dict[str, list[int]] = defaultdict(list)
        for i, line in enumerate(old):
            self.old_positions[line].append(i)
        for j, line in enumerate(new):
            self.new_positions[line].append(j)

    def rank(self, line: str, span: _Span) -> Optional[tuple[int, int]]:
        """Total count and first old position of a line found on both sides of span."""
        old_positions = self.old_positions.get(line, [])
        new_positions = self.new_positions.get(line, [])

        first = bisect_left(old_positions, span.old_lo)
        old_count = bisect_left(old_positions, span.old_hi) - first
        new_count = bisect_left(new_positions, span.new_hi) - bisect_left(new_positions, span.new_lo)
        if not (old_count and new_count):
            return None
        return old_count + new_count, old_positions[first]

    def first_new(self, line: str, span: _Span) -> int:
        positions = self.new_positions[line]
        return positions[bisect_left(positions, span.new_lo)]


class _Candidates:
    """
    Lines common to a span, rarest first.

    Entries are ranked by (total count, first old position), which is
    the anchor order. When the span shrinks only the lines that left it
    change rank; they are pushed again and outdated entries are dropped
    when they reach the top.
    """

    def __init__(self, index: _LineIndex, span: _Span):
        self.index = index
        self.heap: list[tuple[int, int, str]] = []
        self.update(index.old[span.old_lo:span.old_hi], span)

    def update(self, lines: list[str], span: _Span):
        for line in set(lines):
            rank = self.index.rank(line, span)
            if rank is not None:
                heapq.heappush(self.heap, (*rank, line))

    def rarest(self, span: _Span) -> Optional[tuple[str, int]]:
        """The anchor line of span and its first old position."""
        while self.heap:
            total, first, line = self.heap[0]
            if self.index.rank(line, span) == (total, first):
                return line, first
            heapq.heappop(self.heap)
        return None


class _Work(NamedTuple):
    span: _Span
    # Ranking carried over from the enclosing span, if any
    candidates: Optional[_Candidates]


def normalize_newlines(text: str) -> str:
    """Convert Windows line endings; the diff only ever splits on \\n."""
    return text.replace("\r\n", "\n")


def split_lines(text: str) -> list[str]:
    """Split on newlines; an empty string has no lines at all."""
    if text == "":
        return []
    return text.split("\n")


def line_by_line(old: str, new: str) -> list[DiffLine]:
    """
    Compare two texts line by line.

    Args:
        old: The accepted text
        new: The freshly produced text

    Returns:
        Lines in display order. A changed line shows up as its OLD
        version immediately followed by its NEW version.
    """
    # A diff always shows at least one row
    if old == "" and new == "":
        return [DiffLine(number=1, text="", kind=DiffKind.SHARED)]

    old_lines = split_lines(old)
    new_lines = split_lines(new)
    chain = longest_common_chain(old_lines, new_lines)
    return _tag_lines(old_lines, new_lines, chain)


def longest_common_chain(old: list[str], new: list[str]) -> list[str]:
    """
    Common subsequence of lines used as the backbone of the diff.

    Ranges still to align are kept on an explicit stack so that long,
    repetitive inputs cannot exhaust the interpreter's recursion limit.
    Stack entries are either a span to align or lines ready to emit;
    popping them in order yields prefix, before, anchor, after, suffix.

    The larger side of each split keeps the ranking of its parent span
    so that peeling one line at a time stays close to linear.
    """
    index = _LineIndex(old, new)
    chain: list[str] = []
    stack: list[Union[_Work, list[str]]] = [_Work(_Span(0, len(old), 0, len(new)), None)]

    while stack:
        item = stack.pop()
        if isinstance(item, list):
            chain.extend(item)
            continue

        span, candidates = item
        old_lo, old_hi, new_lo, new_hi = span

        while old_lo < old_hi and new_lo < new_hi and old[old_lo] == new[new_lo]:
            chain.append(old[old_lo])
            old_lo += 1
            new_lo += 1

        while old_lo < old_hi and new_lo < new_hi and old[old_hi - 1] == new[new_hi - 1]:
            old_hi -= 1
            new_hi -= 1
        if old_hi < span.old_hi:
            stack.append(old[old_hi:span.old_hi])

        if old_lo >= old_hi or new_lo >= new_hi:
            continue

        trimmed = _Span(old_lo, old_hi, new_lo, new_hi)
        if candidates is None:
            candidates = _Candidates(index, trimmed)
        else:
            candidates.update(
                old[span.old_lo:old_lo] + old[old_hi:span.old_hi]
                + new[span.new_lo:new_lo] + new[new_hi:span.new_hi],
                trimmed,
            )

        anchor = candidates.rarest(trimmed)
        if anchor is None:
            continue

        line, old_at = anchor
        new_at = index.first_new(line, trimmed)
        before = _Span(old_lo, old_at, new_lo, new_at)
        after = _Span(old_at + 1, old_hi, new_at + 1, new_hi)

        if (old_hi - old_at) + (new_hi - new_at) >= (old_at - old_lo) + (new_at - new_lo):
            candidates.update(old[old_lo:old_at + 1] + new[new_lo:new_at + 1], after)
            before_work, after_work = _Work(before, None), _Work(after, candidates)
        else:
            candidates.update(old[old_at:old_hi] + new[new_at:new_hi], before)
            before_work, after_work = _Work(before, candidates), _Work(after, None)

        stack.append(after_work)
        stack.append([line])
        stack.append(before_work)

    return chain


def count_changes(lines: list[DiffLine]) -> DiffStats:
    """Tally the kinds of a diff."""
    stats = DiffStats()
    for line in lines:
        if line.kind == DiffKind.NEW:
            stats.additions += 1
        elif line.kind == DiffKind.OLD:
            stats.deletions += 1
        else:
            stats.shared += 1
    return stats


def _tag_lines(old: list[str], new: list[str], chain: list[str]) -> list[DiffLine]:
    """Walk both texts along the chain and tag every line."""
    lines: list[DiffLine] = []
    i = j = k = 0

    while i < len(old) or j < len(new):
        has_common = k < len(chain)

        if i < len(old) and not (has_common and old[i] == chain[k]):
            lines.append(DiffLine(number=i + 1, text=old[i], kind=DiffKind.OLD))
            i += 1
        elif j < len(new) and not (has_common and new[j] == chain[k]):
            lines.append(DiffLine(number=j + 1, text=new[j], kind=DiffKind.NEW))
            j += 1
        else:
            lines.append(DiffLine(number=j + 1, text=new[j], kind=DiffKind.SHARED))
            i += 1
            j += 1
            k += 1

    return lines
