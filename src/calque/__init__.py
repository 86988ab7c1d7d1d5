"""
calque, a small snapshot testing and review tool.

Typical usage inside a test:

    calque.check(render_report(), "monthly report")

If no accepted snapshot exists yet, or the output changed, the test
fails and a pending snapshot is written under calque_snapshots/.
Review pending snapshots with:

    calque review
"""

import inspect

from .config import VERSION, Config
from .core.checker import CheckOutcome, CheckResult, SnapshotChecker, SnapshotTestFailed
from .core.diff import DiffKind, DiffLine, line_by_line
from .core.levenshtein import distance
from .errors import CalqueError, ErrorKind
from .storage.snapshot import Snapshot, SnapshotStatus
from .storage.store import SnapshotStore

__version__ = VERSION


def check(content: str, title: str) -> None:
    """
    Compare content with the accepted snapshot called title.

    Raises:
        SnapshotTestFailed: If the snapshot is new, differs from the
            accepted one, or could not be checked
    """
    SnapshotChecker().check(content, title)


def check_from_caller(content: str) -> None:
    """Like check, using the calling function's name as the title."""
    frame = inspect.currentframe()
    try:
        title = frame.f_back.f_code.co_name if frame and frame.f_back else None
    finally:
        del frame
    SnapshotChecker().check(content, title)


__all__ = [
    "check",
    "check_from_caller",
    "CheckOutcome",
    "CheckResult",
    "SnapshotChecker",
    "SnapshotTestFailed",
    "DiffKind",
    "DiffLine",
    "line_by_line",
    "distance",
    "CalqueError",
    "ErrorKind",
    "Snapshot",
    "SnapshotStatus",
    "SnapshotStore",
    "Config",
]
