"""Snapshot checks run from inside tests."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional
import logging

from rich.console import Console

from .diff import normalize_newlines
from ..approval.diff_viewer import SnapshotViewer, format_lines_text, snapshot_diff
from ..config import Config, config as default_config
from ..errors import CalqueError, ErrorKind
from ..storage.snapshot import Snapshot
from ..storage.store import SnapshotStore

logger = logging.getLogger(__name__)


class CheckOutcome(Enum):
    """What a check found."""

    UNCHANGED = "unchanged"
    NEW_SNAPSHOT = "new_snapshot"
    MISMATCH = "mismatch"


@dataclass
class CheckResult:
    """Result of comparing content with the accepted snapshot."""

    outcome: CheckOutcome
    snapshot: Snapshot
    path: Path
    accepted: Optional[Snapshot] = None

    @property
    def passed(self) -> bool:
        return self.outcome == CheckOutcome.UNCHANGED


class SnapshotTestFailed(AssertionError):
    """Raised inside the calling test when a snapshot check does not pass."""


class SnapshotChecker:
    """
    Compares test output with accepted snapshots.

    A title without a baseline gets a pending file and fails; a title
    whose baseline differs gets a pending file and fails too. Either
    way the pending file waits for `calque review`.
    """

    def __init__(
        self,
        store: Optional[SnapshotStore] = None,
        viewer: Optional[SnapshotViewer] = None,
        config: Optional[Config] = None,
    ):
        self.config = config or (store.config if store else default_config)
        self.store = store or SnapshotStore(self.config)
        self.viewer = viewer or SnapshotViewer(Console(stderr=True))

    def compare(self, content: str, title: Optional[str]) -> CheckResult:
        """
        Compare content with the accepted snapshot for title.

        Writes a pending file unless the content is unchanged.

        Raises:
            CalqueError: On an empty title or any storage failure
        """
        if not title:
            raise CalqueError(ErrorKind.EMPTY_TITLE)

        self.store.ensure_root()
        snapshot = Snapshot.new(title, content)
        pending = self.store.pending_path(title)
        accepted = self.store.read_accepted(title)

        if accepted is None:
            self.store.write_pending(snapshot, pending)
            return CheckResult(CheckOutcome.NEW_SNAPSHOT, snapshot, pending)

        if normalize_newlines(accepted.content) == normalize_newlines(content):
            self.store.discard_pending(pending)
            return CheckResult(CheckOutcome.UNCHANGED, snapshot, pending, accepted)

        self.store.write_pending(snapshot, pending)
        return CheckResult(CheckOutcome.MISMATCH, snapshot, pending, accepted)

    def check(self, content: str, title: Optional[str]) -> None:
        """
        Snapshot test: return quietly if content matches the accepted snapshot.

        Raises:
            SnapshotTestFailed: If the snapshot is new, differs, or could
                not be checked
        """
        messages = self.config.messages

        try:
            result = self.compare(content, title)
        except CalqueError as e:
            self.viewer.console.print(f"\n{e.explain()}\n", style="red", markup=False)
            raise SnapshotTestFailed(
                f"{messages.test_failed}: snapshot {title!r} failed: {e}"
            ) from e

        if result.outcome == CheckOutcome.NEW_SNAPSHOT:
            logger.debug("New snapshot %r written to %s", title, result.path)
            self.viewer.show_new(result.snapshot, hint=messages.review_hint)
            raise SnapshotTestFailed(
                f"{messages.test_failed}: new snapshot {title!r} was created. "
                f"{messages.review_hint}"
            )

        if result.outcome == CheckOutcome.MISMATCH:
            logger.debug("Snapshot %r differs from %s", title, result.path)
            self.viewer.show_diff(result.accepted, result.snapshot, hint=messages.review_hint)
            raise SnapshotTestFailed(
                f"{messages.test_failed}: snapshot {title!r} differs from the accepted one. "
                f"{messages.review_hint}\n\n"
                f"{format_lines_text(snapshot_diff(result.accepted, result.snapshot))}"
            )
