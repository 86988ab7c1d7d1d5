"""Interactive and batch review of pending snapshots."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

from rich.console import Console
from rich.markup import escape

from .confirmator import ChoicePrompt, ReviewChoice
from .diff_viewer import SnapshotViewer
from ..errors import CalqueError
from ..storage.snapshot import Snapshot
from ..storage.store import SnapshotStore, accepted_path_for

logger = logging.getLogger(__name__)


@dataclass
class ReviewSummary:
    """Tally of a review run."""

    total: int = 0
    accepted: int = 0
    rejected: int = 0
    skipped: int = 0
    failed: int = 0
    aborted: bool = False


class ReviewSession:
    """
    Walks through pending snapshots.

    The pending list is read once when a command starts. Errors on one
    snapshot are reported and the next snapshot is handled anyway.
    """

    def __init__(
        self,
        store: Optional[SnapshotStore] = None,
        console: Optional[Console] = None,
        prompt: Optional[ChoicePrompt] = None,
        viewer: Optional[SnapshotViewer] = None,
    ):
        self.store = store or SnapshotStore()
        self.console = console or Console()
        self.viewer = viewer or SnapshotViewer(self.console)
        self.prompt = prompt or ChoicePrompt(self.console)

    def review(self) -> ReviewSummary:
        """Review pending snapshots one by one."""
        summary = ReviewSummary()
        paths = self._pending_paths()
        if paths is None:
            return summary

        if not paths:
            self.console.print("[green]No new snapshots to review.[/green]")
            return summary

        summary.total = len(paths)
        for current, path in enumerate(paths, 1):
            self.console.clear()

            try:
                snapshot = self.store.read_pending(path)
            except CalqueError as e:
                self._report(e)
                summary.failed += 1
                continue

            self._display(path, snapshot, current, summary.total)

            try:
                choice = self.prompt.ask_choice()
            except CalqueError as e:
                self._report(e)
                summary.failed += 1
                continue

            if choice == ReviewChoice.QUIT:
                self.console.print("[cyan]Review aborted by the user.[/cyan]")
                summary.aborted = True
                break

            if choice == ReviewChoice.ACCEPT:
                self._accept(path, summary)
            elif choice == ReviewChoice.REJECT:
                self._reject(path, summary)
            else:
                summary.skipped += 1

        return summary

    def accept_all(self) -> ReviewSummary:
        """Accept every pending snapshot without showing it."""
        summary = ReviewSummary()
        self.console.print("Looking for new snapshots...")
        paths = self._pending_paths()
        if paths is None:
            return summary

        summary.total = len(paths)
        for path in paths:
            self._accept(path, summary)

        if summary.failed:
            self.console.print(f"[red]{summary.failed} snapshot(s) could not be accepted.[/red]")
        else:
            self.console.print("[green]All new snapshots accepted![/green]")
        return summary

    def reject_all(self) -> ReviewSummary:
        """Reject every pending snapshot without showing it."""
        summary = ReviewSummary()
        self.console.print("Looking for new snapshots...")
        paths = self._pending_paths()
        if paths is None:
            return summary

        summary.total = len(paths)
        for path in paths:
            self._reject(path, summary)

        if summary.failed:
            self.console.print(f"[red]{summary.failed} snapshot(s) could not be rejected.[/red]")
        else:
            self.console.print("[red]All new snapshots rejected![/red]")
        return summary

    def _pending_paths(self) -> Optional[list[Path]]:
        """Pending files, or None after reporting why they can't be listed."""
        try:
            root = self.store.ensure_root()
            return self.store.list_pending(root)
        except CalqueError as e:
            self._report(e)
            return None

    def _display(self, path: Path, snapshot: Snapshot, current: int, total: int):
        try:
            accepted = self.store.read_accepted_at(accepted_path_for(path))
        except CalqueError as e:
            self._report(e)
            accepted = None

        self.console.print(f"[cyan]Reviewing snapshot {current} of {total}[/cyan]")
        if accepted is None:
            self.viewer.show_new(snapshot)
        else:
            self.viewer.show_diff(accepted, snapshot)

    def _accept(self, path: Path, summary: ReviewSummary):
        try:
            self.store.accept(path)
        except CalqueError as e:
            self._report(e)
            summary.failed += 1
            return
        summary.accepted += 1
        self.console.print(f"[green]Accepted {escape(path.name)}[/green]")

    def _reject(self, path: Path, summary: ReviewSummary):
        try:
            self.store.reject(path)
        except CalqueError as e:
            self._report(e)
            summary.failed += 1
            return
        summary.rejected += 1
        self.console.print(f"[red]Rejected {escape(path.name)}[/red]")

    def _report(self, error: CalqueError):
        logger.debug("Review step failed: %s", error.kind.value)
        self.console.print(error.explain(), style="red", markup=False)
