"""Snapshot viewer for showing new and changed snapshots."""

from typing import Optional

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.diff import DiffKind, DiffLine, count_changes, line_by_line, normalize_newlines
from ..storage.snapshot import Snapshot

# marker, number style, text style per kind
LINE_STYLES = {
    DiffKind.SHARED: ("│", "dim", "dim"),
    DiffKind.NEW: ("+", "bold green", "green"),
    DiffKind.OLD: ("-", "red", "red"),
}


def snapshot_lines(snapshot: Snapshot) -> list[DiffLine]:
    """Every line of a snapshot, shown as added."""
    body = normalize_newlines(snapshot.content)
    return [
        DiffLine(number=i, text=line, kind=DiffKind.NEW)
        for i, line in enumerate(body.split("\n"), 1)
    ]


def snapshot_diff(accepted: Snapshot, new: Snapshot) -> list[DiffLine]:
    """Diff between a baseline and a new snapshot, line endings normalised."""
    return line_by_line(normalize_newlines(accepted.content), normalize_newlines(new.content))


def format_lines_text(lines: list[DiffLine]) -> str:
    """Format diff lines as plain text."""
    width = len(str(max((line.number for line in lines), default=1)))
    rows = []
    for line in lines:
        marker = LINE_STYLES[line.kind][0]
        rows.append(f"{line.number:>{width}} {marker} {line.text}".rstrip())
    return "\n".join(rows)


class SnapshotViewer:
    """
    Viewer for displaying snapshots.

    New snapshots are shown in full; changed snapshots are shown as a
    diff against the accepted baseline.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def new_snapshot_view(self, snapshot: Snapshot, hint: Optional[str] = None) -> Panel:
        """Box showing a snapshot that has no baseline yet."""
        info = self._info_lines(snapshot, hint)
        return self._box("new snapshot", snapshot_lines(snapshot), info)

    def diff_view(
        self,
        accepted: Snapshot,
        new: Snapshot,
        hint: Optional[str] = None,
    ) -> Panel:
        """Box showing how a new snapshot differs from its baseline."""
        lines = snapshot_diff(accepted, new)
        stats = count_changes(lines)

        info = self._info_lines(new, hint)
        info.append(Text(""))
        info.append(Text("- old snapshot", style="red"))
        info.append(Text("+ new snapshot", style="green"))

        title = (
            f"mismatched snapshots [green]+{stats.additions}[/green] "
            f"[red]-{stats.deletions}[/red]"
        )
        return self._box(title, lines, info)

    def show_new(self, snapshot: Snapshot, hint: Optional[str] = None):
        """Display a snapshot that has no baseline yet."""
        self.console.print()
        self.console.print(self.new_snapshot_view(snapshot, hint))
        self.console.print()

    def show_diff(self, accepted: Snapshot, new: Snapshot, hint: Optional[str] = None):
        """Display a changed snapshot."""
        self.console.print()
        self.console.print(self.diff_view(accepted, new, hint))
        self.console.print()

    def lines_table(self, lines: list[DiffLine]) -> Table:
        """Grid of numbered, marked lines."""
        table = Table.grid(padding=(0, 1))
        table.add_column(justify="right", no_wrap=True)
        table.add_column(width=1, no_wrap=True)
        table.add_column()

        for line in lines:
            marker, number_style, text_style = LINE_STYLES[line.kind]
            table.add_row(
                Text(str(line.number), style=number_style),
                Text(marker, style=number_style),
                Text(line.text, style=text_style),
            )

        return table

    def _info_lines(self, snapshot: Snapshot, hint: Optional[str]) -> list[Text]:
        info = [
            Text.assemble(
                ("title: ", "blue"),
                " ".join(snapshot.title.split("\n")),
            )
        ]
        if hint:
            info.append(Text.assemble(("hint: ", "blue"), (hint, "yellow")))
        return info

    def _box(self, title: str, lines: list[DiffLine], info: list[RenderableType]) -> Panel:
        content = Group(*info, Text(""), self.lines_table(lines))
        return Panel(
            content,
            title=title,
            title_align="left",
            border_style="blue",
        )
