"""Snapshot value and its on-disk text format."""

from dataclasses import dataclass
from enum import Enum

DELIMITER = "---"
TITLE_PREFIX = "title: "
VERSION_PREFIX = "version: "


class SnapshotStatus(Enum):
    """Snapshot status enumeration."""
    NEW = "new"
    ACCEPTED = "accepted"


class InvalidSnapshotFormat(ValueError):
    """The text does not follow the snapshot file layout."""


@dataclass(frozen=True)
class Snapshot:
    """
    A captured test output.

    Attributes:
        title: Unique name of the snapshot, usually the test name
        content: The captured text
        status: NEW for a fresh capture, ACCEPTED for a reviewed baseline
    """
    title: str
    content: str
    status: SnapshotStatus = SnapshotStatus.NEW

    @classmethod
    def new(cls, title: str, content: str) -> "Snapshot":
        """Create a snapshot awaiting review."""
        return cls(title=title, content=content, status=SnapshotStatus.NEW)

    @classmethod
    def accepted(cls, title: str, content: str) -> "Snapshot":
        """Create a snapshot that was already accepted."""
        return cls(title=title, content=content, status=SnapshotStatus.ACCEPTED)

    def to_text(self, version: str) -> str:
        """Render the file text: a four line header followed by the content."""
        escaped_title = self.title.replace("\n", "\\n")
        return "\n".join([
            DELIMITER,
            f"{VERSION_PREFIX}{version}",
            f"{TITLE_PREFIX}{escaped_title}",
            DELIMITER,
            self.content,
        ])

    @classmethod
    def from_text(cls, raw: str, status: SnapshotStatus) -> "Snapshot":
        """
        Parse file text produced by to_text.

        Windows line endings are normalised first. The header must be
        complete; anything else raises InvalidSnapshotFormat.
        """
        raw = raw.replace("\r\n", "\n")

        open_line, rest = _split_once(raw)
        if open_line != DELIMITER:
            raise InvalidSnapshotFormat("missing opening delimiter")

        # The version line is not interpreted but has to be there
        _version_line, rest = _split_once(rest)

        title_line, rest = _split_once(rest)
        if not title_line.startswith(TITLE_PREFIX):
            raise InvalidSnapshotFormat("missing title line")

        close_line, content = _split_once(rest)
        if close_line != DELIMITER:
            raise InvalidSnapshotFormat("missing closing delimiter")

        title = title_line[len(TITLE_PREFIX):].replace("\\n", "\n")
        return cls(title=title, content=content, status=status)


def _split_once(text: str) -> tuple[str, str]:
    head, sep, rest = text.partition("\n")
    if not sep:
        raise InvalidSnapshotFormat("snapshot header is truncated")
    return head, rest
