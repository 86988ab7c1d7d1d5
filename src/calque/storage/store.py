"""Snapshot storage on disk."""

from pathlib import Path
from typing import Optional, Union
import logging

import regex

from .snapshot import InvalidSnapshotFormat, Snapshot, SnapshotStatus
from ..config import Config, config as default_config
from ..errors import CalqueError, ErrorKind

logger = logging.getLogger(__name__)

PENDING_SUFFIX = ".snap"
ACCEPTED_SUFFIX = ".accepted.snap"
REJECTED_SUFFIX = ".rejected.snap"

# Stand-in for path separators inside titles
SEPARATOR_PLACEHOLDER = "⧸"

_SEPARATORS = regex.compile(r"[/\\]")
_UNSAFE = regex.compile(r"[^[:alnum:]\- _.!+:]")
_WHITESPACE = regex.compile(r"\s+")


def safe_basename(title: str) -> str:
    """
    Turn a title into a file name without suffix.

    Two titles that sanitise to the same name share a file; that
    collision is not detected.
    """
    name = _SEPARATORS.sub(SEPARATOR_PLACEHOLDER, title)
    name = _UNSAFE.sub("_", name)
    name = name.strip()
    return _WHITESPACE.sub(" ", name)


def _swap_suffix(path: Path, suffix: str) -> Path:
    name = path.name
    if name.endswith(PENDING_SUFFIX):
        name = name[: -len(PENDING_SUFFIX)]
    return path.with_name(name + suffix)


def accepted_path_for(pending: Path) -> Path:
    """Accepted counterpart of a pending file."""
    return _swap_suffix(Path(pending), ACCEPTED_SUFFIX)


def rejected_path_for(pending: Path) -> Path:
    """Rejected counterpart of a pending file."""
    return _swap_suffix(Path(pending), REJECTED_SUFFIX)


def is_pending_name(name: str) -> bool:
    return (
        name.endswith(PENDING_SUFFIX)
        and not name.endswith(ACCEPTED_SUFFIX)
        and not name.endswith(REJECTED_SUFFIX)
    )


class SnapshotStore:
    """
    Reads and writes snapshot files for a project.

    Structure:
    calque_snapshots/
        <title>.snap             pending, waiting for review
        <title>.accepted.snap    accepted baseline
        <title>.rejected.snap    rejected, never read back

    Accepting renames the pending file over the baseline; rejecting
    renames it aside. Both rely on a single filesystem rename.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or default_config

    @property
    def root(self) -> Path:
        return self.config.store.root

    def ensure_root(self) -> Path:
        """Create the snapshots folder if needed and check it is a folder."""
        root = self.root
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CalqueError(ErrorKind.STORE_ROOT_UNAVAILABLE, path=root, cause=e) from e

        if not root.is_dir():
            cause = NotADirectoryError(f"{root} is not a directory")
            raise CalqueError(ErrorKind.STORE_ROOT_UNAVAILABLE, path=root, cause=cause)

        return root

    def pending_path(self, title: str) -> Path:
        return self.root / f"{safe_basename(title)}{PENDING_SUFFIX}"

    def accepted_path(self, title: str) -> Path:
        return accepted_path_for(self.pending_path(title))

    def serialize(self, snapshot: Snapshot) -> bytes:
        """File bytes for a snapshot."""
        return snapshot.to_text(self.config.version).encode("utf-8")

    def deserialize(
        self,
        raw: Union[bytes, str],
        status: SnapshotStatus,
        path: Optional[Path] = None,
    ) -> Snapshot:
        """Parse file bytes, raising CORRUPTED_SNAPSHOT on any deviation."""
        try:
            text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
            return Snapshot.from_text(text, status)
        except (UnicodeDecodeError, InvalidSnapshotFormat) as e:
            raise CalqueError(ErrorKind.CORRUPTED_SNAPSHOT, path=path, cause=e) from e

    def read_accepted(self, title: str) -> Optional[Snapshot]:
        """
        Read the accepted baseline for a title.

        Returns:
            The baseline, or None if the title was never accepted
        """
        return self.read_accepted_at(self.accepted_path(title))

    def read_accepted_at(self, path: Path) -> Optional[Snapshot]:
        """Read an accepted file; a missing file is not an error."""
        try:
            raw = Path(path).read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CalqueError(ErrorKind.READ_ACCEPTED_FAILED, path=path, cause=e) from e

        return self.deserialize(raw, SnapshotStatus.ACCEPTED, path)

    def read_pending(self, path: Path) -> Snapshot:
        """Read a pending file."""
        try:
            raw = Path(path).read_bytes()
        except OSError as e:
            raise CalqueError(ErrorKind.READ_PENDING_FAILED, path=path, cause=e) from e

        return self.deserialize(raw, SnapshotStatus.NEW, path)

    def write_pending(self, snapshot: Snapshot, destination: Optional[Path] = None) -> Path:
        """
        Save a new snapshot as a pending file, replacing any previous one.

        Args:
            snapshot: A snapshot with NEW status
            destination: Target file (defaults to the title's pending path)

        Returns:
            The path written
        """
        destination = Path(destination) if destination else self.pending_path(snapshot.title)

        if snapshot.status != SnapshotStatus.NEW or not is_pending_name(destination.name):
            cause = ValueError(f"invalid destination for a new snapshot: {destination.name}")
            raise CalqueError(
                ErrorKind.WRITE_PENDING_FAILED,
                path=destination,
                title=snapshot.title,
                cause=cause,
            )

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(self.serialize(snapshot))
        except OSError as e:
            raise CalqueError(
                ErrorKind.WRITE_PENDING_FAILED,
                path=destination,
                title=snapshot.title,
                cause=e,
            ) from e

        logger.debug("Wrote pending snapshot %s", destination)
        return destination

    def discard_pending(self, path: Path) -> bool:
        """
        Remove a stale pending file, ignoring any failure.

        Returns:
            True if a file was removed
        """
        try:
            Path(path).unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("Could not remove stale snapshot %s: %s", path, e)
            return False

        logger.debug("Removed stale pending snapshot %s", path)
        return True

    def list_pending(self, folder: Optional[Path] = None) -> list[Path]:
        """
        List pending files, sorted by file name.

        Accepted and rejected files are never part of the result.
        """
        folder = Path(folder) if folder else self.root
        try:
            names = [entry.name for entry in folder.iterdir()]
        except OSError as e:
            raise CalqueError(ErrorKind.LIST_PENDING_FAILED, path=folder, cause=e) from e

        return [folder / name for name in sorted(names) if is_pending_name(name)]

    def accept(self, path: Path) -> Path:
        """Promote a pending file to the accepted baseline."""
        target = accepted_path_for(path)
        try:
            Path(path).replace(target)
        except OSError as e:
            raise CalqueError(ErrorKind.ACCEPT_FAILED, path=path, cause=e) from e

        logger.debug("Accepted %s", path)
        return target

    def reject(self, path: Path) -> Path:
        """Move a pending file aside; the baseline is left alone."""
        target = rejected_path_for(path)
        try:
            Path(path).replace(target)
        except OSError as e:
            raise CalqueError(ErrorKind.REJECT_FAILED, path=path, cause=e) from e

        logger.debug("Rejected %s", path)
        return target
