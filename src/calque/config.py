"""Configuration management for calque."""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
import os
from dotenv import load_dotenv

# Load .env file
load_dotenv()

VERSION = "1.3.0"

# Files or folders that mark the root of a project
PROJECT_MARKERS = ("pyproject.toml", "setup.py", "setup.cfg", ".git")


def find_project_root(start: Optional[Path] = None) -> Path:
    """Walk up from start (or the cwd) to the first directory holding a project marker."""
    start = (start or Path.cwd()).resolve()
    for candidate in (start, *start.parents):
        if any((candidate / marker).exists() for marker in PROJECT_MARKERS):
            return candidate
    return start


@dataclass
class StoreConfig:
    """Where snapshots live on disk."""
    folder_name: str = "calque_snapshots"
    # None means "discover from the working directory when needed"
    project_root: Optional[Path] = None

    @property
    def root(self) -> Path:
        base = self.project_root if self.project_root is not None else find_project_root()
        return Path(base) / self.folder_name


@dataclass
class MessageConfig:
    """Fixed messages shown to the user."""
    test_failed: str = "Calque snapshot test failed"
    review_hint: str = "Please review this snapshot using `calque review`"


@dataclass
class Config:
    """Main configuration class."""
    store: StoreConfig = field(default_factory=StoreConfig)
    messages: MessageConfig = field(default_factory=MessageConfig)
    version: str = VERSION
    log_level: str = "WARNING"

    @classmethod
    def for_root(cls, project_root: Path) -> "Config":
        """Configuration with an explicit project root (handy for tests)."""
        return cls(store=StoreConfig(project_root=Path(project_root)))

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        project_root = os.getenv("CALQUE_PROJECT_ROOT")
        return cls(
            store=StoreConfig(
                folder_name=os.getenv("CALQUE_SNAPSHOT_FOLDER", "calque_snapshots"),
                project_root=Path(project_root) if project_root else None,
            ),
            log_level=os.getenv("CALQUE_LOG_LEVEL", "WARNING"),
        )


# Global config instance
config = Config.from_env()
