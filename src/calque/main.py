"""Main entry point for the calque command."""

import logging
import sys

from .config import config
from .interfaces.cli import CalqueCLI
from .storage.store import SnapshotStore

logger = logging.getLogger(__name__)


def resolve_log_level(name: str) -> int:
    """Numeric level for a level name; unknown names fall back to WARNING."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def cli_main():
    """Entry point for CLI."""
    logging.basicConfig(
        level=resolve_log_level(config.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    logger.debug("Snapshots folder: %s", config.store.root)

    cli = CalqueCLI(store=SnapshotStore(config))
    try:
        cli.run(sys.argv[1:])
    except KeyboardInterrupt:
        cli.console.print("\n[yellow]Interrupted.[/yellow]")


if __name__ == "__main__":
    cli_main()
