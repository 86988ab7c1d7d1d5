"""CLI interface for reviewing snapshots."""

from enum import Enum
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..approval import ChoicePrompt, ReviewSession
from ..approval.confirmator import LineReader
from ..core.levenshtein import closest_match
from ..errors import CalqueError, ErrorKind
from ..storage.store import SnapshotStore


class Command(Enum):
    """Subcommands understood by the CLI."""

    REVIEW = "review"
    ACCEPT_ALL = "accept-all"
    REJECT_ALL = "reject-all"
    HELP = "help"


COMMAND_ALIASES = {
    "review": Command.REVIEW,
    "r": Command.REVIEW,
    "accept-all": Command.ACCEPT_ALL,
    "aa": Command.ACCEPT_ALL,
    "reject-all": Command.REJECT_ALL,
    "ra": Command.REJECT_ALL,
    "help": Command.HELP,
    "h": Command.HELP,
}

# Suggestions are looked up in this order
COMMAND_NAMES = [command.value for command in Command]


def parse_command(args: Sequence[str]) -> Command:
    """
    Map command line arguments to a subcommand.

    No argument means review. Names are matched case-insensitively.

    Raises:
        CalqueError: UNKNOWN_COMMAND or TOO_MANY_COMMANDS
    """
    if not args:
        return Command.REVIEW

    if len(args) > 1:
        raise CalqueError(ErrorKind.TOO_MANY_COMMANDS, detail=", ".join(args))

    command = COMMAND_ALIASES.get(args[0].lower())
    if command is None:
        raise CalqueError(ErrorKind.UNKNOWN_COMMAND, detail=args[0])
    return command


class CalqueCLI:
    """
    Entry point for the `calque` command.

    Commands:
    - review, r - Review new snapshots one by one (default)
    - accept-all, aa - Accept all new snapshots
    - reject-all, ra - Reject all new snapshots
    - help, h - Show usage
    """

    def __init__(
        self,
        store: Optional[SnapshotStore] = None,
        console: Optional[Console] = None,
        line_reader: Optional[LineReader] = None,
    ):
        self.console = console or Console()
        self.prompt = ChoicePrompt(self.console, line_reader)
        self.session = ReviewSession(
            store=store,
            console=self.console,
            prompt=self.prompt,
        )

    def run(self, args: Sequence[str]):
        """Parse args and run the matching command."""
        try:
            command = parse_command(args)
        except CalqueError as e:
            self.console.print(f"[red]Error: {escape(str(e))}.[/red]")
            if e.kind == ErrorKind.UNKNOWN_COMMAND:
                self._suggest(e.detail)
            else:
                self.show_help()
            return

        self.execute(command)

    def execute(self, command: Command):
        """Run a parsed command."""
        if command == Command.REVIEW:
            return self.session.review()
        if command == Command.ACCEPT_ALL:
            return self.session.accept_all()
        if command == Command.REJECT_ALL:
            return self.session.reject_all()
        self.show_help()

    def show_help(self):
        """Display usage information."""
        self.console.print("[yellow]USAGE:[/yellow]\n  calque \\[ <SUBCOMMAND> ]\n")

        help_table = Table(title="Subcommands", show_header=True)
        help_table.add_column("Command", style="green")
        help_table.add_column("Alias", style="cyan")
        help_table.add_column("Description")

        commands = [
            ("review", "r", "Review all new snapshots one by one"),
            ("accept-all", "aa", "Accept all new snapshots"),
            ("reject-all", "ra", "Reject all new snapshots"),
            ("help", "h", "Show this help text"),
        ]

        for name, alias, desc in commands:
            help_table.add_row(name, alias, desc)

        self.console.print(help_table)

    def _suggest(self, unknown: Optional[str]):
        """Offer the nearest command, or fall back to help."""
        suggestion = closest_match(unknown or "", COMMAND_NAMES)
        if suggestion is None:
            self.show_help()
            return

        try:
            confirmed = self.prompt.ask_yes_no(
                f"I think you misspelled `{suggestion}`, would you like to run it instead?"
            )
        except CalqueError as e:
            self.console.print(e.explain(), style="red", markup=False)
            confirmed = False

        if confirmed:
            self.execute(Command(suggestion))
        else:
            self.show_help()
