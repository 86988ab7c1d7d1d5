"""Prompts for review decisions."""

from enum import Enum
from typing import Callable, Optional

from rich.console import Console

from ..errors import CalqueError, ErrorKind

# Reads one line of input after showing the given prompt
LineReader = Callable[[str], str]


class ReviewChoice(Enum):
    """What the reviewer decided for a snapshot."""

    ACCEPT = "a"
    REJECT = "r"
    SKIP = "s"
    QUIT = "q"


def prompt_toolkit_reader() -> LineReader:
    """Line reader backed by a prompt_toolkit session, created on first use."""
    session = None

    def read(prompt: str) -> str:
        nonlocal session
        if session is None:
            from prompt_toolkit import PromptSession
            session = PromptSession()
        return session.prompt(prompt)

    return read


class ChoicePrompt:
    """
    Asks the reviewer what to do with a snapshot.

    Empty or unknown answers repeat the question. A failure to read
    input (end of input, closed terminal) raises UNREADABLE_INPUT.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        line_reader: Optional[LineReader] = None,
    ):
        self.console = console or Console()
        self.line_reader = line_reader or prompt_toolkit_reader()

    def ask_choice(self) -> ReviewChoice:
        """Show the menu until a valid choice is entered."""
        while True:
            self._print_menu()
            answer = self._read("> ").strip()
            try:
                return ReviewChoice(answer)
            except ValueError:
                continue

    def ask_yes_no(self, question: str) -> bool:
        """Ask a yes/no question; only y or yes count as yes."""
        self.console.print(f"[yellow]{question} \\[y/N][/yellow]")
        answer = self._read("> ")
        return answer.strip().lower() in ["y", "yes"]

    def _read(self, prompt: str) -> str:
        try:
            return self.line_reader(prompt)
        except (EOFError, OSError) as e:
            raise CalqueError(ErrorKind.UNREADABLE_INPUT, cause=e) from e

    def _print_menu(self):
        self.console.print(
            "  [green]a[/green] accept  "
            "  [red]r[/red] reject  "
            "  [yellow]s[/yellow] skip  "
            "  [cyan]q[/cyan] quit"
        )
