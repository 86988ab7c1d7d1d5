"""User-facing interfaces."""

from .cli import CalqueCLI, Command, parse_command

__all__ = ["CalqueCLI", "Command", "parse_command"]
