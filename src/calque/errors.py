"""Error kinds raised by the snapshot store and the review commands."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class ErrorKind(Enum):
    """Every failure calque knows how to explain."""

    EMPTY_TITLE = "empty_title"
    STORE_ROOT_UNAVAILABLE = "store_root_unavailable"
    READ_ACCEPTED_FAILED = "read_accepted_failed"
    READ_PENDING_FAILED = "read_pending_failed"
    WRITE_PENDING_FAILED = "write_pending_failed"
    LIST_PENDING_FAILED = "list_pending_failed"
    ACCEPT_FAILED = "accept_failed"
    REJECT_FAILED = "reject_failed"
    CORRUPTED_SNAPSHOT = "corrupted_snapshot"
    UNREADABLE_INPUT = "unreadable_input"
    UNKNOWN_COMMAND = "unknown_command"
    TOO_MANY_COMMANDS = "too_many_commands"


@dataclass(eq=False)
class CalqueError(Exception):
    """
    A tagged calque failure.

    The kind says what went wrong; path, title and cause carry the
    context needed to explain it (cause is usually the OSError that
    triggered it). detail holds free text such as the offending command.
    """
    kind: ErrorKind
    path: Optional[Path] = None
    title: Optional[str] = None
    cause: Optional[BaseException] = None
    detail: Optional[str] = None

    def __str__(self):
        return format_error(self)

    def explain(self) -> str:
        """Message for terminal reporting."""
        return f"❌ {format_error(self)}"


def format_reason(cause: Optional[BaseException]) -> str:
    """Turn an underlying exception into a short reason."""
    if cause is None:
        return "unknown reason"
    if isinstance(cause, EOFError):
        return "end of input"
    if isinstance(cause, OSError) and cause.strerror:
        return cause.strerror
    text = str(cause)
    return text if text else repr(cause)


def format_error(error: CalqueError) -> str:
    """Human-readable sentence for an error."""
    reason = format_reason(error.cause)
    kind = error.kind

    if kind == ErrorKind.EMPTY_TITLE:
        return "A snapshot needs a non-empty title"
    if kind == ErrorKind.STORE_ROOT_UNAVAILABLE:
        return f'I couldn\'t create the snapshots folder "{error.path}": {reason}'
    if kind == ErrorKind.READ_ACCEPTED_FAILED:
        return f'I couldn\'t read the accepted snapshot from "{error.path}": {reason}'
    if kind == ErrorKind.READ_PENDING_FAILED:
        return f'I couldn\'t read the new snapshot from "{error.path}": {reason}'
    if kind == ErrorKind.WRITE_PENDING_FAILED:
        return f'I couldn\'t save the snapshot "{error.title}" to "{error.path}": {reason}'
    if kind == ErrorKind.LIST_PENDING_FAILED:
        return f"I couldn't read the snapshots directory ({error.path}): {reason}"
    if kind == ErrorKind.ACCEPT_FAILED:
        return f'I couldn\'t accept the snapshot at "{error.path}": {reason}'
    if kind == ErrorKind.REJECT_FAILED:
        return f'I couldn\'t reject the snapshot at "{error.path}": {reason}'
    if kind == ErrorKind.CORRUPTED_SNAPSHOT:
        return f'The file "{error.path}" does not contain a valid snapshot'
    if kind == ErrorKind.UNREADABLE_INPUT:
        return f"I couldn't read the user input: {reason}"
    if kind == ErrorKind.UNKNOWN_COMMAND:
        return f"{error.detail} isn't a valid subcommand"
    if kind == ErrorKind.TOO_MANY_COMMANDS:
        return f"Only one subcommand is allowed: {error.detail}"
    return kind.value
