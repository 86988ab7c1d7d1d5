"""Human-in-the-loop snapshot review."""

from .diff_viewer import SnapshotViewer
from .confirmator import ChoicePrompt, ReviewChoice
from .review import ReviewSession, ReviewSummary

__all__ = [
    # Viewing
    "SnapshotViewer",
    # Prompting
    "ChoicePrompt",
    "ReviewChoice",
    # Review loops
    "ReviewSession",
    "ReviewSummary",
]
