import io
import sys
from pathlib import Path

# Ensure src is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import pytest
from rich.console import Console

from calque.approval import ChoicePrompt, ReviewChoice, ReviewSession
from calque.config import Config
from calque.errors import CalqueError, ErrorKind
from calque.storage.snapshot import Snapshot
from calque.storage.store import SnapshotStore


class ScriptedReader:
    """Feeds canned answers; raises EOFError once they run out."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def store(tmp_path):
    return SnapshotStore(Config.for_root(tmp_path))


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=500, force_terminal=False, color_system=None)


def make_session(store, console, *answers):
    reader = ScriptedReader(*answers)
    session = ReviewSession(store=store, console=console, prompt=ChoicePrompt(console, reader))
    return session, reader


def add_accepted(store, title, content):
    store.accept(store.write_pending(Snapshot.new(title, content)))


def add_pending(store, title, content):
    return store.write_pending(Snapshot.new(title, content))


def test_review_counts_and_hides_accepted_files(store, console):
    add_accepted(store, "T1", "A")
    add_accepted(store, "T2", "B")
    p1 = add_pending(store, "T1", "A\nC")
    p2 = add_pending(store, "T2", "B\nD")
    session, _ = make_session(store, console, "s", "s")

    summary = session.review()

    output = console.file.getvalue()
    assert "Reviewing snapshot 1 of 2" in output
    assert "Reviewing snapshot 2 of 2" in output
    assert ".accepted.snap" not in output
    assert summary.skipped == 2
    assert p1.exists() and p2.exists()


def test_review_accepts_and_rejects(store, console):
    add_accepted(store, "T1", "old one")
    add_accepted(store, "T2", "old two")
    add_pending(store, "T1", "new one")
    add_pending(store, "T2", "new two")
    session, _ = make_session(store, console, "a", "r")

    summary = session.review()

    assert summary.accepted == 1
    assert summary.rejected == 1
    assert store.read_accepted("T1").content == "new one"
    assert store.read_accepted("T2").content == "old two"
    assert (store.root / "T2.rejected.snap").exists()
    assert store.list_pending() == []


def test_review_shows_diff_against_baseline(store, console):
    add_accepted(store, "T1", "same\nold")
    add_pending(store, "T1", "same\nNEW")
    session, _ = make_session(store, console, "s")

    session.review()

    output = console.file.getvalue()
    assert "mismatched snapshots" in output
    assert "NEW" in output


def test_review_shows_new_snapshot_without_baseline(store, console):
    add_pending(store, "Brand new", "hello")
    session, _ = make_session(store, console, "a")

    summary = session.review()

    assert "new snapshot" in console.file.getvalue()
    assert summary.accepted == 1
    assert store.read_accepted("Brand new").content == "hello"


def test_invalid_answers_prompt_again(store, console):
    add_pending(store, "T1", "content")
    session, reader = make_session(store, console, "", "x", "A", "a")

    summary = session.review()

    assert len(reader.prompts) == 4
    assert summary.accepted == 1


def test_quit_leaves_remaining_files(store, console):
    p1 = add_pending(store, "T1", "one")
    p2 = add_pending(store, "T2", "two")
    session, reader = make_session(store, console, "q")

    summary = session.review()

    assert summary.aborted is True
    assert len(reader.prompts) == 1
    assert p1.exists() and p2.exists()
    assert "Review aborted by the user." in console.file.getvalue()


def test_end_of_input_moves_to_next_snapshot(store, console):
    p1 = add_pending(store, "T1", "one")
    p2 = add_pending(store, "T2", "two")
    session, reader = make_session(store, console)

    summary = session.review()

    assert summary.failed == 2
    assert summary.aborted is False
    assert len(reader.prompts) == 2
    assert "end of input" in console.file.getvalue()
    assert p1.exists() and p2.exists()


def test_unreadable_snapshot_does_not_stop_review(store, console):
    root = store.ensure_root()
    (root / "A broken.snap").write_text("not a snapshot")
    add_pending(store, "B fine", "fine")
    session, reader = make_session(store, console, "a")

    summary = session.review()

    assert summary.failed == 1
    assert summary.accepted == 1
    assert len(reader.prompts) == 1
    assert "does not contain a valid snapshot" in console.file.getvalue()
    assert store.read_accepted("B fine").content == "fine"


def test_unreadable_baseline_falls_back_to_new_view(store, console):
    add_pending(store, "T1", "content")
    store.accepted_path("T1").mkdir()
    session, _ = make_session(store, console, "s")

    summary = session.review()

    output = console.file.getvalue()
    assert "couldn't read the accepted snapshot" in output
    assert "new snapshot" in output
    assert summary.skipped == 1


def test_review_pending_list_is_read_once(store, console):
    add_pending(store, "T1", "one")

    class AddingReader(ScriptedReader):
        def __call__(self, prompt):
            add_pending(store, "T2", "two")
            return super().__call__(prompt)

    session = ReviewSession(
        store=store,
        console=console,
        prompt=ChoicePrompt(console, AddingReader("s")),
    )

    summary = session.review()

    assert summary.total == 1
    assert "Reviewing snapshot 1 of 1" in console.file.getvalue()


def test_review_with_nothing_pending(store, console):
    session, reader = make_session(store, console)

    summary = session.review()

    assert summary.total == 0
    assert reader.prompts == []
    assert "No new snapshots to review." in console.file.getvalue()


def test_review_reports_unusable_root(store, console, tmp_path):
    (tmp_path / "calque_snapshots").write_text("file")
    session, _ = make_session(store, console)

    summary = session.review()

    assert summary.total == 0
    assert "couldn't create the snapshots folder" in console.file.getvalue()


def test_accept_all(store, console):
    add_accepted(store, "T1", "old")
    add_pending(store, "T1", "new")
    add_pending(store, "T2", "two")
    session, reader = make_session(store, console)

    summary = session.accept_all()

    assert summary.accepted == 2
    assert reader.prompts == []
    assert store.list_pending() == []
    assert store.read_accepted("T1").content == "new"
    output = console.file.getvalue()
    assert "All new snapshots accepted!" in output
    assert "Reviewing" not in output


def test_reject_all(store, console):
    add_accepted(store, "T1", "old")
    add_pending(store, "T1", "new")
    add_pending(store, "T2", "two")
    session, _ = make_session(store, console)

    summary = session.reject_all()

    assert summary.rejected == 2
    assert store.list_pending() == []
    assert store.read_accepted("T1").content == "old"
    assert store.read_accepted("T2") is None
    assert "All new snapshots rejected!" in console.file.getvalue()


def test_ask_choice_parses_answers(console):
    prompt = ChoicePrompt(console, ScriptedReader(" r "))

    assert prompt.ask_choice() == ReviewChoice.REJECT


def test_ask_choice_raises_on_unreadable_input(console):
    prompt = ChoicePrompt(console, ScriptedReader())

    with pytest.raises(CalqueError) as exc_info:
        prompt.ask_choice()

    assert exc_info.value.kind == ErrorKind.UNREADABLE_INPUT


@pytest.mark.parametrize("answer, expected", [("y", True), ("YES", True), ("n", False), ("", False)])
def test_ask_yes_no(console, answer, expected):
    prompt = ChoicePrompt(console, ScriptedReader(answer))

    assert prompt.ask_yes_no("Run it?") is expected
