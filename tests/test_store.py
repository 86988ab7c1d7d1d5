import sys
from pathlib import Path

# Ensure src is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import pytest

from calque.config import Config
from calque.errors import CalqueError, ErrorKind
from calque.storage.snapshot import Snapshot, SnapshotStatus
from calque.storage.store import (
    SnapshotStore,
    accepted_path_for,
    rejected_path_for,
    safe_basename,
)


@pytest.fixture
def store(tmp_path):
    return SnapshotStore(Config.for_root(tmp_path))


@pytest.mark.parametrize(
    "title, expected",
    [
        ("my first snapshot", "my first snapshot"),
        ("  padded   title  ", "padded title"),
        ("a/b\\c", "a_b_c"),
        ("tab\there", "tab_here"),
        ("what? *", "what_ _"),
        ("café: ok! 1+1.", "café: ok! 1+1."),
        ("dash-and_underscore", "dash-and_underscore"),
    ],
)
def test_safe_basename(title, expected):
    assert safe_basename(title) == expected


def test_paths(store, tmp_path):
    pending = store.pending_path("Some title")

    assert pending == tmp_path / "calque_snapshots" / "Some title.snap"
    assert store.accepted_path("Some title") == tmp_path / "calque_snapshots" / "Some title.accepted.snap"
    assert accepted_path_for(pending).name == "Some title.accepted.snap"
    assert rejected_path_for(pending).name == "Some title.rejected.snap"


def test_serialize_layout(store):
    snapshot = Snapshot.new("two\nlines", "body\n")

    assert store.serialize(snapshot) == b"---\nversion: 1.3.0\ntitle: two\\nlines\n---\nbody\n"


def test_serialize_round_trip(store):
    snapshot = Snapshot.new("multi\nline title", "first\n\nthird")

    raw = store.serialize(snapshot)

    assert store.deserialize(raw, SnapshotStatus.NEW) == snapshot


def test_deserialize_empty_content(store):
    raw = store.serialize(Snapshot.new("empty", ""))

    parsed = store.deserialize(raw, SnapshotStatus.ACCEPTED)
    assert parsed == Snapshot.accepted("empty", "")


def test_deserialize_normalises_windows_line_endings(store):
    raw = b"---\r\nversion: 1.0.1\r\ntitle: crlf\r\n---\r\nhello\r\nworld\r\n"

    parsed = store.deserialize(raw, SnapshotStatus.ACCEPTED)

    assert parsed.title == "crlf"
    assert parsed.content == "hello\nworld\n"
    assert parsed.status == SnapshotStatus.ACCEPTED


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"---",
        b"---\nversion: 1.3.0\n",
        b"nope\nversion: 1.3.0\ntitle: x\n---\nbody",
        b"---\nversion: 1.3.0\nname: x\n---\nbody",
        b"---\nversion: 1.3.0\ntitle: x\n--\nbody",
        b"---\nversion: 1.3.0\ntitle: x\n---",
        b"---\nversion: 1.3.0\ntitle: \xff\n---\nbody",
    ],
)
def test_deserialize_rejects_malformed_files(store, raw):
    with pytest.raises(CalqueError) as exc_info:
        store.deserialize(raw, SnapshotStatus.NEW, Path("broken.snap"))

    assert exc_info.value.kind == ErrorKind.CORRUPTED_SNAPSHOT
    assert "broken.snap" in str(exc_info.value)


def test_ensure_root_is_idempotent(store, tmp_path):
    assert store.ensure_root() == tmp_path / "calque_snapshots"
    assert store.ensure_root().is_dir()


def test_ensure_root_rejects_a_file(store, tmp_path):
    (tmp_path / "calque_snapshots").write_text("not a folder")

    with pytest.raises(CalqueError) as exc_info:
        store.ensure_root()

    assert exc_info.value.kind == ErrorKind.STORE_ROOT_UNAVAILABLE


def test_read_accepted_missing_is_none(store):
    store.ensure_root()

    assert store.read_accepted("never checked") is None


def test_read_accepted_surfaces_other_failures(store):
    store.accepted_path("folder").mkdir(parents=True)

    with pytest.raises(CalqueError) as exc_info:
        store.read_accepted("folder")

    assert exc_info.value.kind == ErrorKind.READ_ACCEPTED_FAILED


def test_read_accepted_corrupted(store):
    path = store.accepted_path("broken")
    path.parent.mkdir(parents=True)
    path.write_text("garbage")

    with pytest.raises(CalqueError) as exc_info:
        store.read_accepted("broken")

    assert exc_info.value.kind == ErrorKind.CORRUPTED_SNAPSHOT
    assert exc_info.value.path == path


def test_write_pending_creates_folder_and_overwrites(store):
    path = store.write_pending(Snapshot.new("title", "first"))
    store.write_pending(Snapshot.new("title", "second"))

    assert path == store.pending_path("title")
    assert store.read_pending(path).content == "second"


def test_write_pending_refuses_accepted_destination(store):
    destination = store.accepted_path("title")

    with pytest.raises(CalqueError) as exc_info:
        store.write_pending(Snapshot.new("title", "content"), destination)

    assert exc_info.value.kind == ErrorKind.WRITE_PENDING_FAILED
    assert not destination.exists()


def test_write_pending_refuses_titles_that_look_rejected(store):
    with pytest.raises(CalqueError) as exc_info:
        store.write_pending(Snapshot.new("old run.rejected", "content"))

    assert exc_info.value.kind == ErrorKind.WRITE_PENDING_FAILED
    assert not (store.root / "old run.rejected.snap").exists()


def test_write_pending_refuses_accepted_snapshot(store):
    with pytest.raises(CalqueError) as exc_info:
        store.write_pending(Snapshot.accepted("title", "content"))

    assert exc_info.value.kind == ErrorKind.WRITE_PENDING_FAILED


def test_read_pending_missing_file(store):
    with pytest.raises(CalqueError) as exc_info:
        store.read_pending(store.pending_path("missing"))

    assert exc_info.value.kind == ErrorKind.READ_PENDING_FAILED


def test_list_pending_filters_and_sorts(store):
    root = store.ensure_root()
    for name in ["b.snap", "a.snap", "a.accepted.snap", "c.rejected.snap", "notes.txt"]:
        (root / name).write_text("x")

    assert [p.name for p in store.list_pending()] == ["a.snap", "b.snap"]


def test_list_pending_missing_folder(store, tmp_path):
    with pytest.raises(CalqueError) as exc_info:
        store.list_pending(tmp_path / "nowhere")

    assert exc_info.value.kind == ErrorKind.LIST_PENDING_FAILED


def test_accept_replaces_baseline(store):
    store.accept(store.write_pending(Snapshot.new("title", "old")))
    pending = store.write_pending(Snapshot.new("title", "new"))

    accepted = store.accept(pending)

    assert accepted == store.accepted_path("title")
    assert not pending.exists()
    assert store.read_accepted("title") == Snapshot.accepted("title", "new")


def test_reject_keeps_baseline(store):
    store.accept(store.write_pending(Snapshot.new("title", "old")))
    pending = store.write_pending(Snapshot.new("title", "new"))

    rejected = store.reject(pending)

    assert rejected.name == "title.rejected.snap"
    assert not pending.exists()
    assert store.read_accepted("title").content == "old"


def test_accept_missing_file(store):
    store.ensure_root()

    with pytest.raises(CalqueError) as exc_info:
        store.accept(store.pending_path("missing"))

    assert exc_info.value.kind == ErrorKind.ACCEPT_FAILED


def test_reject_missing_file(store):
    store.ensure_root()

    with pytest.raises(CalqueError) as exc_info:
        store.reject(store.pending_path("missing"))

    assert exc_info.value.kind == ErrorKind.REJECT_FAILED


def test_discard_pending_is_best_effort(store):
    path = store.write_pending(Snapshot.new("title", "content"))

    assert store.discard_pending(path) is True
    assert store.discard_pending(path) is False
