import os

import session as session_module
from session import TreeSession

HEADER = "ID,Name,Role,Gender,FatherID,MotherID,Spouses\n"


def write(path, body, mtime_ns=None):
    path.write_text(HEADER + body, encoding="utf-8")
    if mtime_ns is not None:
        os.utime(path, ns=(mtime_ns, mtime_ns))


def test_poll_reloads_only_on_change(tmp_path):
    path = tmp_path / "family.csv"
    write(path, "1,Solo,,Male,0,0,\n", mtime_ns=1_000_000_000)
    session = TreeSession(path)

    assert len(session.snapshot.store) == 0
    assert session.poll() is True
    assert session.snapshot.layout.position(1) == (50, 50)
    assert session.poll() is False

    write(path, "1,Solo,,Male,0,0,\n2,Other,,Female,0,0,\n", mtime_ns=2_000_000_000)
    assert session.poll() is True
    assert len(session.snapshot.store) == 2
    assert session.snapshot.layout.is_visible(2)


def test_reload_swaps_whole_snapshot(tmp_path):
    path = tmp_path / "family.csv"
    write(path, "1,Solo,,Male,0,0,\n", mtime_ns=1_000_000_000)
    session = TreeSession(path)
    old = session.reload()

    write(path, "7,New,,Male,0,0,\n", mtime_ns=2_000_000_000)
    new = session.reload()

    assert old.store.get(1) is not None
    assert old.layout.is_visible(1)
    assert new.store.get(1) is None
    assert new.layout.is_visible(7)
    assert session.snapshot is new


def test_poll_missing_file_keeps_snapshot(tmp_path):
    session = TreeSession(tmp_path / "nope.csv")
    assert session.poll() is False
    assert len(session.snapshot.store) == 0


def test_watch_calls_back_on_change(tmp_path):
    path = tmp_path / "family.csv"
    write(path, "1,Solo,,Male,0,0,\n")
    session = TreeSession(path)
    seen = []

    session.watch(seen.append, interval=0, max_polls=2)

    assert len(seen) == 1
    assert seen[0].layout.roots == [1]


def test_poll_keeps_snapshot_when_reload_fails(tmp_path, monkeypatch):
    path = tmp_path / "family.csv"
    write(path, "1,Solo,,Male,0,0,\n", mtime_ns=1_000_000_000)
    session = TreeSession(path)
    assert session.poll() is True
    before = session.snapshot

    def vanished(path, config):
        raise FileNotFoundError(path)

    monkeypatch.setattr(session_module, "build_snapshot", vanished)
    write(path, "2,Other,,Female,0,0,\n", mtime_ns=2_000_000_000)

    assert session.poll() is False
    assert session.snapshot is before

    # the change is picked up once the file reads cleanly again
    monkeypatch.undo()
    assert session.poll() is True
    assert session.snapshot.layout.is_visible(2)
