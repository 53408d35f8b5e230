from __future__ import annotations

import glob
import stat
import os
from pathlib import Path

import pytest

from jsponfs.io.config import StoreSettings
from jsponfs.io.errors import InvalidEntryId, IoError, NotFound
from jsponfs.io import fs
from jsponfs.io.lock import NullLock
from jsponfs.io.paths import object_dir, root_set_dir, tmp_dir
from jsponfs.io.store import EntryStore


@pytest.fixture
def store(tmp_path: Path) -> EntryStore:
    s = EntryStore(StoreSettings(root_dir=str(tmp_path)))
    s.create_dirs()
    return s


def test_put_get_roundtrip_and_no_temp_leftovers(store: EntryStore) -> None:
    store.put("A1", b'{"data":1}')
    assert store.get("A1") == b'{"data":1}'
    assert store.exists("A1")
    assert glob.glob(os.path.join(tmp_dir(store.settings), "*")) == []


def test_put_overwrites(store: EntryStore) -> None:
    store.put("A1", b"old")
    store.put("A1", b"new")
    assert store.get("A1") == b"new"


def test_get_missing_raises_not_found(store: EntryStore) -> None:
    with pytest.raises(NotFound) as ei:
        store.get("nope")
    assert ei.value.entry_id == "nope"
    assert isinstance(ei.value, IoError)


def test_root_marker_is_hard_link_with_same_bytes(store: EntryStore) -> None:
    store.put("R", b'{"data":"v1"}', root=True)

    obj = store.path("R")
    marker = store.root_index.marker_path("R")
    assert store.is_root("R")
    assert Path(marker).read_bytes() == Path(obj).read_bytes()
    assert os.stat(marker).st_ino == os.stat(obj).st_ino

    # Re-insert as root: marker follows the new inode.
    store.put("R", b'{"data":"v2"}', root=True)
    assert Path(marker).read_bytes() == b'{"data":"v2"}'
    assert os.stat(marker).st_ino == os.stat(obj).st_ino


def test_reinsert_as_non_root_removes_marker(store: EntryStore) -> None:
    store.put("R", b"1", root=True)
    store.put("R", b"2", root=False)
    assert not store.is_root("R")
    assert os.listdir(root_set_dir(store.settings)) == []
    assert store.get("R") == b"2"


def test_delete_is_idempotent_and_removes_marker(store: EntryStore) -> None:
    store.put("D", b"x", root=True)
    store.delete("D")
    store.delete("D")
    assert not store.exists("D")
    assert not store.is_root("D")
    with pytest.raises(NotFound):
        store.get("D")


def test_unmarking_root_keeps_object(store: EntryStore) -> None:
    store.put("K", b"keep", root=True)
    assert store.root_index.unmark_root("K") is True
    assert store.root_index.unmark_root("K") is False
    assert store.get("K") == b"keep"


def test_mark_root_without_object_raises_not_found(store: EntryStore) -> None:
    with pytest.raises(NotFound):
        store.root_index.mark_root("ghost")


def test_list_root_ids(store: EntryStore) -> None:
    store.put("a", b"1", root=True)
    store.put("b", b"2")
    store.put("c", b"3", root=True)
    assert sorted(store.root_index.list_root_ids()) == ["a", "c"]


def test_clear_keeps_directories(store: EntryStore) -> None:
    store.put("a", b"1", root=True)
    store.put("b", b"2")
    store.clear()
    assert os.path.isdir(object_dir(store.settings))
    assert os.path.isdir(root_set_dir(store.settings))
    assert os.listdir(object_dir(store.settings)) == []
    assert os.listdir(root_set_dir(store.settings)) == []
    # Still usable without re-initialization
    store.put("c", b"3")
    assert store.get("c") == b"3"


def test_invalid_ids_are_rejected(store: EntryStore) -> None:
    with pytest.raises(InvalidEntryId):
        store.put("../escape", b"x")
    with pytest.raises(InvalidEntryId):
        store.get("")
    with pytest.raises(InvalidEntryId):
        store.delete("a/b")


def test_fanout_store_roundtrip_and_clear(tmp_path: Path) -> None:
    store = EntryStore(StoreSettings(root_dir=str(tmp_path), fanout_levels=2, fanout_width=2))
    store.create_dirs()
    store.put("abcdef", b"1", root=True)
    store.put("x", b"2")

    assert store.path("abcdef") == os.path.join(str(tmp_path), "all", "ab", "cd", "abcdef")
    assert store.get("abcdef") == b"1"
    assert store.is_root("abcdef")
    assert sorted(os.path.basename(p) for p in store.iter_object_paths()) == ["abcdef", "x"]

    store.clear()
    assert list(store.iter_object_paths()) == []
    assert store.root_index.list_root_ids() == []


def test_failed_rename_discards_temp_file(store: EntryStore, monkeypatch) -> None:
    from jsponfs.io import fs

    def boom(src: str, dst: str) -> None:
        raise PermissionError("read-only")

    monkeypatch.setattr(fs, "rename_atomic", boom)
    with pytest.raises(IoError) as ei:
        store.put("A1", b"x")
    assert ei.value.entry_id == "A1"
    assert os.listdir(tmp_dir(store.settings)) == []
    assert not store.exists("A1")


def test_injected_lock_is_used(tmp_path: Path) -> None:
    calls: list[str] = []

    class RecordingLock(NullLock):
        def hold(self):
            calls.append("hold")
            return super().hold()

    store = EntryStore(StoreSettings(root_dir=str(tmp_path)), lock=RecordingLock())
    store.create_dirs()
    store.put("A1", b"x", root=True)
    store.get("A1")
    store.exists("A1")
    assert calls == ["hold"]


@pytest.mark.parametrize("umask, expected", [(0o022, 0o644), (0o077, 0o600), (0o002, 0o664)])
def test_stored_files_follow_process_umask(
    store: EntryStore, monkeypatch: pytest.MonkeyPatch, umask: int, expected: int
) -> None:
    monkeypatch.setattr(fs, "_UMASK", umask)
    store.put("m", b"1", root=True)

    assert stat.S_IMODE(os.stat(store.path("m")).st_mode) == expected
    assert stat.S_IMODE(os.stat(store.root_index.marker_path("m")).st_mode) == expected


def test_stored_file_mode_matches_plain_open(store: EntryStore, tmp_path: Path) -> None:
    plain = tmp_path / "plain"
    plain.write_bytes(b"x")
    store.put("p", b"1")
    assert stat.S_IMODE(os.stat(store.path("p")).st_mode) == stat.S_IMODE(plain.stat().st_mode)


@pytest.mark.parametrize("entry_id", ["a/b", "", ".", "..", "nul\0id"])
def test_exists_and_is_root_are_false_for_invalid_ids(store: EntryStore, entry_id: str) -> None:
    assert store.exists(entry_id) is False
    assert store.is_root(entry_id) is False
    assert store.root_index.is_root(entry_id) is False
