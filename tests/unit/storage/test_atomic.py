"""Tests for the temp-write + rename commit."""
import os
import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from letterbox.storage import atomic
from letterbox.storage.atomic import commit, leftover_temps


@pytest.fixture
def final(tmp_path: Path) -> Path:
    directory = tmp_path / "docs"
    directory.mkdir()
    return directory / "cache.json"


def _temps(final: Path) -> list[str]:
    return sorted(p.name for p in final.parent.glob("*.tmp"))


class TestCommit:
    def test_creates_new_file(self, final: Path) -> None:
        commit(final, b'{"a": 1}\n')
        assert final.read_bytes() == b'{"a": 1}\n'

    def test_overwrites_existing_file(self, final: Path) -> None:
        final.write_bytes(b"old")
        commit(final, b"new")
        assert final.read_bytes() == b"new"

    def test_no_temp_file_left_behind(self, final: Path) -> None:
        commit(final, b"data")
        assert sorted(p.name for p in final.parent.iterdir()) == ["cache.json"]

    def test_temp_file_is_a_unique_sibling(self, final: Path) -> None:
        first = atomic.tmp_path(final)
        second = atomic.tmp_path(final)
        assert first != second
        for tmp in (first, second):
            assert tmp.parent == final.parent
            assert tmp.name.startswith("cache.json.")
            assert tmp.name.endswith(".tmp")

    def test_commit_renames_from_sibling_temp(self, final: Path) -> None:
        sources = []
        real_replace = os.replace

        def recording_replace(src, dst):
            sources.append(Path(src))
            real_replace(src, dst)

        with patch("letterbox.storage.atomic.os.replace", side_effect=recording_replace):
            commit(final, b"data")
        assert len(sources) == 1
        assert sources[0].parent == final.parent
        assert sources[0] != final

    def test_stale_temp_file_is_left_alone(self, final: Path) -> None:
        stale = final.parent / "cache.json.0123456789ab.tmp"
        stale.write_bytes(b"half-written garbage from a crash")
        commit(final, b"fresh")
        assert final.read_bytes() == b"fresh"
        assert stale.read_bytes() == b"half-written garbage from a crash"


class TestLeftoverTemps:
    def test_lists_only_this_documents_temps(self, final: Path) -> None:
        mine = final.parent / "cache.json.0123456789ab.tmp"
        other = final.parent / "favourites.json.0123456789ab.tmp"
        mine.write_text("x")
        other.write_text("x")
        assert leftover_temps(final) == [mine]

    def test_name_with_glob_characters(self, final: Path) -> None:
        odd = final.parent / "[draft].txt"
        leftover = final.parent / "[draft].txt.0123456789ab.tmp"
        leftover.write_text("x")
        (final.parent / "d.txt.0123456789ab.tmp").write_text("x")
        assert leftover_temps(odd) == [leftover]

    def test_none_when_clean(self, final: Path) -> None:
        commit(final, b"data")
        assert leftover_temps(final) == []


class TestInterruptedCommit:
    def test_rename_failure_keeps_previous_content(self, final: Path) -> None:
        final.write_bytes(b"previous")
        with patch("letterbox.storage.atomic.os.replace", side_effect=OSError("disk gone")):
            with pytest.raises(OSError, match="disk gone"):
                commit(final, b"next")
        assert final.read_bytes() == b"previous"
        assert _temps(final) == []

    def test_rename_failure_leaves_absent_file_absent(self, final: Path) -> None:
        with patch("letterbox.storage.atomic.os.replace", side_effect=OSError("disk gone")):
            with pytest.raises(OSError):
                commit(final, b"next")
        assert not final.exists()
        assert _temps(final) == []

    def test_interrupt_after_write_before_rename(self, final: Path) -> None:
        final.write_bytes(b"previous")
        with patch("letterbox.storage.atomic._fsync_best_effort", side_effect=KeyboardInterrupt):
            with pytest.raises(KeyboardInterrupt):
                commit(final, b"next")
        assert final.read_bytes() == b"previous"
        assert _temps(final) == []

    def test_fsync_failure_is_not_fatal(self, final: Path) -> None:
        with patch("letterbox.storage.atomic.os.fsync", side_effect=OSError("unsupported")):
            commit(final, b"durable enough")
        assert final.read_bytes() == b"durable enough"


class TestConcurrentReaders:
    def test_reader_never_sees_torn_content(self, final: Path) -> None:
        old = b"A" * 200_000
        new = b"B" * 200_000
        final.write_bytes(old)
        seen_bad = []
        done = threading.Event()

        def reader():
            while not done.is_set():
                try:
                    content = final.read_bytes()
                except FileNotFoundError:
                    seen_bad.append(b"<absent>")
                    continue
                if content not in (old, new):
                    seen_bad.append(content[:20])

        t = threading.Thread(target=reader)
        t.start()
        try:
            for i in range(30):
                commit(final, new if i % 2 == 0 else old)
        finally:
            done.set()
            t.join()

        assert not seen_bad
