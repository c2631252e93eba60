"""Tests for managed storage naming and copying."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from lm_player.services import managed_storage
from tests.fakes import make_file


class TestClaimDestination:
    def test_free_name_used_as_is(self, tmp_path):
        dest = managed_storage.claim_destination(tmp_path, "clip.mp4")
        assert dest == tmp_path / "clip.mp4"
        assert dest.exists()

    def test_first_collision_gets_suffix_1(self, tmp_path):
        make_file(tmp_path / "clip.mp4", b"existing")
        assert managed_storage.claim_destination(tmp_path, "clip.mp4") == tmp_path / "clip_1.mp4"
        assert (tmp_path / "clip.mp4").read_bytes() == b"existing"

    def test_counter_keeps_increasing(self, tmp_path):
        make_file(tmp_path / "clip.mp4")
        make_file(tmp_path / "clip_1.mp4")
        make_file(tmp_path / "clip_2.mp4")
        assert managed_storage.claim_destination(tmp_path, "clip.mp4") == tmp_path / "clip_3.mp4"

    def test_name_without_extension(self, tmp_path):
        make_file(tmp_path / "README")
        assert managed_storage.claim_destination(tmp_path, "README") == tmp_path / "README_1"

    def test_claimed_name_is_reserved(self, tmp_path):
        first = managed_storage.claim_destination(tmp_path, "clip.mp4")
        second = managed_storage.claim_destination(tmp_path, "clip.mp4")
        assert (first.name, second.name) == ("clip.mp4", "clip_1.mp4")
        assert first.read_bytes() == b"" and second.read_bytes() == b""

    def test_gives_up_after_limit(self, tmp_path):
        make_file(tmp_path / "a.mp4")
        make_file(tmp_path / "a_1.mp4")
        make_file(tmp_path / "a_2.mp4")
        with patch.object(managed_storage, "MAX_NAME_COLLISIONS", 2):
            with pytest.raises(FileExistsError):
                managed_storage.claim_destination(tmp_path, "a.mp4")


class TestCopyInto:
    def test_copies_content(self, tmp_path, src):
        source = make_file(src / "clip.mp4", b"payload")
        dest = managed_storage.copy_into(tmp_path / "store", source)
        assert dest == tmp_path / "store" / "clip.mp4"
        assert dest.read_bytes() == b"payload"
        assert source.exists()

    def test_never_overwrites(self, tmp_path, src):
        store = tmp_path / "store"
        make_file(store / "clip.mp4", b"first")
        source = make_file(src / "clip.mp4", b"second")
        dest = managed_storage.copy_into(store, source)
        assert dest.name == "clip_1.mp4"
        assert (store / "clip.mp4").read_bytes() == b"first"
        assert dest.read_bytes() == b"second"

    def test_file_appearing_during_copy_is_not_overwritten(self, tmp_path, src):
        store = tmp_path / "store"
        first = make_file(src / "a" / "clip.mp4", b"first")
        second = make_file(src / "b" / "clip.mp4", b"second")
        real_copy = managed_storage.shutil.copyfileobj
        results = []
        rival_started = []

        def _copy_with_rival(fsrc, fdst):
            # Another import of the same name starts before this one finishes
            if not rival_started:
                rival_started.append(True)
                results.append(managed_storage.copy_into(store, second))
            real_copy(fsrc, fdst)

        with patch("lm_player.services.managed_storage.shutil.copyfileobj", side_effect=_copy_with_rival):
            dest = managed_storage.copy_into(store, first)

        assert dest.name == "clip.mp4"
        assert results[0].name == "clip_1.mp4"
        assert dest.read_bytes() == b"first"
        assert results[0].read_bytes() == b"second"

    def test_copies_modification_time(self, tmp_path, src):
        source = make_file(src / "clip.mp4")
        os.utime(source, (1_000_000, 1_000_000))
        dest = managed_storage.copy_into(tmp_path / "store", source)
        assert dest.stat().st_mtime == 1_000_000

    def test_failed_copy_leaves_nothing(self, tmp_path, src):
        store = tmp_path / "store"
        source = make_file(src / "clip.mp4")

        def _broken_copy(fsrc, fdst):
            fdst.write(b"partial")
            raise OSError("disk full")

        with patch("lm_player.services.managed_storage.shutil.copyfileobj", side_effect=_broken_copy):
            with pytest.raises(OSError):
                managed_storage.copy_into(store, source)
        assert list(store.iterdir()) == []

    def test_missing_source_releases_claim(self, tmp_path, src):
        store = tmp_path / "store"
        with pytest.raises(FileNotFoundError):
            managed_storage.copy_into(store, src / "gone.mp4")
        assert list(store.iterdir()) == []


class TestRemoveFile:
    def test_removes_existing(self, tmp_path):
        f = make_file(tmp_path / "clip.mp4")
        assert managed_storage.remove_file(f) is True
        assert not f.exists()

    def test_missing_file_is_not_an_error(self, tmp_path):
        assert managed_storage.remove_file(tmp_path / "gone.mp4") is False

    def test_default_storage_dir_created_under_home(self, isolated_home):
        d = managed_storage.default_storage_dir()
        assert d.is_dir()
        assert d == isolated_home / ".lmplayer" / "videos"
