"""Tests for utils.py utility functions."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from music_organizer.utils import sanitize_name, walk_music_files, remove_empty_dirs


class TestSanitizeName:
    """Tests for sanitize_name function."""

    def test_removes_invalid_characters(self):
        """Should drop invalid characters without substituting anything."""
        assert sanitize_name("AC/DC: Back?") == "ACDC Back"

    def test_removes_every_invalid_character(self):
        """Should remove <, >, :, \", /, \\, |, ? and *."""
        assert sanitize_name('a<b>c:d"e/f\\g|h?i*j') == "abcdefghij"

    def test_replaces_leading_dot(self):
        """Should replace a leading dot with an underscore."""
        assert sanitize_name(".hidden") == "_hidden"

    def test_replaces_trailing_dot(self):
        """Should replace a trailing dot with an underscore."""
        assert sanitize_name("trailing.") == "trailing_"

    def test_replaces_only_boundary_dots(self):
        """Should keep inner dots and replace one dot at each end."""
        assert sanitize_name("..a.b..") == "_.a.b._"

    def test_single_dot(self):
        """A lone dot becomes an underscore."""
        assert sanitize_name(".") == "_"

    def test_dot_exposed_by_removal(self):
        """Boundary dots are checked after invalid characters are removed."""
        assert sanitize_name("?.name") == "_name"

    def test_keeps_spaces(self):
        """Should not strip or collapse whitespace."""
        assert sanitize_name(" a  b ") == " a  b "

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_value_is_empty(self, value):
        """Should render a missing value as an empty string."""
        assert sanitize_name(value) == ""


class TestWalkMusicFiles:
    """Tests for walk_music_files function."""

    def _touch(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
        return path

    def test_yields_supported_extensions_only(self, tmp_path):
        """Should only yield files with a music extension."""
        for name in ["a.mp3", "b.m4a", "c.m4b", "d.m4p", "e.m4v", "f.txt", "g.flac", "h"]:
            self._touch(tmp_path / name)

        names = [p.name for p in walk_music_files(tmp_path)]
        assert names == ["a.mp3", "b.m4a", "c.m4b", "d.m4p", "e.m4v"]

    def test_extension_case_insensitive(self, tmp_path):
        """Should accept upper case extensions."""
        self._touch(tmp_path / "A.MP3")
        assert [p.name for p in walk_music_files(tmp_path)] == ["A.MP3"]

    def test_skips_hidden_files_and_directories(self, tmp_path):
        """Should skip hidden entries and everything below hidden directories."""
        self._touch(tmp_path / ".hidden.mp3")
        self._touch(tmp_path / ".cache" / "song.mp3")
        self._touch(tmp_path / ".cache" / "deeper" / "song.mp3")
        visible = self._touch(tmp_path / "visible" / "song.mp3")

        assert list(walk_music_files(tmp_path)) == [visible]

    def test_recurses_in_sorted_order(self, tmp_path):
        """Should visit files before subdirectories, both sorted."""
        b = self._touch(tmp_path / "b" / "2.mp3")
        a = self._touch(tmp_path / "a" / "1.mp3")
        root = self._touch(tmp_path / "z.mp3")

        assert list(walk_music_files(tmp_path)) == [root, a, b]

    def test_is_lazy(self, tmp_path):
        """Should return an iterator, not a list."""
        self._touch(tmp_path / "a.mp3")
        result = walk_music_files(tmp_path)
        assert next(result).name == "a.mp3"

    def test_missing_root_yields_nothing(self, tmp_path):
        """Should silently yield nothing for an unreadable root."""
        assert list(walk_music_files(tmp_path / "missing")) == []


class TestRemoveEmptyDirs:
    """Tests for remove_empty_dirs function."""

    def test_removes_nested_empty_dirs(self, tmp_path):
        """Should remove empty directories deepest first."""
        (tmp_path / "a" / "b" / "c").mkdir(parents=True)

        removed, errors = remove_empty_dirs(tmp_path)

        assert errors == []
        assert not (tmp_path / "a").exists()
        assert len(removed) == 3

    def test_keeps_dirs_with_files(self, tmp_path):
        """Should keep directories that still contain files."""
        (tmp_path / "full").mkdir()
        (tmp_path / "full" / "song.mp3").touch()
        (tmp_path / "full" / "empty").mkdir()

        removed, _ = remove_empty_dirs(tmp_path)

        assert removed == [tmp_path / "full" / "empty"]
        assert (tmp_path / "full" / "song.mp3").exists()

    def test_never_removes_root(self, tmp_path):
        """Should keep the root even when it is empty."""
        removed, errors = remove_empty_dirs(tmp_path)
        assert removed == []
        assert errors == []
        assert tmp_path.exists()

    def test_keeps_hidden_dirs(self, tmp_path):
        """Should leave hidden directories and their contents alone."""
        (tmp_path / ".stfolder").mkdir()
        (tmp_path / ".git" / "refs" / "tags").mkdir(parents=True)
        (tmp_path / ".git" / "HEAD").write_text("ref: refs/heads/main")
        (tmp_path / "visible").mkdir()

        removed, errors = remove_empty_dirs(tmp_path)

        assert removed == [tmp_path / "visible"]
        assert errors == []
        assert (tmp_path / ".stfolder").is_dir()
        assert (tmp_path / ".git" / "refs" / "tags").is_dir()

    def test_dir_holding_only_hidden_dir_is_kept(self, tmp_path):
        """A directory is not empty while a hidden directory lives in it."""
        (tmp_path / "album" / ".thumbs").mkdir(parents=True)

        removed, _ = remove_empty_dirs(tmp_path)

        assert removed == []
        assert (tmp_path / "album" / ".thumbs").is_dir()
