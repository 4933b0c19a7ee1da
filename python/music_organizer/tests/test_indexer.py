"""Tests for indexer.py grouping logic."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from music_organizer.indexer import IndexBuilder, build_index
from music_organizer.models import Metadata, MusicIndex


def _all_indices(index):
    indices = list(index.unknown)
    for artist in index.artists:
        for album in artist.albums:
            indices.extend(album.songs)
    return indices


class TestGrouping:
    """Tests for artist/album placement."""

    def test_album_artist_takes_precedence(self, make_index):
        index = make_index([("/m/a.mp3", Metadata(album_artist="X", artist="Y", album="A"))])

        assert [a.name for a in index.artists] == ["X"]
        assert index.unknown == []

    def test_artist_used_without_album_artist(self, make_index):
        index = make_index([("/m/a.mp3", Metadata(artist="Y", album="A"))])
        assert [a.name for a in index.artists] == ["Y"]

    def test_no_artist_goes_to_unknown(self, make_index):
        index = make_index([
            ("/m/a.mp3", Metadata(album="A", title="T")),
            ("/m/b.mp3", Metadata(artist="Y")),
        ])

        assert index.unknown == [0]
        assert len(index.songs) == 2
        assert [a.name for a in index.artists] == ["Y"]

    def test_songs_share_album(self, make_index, abba_metadata):
        index = make_index([("/m/a.mp3", abba_metadata[0]), ("/m/b.mp3", abba_metadata[1])])

        assert len(index.artists) == 1
        assert len(index.artists[0].albums) == 1
        assert index.artists[0].albums[0].songs == [0, 1]

    def test_album_artist_and_artist_group_together(self, make_index):
        """Songs tagged only by artist join an album artist of the same name."""
        index = make_index([
            ("/m/a.mp3", Metadata(album_artist="X", artist="Guest", album="A")),
            ("/m/b.mp3", Metadata(artist="X", album="A")),
        ])

        assert len(index.artists) == 1
        assert index.artists[0].albums[0].songs == [0, 1]

    def test_casing_is_not_merged(self, make_index):
        index = make_index([
            ("/m/a.mp3", Metadata(artist="Abba", album="Gold")),
            ("/m/b.mp3", Metadata(artist="ABBA", album="Gold")),
            ("/m/c.mp3", Metadata(artist="Abba", album="GOLD")),
        ])

        assert [a.name for a in index.artists] == ["Abba", "ABBA"]
        assert [al.name for al in index.artists[0].albums] == ["Gold", "GOLD"]

    def test_missing_album_is_own_group(self, make_index):
        index = make_index([
            ("/m/a.mp3", Metadata(artist="X")),
            ("/m/b.mp3", Metadata(artist="X", album="A")),
            ("/m/c.mp3", Metadata(artist="X")),
        ])

        albums = index.artists[0].albums
        assert [al.name for al in albums] == [None, "A"]
        assert albums[0].songs == [0, 2]

    def test_empty_album_differs_from_missing(self, make_index):
        index = make_index([
            ("/m/a.mp3", Metadata(artist="X")),
            ("/m/b.mp3", Metadata(artist="X", album="")),
        ])
        assert [al.name for al in index.artists[0].albums] == [None, ""]

    def test_first_seen_order(self, make_index):
        index = make_index([
            ("/m/1.mp3", Metadata(artist="B", album="2")),
            ("/m/2.mp3", Metadata(artist="A", album="1")),
            ("/m/3.mp3", Metadata(artist="B", album="1")),
            ("/m/4.mp3", Metadata(artist="A", album="1")),
            ("/m/5.mp3", Metadata(artist="B", album="2")),
        ])

        assert [a.name for a in index.artists] == ["B", "A"]
        assert [al.name for al in index.artists[0].albums] == ["2", "1"]
        assert index.artists[0].albums[0].songs == [0, 4]
        assert index.artists[1].albums[0].songs == [1, 3]

    def test_indices_are_valid_and_unique(self, make_index):
        entries = [
            (f"/m/{i}.mp3", Metadata(artist=["A", "B", None][i % 3], album=str(i % 2)))
            for i in range(12)
        ]
        index = make_index(entries)

        indices = _all_indices(index)
        assert sorted(indices) == list(range(len(index.songs)))


class TestReadIter:
    """Tests for lazy reading."""

    def test_yields_metadata_per_file(self, fake_handler, abba_metadata):
        handler = fake_handler({"a.mp3": abba_metadata[0], "b.mp3": abba_metadata[1]})
        index = MusicIndex(music_dir=Path("/m"))
        builder = IndexBuilder(index, handler, files=[Path("/m/a.mp3"), Path("/m/b.mp3")])

        assert list(builder.read_iter()) == list(abba_metadata)

    def test_partial_consumption_builds_partial_index(self, fake_handler, abba_metadata):
        handler = fake_handler({"a.mp3": abba_metadata[0], "b.mp3": abba_metadata[1]})
        index = MusicIndex(music_dir=Path("/m"))
        builder = IndexBuilder(index, handler, files=[Path("/m/a.mp3"), Path("/m/b.mp3")])

        it = builder.read_iter()
        next(it)

        assert len(index.songs) == 1
        assert index.artists[0].albums[0].songs == [0]

    def test_read_returns_count(self, fake_handler):
        index = MusicIndex(music_dir=Path("/m"))
        builder = IndexBuilder(index, fake_handler(), files=[Path("/m/a.mp3"), Path("/m/b.mp3")])

        assert builder.read() == 2
        assert index.unknown == [0, 1]

    def test_continues_existing_index(self, make_index, fake_handler):
        """A builder on a filled index keeps grouping into existing entries."""
        index = make_index([("/m/a.mp3", Metadata(artist="X", album="A"))])
        handler = fake_handler({"b.mp3": Metadata(artist="X", album="A")})
        IndexBuilder(index, handler, files=[Path("/m/b.mp3")]).read()

        assert len(index.artists) == 1
        assert index.artists[0].albums[0].songs == [0, 1]


class TestBuildIndex:
    """Tests for build_index with the directory walker."""

    def test_reads_real_tags(self, tmp_path, make_mp3):
        make_mp3(tmp_path / "a.mp3", artist="Abba", album="Gold", track=1, title="X")
        make_mp3(tmp_path / "sub" / "b.mp3", artist="Abba", album="Gold", track=2, title="Y")
        make_mp3(tmp_path / ".hidden" / "c.mp3", artist="Abba", album="Gold", title="Z")
        (tmp_path / "notes.txt").write_text("skip me")

        index = build_index(tmp_path)

        assert [s.title for s in index.songs] == ["X", "Y"]
        assert index.artists[0].name == "Abba"
        assert index.artists[0].albums[0].songs == [0, 1]

    def test_unreadable_tags_go_to_unknown(self, tmp_path):
        (tmp_path / "broken.m4a").write_bytes(b"garbage")

        index = build_index(tmp_path)

        assert index.unknown == [0]
        assert index.songs[0].current_file == tmp_path / "broken.m4a"
