"""Shared test fixtures for music_organizer tests."""

import sys
from pathlib import Path

import pytest

# Add the python/ directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from music_organizer.indexer import IndexBuilder
from music_organizer.models import Metadata, MetadataPatch, MusicIndex
from music_organizer.tag_handler import TagHandler


class FakeTagHandler:
    """Tag handler serving metadata from a dict keyed by file name."""

    def __init__(self, metadata_by_name=None):
        self.metadata_by_name = metadata_by_name or {}
        self.written = []

    def read_tags(self, file_path):
        return self.metadata_by_name.get(Path(file_path).name, Metadata())

    def write_tags(self, file_path, patch):
        self.written.append((Path(file_path), patch))
        return True, str(file_path)


@pytest.fixture
def fake_handler():
    """Factory for FakeTagHandler instances."""
    return FakeTagHandler


@pytest.fixture
def make_index():
    """Build an index from (path, Metadata) pairs without touching the disk."""
    def _make(entries, music_dir="/music"):
        index = MusicIndex(music_dir=Path(music_dir))
        builder = IndexBuilder(index, FakeTagHandler())
        for path, metadata in entries:
            builder.add(Path(path), metadata)
        return index
    return _make


@pytest.fixture
def make_mp3():
    """Create a file with real ID3 tags written through TagHandler."""
    def _make(path, **fields):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\x00" * 1024)
        if fields:
            success, message = TagHandler().write_tags(path, MetadataPatch(**fields))
            assert success, message
        return path
    return _make


@pytest.fixture
def abba_metadata():
    """Two tracks of one album."""
    return (
        Metadata(artist="Abba", album="Gold", track=1, title="X"),
        Metadata(artist="Abba", album="Gold", track=2, title="Y"),
    )
