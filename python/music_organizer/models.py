"""Data models for Music Organizer."""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, List


def zero_none(value: Optional[int]) -> Optional[int]:
    """Normalize a stored track/disc number of 0 to absent."""
    if not value:
        return None
    return value


@dataclass(frozen=True)
class Metadata:
    """Tag fields read from a single audio file."""
    track: Optional[int] = None
    total_tracks: Optional[int] = None
    disc: Optional[int] = None
    total_discs: Optional[int] = None
    artist: Optional[str] = None
    album_artist: Optional[str] = None
    album: Optional[str] = None
    title: Optional[str] = None

    @property
    def grouping_artist(self) -> Optional[str]:
        """Name the file is grouped under: album artist first, then artist."""
        if self.album_artist is not None:
            return self.album_artist
        return self.artist


@dataclass
class MetadataPatch:
    """
    Partial tag update.

    None leaves a field untouched, an empty string or 0 removes it and any
    other value replaces it.
    """
    track: Optional[int] = None
    total_tracks: Optional[int] = None
    disc: Optional[int] = None
    total_discs: Optional[int] = None
    artist: Optional[str] = None
    album_artist: Optional[str] = None
    album: Optional[str] = None
    title: Optional[str] = None

    def is_empty(self) -> bool:
        """Check if the patch would not touch any field."""
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass
class Song:
    """One indexed audio file."""
    current_file: Path
    track: Optional[int] = None
    total_tracks: Optional[int] = None
    disc: Optional[int] = None
    total_discs: Optional[int] = None
    artist: Optional[str] = None
    album_artist: Optional[str] = None
    title: Optional[str] = None

    @classmethod
    def from_metadata(cls, path: Path, metadata: Metadata) -> "Song":
        """Build a song from the metadata read for ``path``."""
        return cls(
            current_file=path,
            track=metadata.track,
            total_tracks=metadata.total_tracks,
            disc=metadata.disc,
            total_discs=metadata.total_discs,
            artist=metadata.artist,
            album_artist=metadata.album_artist,
            title=metadata.title,
        )


@dataclass
class Album:
    """Album grouping; songs are indices into MusicIndex.songs."""
    name: Optional[str] = None
    songs: List[int] = field(default_factory=list)


@dataclass
class Artist:
    """Artist grouping with its albums in first-seen order."""
    name: str
    albums: List[Album] = field(default_factory=list)


@dataclass
class MusicIndex:
    """Grouped index of a music directory."""
    music_dir: Path
    songs: List[Song] = field(default_factory=list)
    artists: List[Artist] = field(default_factory=list)
    unknown: List[int] = field(default_factory=list)

    def album_songs(self, album: Album) -> List[Song]:
        """Resolve the song indices of an album."""
        return [self.songs[i] for i in album.songs]


@dataclass
class ProcessingStats:
    """Statistics for a processing run."""
    files_indexed: int = 0
    unknown_files: int = 0
    conflicts_found: int = 0
    tags_updated: int = 0
    dirs_created: int = 0
    files_moved: int = 0
    dirs_removed: int = 0
    errors: List[str] = field(default_factory=list)
