"""Build the Artist -> Album -> Song index of a music directory."""

from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Tuple

from music_organizer.models import Album, Artist, Metadata, MusicIndex, Song
from music_organizer.tag_handler import TagHandler
from music_organizer.utils import walk_music_files


class IndexBuilder:
    """Incrementally groups songs into a MusicIndex while files are read.

    Artists are unique by exact name, albums are unique by exact name within
    their artist. Both keep first-seen order.
    """

    def __init__(self, index: MusicIndex, tag_handler: Optional[TagHandler] = None,
                 files: Optional[Iterable[Path]] = None):
        """
        Initialize builder.

        Args:
            index: Index to fill (usually empty)
            tag_handler: Metadata source, defaults to a TagHandler
            files: Paths to index, defaults to walking index.music_dir
        """
        self.index = index
        self.tag_handler = tag_handler or TagHandler()
        self.files = files

        # artist name -> (position in index.artists, album name -> position in albums)
        self._lookup: Dict[str, Tuple[int, Dict[Optional[str], int]]] = {}
        for ar_pos, artist in enumerate(index.artists):
            albums = {al.name: al_pos for al_pos, al in enumerate(artist.albums)}
            self._lookup.setdefault(artist.name, (ar_pos, albums))

    def read_iter(self) -> Iterator[Metadata]:
        """Index files one by one, yielding the metadata of each.

        Stopping early leaves a partially built but valid index.
        """
        files = self.files
        if files is None:
            files = walk_music_files(self.index.music_dir)

        for path in files:
            metadata = self.tag_handler.read_tags(path)
            self.add(path, metadata)
            yield metadata

    def read(self) -> int:
        """Index every file. Returns the number of files read."""
        count = 0
        for _ in self.read_iter():
            count += 1
        return count

    def add(self, path: Path, metadata: Metadata) -> int:
        """Add one file to the index and return its song index."""
        song_index = len(self.index.songs)
        self.index.songs.append(Song.from_metadata(Path(path), metadata))

        artist_name = metadata.grouping_artist
        if artist_name is None:
            self.index.unknown.append(song_index)
            return song_index

        entry = self._lookup.get(artist_name)
        if entry is None:
            self.index.artists.append(Artist(name=artist_name))
            entry = (len(self.index.artists) - 1, {})
            self._lookup[artist_name] = entry

        ar_pos, albums = entry
        artist = self.index.artists[ar_pos]

        al_pos = albums.get(metadata.album)
        if al_pos is None:
            artist.albums.append(Album(name=metadata.album))
            al_pos = len(artist.albums) - 1
            albums[metadata.album] = al_pos

        artist.albums[al_pos].songs.append(song_index)
        return song_index


def build_index(music_dir, tag_handler: Optional[TagHandler] = None) -> MusicIndex:
    """Read a whole music directory into a new index."""
    index = MusicIndex(music_dir=Path(music_dir))
    IndexBuilder(index, tag_handler).read()
    return index
