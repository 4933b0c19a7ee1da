"""Plan the moves that bring a library into Artist/Album/NN - Artist - Title layout."""

from pathlib import Path
from typing import List, Tuple

from music_organizer.changes import Changes, DirCreation, FileOperation
from music_organizer.models import Album, MusicIndex, Song
from music_organizer.utils import sanitize_name

UNKNOWN_DIR_NAME = "unknown"


class ReorganizationPlanner:
    """Computes the Changes needed to reach the canonical layout.

    The filesystem is only queried for existence of directories; nothing is
    created or moved here.
    """

    def plan(self, index: MusicIndex, output_dir) -> Changes:
        """
        Build the plan for an index.

        Args:
            index: Built music index
            output_dir: Root of the organized library

        Returns:
            Changes with directory creations before file operations
        """
        output_dir = Path(output_dir)
        changes = Changes()
        moves: List[Tuple[Path, Path]] = []

        self._schedule_dir(changes, output_dir)

        for artist in index.artists:
            artist_dir = output_dir / sanitize_name(artist.name)
            self._schedule_dir(changes, artist_dir)

            for album in artist.albums:
                songs = index.album_songs(album)
                single = self.is_single(album, songs)

                if single:
                    album_dir = artist_dir
                else:
                    album_dir = artist_dir / sanitize_name(album.name)
                    self._schedule_dir(changes, album_dir)

                for song in songs:
                    new_file = album_dir / self.generate_filename(song, single)
                    moves.append((song.current_file, new_file))

        if index.unknown:
            unknown_dir = output_dir / UNKNOWN_DIR_NAME
            self._schedule_dir(changes, unknown_dir)
            for si in index.unknown:
                song = index.songs[si]
                moves.append((song.current_file, unknown_dir / song.current_file.name))

        self._schedule_files(changes, moves)
        return changes

    def is_single(self, album: Album, songs: List[Song]) -> bool:
        """
        Check if an album's songs belong directly in the artist directory.

        True when the album has no name, an empty name, or is a lone song
        whose album is named "<title> - single" (any casing).
        """
        if album.name is None or album.name == "":
            return True

        if len(songs) != 1 or songs[0].title is None:
            return False

        return album.name.lower() == f"{songs[0].title} - single".lower()

    def generate_filename(self, song: Song, single: bool) -> str:
        """
        Generate the file name of a song.

        Single: {ARTIST} - {TITLE}.ext
        Album:  {TRACK:02} - {ARTIST} - {TITLE}.ext (missing track is 00)
        """
        extension = song.current_file.suffix
        name = f"{sanitize_name(song.artist)} - {sanitize_name(song.title)}{extension}"
        if single:
            return name
        return f"{song.track or 0:02d} - {name}"

    def _schedule_dir(self, changes: Changes, path: Path) -> None:
        # Names that only differ in sanitized characters share a directory
        creation = DirCreation(path=path)
        if not path.exists() and creation not in changes.dir_creations:
            changes.dir_creations.append(creation)

    def _schedule_files(self, changes: Changes, moves: List[Tuple[Path, Path]]) -> None:
        # Files already in place keep their name, later claims on a name collide
        claimed = {new for old, new in moves if new == old}
        for old, new in moves:
            if new == old:
                continue
            operation = FileOperation(old=old, new=new)
            if new in claimed:
                changes.collisions.append(operation)
            else:
                claimed.add(new)
                changes.file_operations.append(operation)
