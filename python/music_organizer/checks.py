"""Detection of likely tagging mistakes between sibling artists, albums and songs.

The checks never modify the index. Every conflict is passed to a decision
function; a non-None answer becomes a Resolution that apply_resolutions()
can write to the files.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from music_organizer.models import Album, Artist, MetadataPatch, MusicIndex, Song
from music_organizer.tag_handler import TagHandler

TrackGroups = List[Tuple[List[Song], Optional[int]]]


@dataclass
class Resolution:
    """Accepted answer to a conflict: tag patches keyed by song index."""
    description: str
    updates: Dict[int, MetadataPatch] = field(default_factory=dict)


class Resolver:
    """Decides conflicts. Returning None leaves the files unchanged.

    This base class only reports; subclasses ask the user or apply rules.
    """

    def resolve_artists(self, artist1: Artist, artist2: Artist) -> Optional[str]:
        return None

    def resolve_albums(self, artist: Artist, album1: Album, album2: Album) -> Optional[str]:
        return None

    def resolve_total_tracks(self, artist: Artist, album: Album,
                             groups: TrackGroups) -> Optional[int]:
        return None

    def resolve_total_discs(self, artist: Artist, album: Album,
                            values: List[Optional[int]]) -> Optional[int]:
        return None


def _artist_song_indices(artist: Artist) -> List[int]:
    return [si for album in artist.albums for si in album.songs]


def check_inconsistent_artists(
    index: MusicIndex,
    f: Callable[[Artist, Artist], Optional[str]],
) -> List[Resolution]:
    """Report every pair of artists whose names only differ in casing."""
    resolutions = []

    for i, ar1 in enumerate(index.artists):
        for ar2 in index.artists[i + 1:]:
            if ar1.name.lower() != ar2.name.lower():
                continue

            name = f(ar1, ar2)
            if name is None:
                continue

            resolution = Resolution(
                description=f"artist {ar1.name!r} / {ar2.name!r} -> {name!r}"
            )
            for artist in (ar1, ar2):
                for si in _artist_song_indices(artist):
                    patch = _artist_patch(index.songs[si], artist.name, name)
                    if not patch.is_empty():
                        resolution.updates[si] = patch
            resolutions.append(resolution)

    return resolutions


def _artist_patch(song: Song, grouped_name: str, name: str) -> MetadataPatch:
    """Rename whichever artist tags carry the grouping name."""
    patch = MetadataPatch()
    if song.album_artist is not None and song.album_artist != name:
        patch.album_artist = name
    if song.artist is not None and song.artist != name:
        if song.album_artist is None or song.artist.lower() == grouped_name.lower():
            patch.artist = name
    return patch


def check_inconsistent_albums(
    index: MusicIndex,
    f: Callable[[Artist, Album, Album], Optional[str]],
) -> List[Resolution]:
    """Report every pair of albums of one artist whose names only differ in casing."""
    resolutions = []

    for ar in index.artists:
        for i, al1 in enumerate(ar.albums):
            for al2 in ar.albums[i + 1:]:
                if al1.name is None or al2.name is None:
                    continue
                if al1.name.lower() != al2.name.lower():
                    continue

                name = f(ar, al1, al2)
                if name is None:
                    continue

                resolution = Resolution(
                    description=f"album {ar.name} - {al1.name!r} / {al2.name!r} -> {name!r}"
                )
                for album in (al1, al2):
                    if album.name == name:
                        continue
                    for si in album.songs:
                        resolution.updates[si] = MetadataPatch(album=name)
                resolutions.append(resolution)

    return resolutions


def check_inconsistent_total_tracks(
    index: MusicIndex,
    f: Callable[[Artist, Album, TrackGroups], Optional[int]],
) -> List[Resolution]:
    """Report albums whose songs disagree on the total number of tracks."""
    resolutions = []

    for ar in index.artists:
        for al in ar.albums:
            groups: TrackGroups = []
            for song in index.album_songs(al):
                for songs, total in groups:
                    if total == song.total_tracks:
                        songs.append(song)
                        break
                else:
                    groups.append(([song], song.total_tracks))

            if len(groups) <= 1:
                continue

            total = f(ar, al, groups)
            if total is None:
                continue

            resolution = Resolution(
                description=f"total tracks of {ar.name} - {al.name} -> {total}"
            )
            for si in al.songs:
                if index.songs[si].total_tracks != (total or None):
                    resolution.updates[si] = MetadataPatch(total_tracks=total)
            resolutions.append(resolution)

    return resolutions


def check_inconsistent_total_discs(
    index: MusicIndex,
    f: Callable[[Artist, Album, List[Optional[int]]], Optional[int]],
) -> List[Resolution]:
    """Report albums whose songs disagree on the total number of discs."""
    resolutions = []

    for ar in index.artists:
        for al in ar.albums:
            # absent sorts before any number
            values = sorted(
                {s.total_discs for s in index.album_songs(al)},
                key=lambda v: (v is not None, v or 0),
            )
            if len(values) <= 1:
                continue

            total = f(ar, al, values)
            if total is None:
                continue

            resolution = Resolution(
                description=f"total discs of {ar.name} - {al.name} -> {total}"
            )
            for si in al.songs:
                if index.songs[si].total_discs != (total or None):
                    resolution.updates[si] = MetadataPatch(total_discs=total)
            resolutions.append(resolution)

    return resolutions


def check_all(index: MusicIndex, resolver: Resolver) -> List[Resolution]:
    """Run all four checks against one resolver."""
    resolutions = []
    resolutions += check_inconsistent_artists(index, resolver.resolve_artists)
    resolutions += check_inconsistent_albums(index, resolver.resolve_albums)
    resolutions += check_inconsistent_total_tracks(index, resolver.resolve_total_tracks)
    resolutions += check_inconsistent_total_discs(index, resolver.resolve_total_discs)
    return resolutions


def apply_resolutions(index: MusicIndex, resolutions: List[Resolution],
                      tag_handler: Optional[TagHandler] = None) -> Tuple[int, List[str]]:
    """
    Write accepted resolutions to the audio files.

    The index itself is left as it was; rebuild it to see the new tags.

    Args:
        index: Index the resolutions were computed from
        resolutions: Output of the check functions
        tag_handler: Tag writer, defaults to a TagHandler

    Returns:
        (number of successful writes, list of error messages)
    """
    tag_handler = tag_handler or TagHandler()
    written = 0
    errors = []

    for resolution in resolutions:
        for si, patch in resolution.updates.items():
            success, message = tag_handler.write_tags(index.songs[si].current_file, patch)
            if success:
                written += 1
            else:
                errors.append(message)

    return written, errors
