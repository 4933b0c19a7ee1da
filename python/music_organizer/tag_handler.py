"""Tag handler using mutagen for MP3 (ID3) and MP4 container support."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Tuple

from mutagen import MutagenError
from mutagen.id3 import ID3, ID3NoHeaderError, TIT2, TPE1, TALB, TPE2, TRCK, TPOS
from mutagen.mp4 import MP4

from music_organizer.config import eprint
from music_organizer.models import Metadata, MetadataPatch, zero_none


def _merge_pair(current: Tuple[Optional[int], Optional[int]],
                number: Optional[int],
                total: Optional[int]) -> Tuple[Optional[int], Optional[int]]:
    """Apply patch values (None keeps, 0 removes) to a (number, total) pair."""
    cur_number, cur_total = current
    if number is not None:
        cur_number = number or None
    if total is not None:
        cur_total = total or None
    return cur_number, cur_total


class TagCodec(ABC):
    """Reads and writes the tag block of one container family."""

    @abstractmethod
    def read(self, file_path: str) -> Metadata:
        pass

    @abstractmethod
    def write(self, file_path: str, patch: MetadataPatch) -> None:
        pass


class ID3Codec(TagCodec):
    """ID3v2 tags of MP3 files."""

    TEXT_FRAMES = {
        "title": TIT2,
        "artist": TPE1,
        "album": TALB,
        "album_artist": TPE2,
    }

    def read(self, file_path: str) -> Metadata:
        tags = ID3(file_path)

        track, total_tracks = self._parse_track_disc(self._get_text(tags, "TRCK") or "")
        disc, total_discs = self._parse_track_disc(self._get_text(tags, "TPOS") or "")

        return Metadata(
            track=zero_none(track),
            total_tracks=zero_none(total_tracks),
            disc=zero_none(disc),
            total_discs=zero_none(total_discs),
            artist=self._get_text(tags, "TPE1"),
            album_artist=self._get_text(tags, "TPE2"),
            album=self._get_text(tags, "TALB"),
            title=self._get_text(tags, "TIT2"),
        )

    def write(self, file_path: str, patch: MetadataPatch) -> None:
        try:
            tags = ID3(file_path)
        except ID3NoHeaderError:
            tags = ID3()

        for attr, frame_cls in self.TEXT_FRAMES.items():
            value = getattr(patch, attr)
            if value is None:
                continue
            tags.delall(frame_cls.__name__)
            if value:
                tags.add(frame_cls(encoding=3, text=value))

        self._write_pair(tags, TRCK, patch.track, patch.total_tracks)
        self._write_pair(tags, TPOS, patch.disc, patch.total_discs)

        tags.save(file_path, v2_version=4)

    def _write_pair(self, tags: ID3, frame_cls, number: Optional[int],
                    total: Optional[int]) -> None:
        """Update a TRCK/TPOS style 'number/total' frame."""
        if number is None and total is None:
            return

        key = frame_cls.__name__
        current = self._parse_track_disc(self._get_text(tags, key) or "")
        number, total = _merge_pair(current, number, total)

        tags.delall(key)
        if number is None and total is None:
            return
        text = str(number or 0)
        if total:
            text += f"/{total}"
        tags.add(frame_cls(encoding=3, text=text))

    def _get_text(self, tags: ID3, key: str) -> Optional[str]:
        """Get first text value of a frame."""
        frame = tags.get(key)
        if frame is None or not frame.text:
            return None
        return str(frame.text[0])

    def _parse_track_disc(self, value: str) -> tuple:
        """
        Parse track/disc string like '3/12' or '3'.

        Returns:
            (number, total) tuple
        """
        if not value:
            return None, None

        parts = value.split("/")
        try:
            num = int(parts[0]) if parts[0].strip() else None
            total = int(parts[1]) if len(parts) > 1 and parts[1].strip() else None
            return num, total
        except ValueError:
            return None, None


class MP4Codec(TagCodec):
    """iTunes style atoms of MP4 containers (m4a, m4b, m4p, m4v)."""

    MP4_TAGS = {
        "title": "\xa9nam",
        "artist": "\xa9ART",
        "album": "\xa9alb",
        "album_artist": "aART",
        "track": "trkn",  # tuple: (track_num, total)
        "disc": "disk",   # tuple: (disc_num, total)
    }

    def read(self, file_path: str) -> Metadata:
        audio = MP4(file_path)
        tags = audio.tags or {}

        track, total_tracks = self._get_pair(tags, "track")
        disc, total_discs = self._get_pair(tags, "disc")

        return Metadata(
            track=zero_none(track),
            total_tracks=zero_none(total_tracks),
            disc=zero_none(disc),
            total_discs=zero_none(total_discs),
            artist=self._get_mp4_tag(tags, "artist"),
            album_artist=self._get_mp4_tag(tags, "album_artist"),
            album=self._get_mp4_tag(tags, "album"),
            title=self._get_mp4_tag(tags, "title"),
        )

    def write(self, file_path: str, patch: MetadataPatch) -> None:
        audio = MP4(file_path)
        if audio.tags is None:
            audio.add_tags()
        tags = audio.tags

        for attr in ("title", "artist", "album", "album_artist"):
            value = getattr(patch, attr)
            if value is None:
                continue
            key = self.MP4_TAGS[attr]
            if value:
                tags[key] = [value]
            elif key in tags:
                del tags[key]

        self._write_pair(tags, "track", patch.track, patch.total_tracks)
        self._write_pair(tags, "disc", patch.disc, patch.total_discs)

        audio.save()

    def _write_pair(self, tags, name: str, number: Optional[int],
                    total: Optional[int]) -> None:
        """Update a trkn/disk tuple atom."""
        if number is None and total is None:
            return

        key = self.MP4_TAGS[name]
        number, total = _merge_pair(self._get_pair(tags, name), number, total)

        if number is None and total is None:
            if key in tags:
                del tags[key]
        else:
            tags[key] = [(number or 0, total or 0)]

    def _get_pair(self, tags, name: str) -> Tuple[Optional[int], Optional[int]]:
        """Get (number, total) from a trkn/disk atom."""
        info = tags.get(self.MP4_TAGS[name], [(None, None)])[0]
        number = info[0] if info and info[0] else None
        total = info[1] if info and len(info) > 1 and info[1] else None
        return number, total

    def _get_mp4_tag(self, tags, key: str) -> Optional[str]:
        """Get string value from MP4 tag."""
        mp4_key = self.MP4_TAGS.get(key)
        if mp4_key and mp4_key in tags:
            value = tags[mp4_key]
            if isinstance(value, list) and value:
                return str(value[0])
            return str(value) if value else None
        return None


class TagHandler:
    """Selects a codec by file extension and hides codec failures."""

    CODECS: Dict[str, TagCodec] = {
        ".mp3": ID3Codec(),
        ".m4a": MP4Codec(),
        ".m4b": MP4Codec(),
        ".m4p": MP4Codec(),
        ".m4v": MP4Codec(),
    }

    SUPPORTED_EXTENSIONS = frozenset(CODECS)

    @classmethod
    def is_supported(cls, file_path) -> bool:
        """Check if file format is supported."""
        return Path(file_path).suffix.lower() in cls.SUPPORTED_EXTENSIONS

    @classmethod
    def get_codec(cls, file_path) -> Optional[TagCodec]:
        """Get the codec responsible for a file, by extension."""
        return cls.CODECS.get(Path(file_path).suffix.lower())

    def read_tags(self, file_path) -> Metadata:
        """
        Read tags from an audio file.

        Never raises: unsupported or unreadable files yield an empty Metadata.

        Args:
            file_path: Path to audio file

        Returns:
            Metadata with current tags
        """
        codec = self.get_codec(file_path)
        if codec is None:
            return Metadata()

        try:
            return codec.read(str(file_path))
        except (MutagenError, OSError, ValueError) as e:
            eprint(f"Could not read tags from {file_path}: {e}")
            return Metadata()

    def write_tags(self, file_path, patch: MetadataPatch) -> Tuple[bool, str]:
        """
        Write the present fields of a patch to an audio file.

        Args:
            file_path: Path to audio file
            patch: Fields to set ("" / 0 removes a field)

        Returns:
            (success, message) tuple
        """
        codec = self.get_codec(file_path)
        if codec is None:
            return False, f"Unsupported format: {file_path}"

        if patch.is_empty():
            return True, "Nothing to write"

        try:
            codec.write(str(file_path), patch)
            return True, str(file_path)
        except (MutagenError, OSError, ValueError) as e:
            return False, f"Error writing tags to {file_path}: {e}"
