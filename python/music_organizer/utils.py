"""Utility functions for Music Organizer."""

import os
import re
from pathlib import Path
from typing import Iterator, List, Optional

from music_organizer.tag_handler import TagHandler

INVALID_NAME_CHARS = re.compile(r'[<>:"/\\|?*]')


def sanitize_name(s: Optional[str]) -> str:
    """Sanitize a single path segment.

    Removes characters invalid in file names and replaces a leading or
    trailing dot with an underscore. A missing value renders as "".
    """
    if not s:
        return ""

    s = INVALID_NAME_CHARS.sub("", s)
    if s.startswith("."):
        s = "_" + s[1:]
    if s.endswith("."):
        s = s[:-1] + "_"
    return s


def is_hidden(name: str) -> bool:
    """Names starting with a dot are hidden."""
    return name.startswith(".")


def walk_music_files(root) -> Iterator[Path]:
    """Lazily yield audio files below root.

    Hidden entries and everything below hidden directories are skipped,
    directories are visited in sorted order and unreadable ones are ignored.

    Args:
        root: Directory to search

    Yields:
        Paths of files with a supported audio extension
    """
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not is_hidden(d))

        for name in sorted(filenames):
            if is_hidden(name):
                continue
            path = Path(dirpath) / name
            if TagHandler.is_supported(path):
                yield path


def remove_empty_dirs(root) -> tuple:
    """Remove empty directories below root, deepest first.

    The root itself is never removed, and neither is anything hidden or
    below a hidden directory.

    Args:
        root: Directory to clean up

    Returns:
        (removed, errors) tuple: removed paths and OSErrors encountered
    """
    root = Path(root)
    removed: List[Path] = []
    errors: List[OSError] = []

    candidates: List[Path] = []
    for dirpath, dirnames, _ in os.walk(root):
        dirnames[:] = [d for d in dirnames if not is_hidden(d)]
        candidates.extend(Path(dirpath) / d for d in dirnames)

    # top-down order reversed puts children before their parents
    for path in reversed(candidates):
        try:
            if not any(path.iterdir()):
                path.rmdir()
                removed.append(path)
        except OSError as e:
            errors.append(e)

    return removed, errors
