"""
Music Organizer - Reorganize a music library using embedded tags.

This package provides tools to:
- Index audio files into an Artist/Album/Song hierarchy
- Detect inconsistent artist/album casing and track/disc totals
- Plan and apply moves into an Artist/Album/NN - Artist - Title layout
- Read and write MP3 (ID3) and MP4 tags
"""

__version__ = "0.2.0"
