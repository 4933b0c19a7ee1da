"""Interactive user prompts, conflict resolution and confirmations."""

from typing import List, Optional, Sequence

from music_organizer.changes import Changes, FileOpType
from music_organizer.checks import Resolver, TrackGroups
from music_organizer.models import Album, Artist, Metadata, ProcessingStats


class InteractivePrompts(Resolver):
    """Handles user interaction: progress, conflicts and confirmations."""

    COLORS = {
        "reset": "\033[0m",
        "bold": "\033[1m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "red": "\033[91m",
        "cyan": "\033[96m",
        "dim": "\033[2m",
    }

    CUSTOM_CHOICE = -1

    def __init__(self, no_color: bool = False, auto_yes: bool = False,
                 quiet: bool = False, verbosity: int = 1, dry_run: bool = False):
        """
        Initialize interactive prompts.

        Args:
            no_color: Disable colored output
            auto_yes: Auto-confirm the plan, never ask about conflicts
            quiet: Suppress non-essential output
            verbosity: 0 least, 2 most verbose output
            dry_run: Only report conflicts, never ask
        """
        self.no_color = no_color
        self.auto_yes = auto_yes
        self.quiet = quiet
        self.verbosity = verbosity
        self.dry_run = dry_run
        self.conflicts = 0
        self._last_len = 0

        if no_color:
            self.COLORS = {k: "" for k in self.COLORS}

    @property
    def asks(self) -> bool:
        """Whether conflicts are put to the user."""
        return not (self.auto_yes or self.dry_run)

    def _c(self, color: str, text: str) -> str:
        """Apply color to text."""
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def print(self, *args, **kwargs):
        """Print unless quiet mode."""
        if not self.quiet:
            print(*args, **kwargs)

    def show_progress(self, number: int, metadata: Metadata) -> None:
        """Show the file being indexed.

        Verbosity 2 prints one line per file, otherwise the line is reused.
        """
        if self.quiet or self.verbosity == 0:
            return

        line = f"{number} {metadata.artist or ''} - {metadata.title or ''}"
        if self.verbosity >= 2:
            print(line)
            return

        padding = " " * max(self._last_len - len(line), 0)
        print(f"\r{line}{padding}", end="", flush=True)
        self._last_len = len(line)

    def end_progress(self) -> None:
        """Finish a reused progress line."""
        if not self.quiet and self.verbosity == 1 and self._last_len:
            print()
        self._last_len = 0

    def _choose(self, header: str, options: Sequence[str],
                custom_label: Optional[str] = None) -> Optional[int]:
        """
        Let the user pick one of the options.

        Returns:
            Index of the chosen option, CUSTOM_CHOICE when the custom entry
            was picked, or None when skipped
        """
        print(f"\n{self._c('yellow', header)}")
        for i, option in enumerate(options):
            print(f"  [{i}] {option}")
        if custom_label:
            print(f"  [c] {custom_label}")
        print("  [s] Skip")

        while True:
            choice = input(f"{self._c('bold', 'Select option: ')} ").strip().lower()

            if choice in ("s", ""):
                return None
            if custom_label and choice == "c":
                return self.CUSTOM_CHOICE

            try:
                idx = int(choice)
                if 0 <= idx < len(options):
                    return idx
            except ValueError:
                pass

            print(self._c("red", "Invalid selection. Try again."))

    def _read_name(self, label: str) -> Optional[str]:
        value = input(f"  {label}: ").strip()
        return value or None

    def _read_number(self, label: str) -> Optional[int]:
        while True:
            value = input(f"  {label} (empty to skip, 0 to remove): ").strip()
            if not value:
                return None
            try:
                number = int(value)
                if number >= 0:
                    return number
            except ValueError:
                pass
            print(self._c("red", "Invalid number. Try again."))

    def _report(self, text: str) -> None:
        self.conflicts += 1
        if not self.asks:
            self.print(f"{self._c('yellow', 'Inconsistent:')} {text}")

    def _choose_name(self, header: str, names: List[str], label: str) -> Optional[str]:
        choice = self._choose(header, names, custom_label="Enter a name")
        if choice == self.CUSTOM_CHOICE:
            return self._read_name(label)
        if choice is None:
            return None
        return names[choice]

    def _choose_number(self, values: List[Optional[int]], label: str) -> Optional[int]:
        numbers = [v for v in values if v is not None]
        choice = self._choose(f"{label}:", [str(n) for n in numbers],
                              custom_label="Enter a number")
        if choice == self.CUSTOM_CHOICE:
            return self._read_number(label)
        if choice is None:
            return None
        return numbers[choice]

    def resolve_artists(self, artist1: Artist, artist2: Artist) -> Optional[str]:
        """Ask which spelling two differently cased artists should share."""
        self._report(f"artists {artist1.name!r} and {artist2.name!r}")
        if not self.asks:
            return None

        return self._choose_name("Inconsistent artist names:",
                                 [artist1.name, artist2.name], "Artist name")

    def resolve_albums(self, artist: Artist, album1: Album, album2: Album) -> Optional[str]:
        """Ask which spelling two differently cased albums should share."""
        self._report(f"albums of {artist.name}: {album1.name!r} and {album2.name!r}")
        if not self.asks:
            return None

        return self._choose_name(f"Inconsistent album names of {artist.name}:",
                                 [album1.name, album2.name], "Album name")

    def resolve_total_tracks(self, artist: Artist, album: Album,
                             groups: TrackGroups) -> Optional[int]:
        """Ask for the total track count of an album whose songs disagree."""
        self._report(
            f"total tracks of {artist.name} - {album.name}: "
            + ", ".join(str(total) for _, total in groups)
        )
        if not self.asks:
            return None

        print(f"\n{self._c('yellow', f'Inconsistent total tracks of {artist.name} - {album.name}:')}")
        for songs, total in groups:
            shown = total if total is not None else self._c("dim", "(empty)")
            print(f"  {shown}: " + ", ".join(s.title or "?" for s in songs))

        return self._choose_number([total for _, total in groups], "Total tracks")

    def resolve_total_discs(self, artist: Artist, album: Album,
                            values: List[Optional[int]]) -> Optional[int]:
        """Ask for the total disc count of an album whose songs disagree."""
        self._report(
            f"total discs of {artist.name} - {album.name}: "
            + ", ".join(str(v) for v in values)
        )
        if not self.asks:
            return None

        print(f"\n{self._c('yellow', f'Inconsistent total discs of {artist.name} - {album.name}:')}")
        return self._choose_number(values, "Total discs")

    def show_changes(self, changes: Changes) -> None:
        """List planned directories and destination files (verbosity >= 1)."""
        if self.quiet or self.verbosity < 1:
            return

        if changes.dir_creations:
            print(self._c("cyan", "dirs:"))
            for i, d in enumerate(changes.dir_creations, 1):
                print(f"{i} {d.path}")
            print()

        if changes.file_operations:
            print(self._c("cyan", "files:"))
            for i, f in enumerate(changes.file_operations, 1):
                if self.verbosity >= 2:
                    print(f"{i} {f.old}")
                    print(f"  -> {self._c('green', str(f.new))}")
                else:
                    print(f"{i} {f.new}")
            print()

    def confirm_changes(self, changes: Changes, op_type: FileOpType) -> bool:
        """
        Confirm a plan.

        Args:
            changes: Planned changes
            op_type: Move or copy

        Returns:
            True if confirmed
        """
        if self.auto_yes:
            return True

        print(f"{len(changes.dir_creations)} dirs will be created.")
        print(f"{len(changes.file_operations)} files will be {op_type.past_tense}.")

        while True:
            choice = input(f"{self._c('bold', 'Continue? [y/N]: ')} ").strip().lower()
            if choice == "y":
                return True
            if choice in ("n", ""):
                return False
            print(self._c("red", "Invalid choice. Enter y or n."))

    def show_errors(self, errors: Sequence) -> None:
        """Print collected errors."""
        for e in errors:
            print(self._c("red", f"Error: {e}"))

    def show_summary(self, stats: ProcessingStats) -> None:
        """Display processing summary."""
        self.print(f"\n{self._c('bold', 'Summary:')}")
        self.print(f"  Files indexed:   {stats.files_indexed}")
        self.print(f"  Unknown files:   {stats.unknown_files}")
        self.print(f"  Conflicts found: {stats.conflicts_found}")
        self.print(f"  Tags updated:    {stats.tags_updated}")
        self.print(f"  Dirs created:    {stats.dirs_created}")
        self.print(f"  Files moved:     {stats.files_moved}")
        self.print(f"  Dirs removed:    {stats.dirs_removed}")

        if stats.errors:
            self.print(f"\n{self._c('red', f'Errors ({len(stats.errors)}):')}")
            for error in stats.errors:
                self.print(f"  - {error}")
