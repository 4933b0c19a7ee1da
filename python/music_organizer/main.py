#!/usr/bin/env python3
"""
Music Organizer - Move/copy and rename music files using their tags.

Usage:
    python -m music_organizer --music-dir /path/to/music [options]
"""

import argparse
import sys

from music_organizer.config import load_config, validate_config, eprint, expand_dir
from music_organizer.changes import Changes, FileOpType
from music_organizer.checks import apply_resolutions, check_all
from music_organizer.indexer import IndexBuilder
from music_organizer.interactive import InteractivePrompts
from music_organizer.models import MusicIndex, ProcessingStats
from music_organizer.planner import ReorganizationPlanner
from music_organizer.tag_handler import TagHandler
from music_organizer.utils import remove_empty_dirs


class MusicOrganizer:
    """Runs index, check, plan and write for one music directory."""

    def __init__(self, args: argparse.Namespace, prompts: InteractivePrompts,
                 tag_handler: TagHandler = None):
        """
        Initialize organizer.

        Args:
            args: CLI arguments (music_dir and output_dir already resolved)
            prompts: Interactive prompts handler
            tag_handler: Tag reader/writer
        """
        self.args = args
        self.prompts = prompts
        self.stats = ProcessingStats()
        self.tag_handler = tag_handler or TagHandler()
        self.planner = ReorganizationPlanner()
        self.op_type = FileOpType.from_copy_flag(args.copy)

    def run(self) -> int:
        """
        Main entry point for processing.

        Returns:
            Process exit code
        """
        self.prompts.print("indexing...")
        index = self.index()

        if not self.args.no_check:
            self.prompts.print("checking...")
            if self.check(index):
                self.prompts.print("reindexing...")
                index = self.index()

        self.prompts.print("changes...")
        changes = self.planner.plan(index, self.args.output_dir)
        for collision in changes.collisions:
            self._record_error(
                f"Not touching {collision.old}: {collision.new} is claimed by another file"
            )

        if changes.is_empty():
            self.prompts.print("nothing to do, exiting...")
            self.prompts.show_summary(self.stats)
            return 0

        self.prompts.show_changes(changes)

        if self.args.dry_run:
            self.prompts.print(
                f"{len(changes.dir_creations)} dirs would be created, "
                f"{len(changes.file_operations)} files would be {self.op_type.past_tense}."
            )
            return 0

        if not self.prompts.confirm_changes(changes, self.op_type):
            self.prompts.print("exiting...")
            return 1

        self.prompts.print("writing...")
        self.write(changes)

        if self.op_type is FileOpType.MOVE and not self.args.no_cleanup:
            self.prompts.print("cleaning up...")
            self.cleanup()

        self.prompts.show_summary(self.stats)
        return 0

    def index(self) -> MusicIndex:
        """Read the music directory, reporting progress per file."""
        index = MusicIndex(music_dir=self.args.music_dir)
        builder = IndexBuilder(index, self.tag_handler)

        for i, metadata in enumerate(builder.read_iter(), 1):
            self.prompts.show_progress(i, metadata)
        self.prompts.end_progress()

        self.stats.files_indexed = len(index.songs)
        self.stats.unknown_files = len(index.unknown)
        return index

    def check(self, index: MusicIndex) -> bool:
        """
        Look for inconsistencies and write the accepted resolutions.

        Returns:
            True if any tags were written and the index is stale
        """
        self.prompts.conflicts = 0
        resolutions = check_all(index, self.prompts)
        self.stats.conflicts_found += self.prompts.conflicts

        if not resolutions or self.args.dry_run:
            return False

        written, errors = apply_resolutions(index, resolutions, self.tag_handler)
        self.stats.tags_updated += written
        self.stats.errors.extend(errors)
        for error in errors:
            eprint(error)

        return written > 0

    def write(self, changes: Changes) -> None:
        """Apply the plan, collecting every error."""
        for _, error in changes.iter_dir_creations():
            if error is not None:
                self._record_error(error)
            else:
                self.stats.dirs_created += 1

        for _, error in changes.iter_file_operations(self.op_type):
            if error is not None:
                self._record_error(error)
            else:
                self.stats.files_moved += 1

    def cleanup(self) -> None:
        """Remove directories emptied by moving files out of them."""
        removed, errors = remove_empty_dirs(self.args.music_dir)
        self.stats.dirs_removed += len(removed)
        for error in errors:
            self._record_error(error)

    def _record_error(self, error) -> None:
        self.stats.errors.append(str(error))
        self.prompts.show_errors([error])


def build_parser(config: dict = None) -> argparse.ArgumentParser:
    """Build argument parser."""
    config = config or {}

    parser = argparse.ArgumentParser(
        description="Moves/copies, renames and retags music files using their metadata.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Organize ~/Music in place
  python -m music_organizer

  # Preview what would happen
  python -m music_organizer -m /path/to/music --dry-run

  # Copy into a new library without asking
  python -m music_organizer -m /path/to/music -o /path/to/library --copy --yes
"""
    )

    parser.add_argument(
        "--music-dir", "-m",
        default=config.get("music_dir", "~/Music"),
        help="The directory which will be searched for music files (default: %(default)s)"
    )

    parser.add_argument(
        "--output-dir", "-o",
        default=config.get("output_dir"),
        help="The directory which the content will be written to (default: the music dir)"
    )

    parser.add_argument(
        "--copy", "-c",
        action="store_true",
        help="Copy the files instead of moving (requires --output-dir)"
    )

    parser.add_argument(
        "--no-check", "-n",
        action="store_true",
        help="Don't check for inconsistencies"
    )

    parser.add_argument(
        "--no-cleanup",
        action="store_true",
        help="Don't remove empty directories"
    )

    confirm = parser.add_mutually_exclusive_group()
    confirm.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Assume yes as an answer for questions"
    )
    confirm.add_argument(
        "--dry-run", "-d",
        action="store_true",
        help="Only check files, don't change anything"
    )

    parser.add_argument(
        "--verbosity", "-v",
        type=int,
        choices=[0, 1, 2],
        default=int(config.get("verbosity", 1)),
        help="Verbosity level of the output, 0 least and 2 most verbose (default: %(default)s)"
    )

    # Configuration
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to .env file (default: ./.env)"
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output"
    )

    return parser


def _env_file_from_argv(argv) -> str:
    """Find --env-file before the full parse so it can provide defaults."""
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--env-file", default=".env")
    known, _ = pre.parse_known_args(argv)
    return known.env_file


def main(argv=None):
    """Main entry point."""
    if argv is None:
        argv = sys.argv[1:]

    config = load_config(_env_file_from_argv(argv))
    problems = validate_config(config)
    if problems:
        for problem in problems:
            eprint(f"Invalid configuration: {problem}")
        sys.exit(1)

    parser = build_parser(config)
    args = parser.parse_args(argv)

    if args.copy and not args.output_dir:
        parser.error("--copy requires --output-dir")

    music_dir = expand_dir(args.music_dir)
    if not music_dir.is_dir():
        eprint(f"Not a valid music dir path: {args.music_dir}")
        sys.exit(1)

    args.music_dir = music_dir.resolve()
    if args.output_dir:
        args.output_dir = expand_dir(args.output_dir).resolve()
    else:
        args.output_dir = args.music_dir

    prompts = InteractivePrompts(
        no_color=args.no_color,
        auto_yes=args.yes,
        quiet=args.verbosity == 0,
        verbosity=args.verbosity,
        dry_run=args.dry_run,
    )

    organizer = MusicOrganizer(args, prompts)

    try:
        code = organizer.run()
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
