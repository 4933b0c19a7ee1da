"""Filesystem operations making up a reorganization plan."""

import errno
import os
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Tuple


class FileOpType(Enum):
    """How file operations are carried out."""
    MOVE = "move"
    COPY = "copy"

    @classmethod
    def from_copy_flag(cls, copy: bool) -> "FileOpType":
        return cls.COPY if copy else cls.MOVE

    @property
    def past_tense(self) -> str:
        return "copied" if self is FileOpType.COPY else "moved"


@dataclass
class DirCreation:
    """A directory to create."""
    path: Path

    def execute(self) -> None:
        """Create the directory. Raises OSError on failure."""
        os.mkdir(self.path)


@dataclass
class FileOperation:
    """A file to move or copy from old to new."""
    old: Path
    new: Path

    def execute(self, op_type: FileOpType) -> None:
        """Move or copy the file. Raises OSError on failure.

        An existing target is never replaced.
        """
        if self.new.exists():
            raise FileExistsError(errno.EEXIST, "Target already exists", str(self.new))
        if op_type is FileOpType.COPY:
            shutil.copy2(self.old, self.new)
        else:
            os.rename(self.old, self.new)


@dataclass
class Changes:
    """Directory creations followed by file operations.

    collisions holds moves that were left out because another file already
    claimed their destination. They are never executed.
    """
    dir_creations: List[DirCreation] = field(default_factory=list)
    file_operations: List[FileOperation] = field(default_factory=list)
    collisions: List[FileOperation] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.dir_creations and not self.file_operations

    def iter_dir_creations(self) -> Iterator[Tuple[DirCreation, Optional[OSError]]]:
        """Create directories one by one, yielding each with its error (or None)."""
        for d in self.dir_creations:
            try:
                d.execute()
            except OSError as e:
                yield d, e
            else:
                yield d, None

    def iter_file_operations(
        self, op_type: FileOpType
    ) -> Iterator[Tuple[FileOperation, Optional[OSError]]]:
        """Apply file operations one by one, yielding each with its error (or None)."""
        for f in self.file_operations:
            try:
                f.execute(op_type)
            except OSError as e:
                yield f, e
            else:
                yield f, None

    def write(self, op_type: FileOpType) -> List[OSError]:
        """
        Apply the whole plan.

        Every operation is attempted; nothing already applied is undone.

        Args:
            op_type: Move or copy for all file operations

        Returns:
            Errors of the operations that failed, in order
        """
        errors = []
        for _, e in self.iter_dir_creations():
            if e is not None:
                errors.append(e)
        for _, e in self.iter_file_operations(op_type):
            if e is not None:
                errors.append(e)
        return errors
