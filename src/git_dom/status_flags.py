"""File status flags and the staged/modified/untracked classification."""

from dataclasses import dataclass
from enum import Flag
from typing import Iterable


class FileStatus(Flag):
    """Per-path status flags reported by a backend.

    Bit values match libgit2's ``git_status_t`` so a backend built on it can
    translate flags one member at a time.
    """
    CURRENT = 0
    INDEX_NEW = 1 << 0
    INDEX_MODIFIED = 1 << 1
    INDEX_DELETED = 1 << 2
    INDEX_RENAMED = 1 << 3
    INDEX_TYPECHANGE = 1 << 4
    WT_NEW = 1 << 7
    WT_MODIFIED = 1 << 8
    WT_DELETED = 1 << 9
    WT_TYPECHANGE = 1 << 10
    WT_RENAMED = 1 << 11
    WT_UNREADABLE = 1 << 12
    IGNORED = 1 << 14
    CONFLICTED = 1 << 15


STAGED_FLAGS = (
    FileStatus.INDEX_NEW
    | FileStatus.INDEX_MODIFIED
    | FileStatus.INDEX_DELETED
    | FileStatus.INDEX_RENAMED
    | FileStatus.INDEX_TYPECHANGE
)

# WT_TYPECHANGE does not count as modified
MODIFIED_FLAGS = FileStatus.WT_MODIFIED | FileStatus.WT_DELETED | FileStatus.WT_RENAMED

UNTRACKED_FLAGS = FileStatus.WT_NEW


def is_staged(status: FileStatus) -> bool:
    """Check if the index holds a change for this entry."""
    return bool(status & STAGED_FLAGS)


def is_modified(status: FileStatus) -> bool:
    """Check if the working tree differs from the index for this entry."""
    return bool(status & MODIFIED_FLAGS)


def is_untracked(status: FileStatus) -> bool:
    """Check if this entry is present in the working tree but not tracked."""
    return bool(status & UNTRACKED_FLAGS)


@dataclass(frozen=True)
class StatusCounts:
    """Number of working-tree entries in each category."""
    staged: int = 0
    modified: int = 0
    untracked: int = 0

    @property
    def is_dirty(self) -> bool:
        """Untracked files alone never make a tree dirty."""
        return self.staged > 0 or self.modified > 0

    @property
    def is_clean(self) -> bool:
        return self.staged == 0 and self.modified == 0 and self.untracked == 0


def count_statuses(statuses: Iterable[FileStatus]) -> StatusCounts:
    """Fold status flags into per-category counts.

    Categories are not mutually exclusive: an entry that is both staged and
    modified in the working tree counts once in each.

    Args:
        statuses: Status flags, one per entry

    Returns:
        StatusCounts for the given entries
    """
    staged = modified = untracked = 0
    for status in statuses:
        if is_staged(status):
            staged += 1
        if is_modified(status):
            modified += 1
        if is_untracked(status):
            untracked += 1
    return StatusCounts(staged=staged, modified=modified, untracked=untracked)
