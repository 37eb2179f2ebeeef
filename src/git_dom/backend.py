"""Version-control backend protocols and the value types they exchange.

The aggregator only performs read queries, and only through these protocols.
Implementations translate their native failures into ``git_dom.errors``.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple

from .status_flags import FileStatus


class DiffKind(Enum):
    """Which pair of trees a parent diff compares."""
    STAGED = "staged"      # HEAD tree vs index
    UNSTAGED = "unstaged"  # index vs working tree


@dataclass(frozen=True)
class SubmoduleEntry:
    """A submodule as declared in the parent's configuration."""
    name: str
    path: str  # POSIX, relative to the parent working directory
    url: str = ""


@dataclass(frozen=True)
class HeadState:
    """Where a repository's HEAD points."""
    branch: Optional[str] = None  # Short branch name when on a branch
    target: Optional[str] = None  # Full commit id HEAD resolves to

    @property
    def is_unborn(self) -> bool:
        return self.target is None

    @property
    def is_detached(self) -> bool:
        return self.branch is None and self.target is not None


@dataclass(frozen=True)
class CommitSummary:
    """A commit id with the first line of its message."""
    id: str
    summary: str = ""


class RepositoryHandle(Protocol):
    """
    Read-only handle on an open repository.

    Lookups that cannot succeed return None; only the documented
    exceptions are raised.
    """

    @property
    def path(self) -> Path:
        """Location of the repository, for messages."""
        ...

    @property
    def workdir(self) -> Optional[Path]:
        """Working directory, or None for a bare repository."""
        ...

    def submodules(self) -> List[SubmoduleEntry]:
        """
        List declared submodules in configuration order.

        Raises:
            SubmoduleConfigError: If the configuration cannot be read
        """
        ...

    def head(self) -> HeadState:
        """Describe HEAD; an empty HeadState when unborn or unreadable."""
        ...

    def head_commit(self) -> Optional[CommitSummary]:
        """Commit HEAD resolves to, if any."""
        ...

    def statuses(self, include_untracked: bool = True) -> Dict[str, FileStatus]:
        """
        Enumerate working-tree status entries keyed by path.

        Raises:
            StatusUnavailableError: If status cannot be enumerated
        """
        ...

    def resolve_reference(self, refname: str) -> Optional[str]:
        """Resolve a full reference name to a commit id."""
        ...

    def ahead_behind(self, local: str, upstream: str) -> Tuple[int, int]:
        """
        Count commits unique to each side.

        Raises:
            DivergenceUnavailableError: If the graph walk fails
        """
        ...

    def has_changes(self, kind: DiffKind, pathspec: str) -> bool:
        """
        Check whether the commit recorded for the submodule at ``pathspec``
        has a pending change of the given kind.

        Changes inside the submodule's own working tree do not count.

        Raises:
            DiffUnavailableError: If the change cannot be computed
        """
        ...

    def config_value(self, key: str) -> Optional[str]:
        """Read a configuration value, None when unset."""
        ...

    def index_entry_id(self, path: str) -> Optional[str]:
        """Object id the index records at ``path``."""
        ...


class Backend(Protocol):
    """Opens repositories."""

    def open(self, path: Path) -> RepositoryHandle:
        """
        Open the repository at exactly ``path``.

        Raises:
            NotARepositoryError: If ``path`` is not a repository
        """
        ...

    def discover(self, start: Path) -> RepositoryHandle:
        """
        Open the repository containing ``start``, searching upwards.

        Raises:
            NotARepositoryError: If no repository contains ``start``
        """
        ...
