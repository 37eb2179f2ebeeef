"""Repository backend implemented with pygit2 (libgit2)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pygit2
from pygit2.enums import RepositoryOpenFlag, SubmoduleIgnore, SubmoduleStatus

from .backend import CommitSummary, DiffKind, HeadState, SubmoduleEntry
from .errors import (
    DiffUnavailableError,
    DivergenceUnavailableError,
    NotARepositoryError,
    StatusUnavailableError,
    SubmoduleConfigError,
)
from .status_flags import FileStatus

logger = logging.getLogger(__name__)

# (ours, pygit2's) for every flag pygit2 knows about
_NATIVE_FLAGS: Tuple[Tuple[FileStatus, int], ...] = tuple(
    (member, int(getattr(pygit2.enums.FileStatus, name)))
    for name, member in FileStatus.__members__.items()
    if member.value and hasattr(pygit2.enums.FileStatus, name)
)

# Recorded commit differs between HEAD tree and index
_STAGED_POINTER_FLAGS = int(
    SubmoduleStatus.INDEX_ADDED | SubmoduleStatus.INDEX_DELETED | SubmoduleStatus.INDEX_MODIFIED
)
# Checked-out commit differs from the one in the index
_UNSTAGED_POINTER_FLAGS = int(
    SubmoduleStatus.WD_ADDED | SubmoduleStatus.WD_DELETED | SubmoduleStatus.WD_MODIFIED
)


def to_file_status(flags: int) -> FileStatus:
    """Translate pygit2 status bits into FileStatus."""
    status = FileStatus.CURRENT
    for member, native in _NATIVE_FLAGS:
        if flags & native:
            status |= member
    return status


class Pygit2Repository:
    """RepositoryHandle over a ``pygit2.Repository``."""

    def __init__(self, repo: pygit2.Repository):
        self._repo = repo

    @property
    def repo(self) -> pygit2.Repository:
        """The wrapped pygit2 repository."""
        return self._repo

    @property
    def path(self) -> Path:
        return Path(self._repo.workdir or self._repo.path)

    @property
    def workdir(self) -> Optional[Path]:
        if self._repo.is_bare or not self._repo.workdir:
            return None
        return Path(self._repo.workdir)

    def submodules(self) -> List[SubmoduleEntry]:
        try:
            return [
                SubmoduleEntry(
                    name=submodule.name,
                    path=Path(submodule.path).as_posix(),
                    url=submodule.url or "",
                )
                for submodule in self._repo.submodules
            ]
        except (pygit2.GitError, KeyError) as exc:
            raise SubmoduleConfigError(self.path, str(exc)) from exc

    def head(self) -> HeadState:
        if self._repo.head_is_unborn:
            return HeadState()
        try:
            head = self._repo.head
        except pygit2.GitError:
            return HeadState()
        target = str(head.target)
        if self._repo.head_is_detached:
            return HeadState(target=target)
        return HeadState(branch=head.shorthand, target=target)

    def head_commit(self) -> Optional[CommitSummary]:
        if self._repo.head_is_unborn:
            return None
        try:
            commit = self._repo.head.peel(pygit2.Commit)
        except (pygit2.GitError, ValueError):
            return None
        message = commit.message or ""
        lines = message.splitlines()
        return CommitSummary(id=str(commit.id), summary=lines[0].strip() if lines else "")

    def statuses(self, include_untracked: bool = True) -> Dict[str, FileStatus]:
        untracked_files = "normal" if include_untracked else "no"
        try:
            raw = self._repo.status(untracked_files=untracked_files)
        except pygit2.GitError as exc:
            raise StatusUnavailableError(f"Status unavailable for {self.path}: {exc}") from exc
        return {path: to_file_status(flags) for path, flags in raw.items()}

    def resolve_reference(self, refname: str) -> Optional[str]:
        try:
            reference = self._repo.references.get(refname)
            if reference is None:
                return None
            return str(reference.resolve().target)
        except (KeyError, ValueError, pygit2.GitError) as exc:
            logger.debug("Could not resolve %s in %s: %s", refname, self.path, exc)
            return None

    def ahead_behind(self, local: str, upstream: str) -> Tuple[int, int]:
        try:
            ahead, behind = self._repo.ahead_behind(pygit2.Oid(hex=local), pygit2.Oid(hex=upstream))
        except (pygit2.GitError, ValueError) as exc:
            raise DivergenceUnavailableError(
                f"Cannot compare {local[:7]} with {upstream[:7]} in {self.path}: {exc}"
            ) from exc
        return int(ahead), int(behind)

    def has_changes(self, kind: DiffKind, pathspec: str) -> bool:
        try:
            if kind is DiffKind.STAGED and self._repo.head_is_unborn:
                # Everything in the index is staged against an empty tree
                return pathspec in self._repo.index
            # Only the recorded commit counts, not the submodule's own working tree
            status = self._repo.submodules.status(pathspec, ignore=SubmoduleIgnore.DIRTY)
        except (pygit2.GitError, KeyError, ValueError) as exc:
            raise DiffUnavailableError(
                f"Cannot compute {kind.value} change for {pathspec} in {self.path}: {exc}"
            ) from exc
        flags = _STAGED_POINTER_FLAGS if kind is DiffKind.STAGED else _UNSTAGED_POINTER_FLAGS
        return bool(int(status) & flags)

    def config_value(self, key: str) -> Optional[str]:
        try:
            return self._repo.config[key]
        except (KeyError, pygit2.GitError):
            return None

    def index_entry_id(self, path: str) -> Optional[str]:
        try:
            entry = self._repo.index[path]
        except (KeyError, pygit2.GitError):
            return None
        return str(entry.id)


class Pygit2Backend:
    """Backend that opens repositories with pygit2."""

    def open(self, path: Path) -> Pygit2Repository:
        try:
            repo = pygit2.Repository(str(path), RepositoryOpenFlag.NO_SEARCH)
        except (pygit2.GitError, KeyError) as exc:
            raise NotARepositoryError(path) from exc
        return Pygit2Repository(repo)

    def discover(self, start: Path) -> Pygit2Repository:
        try:
            repo_path = pygit2.discover_repository(str(start))
        except (KeyError, ValueError, pygit2.GitError) as exc:
            raise NotARepositoryError(start) from exc
        if repo_path is None:
            raise NotARepositoryError(start)
        try:
            repo = pygit2.Repository(repo_path)
        except (pygit2.GitError, KeyError) as exc:
            raise NotARepositoryError(start) from exc
        logger.debug("Discovered repository at %s", repo_path)
        return Pygit2Repository(repo)
