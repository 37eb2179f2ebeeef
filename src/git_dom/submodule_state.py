"""Per-submodule state: one consistent record from several independent sources.

For every submodule declared by the parent repository this module reads the
nested repository's HEAD, working tree and upstream tracking ref, then checks
the parent's index and working tree for a pending change of the recorded
commit pointer. Nothing here writes to any repository.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .backend import Backend, DiffKind, HeadState, RepositoryHandle, SubmoduleEntry
from .constants import DEFAULT_REMOTE, REMOTE_REFS_PREFIX, SHORT_ID_LENGTH
from .errors import (
    BareRepositoryError,
    DiffUnavailableError,
    DivergenceUnavailableError,
    NotARepositoryError,
    StatusUnavailableError,
    SubmoduleOpenError,
)
from .status_flags import StatusCounts, count_statuses

logger = logging.getLogger(__name__)


def short_id(commit_id: str) -> str:
    """Abbreviate a commit id."""
    return commit_id[:SHORT_ID_LENGTH]


@dataclass(frozen=True)
class SubmoduleInfo:
    """Snapshot of one submodule, built fresh on every query."""
    name: str
    path: str  # POSIX, relative to the parent working directory
    url: str = ""

    branch: Optional[str] = None  # Branch name, or short commit id when detached
    detached: bool = False
    head_commit: Optional[str] = None
    head_message: Optional[str] = None

    ahead: int = 0
    behind: int = 0

    staged: int = 0
    modified: int = 0
    untracked: int = 0

    parent_changed: bool = False

    @classmethod
    def not_checked_out(cls, entry: SubmoduleEntry, parent_changed: bool = False) -> "SubmoduleInfo":
        """Record for a submodule whose directory is absent from disk."""
        return cls(
            name=entry.name,
            path=entry.path,
            url=entry.url,
            parent_changed=parent_changed,
        )

    @property
    def is_dirty(self) -> bool:
        """Staged or modified entries; untracked files alone never count."""
        return self.staged > 0 or self.modified > 0

    @property
    def checked_out(self) -> bool:
        """Whether there is a nested HEAD commit to report.

        A nested repository whose HEAD is unborn has no commit yet and counts
        as not checked out, like a submodule absent from disk.
        """
        return self.head_commit is not None

    @property
    def counts(self) -> StatusCounts:
        return StatusCounts(staged=self.staged, modified=self.modified, untracked=self.untracked)

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation for machine-readable output."""
        return {
            "name": self.name,
            "path": self.path,
            "url": self.url,
            "branch": self.branch,
            "detached": self.detached,
            "head_commit": self.head_commit,
            "head_message": self.head_message,
            "is_dirty": self.is_dirty,
            "ahead": self.ahead,
            "behind": self.behind,
            "staged": self.staged,
            "modified": self.modified,
            "untracked": self.untracked,
            "parent_changed": self.parent_changed,
        }


@dataclass(frozen=True)
class SubmoduleContext:
    """Handles used while resolving a single submodule."""
    parent: RepositoryHandle
    entry: SubmoduleEntry
    abs_path: Path
    nested: Optional[RepositoryHandle] = None


# ============= Enumerator =============

def enumerate_submodules(parent: RepositoryHandle, name: Optional[str] = None) -> List[SubmoduleEntry]:
    """List declared submodules, optionally narrowed to a single name.

    Args:
        parent: Parent repository
        name: Only keep the submodule with exactly this name

    Returns:
        Entries in configuration order; the first declaration of a
        duplicated name wins. Empty when nothing matches.

    Raises:
        SubmoduleConfigError: If the configuration cannot be read
    """
    entries: List[SubmoduleEntry] = []
    seen = set()
    for entry in parent.submodules():
        if entry.name in seen:
            logger.debug("Ignoring duplicate submodule declaration %s", entry.name)
            continue
        seen.add(entry.name)
        if name is not None and entry.name != name:
            continue
        entries.append(entry)
    return entries


# ============= Nested repository readers =============

def resolve_branch(nested: RepositoryHandle, head: Optional[HeadState] = None) -> Tuple[Optional[str], bool]:
    """Determine what the nested checkout is on.

    Returns:
        (branch name, False) on a branch, (short commit id, True) when
        detached, (None, False) when HEAD cannot be read
    """
    head = head if head is not None else nested.head()
    if head.branch:
        return head.branch, False
    if head.target:
        return short_id(head.target), True
    return None, False


def read_head_commit(nested: RepositoryHandle) -> Tuple[Optional[str], Optional[str]]:
    """Short id and summary line of the nested HEAD commit."""
    commit = nested.head_commit()
    if commit is None:
        return None, None
    return short_id(commit.id), commit.summary or ""


def count_working_tree(nested: RepositoryHandle) -> StatusCounts:
    """Count staged, modified and untracked entries of the nested tree.

    Falls back to a status without untracked files, then to zero counts.
    """
    try:
        statuses = nested.statuses(include_untracked=True)
    except StatusUnavailableError as exc:
        logger.debug("Retrying status without untracked files: %s", exc)
        try:
            statuses = nested.statuses(include_untracked=False)
        except StatusUnavailableError as retry_exc:
            logger.debug("Status unavailable, reporting zero counts: %s", retry_exc)
            return StatusCounts()
    return count_statuses(statuses.values())


def upstream_refname(branch: str, remote: str = DEFAULT_REMOTE) -> str:
    """Full name of the remote-tracking ref for a local branch."""
    return f"{REMOTE_REFS_PREFIX}/{remote}/{branch}"


def compute_divergence(nested: RepositoryHandle, head: Optional[HeadState] = None) -> Tuple[int, int]:
    """Commits ahead of and behind ``origin/<branch>``.

    Missing tracking information is reported as up to date, (0, 0).
    """
    head = head if head is not None else nested.head()
    if not head.branch or not head.target:
        return 0, 0
    upstream = nested.resolve_reference(upstream_refname(head.branch))
    if upstream is None:
        return 0, 0
    try:
        return nested.ahead_behind(head.target, upstream)
    except DivergenceUnavailableError as exc:
        logger.debug("Divergence unavailable: %s", exc)
        return 0, 0


# ============= Parent repository =============

def detect_parent_change(parent: RepositoryHandle, path: str) -> bool:
    """Check whether the parent has a staged or unstaged change at ``path``.

    Each side is computed independently; a failing diff counts as no change.
    """
    for kind in (DiffKind.STAGED, DiffKind.UNSTAGED):
        try:
            if parent.has_changes(kind, path):
                return True
        except DiffUnavailableError as exc:
            logger.debug("Treating %s diff as unchanged: %s", kind.value, exc)
    return False


# ============= Aggregator =============

def _open_nested(backend: Backend, entry: SubmoduleEntry, abs_path: Path) -> RepositoryHandle:
    try:
        return backend.open(abs_path)
    except NotARepositoryError as exc:
        raise SubmoduleOpenError(entry.name, abs_path) from exc


def _gather_info(ctx: SubmoduleContext) -> SubmoduleInfo:
    nested = ctx.nested
    logger.debug("Reading submodule %s at %s", ctx.entry.name, ctx.abs_path)
    head = nested.head()
    branch, detached = resolve_branch(nested, head)
    head_commit, head_message = read_head_commit(nested)
    counts = count_working_tree(nested)
    ahead, behind = compute_divergence(nested, head)
    parent_changed = detect_parent_change(ctx.parent, ctx.entry.path)

    return SubmoduleInfo(
        name=ctx.entry.name,
        path=ctx.entry.path,
        url=ctx.entry.url,
        branch=branch,
        detached=detached,
        head_commit=head_commit,
        head_message=head_message,
        ahead=ahead,
        behind=behind,
        staged=counts.staged,
        modified=counts.modified,
        untracked=counts.untracked,
        parent_changed=parent_changed,
    )


def discover(
    repository: RepositoryHandle,
    name: Optional[str] = None,
    *,
    backend: Optional[Backend] = None,
) -> List[SubmoduleInfo]:
    """Build a fresh status snapshot of the parent's submodules.

    All-or-nothing: either every enumerated submodule gets a record, or the
    call raises.

    Args:
        repository: Parent repository
        name: Only report the submodule with this name
        backend: Opens nested repositories (defaults to pygit2)

    Returns:
        One SubmoduleInfo per submodule, in configuration order

    Raises:
        BareRepositoryError: If the parent has no working directory
        SubmoduleConfigError: If the submodule configuration cannot be read
        SubmoduleOpenError: If a submodule directory is not a repository
    """
    workdir = repository.workdir
    if workdir is None:
        raise BareRepositoryError(repository.path)

    if backend is None:
        from .pygit2_backend import Pygit2Backend
        backend = Pygit2Backend()

    results: List[SubmoduleInfo] = []
    for entry in enumerate_submodules(repository, name):
        abs_path = workdir / entry.path

        if not abs_path.exists():
            logger.debug("Submodule %s is not checked out at %s", entry.name, abs_path)
            parent_changed = detect_parent_change(repository, entry.path)
            results.append(SubmoduleInfo.not_checked_out(entry, parent_changed))
            continue

        ctx = SubmoduleContext(
            parent=repository,
            entry=entry,
            abs_path=abs_path,
            nested=_open_nested(backend, entry, abs_path),
        )
        results.append(_gather_info(ctx))

    return results
