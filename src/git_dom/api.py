"""Stable API for git-dom.

This module is the surface for tools that want submodule state without going
through the CLI, for example an update-and-commit workflow deciding which
submodule pointers to record.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .backend import RepositoryHandle
from .context import RepoContext
from .submodule_state import SubmoduleInfo, short_id


@dataclass(frozen=True)
class PointerChange:
    """Commit recorded by the parent versus the commit checked out."""
    name: str
    path: str
    recorded: Optional[str]  # Short id in the parent index, None if not recorded
    current: Optional[str]   # Short id of the nested HEAD

    @property
    def moved(self) -> bool:
        return self.recorded != self.current


def snapshot(path: Union[str, Path] = ".", name: Optional[str] = None) -> List[SubmoduleInfo]:
    """Status snapshot for the repository containing ``path``.

    Args:
        path: Any path inside the parent working tree
        name: Only report the submodule with this name

    Returns:
        One SubmoduleInfo per submodule

    Raises:
        NotARepositoryError: If path is not inside a repository
        BareRepositoryError: If the repository has no working directory
        SubmoduleConfigError: If the submodule configuration cannot be read
        SubmoduleOpenError: If a submodule directory is not a repository

    Example:
        >>> from git_dom.api import snapshot, changed_submodules
        >>> for info in changed_submodules(snapshot(".")):
        ...     print(info.name)
    """
    return RepoContext(Path(path)).discover(name)


def changed_submodules(infos: Iterable[SubmoduleInfo]) -> List[SubmoduleInfo]:
    """Submodules with a pending pointer change in the parent or a dirty tree."""
    return [info for info in infos if info.parent_changed or info.is_dirty]


def pointer_changes(repository: RepositoryHandle, infos: Iterable[SubmoduleInfo]) -> List[PointerChange]:
    """Compare the parent's recorded commit with each checked-out HEAD.

    Args:
        repository: Parent repository
        infos: Records from ``discover``

    Returns:
        One PointerChange per checked-out submodule
    """
    changes = []
    for info in infos:
        if not info.checked_out:
            continue
        recorded = repository.index_entry_id(info.path)
        changes.append(PointerChange(
            name=info.name,
            path=info.path,
            recorded=short_id(recorded) if recorded else None,
            current=info.head_commit,
        ))
    return changes
