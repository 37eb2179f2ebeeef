"""Repository context for commands run from inside a working tree."""

from pathlib import Path
from typing import List, Optional

from .backend import Backend, RepositoryHandle
from .config import DomConfig, load_config
from .errors import BareRepositoryError
from .submodule_state import SubmoduleInfo, discover


class RepoContext:
    """Locates the parent repository and carries the backend used to read it."""

    def __init__(self, start_path: Optional[Path] = None, backend: Optional[Backend] = None):
        """Open the repository containing ``start_path``.

        Args:
            start_path: Path to start searching from (defaults to CWD)
            backend: Repository backend (defaults to pygit2)

        Raises:
            NotARepositoryError: If no repository contains start_path
            BareRepositoryError: If the repository has no working directory
        """
        if backend is None:
            from .pygit2_backend import Pygit2Backend
            backend = Pygit2Backend()
        self.backend = backend
        self.repository: RepositoryHandle = backend.discover(Path(start_path or Path.cwd()).resolve())
        if self.repository.workdir is None:
            raise BareRepositoryError(self.repository.path)
        self._config: Optional[DomConfig] = None

    @property
    def root(self) -> Path:
        """Working directory of the parent repository."""
        return self.repository.workdir

    def get_config(self) -> DomConfig:
        """Get git-dom settings (memoized)."""
        if self._config is None:
            self._config = load_config(self.repository)
        return self._config

    def discover(self, name: Optional[str] = None) -> List[SubmoduleInfo]:
        """Fresh snapshot of the parent's submodules."""
        return discover(self.repository, name, backend=self.backend)
