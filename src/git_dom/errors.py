"""Custom exceptions for git-dom.

Errors come in two tiers. Fatal errors (everything that is not a
``RecoverableError``) abort a query and carry a message meant for the user.
Recoverable errors are raised by the backend for narrow lookups (status,
divergence, diff) and are always mapped to a default value by the caller.
"""

from pathlib import Path
from typing import Union


class DomError(RuntimeError):
    """Base class for all git-dom errors."""
    pass


# Environment Errors
class GitEnvironmentError(DomError):
    """Base class for problems with the parent repository itself."""
    pass


class NotARepositoryError(GitEnvironmentError):
    """Path is not (inside) a git repository."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        super().__init__(f"Not a git repository: {self.path}")


class BareRepositoryError(GitEnvironmentError):
    """Repository has no working directory."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        super().__init__(
            f"Bare repositories are not supported: {self.path} has no working directory"
        )


class SubmoduleConfigError(GitEnvironmentError):
    """Submodule configuration could not be read."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = str(path)
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to read submodules of {self.path}{detail}")


# Submodule Errors
class SubmoduleOpenError(DomError):
    """A submodule directory exists but is not a valid repository."""

    def __init__(self, name: str, path: Union[str, Path]):
        self.name = name
        self.path = str(path)
        super().__init__(
            f"Failed to open submodule repo '{name}' at {self.path}"
        )


# Recoverable Errors
class RecoverableError(DomError):
    """Base class for lookups that degrade to a default instead of failing."""
    pass


class StatusUnavailableError(RecoverableError):
    """Working-tree status could not be enumerated."""
    pass


class DivergenceUnavailableError(RecoverableError):
    """Ahead/behind counts could not be computed."""
    pass


class DiffUnavailableError(RecoverableError):
    """A diff of the parent repository could not be computed."""
    pass
