"""git-dom: per-submodule status snapshots for git repositories."""

from .constants import GIT_DOM_VERSION as __version__
from .errors import (
    BareRepositoryError,
    DomError,
    GitEnvironmentError,
    NotARepositoryError,
    SubmoduleConfigError,
    SubmoduleOpenError,
)
from .submodule_state import SubmoduleInfo, discover

__all__ = [
    "BareRepositoryError",
    "DomError",
    "GitEnvironmentError",
    "NotARepositoryError",
    "SubmoduleConfigError",
    "SubmoduleInfo",
    "SubmoduleOpenError",
    "discover",
]
