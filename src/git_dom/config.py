"""Configuration read from the parent repository's git config."""

import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .backend import RepositoryHandle
from .constants import CONFIG_COMMIT_KEY, CONFIG_ROOT_KEY, DEFAULT_ROOT

logger = logging.getLogger(__name__)


class CommitMode(str, Enum):
    """How workflows that move submodule pointers record the change."""
    AUTO = "auto"      # Commit the new pointers
    STAGE = "stage"    # Stage them, leave committing to the user
    PROMPT = "prompt"  # Ask first


class DomConfig(BaseModel):
    """Effective git-dom settings (``dom.*`` git config keys)."""

    root: str = Field(DEFAULT_ROOT, min_length=1, description="Directory new submodules are placed under")
    commit_mode: CommitMode = CommitMode.AUTO


def _parse_commit_mode(raw: Optional[str]) -> CommitMode:
    if raw is None:
        return CommitMode.AUTO
    try:
        mode = CommitMode(raw.strip().lower())
    except ValueError:
        logger.debug("Unknown %s value %r, using %s", CONFIG_COMMIT_KEY, raw, CommitMode.AUTO.value)
        return CommitMode.AUTO
    return mode


def load_config(repository: RepositoryHandle) -> DomConfig:
    """Load git-dom settings from a repository's configuration.

    Args:
        repository: Repository whose config (all levels) is consulted

    Returns:
        DomConfig with defaults for unset or unrecognised values
    """
    root = repository.config_value(CONFIG_ROOT_KEY)
    return DomConfig(
        root=root.strip() if root and root.strip() else DEFAULT_ROOT,
        commit_mode=_parse_commit_mode(repository.config_value(CONFIG_COMMIT_KEY)),
    )
