"""Constants for git-dom."""

# Abbreviated commit ids, as shown by `git log --oneline`
SHORT_ID_LENGTH = 7

# Remote consulted for upstream divergence
DEFAULT_REMOTE = "origin"
REMOTE_REFS_PREFIX = "refs/remotes"

# Placeholders used when rendering records
NO_COMMIT_PLACEHOLDER = "-" * SHORT_ID_LENGTH
NO_BRANCH_PLACEHOLDER = "(none)"
DETACHED_LABEL = "(detached)"

# Git configuration keys (read from the parent repository)
CONFIG_ROOT_KEY = "dom.root"
CONFIG_COMMIT_KEY = "dom.commit"
DEFAULT_ROOT = "src"

# Environment
NO_COLOR_ENV = "NO_COLOR"

# Version
GIT_DOM_VERSION = "0.1.0"
