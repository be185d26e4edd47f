"""Shared constants for git-worktree-keeper."""

# Remote consulted for provider detection and remote-tracking branches
REMOTE_NAME = "origin"

# Team-shared configuration file at the main repository root
TEAM_CONFIG_FILE = ".wtkconfig"

# Identifier that always resolves to the main checkout
MAIN_WORKTREE_SENTINEL = "1"

# Configuration keys and their environment variable fallbacks
KEY_PROVIDER = "wtk.provider"
ENV_PROVIDER = "WTK_PROVIDER"

KEY_PROVIDER_TIMEOUT = "wtk.provider.timeout"
ENV_PROVIDER_TIMEOUT = "WTK_PROVIDER_TIMEOUT"
DEFAULT_PROVIDER_TIMEOUT = 30.0  # seconds

KEY_WORKTREES_DIR = "wtk.worktrees.dir"
ENV_WORKTREES_DIR = "WTK_WORKTREES_DIR"

KEY_WORKTREES_PREFIX = "wtk.worktrees.prefix"
ENV_WORKTREES_PREFIX = "WTK_WORKTREES_PREFIX"

# Characters replaced with "-" when turning a branch name into a folder name
UNSAFE_FOLDER_CHARS = '/\\:*?"<>|'

# Hostnames recognised without an explicit provider override
PROVIDER_HOSTS = {
    "github.com": "github",
    "gitlab.com": "gitlab",
}

# Table column labels for `list`
LIST_COLUMNS = ["", "Branch", "Path"]

SYMBOL_MAIN = "●"
DETACHED_LABEL = "(detached)"
