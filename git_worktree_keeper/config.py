"""Run configuration for git-worktree-keeper"""

from dataclasses import dataclass


@dataclass
class Config:
    """Options for a single git-wtk invocation, with validation.

    Persistent settings live in git config and are read through
    ConfigResolver; this only carries what the command line asked for.
    """

    # Execution modes
    verbose: bool = False
    debug: bool = False
    dry_run: bool = False
    force: bool = False  # Remove dirty worktrees too
    yes: bool = False  # Skip confirmations

    # Worktree creation
    fetch: bool = True
    from_ref: str = "HEAD"

    # Removal
    delete_branch: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_from_ref()

    def _validate_from_ref(self):
        """Validate from_ref is not empty."""
        if not self.from_ref or not self.from_ref.strip():
            raise ValueError("from_ref cannot be empty")
        self.from_ref = self.from_ref.strip()

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "verbose": self.verbose,
            "debug": self.debug,
            "dry_run": self.dry_run,
            "force": self.force,
            "yes": self.yes,
            "fetch": self.fetch,
            "from_ref": self.from_ref,
            "delete_branch": self.delete_branch,
        }

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        known_fields = {
            "verbose",
            "debug",
            "dry_run",
            "force",
            "yes",
            "fetch",
            "from_ref",
            "delete_branch",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
