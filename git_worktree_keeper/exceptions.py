"""Custom exceptions for git-worktree-keeper"""

from typing import Optional, Sequence


class WorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""
    pass


class TargetNotFoundError(WorktreeKeeperError):
    """Exception raised when an identifier matches no registered worktree."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"No worktree found for '{identifier}'")


class TargetAmbiguousError(WorktreeKeeperError):
    """Exception raised when an identifier matches more than one worktree."""

    def __init__(self, identifier: str, candidates: Sequence[str]):
        self.identifier = identifier
        self.candidates = list(candidates)

        error_msg = f"'{identifier}' matches {len(self.candidates)} worktrees"
        if self.candidates:
            error_msg += ": " + ", ".join(self.candidates)

        super().__init__(error_msg)


class ConfigSourceUnreadableError(WorktreeKeeperError):
    """Exception raised when a configuration source cannot be read."""

    def __init__(self, source: str, message: Optional[str] = None):
        self.source = source
        self.message = message

        error_msg = f"Configuration source '{source}' is unreadable"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class RemoteUrlUnparseableError(WorktreeKeeperError):
    """Exception raised when no hostname can be extracted from a remote URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Cannot extract hostname from remote URL '{url}'")


class ProviderUnknownError(WorktreeKeeperError):
    """Exception raised when the hosting provider cannot be determined."""

    def __init__(self, message: Optional[str] = None):
        self.message = message
        self.hint = "Set the provider explicitly: git config wtk.provider github|gitlab"

        error_msg = "Could not determine hosting provider"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class ProviderCliError(WorktreeKeeperError):
    """Base exception for companion CLI problems."""

    def __init__(self, provider: str, message: str, hint: Optional[str] = None):
        self.provider = provider
        self.message = message
        self.hint = hint
        super().__init__(message)


class CliMissingError(ProviderCliError):
    """Exception raised when the provider's CLI is not installed."""

    def __init__(self, provider: str, binary: str, install_url: str):
        self.binary = binary
        super().__init__(
            provider,
            f"{provider} CLI ({binary}) not found",
            hint=f"Install from: {install_url}",
        )


class CliUnauthenticatedError(ProviderCliError):
    """Exception raised when the provider's CLI cannot view the current repository."""

    def __init__(self, provider: str, binary: str, message: Optional[str] = None):
        self.binary = binary

        error_msg = f"Not authenticated with {provider} or not a {provider} repository"
        if message:
            error_msg += f" ({message})"

        super().__init__(provider, error_msg, hint=f"Run: {binary} auth login")


class BranchSourceUndeterminedError(WorktreeKeeperError):
    """Exception raised when no branch source could be chosen for a new worktree."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"Could not determine how to source branch '{branch}'")


class WorktreeOperationError(WorktreeKeeperError):
    """Exception raised for errors in git worktree operations."""

    def __init__(self, operation: str, target: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.target = target
        self.message = message

        error_msg = f"git {operation} failed"
        if target:
            error_msg += f" for '{target}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)
