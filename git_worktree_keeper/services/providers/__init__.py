"""Hosting provider services for git-worktree-keeper."""

from .base import ProviderClient, ProviderName
from .detector import ProviderDetector, ensure_provider_cli, is_branch_merged
from .github import GitHubClient
from .gitlab import GitLabClient
from .remote_url import RemoteShape, RemoteURL, extract_hostname, parse_remote_url

__all__ = [
    "ProviderClient",
    "ProviderName",
    "ProviderDetector",
    "ensure_provider_cli",
    "is_branch_merged",
    "GitHubClient",
    "GitLabClient",
    "RemoteShape",
    "RemoteURL",
    "extract_hostname",
    "parse_remote_url",
]
