"""Hosting provider detection and merge-state checks"""

from typing import Dict, Optional, Type

from git_worktree_keeper.constants import (
    DEFAULT_PROVIDER_TIMEOUT,
    ENV_PROVIDER,
    ENV_PROVIDER_TIMEOUT,
    KEY_PROVIDER,
    KEY_PROVIDER_TIMEOUT,
    PROVIDER_HOSTS,
)
from git_worktree_keeper.context import ExecutionContext
from git_worktree_keeper.exceptions import ProviderUnknownError, RemoteUrlUnparseableError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.services.config_resolver import ConfigResolver
from git_worktree_keeper.services.git.operations import GitOperations
from git_worktree_keeper.services.providers.base import ProviderClient, ProviderName
from git_worktree_keeper.services.providers.github import GitHubClient
from git_worktree_keeper.services.providers.gitlab import GitLabClient
from git_worktree_keeper.services.providers.remote_url import extract_hostname

logger = get_logger(__name__)

PROVIDER_CLIENTS: Dict[ProviderName, Type[ProviderClient]] = {
    ProviderName.GITHUB: GitHubClient,
    ProviderName.GITLAB: GitLabClient,
}


class ProviderDetector:
    """Works out which hosting provider the repository lives on."""

    def __init__(
        self,
        context: ExecutionContext,
        config_resolver: Optional[ConfigResolver] = None,
        git_ops: Optional[GitOperations] = None,
    ):
        self.context = context
        self.config_resolver = config_resolver or ConfigResolver(context)
        self.git_ops = git_ops or GitOperations(context)

    def provider_timeout(self) -> float:
        """Timeout in seconds for companion CLI calls."""
        raw = self.config_resolver.resolve_scalar(KEY_PROVIDER_TIMEOUT, ENV_PROVIDER_TIMEOUT, "")
        if not raw:
            return DEFAULT_PROVIDER_TIMEOUT
        try:
            timeout = float(raw)
        except ValueError:
            logger.warning(f"Invalid {KEY_PROVIDER_TIMEOUT} {raw!r}, using {DEFAULT_PROVIDER_TIMEOUT}s")
            return DEFAULT_PROVIDER_TIMEOUT
        if timeout <= 0:
            logger.warning(f"{KEY_PROVIDER_TIMEOUT} must be positive, using {DEFAULT_PROVIDER_TIMEOUT}s")
            return DEFAULT_PROVIDER_TIMEOUT
        return timeout

    def client_for(self, name: str) -> ProviderClient:
        """Build the client for a provider name.

        Raises:
            ProviderUnknownError: If no client supports ``name``
        """
        try:
            provider = ProviderName(name)
        except ValueError:
            raise ProviderUnknownError(f"Unsupported hosting provider: {name}")
        return PROVIDER_CLIENTS[provider](self.context, timeout=self.provider_timeout())

    def detect_provider(self) -> ProviderClient:
        """Determine the hosting provider.

        An explicit ``wtk.provider`` / ``$WTK_PROVIDER`` setting always wins,
        which is how self-hosted instances are supported. Otherwise the
        hostname of the origin remote decides.

        Raises:
            ProviderUnknownError: If no provider can be determined
        """
        override = self.config_resolver.resolve_scalar(KEY_PROVIDER, ENV_PROVIDER, "")
        if override:
            logger.debug(f"Using configured provider {override!r}")
            return self.client_for(override)

        remote_url = self.git_ops.get_remote_url()
        if not remote_url:
            raise ProviderUnknownError(f"no {self.git_ops.remote_name} remote")

        try:
            hostname = extract_hostname(remote_url)
        except RemoteUrlUnparseableError as e:
            raise ProviderUnknownError(str(e)) from e

        name = PROVIDER_HOSTS.get(hostname)
        if name is None:
            raise ProviderUnknownError(f"unrecognised host {hostname}")

        logger.debug(f"Detected provider {name} from {remote_url}")
        return self.client_for(name)


def ensure_provider_cli(client: ProviderClient) -> None:
    """Verify the provider's CLI is installed and authenticated.

    Raises:
        CliMissingError: If the CLI is not installed
        CliUnauthenticatedError: If the CLI is not logged in for this repository
    """
    client.ensure_cli()


def is_branch_merged(client: ProviderClient, branch_name: str) -> bool:
    """Check if ``branch_name`` has a merged change request on the provider."""
    return client.query_merged_branch(branch_name)
