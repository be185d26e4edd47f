"""GitLab integration through the glab CLI"""

import json
from typing import List

from git_worktree_keeper.services.providers.base import ProviderClient, ProviderName

# Outputs glab prints when nothing matches
EMPTY_RESULTS = {"", "[]", "null"}


class GitLabClient(ProviderClient):
    name = ProviderName.GITLAB
    display_name = "GitLab"
    cli_binary = "glab"
    install_url = "https://gitlab.com/gitlab-org/cli"

    def merge_query_command(self, branch_name: str) -> List[str]:
        return [
            "mr", "list",
            "--source-branch", branch_name,
            "--merged",
            "--per-page", "1",
            "--output", "json",
        ]

    def parse_merge_query(self, output: str) -> bool:
        output = output.strip()
        if output in EMPTY_RESULTS:
            return False
        requests = json.loads(output)
        if not isinstance(requests, list):
            raise ValueError(f"expected a JSON list, got {type(requests).__name__}")
        return len(requests) > 0
