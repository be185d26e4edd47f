"""GitHub integration through the gh CLI"""

import json
from typing import List

from git_worktree_keeper.services.providers.base import ProviderClient, ProviderName


class GitHubClient(ProviderClient):
    name = ProviderName.GITHUB
    display_name = "GitHub"
    cli_binary = "gh"
    install_url = "https://cli.github.com/"

    def merge_query_command(self, branch_name: str) -> List[str]:
        return [
            "pr", "list",
            "--head", branch_name,
            "--state", "merged",
            "--limit", "1",
            "--json", "number",
        ]

    def parse_merge_query(self, output: str) -> bool:
        # json.JSONDecodeError is a ValueError
        pulls = json.loads(output)
        if not isinstance(pulls, list):
            raise ValueError(f"expected a JSON list, got {type(pulls).__name__}")
        return len(pulls) > 0
