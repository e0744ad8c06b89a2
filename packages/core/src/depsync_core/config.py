import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "base_branch": "master",
    "branch_prefix": "depsync-",
    "check_dependencies": True,
    "rebase_mode": True,  # rewrite an open PR with the same title only when it has merge conflicts
    "dry_run": False,
    "pr_labels": ["depsync"],
    "issue_labels": ["depsync"],
    "pending_issue_title": "depsync pending changes",
    "git_host": "github.com",
    "store": "issue",  # "issue" | "noop"
    "mergeable_retries": 5,
    "mergeable_wait": 1.0,
}

_LIST_KEYS = ("pr_labels", "issue_labels")


def load_config(config_path: str = ".depsync.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .depsync.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG}
    for key in _LIST_KEYS:
        config[key] = list(DEFAULT_CONFIG[key])

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config
