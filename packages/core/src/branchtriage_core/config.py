import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "main_branch": "main",
    "next_branch": "next",
    "release_branch_glob": "release/*",
    "working_branch": None,  # None = run from any branch; set to require one (e.g. "branch-strategy-triage")
    "github_repo": None,  # owner/name; None = detect from the origin remote
    "cherry_pick_label": "cherry-pick",
    "data_dir": ".branchtriage",  # triage caches live here, one JSON file per direction
    "hash_width": 9,  # minimum hash length recognised in `git log --oneline` output
}

CACHE_FILES = {
    "triage-main": "triage-main.json",
    "triage-next": "triage-next.json",
    "release-commits": "release-commits.json",
}


def load_config(config_path: str = ".branchtriage.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .branchtriage.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config


def cache_path(config: dict, command: str) -> Path:
    """Return the cache file for a command, e.g. ``.branchtriage/triage-main.json``."""
    return Path(config["data_dir"]) / CACHE_FILES[command]
