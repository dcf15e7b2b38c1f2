import os
from pathlib import Path
from typing import Optional

import yaml

from revsuggest_core.ranking import Weights
from revsuggest_core.utils.identity import clamp

DEFAULT_WEIGHTS: dict = {
    "commit_history": 1,
    "codeowners": 4,
    "latency": 1,
}

DEFAULT_CONFIG: dict = {
    "max_reviewers": 3,
    "lookback_days": 90,
    "max_files": 50,
    "per_file_commits": 30,
    "use_codeowners": True,
    "use_latency": True,
    "latency_prs": 20,  # clamped to [LATENCY_PRS_MIN, LATENCY_PRS_MAX]
    "weights": DEFAULT_WEIGHTS,
}

LATENCY_PRS_MIN = 5
LATENCY_PRS_MAX = 50


def load_config(config_path: str = ".revsuggest.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .revsuggest.yml in the current directory
      3. CLI argument overrides

    A partial ``weights`` mapping in the file only replaces the weights it names.
    """
    config = {**DEFAULT_CONFIG, "weights": dict(DEFAULT_WEIGHTS)}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        file_weights = file_config.pop("weights", None) or {}
        config.update(file_config)
        config["weights"].update(file_weights)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config


def build_weights(config: dict) -> Weights:
    """Turn the ``weights`` section plus the signal toggles into a Weights value.

    A disabled signal is weighted 0 so the ranking engine skips it entirely.
    """
    raw = {**DEFAULT_WEIGHTS, **(config.get("weights") or {})}
    for name, value in raw.items():
        if value is None or float(value) < 0:
            raise ValueError(f"Weight {name!r} must be a non-negative number, got {value!r}.")

    return Weights(
        commit_history=raw["commit_history"],
        codeowners=raw["codeowners"] if config.get("use_codeowners", True) else 0,
        latency=raw["latency"] if config.get("use_latency", True) else 0,
    )


def latency_sample_size(config: dict) -> int:
    return int(clamp(int(config.get("latency_prs", 20)), LATENCY_PRS_MIN, LATENCY_PRS_MAX))
