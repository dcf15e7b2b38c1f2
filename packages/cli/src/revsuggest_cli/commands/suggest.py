"""suggest command: rank reviewers for a pull request."""

from __future__ import annotations

import json
import os

import click
from rich.console import Console

from revsuggest_core.suggester import run_suggestion

console = Console()

_PR_EVENTS = ("pull_request", "pull_request_target")


def _pr_from_actions_env() -> tuple[str, int] | None:
    """Read the repository and PR number from a GitHub Actions run.

    Returns None when the triggering event is not a pull request.
    """
    repo = os.environ.get("GITHUB_REPOSITORY")
    event_name = os.environ.get("GITHUB_EVENT_NAME")
    event_path = os.environ.get("GITHUB_EVENT_PATH")
    if not repo or not event_name:
        raise click.UsageError("Pass --repo and --pr, or run inside a GitHub Actions pull_request workflow.")
    if event_name not in _PR_EVENTS:
        return None

    payload = {}
    if event_path and os.path.exists(event_path):
        with open(event_path, encoding="utf-8") as f:
            payload = json.load(f)
    pull_request = payload.get("pull_request") or {}
    if "number" not in pull_request:
        return None
    return repo, int(pull_request["number"])


@click.command("suggest")
@click.option("--repo", default=None, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number.")
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print suggestions without posting a comment.",
)
@click.option("--max-reviewers", type=int, default=None, help="Number of reviewers to suggest.")
@click.option("--lookback-days", type=int, default=None, help="History window in days.")
@click.pass_context
def suggest_cmd(
    ctx,
    repo: str | None,
    pr_number: int | None,
    shadow: bool,
    max_reviewers: int | None,
    lookback_days: int | None,
):
    """Suggest reviewers for a pull request.

    Combines recent commit authors of the changed files, CODEOWNERS rules and
    historical review latency into one ranked list, then posts it as a single
    PR comment that later runs update in place.

    \b
    Without --repo/--pr the PR is taken from the GitHub Actions event.
    Required environment variables:
      GITHUB_TOKEN         GitHub token (or use gh CLI)
    """
    from revsuggest_cli.auth import resolve_github_token
    from revsuggest_core.config import load_config

    if repo is None or pr_number is None:
        target = _pr_from_actions_env()
        if target is None:
            console.print("Not a pull_request event; skipping.")
            return
        repo, pr_number = repo or target[0], pr_number or target[1]

    config_path = (ctx.obj or {}).get("config_path", ".revsuggest.yml")
    config = load_config(
        config_path,
        cli_overrides={"max_reviewers": max_reviewers, "lookback_days": lookback_days},
    )

    token = resolve_github_token()
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    config["github_token"] = token

    try:
        run_suggestion(repo=repo, pr_number=pr_number, config=config, shadow=shadow)
    except ValueError as e:
        raise click.ClickException(str(e))
