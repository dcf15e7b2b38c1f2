"""Core reviewer-suggestion orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from github import GithubException
from rich.console import Console

from revsuggest_core.config import build_weights, latency_sample_size
from revsuggest_core.confidence import compute_confidence
from revsuggest_core.formatter import format_comment, print_suggestions
from revsuggest_core.gh.pull_request import get_pull, get_repo, list_changed_files, sample_review_requests, upsert_comment
from revsuggest_core.latency import estimate_reviewer_latency
from revsuggest_core.ownership import parse_ownership_rules
from revsuggest_core.ranking import Candidate, rank_candidates
from revsuggest_core.signals import GithubSignalCollector, SignalCollector

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class SuggestionSummary:
    """Result returned by run_suggestion."""

    repo: str
    pr_number: int
    pr_author: str | None
    confidence: str
    body: str
    changed_files: list[str] = field(default_factory=list)
    suggestions: list[Candidate] = field(default_factory=list)
    posted: bool = False
    updated: bool = False  # True when an earlier suggestion comment was edited in place
    comment_url: str | None = None


def _latency_profile(repo, config: dict, window_start: datetime) -> dict[str, float]:
    try:
        requests = sample_review_requests(repo, latency_sample_size(config))
    except GithubException as e:
        logger.warning("Latency computation failed (continuing): %s", e)
        return {}
    profile = estimate_reviewer_latency(requests, window_start)
    console.print(f"[dim]Latency entries computed: {len(profile)}[/dim]")
    return profile


def run_suggestion(
    repo: str,
    pr_number: int,
    config: dict,
    shadow: bool = False,
    repo_obj=None,
    collector: SignalCollector | None = None,
    now: datetime | None = None,
) -> SuggestionSummary:
    """Rank likely reviewers for a PR and post (or, in shadow mode, print) the result.

    ``collector`` and ``now`` exist so callers can swap the signal source and
    pin the lookback window; they default to GitHub and the current time.
    """
    this_repo = repo_obj if repo_obj is not None else get_repo(repo, token=config["github_token"])

    try:
        this_pr = get_pull(this_repo, pr_number)
    except GithubException:
        raise ValueError(f"PR #{pr_number} not found in {repo}.")

    pr_author = this_pr.user.login if this_pr.user is not None else None
    weights = build_weights(config)
    lookback_days = config["lookback_days"]
    max_files = config["max_files"]
    window_start = (now or datetime.now(timezone.utc)) - timedelta(days=lookback_days)

    console.print(f"Analyzing PR #{pr_number} in {repo}")
    files = list_changed_files(this_pr, max_files)

    if collector is None:
        collector = GithubSignalCollector(
            this_repo,
            since=window_start,
            ref=this_pr.head.sha,
            per_file_commits=config.get("per_file_commits", 30),
        )

    rules = []
    if weights.codeowners > 0:
        try:
            ownership_text = collector.ownership_text()
        except Exception as e:
            logger.warning("Could not load ownership rules (continuing): %s", e)
            ownership_text = None
        rules = parse_ownership_rules(ownership_text)
        console.print(f"[dim]Ownership rules loaded: {len(rules)}[/dim]")

    contributor_signals = collector.collect_contributors(files)

    latency_profile: dict[str, float] = {}
    if weights.latency > 0:
        latency_profile = _latency_profile(this_repo, config, window_start)

    ranked = rank_candidates(contributor_signals, rules, files, latency_profile, weights, pr_author)
    suggestions = ranked[: config["max_reviewers"]]
    confidence = compute_confidence(ranked, files, rules, contributor_signals)

    body = format_comment(
        suggestions,
        lookback_days=lookback_days,
        max_files=max_files,
        file_count=len(files),
        confidence=confidence,
    )
    summary = SuggestionSummary(
        repo=repo,
        pr_number=pr_number,
        pr_author=pr_author,
        confidence=confidence,
        body=body,
        changed_files=files,
        suggestions=suggestions,
    )

    if shadow:
        print_suggestions(suggestions, confidence)
        console.print("[bold]Shadow run complete. Nothing was posted.[/bold]")
        return summary

    summary.updated, summary.comment_url = upsert_comment(this_pr, body)
    summary.posted = True
    console.print(
        "[green]Updated existing suggestion comment.[/green]"
        if summary.updated
        else "[green]Created suggestion comment.[/green]"
    )
    console.print(f"Comment: {summary.comment_url}")
    return summary
