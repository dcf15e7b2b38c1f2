from __future__ import annotations

import logging
from datetime import datetime

from github import Github, GithubException

from revsuggest_core.formatter import MARKER
from revsuggest_core.latency import ReviewEvent, ReviewRequest
from revsuggest_core.ownership import OWNERSHIP_FILE_PATHS
from revsuggest_core.utils.identity import is_bot_login

logger = logging.getLogger(__name__)


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def list_changed_files(pr, max_files: int) -> list[str]:
    """Return up to max_files distinct changed paths, in GitHub's order."""
    files: list[str] = []
    for f in pr.get_files():
        if len(files) >= max_files:
            break
        if f.filename and f.filename not in files:
            files.append(f.filename)
    return files


def commit_authors_for_path(repo, path: str, since: datetime, cap: int = 30) -> list[str]:
    """Return non-bot author logins of the latest commits touching path, newest first.

    Commits whose author has no linked GitHub account are skipped.
    """
    authors: list[str] = []
    # Lazy iteration so PyGithub stops paging once the cap is reached.
    for i, commit in enumerate(repo.get_commits(path=path, since=since)):
        if i >= cap:
            break
        login = commit.author.login if commit.author is not None else None
        if login and not is_bot_login(login):
            authors.append(login)
    return authors


def fetch_ownership_text(repo, ref: str | None = None) -> str | None:
    """Return the first readable ownership file, or None when there is none."""
    for path in OWNERSHIP_FILE_PATHS:
        try:
            contents = repo.get_contents(path, ref=ref) if ref else repo.get_contents(path)
        except GithubException:
            continue
        except Exception as e:
            # Transport failure: the remaining paths would fail the same way.
            logger.warning("Could not read ownership file %s; continuing without ownership rules: %s", path, e)
            return None
        if isinstance(contents, list) or not contents.content:
            continue
        logger.debug("Loaded ownership rules from %s", path)
        return contents.decoded_content.decode("utf-8", errors="replace")
    return None


def sample_review_requests(repo, limit: int) -> list[ReviewRequest]:
    """Return the most recently updated closed PRs with their submitted reviews."""
    requests: list[ReviewRequest] = []
    pulls = repo.get_pulls(state="closed", sort="updated", direction="desc")
    for i, pr in enumerate(pulls):
        if i >= limit:
            break
        try:
            reviews = list(pr.get_reviews())
        except GithubException as e:
            logger.warning("Could not list reviews for PR #%d: %s", pr.number, e)
            continue
        requests.append(
            ReviewRequest(
                number=pr.number,
                created_at=pr.created_at,
                closed_at=pr.closed_at,
                merged_at=pr.merged_at,
                events=[
                    ReviewEvent(
                        reviewer=r.user.login if r.user is not None else None,
                        submitted_at=r.submitted_at,
                    )
                    for r in reviews
                ],
            )
        )
    return requests


def upsert_comment(pr, body: str) -> tuple[bool, str]:
    """Update the comment carrying MARKER, or create one. Returns (updated, url)."""
    for comment in pr.get_issue_comments():
        if MARKER in (comment.body or ""):
            comment.edit(body)
            return True, comment.html_url
    created = pr.create_issue_comment(body)
    return False, created.html_url
