"""Tests for the suggestion pipeline: run_suggestion."""

import types
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from github import GithubException

from revsuggest_core.config import load_config
from revsuggest_core.formatter import MARKER
from revsuggest_core.signals import SignalCollector
from revsuggest_core.suggester import run_suggestion

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


class StubCollector(SignalCollector):
    def __init__(self, authors_by_path=None, text=None):
        self._authors = authors_by_path or {}
        self._text = text
        self.ownership_calls = 0

    def commit_authors(self, path):
        return self._authors.get(path, [])

    def ownership_text(self):
        self.ownership_calls += 1
        return self._text


@pytest.fixture
def config(tmp_path):
    return load_config(config_path=str(tmp_path / "none.yml"))


def make_pr(files, author="carol", comments=()):
    pr = MagicMock()
    pr.user = types.SimpleNamespace(login=author)
    pr.head.sha = "a" * 40
    pr.get_files.return_value = [types.SimpleNamespace(filename=f) for f in files]
    pr.get_issue_comments.return_value = list(comments)
    pr.create_issue_comment.return_value = MagicMock(html_url="https://github.com/o/r/pull/1#c1")
    return pr


def make_repo(pr, closed_pulls=()):
    repo = MagicMock()
    repo.get_pull.return_value = pr
    repo.get_pulls.return_value = list(closed_pulls)
    return repo


def closed_pull(number, reviews):
    pull = MagicMock()
    pull.number = number
    pull.created_at = NOW - timedelta(days=3)
    pull.closed_at = NOW - timedelta(days=2)
    pull.merged_at = NOW - timedelta(days=2)
    pull.get_reviews.return_value = [
        types.SimpleNamespace(user=types.SimpleNamespace(login=login), submitted_at=pull.created_at + timedelta(hours=h))
        for login, h in reviews
    ]
    return pull


class TestRunSuggestion:
    def test_ownership_only_scenario(self, config):
        pr = make_pr(["src/app.js", "README.md"])
        collector = StubCollector(text="/src/** alice\n*.md bob")

        summary = run_suggestion("o/r", 1, config, shadow=True, repo_obj=make_repo(pr), collector=collector, now=NOW)

        assert [(c.login, c.score) for c in summary.suggestions] == [("alice", 4), ("bob", 4)]
        assert summary.pr_author == "carol"
        assert summary.changed_files == ["src/app.js", "README.md"]

    def test_shadow_does_not_post(self, config):
        pr = make_pr(["a.py"])
        summary = run_suggestion(
            "o/r", 1, config, shadow=True, repo_obj=make_repo(pr), collector=StubCollector({"a.py": ["alice"]}), now=NOW
        )
        assert summary.posted is False
        pr.create_issue_comment.assert_not_called()
        assert MARKER in summary.body

    def test_posts_new_comment(self, config):
        pr = make_pr(["a.py"])
        summary = run_suggestion(
            "o/r", 1, config, repo_obj=make_repo(pr), collector=StubCollector({"a.py": ["alice"]}), now=NOW
        )
        assert summary.posted is True
        assert summary.updated is False
        assert summary.comment_url == "https://github.com/o/r/pull/1#c1"
        pr.create_issue_comment.assert_called_once_with(summary.body)

    def test_updates_existing_comment(self, config):
        existing = MagicMock(body=f"### Reviewer suggestions\n{MARKER}", html_url="https://x/c9")
        pr = make_pr(["a.py"], comments=[existing])
        summary = run_suggestion(
            "o/r", 1, config, repo_obj=make_repo(pr), collector=StubCollector({"a.py": ["alice"]}), now=NOW
        )
        assert summary.updated is True
        existing.edit.assert_called_once_with(summary.body)
        pr.create_issue_comment.assert_not_called()

    def test_author_excluded_and_truncated(self, config):
        config["max_reviewers"] = 2
        pr = make_pr(["a.py"], author="carol")
        collector = StubCollector({"a.py": ["carol", "alice", "bob", "dave"]})
        summary = run_suggestion("o/r", 1, config, shadow=True, repo_obj=make_repo(pr), collector=collector, now=NOW)
        assert [c.login for c in summary.suggestions] == ["alice", "bob"]

    def test_latency_profile_feeds_ranking(self, config):
        pr = make_pr(["a.py"])
        repo = make_repo(pr, closed_pulls=[closed_pull(7, [("erin", 2), ("frank", 30)])])
        summary = run_suggestion("o/r", 1, config, shadow=True, repo_obj=repo, collector=StubCollector(), now=NOW)
        assert [(c.login, c.score) for c in summary.suggestions] == [("erin", 6), ("frank", 1)]

    def test_unreadable_ownership_source_is_not_fatal(self, config):
        class BrokenOwnership(StubCollector):
            def ownership_text(self):
                raise TimeoutError("read timed out")

        pr = make_pr(["a.py"])
        summary = run_suggestion(
            "o/r", 1, config, shadow=True, repo_obj=make_repo(pr), collector=BrokenOwnership({"a.py": ["alice"]}), now=NOW
        )
        assert [c.login for c in summary.suggestions] == ["alice"]

    def test_latency_failure_is_not_fatal(self, config):
        pr = make_pr(["a.py"])
        repo = make_repo(pr)
        repo.get_pulls.side_effect = GithubException(500, "boom", None)
        summary = run_suggestion(
            "o/r", 1, config, shadow=True, repo_obj=repo, collector=StubCollector({"a.py": ["alice"]}), now=NOW
        )
        assert [c.login for c in summary.suggestions] == ["alice"]

    def test_disabled_signals_are_not_fetched(self, config):
        config["use_codeowners"] = False
        config["use_latency"] = False
        pr = make_pr(["a.py"])
        repo = make_repo(pr)
        collector = StubCollector(text="* alice")
        summary = run_suggestion("o/r", 1, config, shadow=True, repo_obj=repo, collector=collector, now=NOW)
        assert summary.suggestions == []
        assert collector.ownership_calls == 0
        repo.get_pulls.assert_not_called()

    def test_no_candidates_renders_explicit_message(self, config):
        pr = make_pr(["a.py"], author="carol")
        collector = StubCollector({"a.py": ["carol", "dependabot[bot]"]})
        summary = run_suggestion("o/r", 1, config, shadow=True, repo_obj=make_repo(pr), collector=collector, now=NOW)
        assert summary.suggestions == []
        assert summary.confidence == "Low"
        assert "No strong candidates found" in summary.body

    def test_missing_pr_raises_value_error(self, config):
        repo = MagicMock()
        repo.get_pull.side_effect = GithubException(404, "not found", None)
        with pytest.raises(ValueError, match="PR #9 not found"):
            run_suggestion("o/r", 9, config, repo_obj=repo, collector=StubCollector(), now=NOW)

    def test_default_collector_reads_github(self, config):
        pr = make_pr(["a.py"])
        repo = make_repo(pr)
        repo.get_commits.return_value = [MagicMock(author=types.SimpleNamespace(login="alice"))]
        repo.get_contents.side_effect = GithubException(404, "missing", None)

        summary = run_suggestion("o/r", 1, config, shadow=True, repo_obj=repo, now=NOW)

        assert [(c.login, c.score) for c in summary.suggestions] == [("alice", 3)]
        repo.get_commits.assert_called_once_with(path="a.py", since=NOW - timedelta(days=90))
        repo.get_contents.assert_any_call(".github/CODEOWNERS", ref="a" * 40)
