"""Raw signal collection for the ranking engine.

A SignalCollector turns a list of changed files into the two inputs the
ranking engine cannot compute itself: per-file contributor lists and the raw
ownership rule text. The engine only sees the results, so any data source
(GitHub, a local clone, a fixture in tests) can stand behind it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime

from revsuggest_core.gh.pull_request import commit_authors_for_path, fetch_ownership_text
from revsuggest_core.ranking import ContributorSignal

logger = logging.getLogger(__name__)


class SignalCollector(ABC):
    @abstractmethod
    def commit_authors(self, path: str) -> list[str]:
        """Return non-bot commit authors of path, most relevant first."""

    @abstractmethod
    def ownership_text(self) -> str | None:
        """Return the raw ownership rule text, or None if there is none."""

    def collect_contributors(self, changed_files: list[str]) -> list[ContributorSignal]:
        """Return one signal per file that has at least one author.

        A failed lookup only costs that file its signal; it never aborts
        collection for the remaining files.
        """
        signals: list[ContributorSignal] = []
        for path in changed_files:
            try:
                authors = self.commit_authors(path)
            except Exception as e:
                logger.warning("Failed commit lookup for %s: %s", path, e)
                continue
            if authors:
                signals.append(ContributorSignal(path=path, authors=tuple(authors)))
        return signals


class GithubSignalCollector(SignalCollector):
    """Collects signals through the GitHub REST API via PyGithub."""

    def __init__(self, repo, since: datetime, ref: str | None = None, per_file_commits: int = 30):
        self.repo = repo
        self.since = since
        self.ref = ref
        self.per_file_commits = per_file_commits

    def commit_authors(self, path: str) -> list[str]:
        return commit_authors_for_path(self.repo, path, self.since, cap=self.per_file_commits)

    def ownership_text(self) -> str | None:
        return fetch_ownership_text(self.repo, ref=self.ref)
