"""Weighted multi-signal reviewer ranking.

Three independent signals feed one additive score per candidate:

- commit history: recent authors of each changed file, front-loaded
- ownership: owners of each changed file under last-match-wins rules
- latency: a bonus for reviewers who historically respond quickly

Every award passes through ``award`` so the PR author and bots can never
enter the ranking, no matter which signal points at them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from revsuggest_core.ownership import OwnershipRule, resolve_owners
from revsuggest_core.utils.identity import is_bot_login

MAX_AUTHORS_PER_FILE = 10

COMMITS_REASON = "recent commits"
OWNERSHIP_REASON = "ownership match"

# (max median hours, bonus) in ascending order; slower than the last tier earns nothing.
_LATENCY_TIERS = (
    (4, 6),
    (12, 4),
    (24, 2),
    (48, 1),
)


@dataclass(frozen=True)
class Weights:
    commit_history: float = 1
    codeowners: float = 4
    latency: float = 1


@dataclass(frozen=True)
class ContributorSignal:
    """Commit authors of one changed file, most relevant first."""

    path: str
    authors: tuple[str, ...]


@dataclass
class Candidate:
    login: str
    score: float = 0
    reasons: list[str] = field(default_factory=list)


def award(candidates: dict[str, Candidate], login: str | None, points: float, reason: str, pr_author: str | None) -> None:
    """Add points and a reason to login, creating the candidate on first award.

    Awards to the PR author, to bots, and awards worth no points are dropped.
    """
    # A signal weighted 0 contributes no candidates, not 0-score ones.
    if is_bot_login(login) or login == pr_author or points <= 0:
        return
    candidate = candidates.get(login)
    if candidate is None:
        candidate = candidates[login] = Candidate(login=login)
    candidate.score += points
    if reason and reason not in candidate.reasons:
        candidate.reasons.append(reason)


def latency_bonus(median_hours: float | None) -> int:
    """Step bonus for a median first-review latency; faster is larger."""
    if median_hours is None:
        return 0
    for limit, bonus in _LATENCY_TIERS:
        if median_hours <= limit:
            return bonus
    return 0


def latency_reason(median_hours: float) -> str:
    return f"fast reviewer (~{math.floor(median_hours + 0.5)}h median)"


def rank_candidates(
    contributor_signals: list[ContributorSignal],
    ownership_rules: list[OwnershipRule],
    changed_files: list[str],
    latency_profile: dict[str, float],
    weights: Weights,
    pr_author: str | None,
) -> list[Candidate]:
    """Score every candidate and return them best first.

    Ties keep the order in which candidates first received points.
    """
    candidates: dict[str, Candidate] = {}

    for signal in contributor_signals:
        for i, login in enumerate(signal.authors[:MAX_AUTHORS_PER_FILE]):
            # 3, 2, then 1 for the rest of the capped list.
            award(candidates, login, max(1, 3 - i) * weights.commit_history, COMMITS_REASON, pr_author)

    if weights.codeowners > 0 and ownership_rules:
        seen: set[tuple[str, str]] = set()
        for path in changed_files:
            for owner in resolve_owners(ownership_rules, path):
                if (owner, path) in seen:
                    continue
                seen.add((owner, path))
                award(candidates, owner, weights.codeowners, OWNERSHIP_REASON, pr_author)

    if weights.latency > 0:
        for login, median_hours in latency_profile.items():
            bonus = latency_bonus(median_hours) * weights.latency
            if bonus > 0:
                award(candidates, login, bonus, latency_reason(median_hours), pr_author)

    return sorted(candidates.values(), key=lambda c: c.score, reverse=True)
