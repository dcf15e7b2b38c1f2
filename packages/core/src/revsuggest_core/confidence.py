"""Coarse confidence label for a ranked suggestion list.

This is an auditable rule of thumb, not a statistical confidence interval:
it looks at how many points the top candidate earned, how clearly it beats
the runner-up, and how much of the change any signal covered. The label
carries no calibrated probability.
"""

from __future__ import annotations

from revsuggest_core.ownership import OwnershipRule, resolve_owners
from revsuggest_core.ranking import Candidate, ContributorSignal
from revsuggest_core.utils.identity import clamp

HIGH = "High"
MEDIUM = "Medium"
LOW = "Low"


def separation(top: float, second: float) -> float:
    """Relative lead of rank 0 over rank 1, in [0, 1]."""
    if top <= 0:
        return 0.0
    return clamp((top - second) / top, 0.0, 1.0)


def confidence_label(top: float, second: float, coverage: float) -> str:
    if top >= 12 and coverage >= 0.5 and separation(top, second) >= 0.25:
        return HIGH
    if top >= 6 and coverage >= 0.25:
        return MEDIUM
    return LOW


def signal_coverage(
    changed_files: list[str],
    ownership_rules: list[OwnershipRule],
    contributor_signals: list[ContributorSignal],
) -> float:
    """Fraction of changed files with any signal.

    Contributor coverage is approximated by the number of files that produced
    a contributor list (at least one when any did) rather than tracked per
    path; ownership coverage is exact. The larger of the two counts wins.
    """
    if not changed_files:
        return 0.0

    covered = 0
    if contributor_signals:
        covered = min(len(changed_files), max(1, len(contributor_signals)))

    if ownership_rules:
        owned = sum(1 for path in changed_files if resolve_owners(ownership_rules, path))
        covered = max(covered, owned)

    return clamp(covered / len(changed_files), 0.0, 1.0)


def compute_confidence(
    ranked: list[Candidate],
    changed_files: list[str],
    ownership_rules: list[OwnershipRule],
    contributor_signals: list[ContributorSignal],
) -> str:
    top = ranked[0].score if ranked else 0
    second = ranked[1].score if len(ranked) > 1 else 0
    coverage = signal_coverage(changed_files, ownership_rules, contributor_signals)
    return confidence_label(top, second, coverage)
