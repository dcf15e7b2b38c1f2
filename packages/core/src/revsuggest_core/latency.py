"""Reviewer responsiveness estimated from recently closed pull requests."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

from revsuggest_core.utils.identity import is_bot_login

_SECONDS_PER_HOUR = 3600


@dataclass(frozen=True)
class ReviewEvent:
    """A single submitted review on a pull request."""

    reviewer: str | None
    submitted_at: datetime | None


@dataclass
class ReviewRequest:
    """A closed pull request together with the reviews it received.

    Timestamps must share one convention (PyGithub returns timezone-aware UTC).
    """

    number: int
    created_at: datetime
    closed_at: datetime | None = None
    merged_at: datetime | None = None
    events: list[ReviewEvent] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.merged_at is not None or self.closed_at is not None


def median(values: list[float]) -> float | None:
    """Median of values; None for an empty list (no data, not zero)."""
    if not values:
        return None
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def first_responses(request: ReviewRequest) -> dict[str, datetime]:
    """Earliest review timestamp per human reviewer on one request."""
    first: dict[str, datetime] = {}
    for event in request.events:
        if is_bot_login(event.reviewer) or event.submitted_at is None:
            continue
        seen = first.get(event.reviewer)
        if seen is None or event.submitted_at < seen:
            first[event.reviewer] = event.submitted_at
    return first


def estimate_reviewer_latency(requests: list[ReviewRequest], window_start: datetime) -> dict[str, float]:
    """Return ``login -> median hours`` from request creation to first review.

    Only terminal requests created at or after window_start are sampled.
    Negative or non-finite samples (clock skew, bad data) are dropped, and a
    reviewer with no valid sample is absent from the result.
    """
    samples: dict[str, list[float]] = {}
    for request in requests:
        if not request.is_terminal or request.created_at < window_start:
            continue
        for login, submitted_at in first_responses(request).items():
            hours = (submitted_at - request.created_at).total_seconds() / _SECONDS_PER_HOUR
            if not math.isfinite(hours) or hours < 0:
                continue
            samples.setdefault(login, []).append(hours)

    profile: dict[str, float] = {}
    for login, hours in samples.items():
        value = median(hours)
        if value is not None:
            profile[login] = value
    return profile
