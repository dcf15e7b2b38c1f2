"""Identity helpers shared by every signal source."""

from __future__ import annotations

_ACTIONS_LOGIN = "github-actions"


def is_bot_login(login: str | None) -> bool:
    """Return True for logins that look like automated accounts.

    Deliberately broad: anything containing "bot" (case-insensitive) is
    treated as a bot, so a human named e.g. "abbott" is excluded too. Missing
    logins count as bots because they can never be requested as reviewers.
    """
    if not login:
        return True
    lowered = login.lower()
    return login.endswith("[bot]") or "bot" in lowered or lowered == _ACTIONS_LOGIN


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
