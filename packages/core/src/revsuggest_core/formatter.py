"""Rendering of suggestions as a PR comment and as a terminal preview."""

from __future__ import annotations

from rich.console import Console

from revsuggest_core.ranking import Candidate

console = Console()

# Located by upsert_comment to update the previous comment in place.
# Never change it: older comments would stop being found.
MARKER = "<!-- reviewer-suggester:v0 -->"

NO_CANDIDATES_MESSAGE = (
    "No strong candidates found (not enough history, no CODEOWNERS match, or only bots/author matched)."
)

_CONFIDENCE_COLOR = {"High": "green", "Medium": "yellow", "Low": "red"}


def format_score(score: float) -> str:
    """Render 4.0 as "4" and 2.5 as "2.5"."""
    return f"{score:g}"


def format_comment(
    suggestions: list[Candidate],
    lookback_days: int,
    max_files: int,
    file_count: int,
    confidence: str,
) -> str:
    """Build the Markdown comment body. Identical inputs give identical output."""
    header = f"### Reviewer suggestions\n{MARKER}\n\n"
    meta = (
        "Based on:\n"
        f"- commit history in the last **{lookback_days} days**\n"
        f"- changed files: **{min(file_count, max_files)}**\n"
        f"- confidence: **{confidence}**\n\n"
    )

    if not suggestions:
        return header + meta + NO_CANDIDATES_MESSAGE + "\n"

    lines = []
    for s in suggestions:
        why = f" — {', '.join(s.reasons)}" if s.reasons else ""
        lines.append(f"- @{s.login} (score: {format_score(s.score)}){why}")

    note = "\n\n_Notes: excludes PR author and bots; heuristic-based._\n"
    return header + meta + "\n".join(lines) + note


def print_suggestions(suggestions: list[Candidate], confidence: str) -> None:
    """Print suggestions to the terminal without posting to GitHub."""
    color = _CONFIDENCE_COLOR.get(confidence, "white")
    if not suggestions:
        console.print(f"[yellow]{NO_CANDIDATES_MESSAGE}[/yellow]")
        return
    console.print(f"\n[bold]Suggested reviewers[/bold] (confidence: [{color}]{confidence}[/{color}])\n")
    for rank, s in enumerate(suggestions, 1):
        console.print(f"  {rank}. [bold cyan]@{s.login}[/bold cyan]  score [bold]{format_score(s.score)}[/bold]")
        if s.reasons:
            console.print(f"     [dim]{', '.join(s.reasons)}[/dim]")
    console.print()
