"""owners command: explain ownership resolution for local paths."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from revsuggest_core.ownership import OWNERSHIP_FILE_PATHS, matching_rule, parse_ownership_rules

console = Console()


def _find_rules_file(root: Path) -> Path | None:
    for candidate in OWNERSHIP_FILE_PATHS:
        path = root / candidate
        if path.is_file():
            return path
    return None


@click.command("owners")
@click.argument("paths", nargs=-1, required=True)
@click.option(
    "--rules",
    "rules_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Ownership file to use. Defaults to the CODEOWNERS file in the current repository.",
)
def owners_cmd(paths: tuple[str, ...], rules_path: str | None):
    """Show the winning ownership rule and owners for each PATH.

    PATHS are repository-relative, e.g. src/app.py. Works offline.
    """
    source = Path(rules_path) if rules_path else _find_rules_file(Path.cwd())
    if source is None:
        console.print("[yellow]No ownership file found.[/yellow]")
        return

    rules = parse_ownership_rules(source.read_text(encoding="utf-8", errors="replace"))

    table = Table(title=f"Ownership — {source}", show_header=True, header_style="bold cyan")
    table.add_column("Path", style="bold")
    table.add_column("Rule")
    table.add_column("Owners")

    for path in paths:
        rule = matching_rule(rules, path)
        if rule is None:
            table.add_row(escape(path), "[dim]no match[/dim]", "—")
            continue
        table.add_row(
            escape(path),
            escape(f"line {rule.line_number}: {rule.pattern}"),
            ", ".join(f"@{o}" for o in rule.owners),
        )

    console.print(table)
