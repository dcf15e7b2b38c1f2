"""CLI entry point for revsuggest.

Commands:
  suggest  : rank likely reviewers for a pull request and post the result
  owners   : show which ownership rule applies to local paths
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from revsuggest_cli.commands.owners import owners_cmd
from revsuggest_cli.commands.suggest import suggest_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("revsuggest"),
    prog_name="revsuggest",
)
@click.option(
    "--config",
    "config_path",
    default=".revsuggest.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="REVSUGGEST_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Suggest pull request reviewers from history, ownership and responsiveness."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(suggest_cmd)
main.add_command(owners_cmd)
