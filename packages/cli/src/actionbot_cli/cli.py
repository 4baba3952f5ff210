"""CLI entry point for actionbot.

Commands:
  label    — add a label to an issue or pull request
  unlabel  — remove a label from an issue or pull request
  comment  — post a comment on an issue or pull request

Every command runs through a single execution Context. Under GitHub Actions
(--source GHA) the context posts a summary of everything that happened as a
comment on the target issue before the process exits.
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from actionbot_cli.commands.comment import comment_cmd
from actionbot_cli.commands.label import label_cmd, unlabel_cmd
from actionbot_core.config import Source


@click.group()
@click.version_option(
    version=importlib.metadata.version("actionbot"),
    prog_name="actionbot",
)
@click.option(
    "--source",
    type=click.Choice([s.value for s in Source]),
    default=lambda: Source.detect().value,
    help="Where actionbot runs: CLI (local) or GHA (GitHub Actions). Detected from GITHUB_ACTIONS by default.",
)
@click.option("--repo", default=None, help="GitHub repository in owner/name format.")
@click.option(
    "--config",
    "config_path",
    default=".actionbot.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="ACTIONBOT_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Print the result of each GitHub call.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, source: str, repo: str | None, config_path: str, verbose: bool, debug: bool):
    """GitHub automation commands for local and CI use."""
    from actionbot_cli.auth import resolve_context_config
    from actionbot_core.config import load_config
    from actionbot_core.context import Context

    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING)
    ctx.ensure_object(dict)

    config = load_config(config_path, cli_overrides={"repo": repo, "verbose": verbose or None})

    # Subcommands see the resolved values as top-level options.
    ctx.params["repo"] = config.get("repo")
    ctx.params["verbose"] = bool(config.get("verbose"))

    ctx.obj["config"] = config
    ctx.obj["context"] = Context(Source(source), config=resolve_context_config(config, Source(source)))


main.add_command(label_cmd)
main.add_command(unlabel_cmd)
main.add_command(comment_cmd)
