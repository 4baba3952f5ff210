"""label / unlabel commands — manage labels on an issue or pull request."""

from __future__ import annotations

import asyncio

import click

from actionbot_cli.runner import get_context, run_and_exit
from actionbot_core.gh.comments import get_issue


@click.command("label")
@click.argument("label")
@click.option("--issue", type=int, default=None, help="Issue or pull request number.")
@click.option("--repo", default=None, help="GitHub repository in owner/name format.")
@click.pass_context
def label_cmd(ctx, label: str, issue: int | None, repo: str | None):
    """Add LABEL to an issue or pull request."""
    context = get_context(ctx)
    options = context.process_options(ctx, ["issue", "repo"])

    def add_label():
        get_issue(context.github, options["repo"], options["issue"]).add_to_labels(options["label"])

    wrapped = context.command_wrapper(
        operation=lambda: asyncio.to_thread(add_label),
        success_message=f"added label '{label}' to #{options['issue']}",
        error_message=f"failed to add label '{label}' to #{options['issue']}",
        verbose=options.get("verbose", False),
    )
    run_and_exit(context, wrapped)


@click.command("unlabel")
@click.argument("label")
@click.option("--issue", type=int, default=None, help="Issue or pull request number.")
@click.option("--repo", default=None, help="GitHub repository in owner/name format.")
@click.pass_context
def unlabel_cmd(ctx, label: str, issue: int | None, repo: str | None):
    """Remove LABEL from an issue or pull request."""
    context = get_context(ctx)
    options = context.process_options(ctx, ["issue", "repo"])

    def remove_label():
        get_issue(context.github, options["repo"], options["issue"]).remove_from_labels(options["label"])

    wrapped = context.command_wrapper(
        operation=lambda: asyncio.to_thread(remove_label),
        success_message=f"removed label '{label}' from #{options['issue']}",
        error_message=f"failed to remove label '{label}' from #{options['issue']}",
        verbose=options.get("verbose", False),
    )
    run_and_exit(context, wrapped)
