"""comment command — post a free-form comment on an issue or pull request."""

from __future__ import annotations

import asyncio

import click

from actionbot_cli.runner import get_context, run_and_exit
from actionbot_core.gh.comments import CommentRequest


@click.command("comment")
@click.argument("body")
@click.option("--issue", type=int, default=None, help="Issue or pull request number.")
@click.option("--repo", default=None, help="GitHub repository in owner/name format.")
@click.pass_context
def comment_cmd(ctx, body: str, issue: int | None, repo: str | None):
    """Post BODY as a comment on an issue or pull request.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub token (or use gh CLI)
    """
    context = get_context(ctx)
    options = context.process_options(ctx, ["issue", "repo", "body"])

    owner, _, name = options["repo"].partition("/")
    request = CommentRequest(owner=owner, repo=name, issue_number=options["issue"], body=options["body"])

    wrapped = context.command_wrapper(
        operation=lambda: asyncio.to_thread(context.poster.create_comment, request),
        success_message=f"commented on {options['repo']}#{options['issue']}",
        verbose=options.get("verbose", False),
    )
    run_and_exit(context, wrapped)
