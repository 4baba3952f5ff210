"""Glue between click commands and the execution context."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import click

from actionbot_core.context import Context

logger = logging.getLogger(__name__)


def get_context(ctx: click.Context) -> Context:
    """Return the Context built by the top-level group."""
    obj = ctx.find_object(dict) or {}
    context = obj.get("context")
    if context is None:
        raise click.UsageError("actionbot commands must be run through the actionbot command group.")
    return context


def run_and_exit(context: Context, body: Callable[[], Awaitable[object]]) -> None:
    """Run an async command body, then finalize the context and exit.

    Anything escaping ``body`` is recorded as an error and the process exits
    with status 1 after the summary is reported.
    """
    try:
        asyncio.run(body())
    except Exception as e:
        logger.debug("Unhandled error in command body", exc_info=True)
        context.log_error(f"unexpected error: {e}")
        context.exit(1)
    context.exit(0)
