"""Build the ContextConfig the execution context runs with.

The GitHub token comes from GITHUB_TOKEN (read by load_config). Local runs
without it fall back to the GitHub CLI session (`gh auth token`); runs under
GitHub Actions never do, since the workflow must inject GITHUB_TOKEN itself.
"""

from __future__ import annotations

import logging
import subprocess

from actionbot_core.config import ContextConfig, Source

logger = logging.getLogger(__name__)

_GH_TIMEOUT_SECONDS = 5


def gh_cli_token() -> str | None:
    """Token of the current `gh auth login` session, or None."""
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=_GH_TIMEOUT_SECONDS,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("gh CLI unavailable: %s", e)
        return None
    if result.returncode != 0:
        logger.debug("gh auth token exited with %d", result.returncode)
        return None
    return result.stdout.strip() or None


def resolve_context_config(config: dict, source: Source) -> ContextConfig:
    """Resolve credentials once and freeze them into a ContextConfig.

    A token that cannot be found is left as None; the context reports it the
    first time a GitHub client is needed.
    """
    token = config.get("github_token")
    if not token and source is Source.INTERACTIVE:
        token = gh_cli_token()
        if token:
            logger.info("GITHUB_TOKEN not set; using the gh CLI session token.")
    return ContextConfig.from_config({**config, "github_token": token})
