"""Per-invocation execution context.

One Context is built when the process starts. It holds the merged command
options, accumulates a transcript of success and error messages produced by
wrapped operations, and, when running inside GitHub Actions, posts that
transcript as a single comment on the target issue or pull request right
before the process exits.

Lifecycle:  CREATED -> OPTIONS_PROCESSED -> (operations 0..n) -> FINALIZED
"""

from __future__ import annotations

import functools
import logging
import sys
from enum import Enum
from typing import Any, Callable, Iterable, Sequence

from github import Github, GithubException
from rich.console import Console

from actionbot_core.command_line import format_command, merge_options
from actionbot_core.config import ContextConfig, Source
from actionbot_core.errors import ConfigurationError, ContextStateError
from actionbot_core.gh.comments import CommentPoster, CommentRequest, GithubCommentPoster, github_client_factory
from actionbot_core.outcome import Failure, Outcome, Success, capture
from actionbot_core.summary import DoneReport, build_summary

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)
logger = logging.getLogger(__name__)

SUCCESS_MARKER = "🟢 SUCCESS:"
ERROR_MARKER = "🔴 ERROR:"


class ContextState(Enum):
    CREATED = "created"
    OPTIONS_PROCESSED = "options_processed"
    FINALIZED = "finalized"


class Context:
    def __init__(
        self,
        source: Source | str,
        config: ContextConfig | None = None,
        client_factory: Callable[[str | None], Github] = github_client_factory,
        poster: CommentPoster | None = None,
    ):
        self.source = Source(source)
        self.config = config or ContextConfig()
        self.options: dict = {}
        self.issue_number: int | None = None
        self.command: str | None = None
        self.state = ContextState.CREATED

        self._logs: list[str] = []
        self._error_logs: list[str] = []
        self._client_factory = client_factory
        self._client: Github | None = None
        self._poster = poster

    # ------------------------------------------------------------------
    # Transcript
    # ------------------------------------------------------------------

    @property
    def success_logs(self) -> tuple[str, ...]:
        return tuple(self._logs)

    @property
    def error_logs(self) -> tuple[str, ...]:
        return tuple(self._error_logs)

    @property
    def has_errors(self) -> bool:
        return bool(self._error_logs)

    def log(self, message: str) -> None:
        console.print(f"{SUCCESS_MARKER} {message}", markup=False, highlight=False, emoji=False)
        self._logs.append(message)

    def log_error(self, message: str) -> None:
        err_console.print(f"{ERROR_MARKER} {message}", markup=False, highlight=False, emoji=False)
        self._error_logs.append(message)

    # ------------------------------------------------------------------
    # GitHub access
    # ------------------------------------------------------------------

    @property
    def github(self) -> Github:
        """Lazily built GitHub client, shared for the rest of the run."""
        if self._client is None:
            if not self.config.github_token:
                self.log_error("GITHUB_TOKEN is not set. Please set the GITHUB_TOKEN environment variable.")
            self._client = self._client_factory(self.config.github_token)
            logger.debug("Constructed GitHub client (authenticated=%s)", bool(self.config.github_token))
        return self._client

    @property
    def poster(self) -> CommentPoster:
        if self._poster is None:
            self._poster = GithubCommentPoster(self.github)
        return self._poster

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def require_option(self, option_name: str, options: dict) -> None:
        if options.get(option_name) is None:
            self.log_error(f"option [{option_name}] is required")
            self.exit(1)

    def require_options(self, option_names: Iterable[str], options: dict) -> None:
        for option_name in option_names:
            self.require_option(option_name, options)

    def process_options(self, command, required_options: Sequence[str] = (), raw_args: Sequence[str] | None = None) -> dict:
        """Merge, validate and return the options of the invoked command.

        ``command`` is the subcommand's click context (anything with ``params``
        and ``parent``). Exits with status 1 when a required option is
        missing. In automated mode the acting user and repository always come
        from the ambient GitHub environment.
        """
        if self.state is not ContextState.CREATED:
            raise ContextStateError("Options have already been processed for this context.")

        self.command = format_command(sys.argv if raw_args is None else raw_args)
        parent = getattr(command, "parent", None)
        self.options = merge_options(parent.params if parent is not None else {}, command.params)
        self.state = ContextState.OPTIONS_PROCESSED

        if self.source is Source.AUTOMATED:
            self.options["actor"] = self.config.actor
            self.options["repo"] = self.config.repository

        # Set before validation so a failure report still reaches the issue.
        self.issue_number = self._issue_number_from(self.options.get("issue"))
        self.require_options(required_options, self.options)
        return self.options

    def _issue_number_from(self, value: Any) -> int | None:
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            self.log_error(f"option [issue] must be a number, got {value!r}")
            self.exit(1)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def run_operation(self, operation: Callable, *args, error_message: str | None = None, **kwargs) -> Outcome:
        """Run an operation and return its Outcome without recording anything."""
        if self.state is not ContextState.OPTIONS_PROCESSED:
            raise ContextStateError(f"Cannot run operations while the context is {self.state.value}.")
        return await capture(operation, *args, error_message=error_message, **kwargs)

    def record(self, outcome: Outcome, success_message: str | None = None, verbose: bool = False) -> None:
        """Append at most one transcript entry for an outcome."""
        if isinstance(outcome, Failure):
            logger.debug("Operation failed", exc_info=outcome.error)
            self.log_error(outcome.message)
            return
        if verbose:
            console.print(outcome.value)
        if success_message:
            self.log(success_message)

    def command_wrapper(
        self,
        operation: Callable,
        success_message: str | None = None,
        error_message: str | None = None,
        verbose: bool = False,
    ) -> Callable:
        """Wrap ``operation`` so its outcome lands in the transcript.

        The returned coroutine function never raises because of the
        operation: on failure it records ``error_message`` (or the exception's
        own text) and returns None; on success it records ``success_message``
        when given and returns the operation's result.
        """

        @functools.wraps(operation)
        async def wrapped(*args, **kwargs):
            outcome = await self.run_operation(operation, *args, error_message=error_message, **kwargs)
            self.record(outcome, success_message=success_message, verbose=verbose)
            return outcome.value if isinstance(outcome, Success) else None

        return wrapped

    # ------------------------------------------------------------------
    # Finalization
    # ------------------------------------------------------------------

    def done_comment(self) -> str:
        return build_summary(self.command or "???", self._logs, self._error_logs)

    def done_report(self) -> DoneReport:
        """Describe what finalization would post, without posting anything."""
        body = self.done_comment()
        if self.source is not Source.AUTOMATED:
            return DoneReport(body=body)
        owner, name = self.config.owner_and_name()
        if self.issue_number is None:
            raise ConfigurationError("No issue or pull request number to comment on. Pass --issue.")
        return DoneReport(
            body=body,
            request=CommentRequest(owner=owner, repo=name, issue_number=self.issue_number, body=body),
        )

    def on_done(self) -> DoneReport:
        """Post the summary comment in automated mode; a no-op interactively.

        Errors from the GitHub call propagate to the caller.
        """
        if self.state is ContextState.FINALIZED:
            raise ContextStateError("Context has already been finalized.")
        self.state = ContextState.FINALIZED
        report = self.done_report()
        if report.request is not None:
            self.poster.create_comment(report.request)
            logger.info("Posted summary comment on %s#%d", report.request.full_name, report.request.issue_number)
        return report

    def exit(self, code: int = 0):
        """Finalize and terminate the process with ``code``.

        A summary that cannot be posted turns a zero exit status into 1.
        """
        try:
            self.on_done()
        except (GithubException, ConfigurationError) as e:
            logger.error("Could not post summary comment: %s", e)
            err_console.print(f"{ERROR_MARKER} could not post summary comment: {e}", markup=False, highlight=False, emoji=False)
            code = code or 1
        sys.exit(code)
