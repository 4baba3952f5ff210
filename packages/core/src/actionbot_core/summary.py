from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from actionbot_core.gh.comments import CommentRequest


@dataclass(frozen=True)
class DoneReport:
    """What finalization would do: the summary body and, in automated mode, the comment to post."""

    body: str
    request: CommentRequest | None = None


def build_summary(command: str, success_logs: Sequence[str], error_logs: Sequence[str]) -> str:
    """Build the summary comment body.

    Success messages come first, then error messages; ordering is preserved
    within each group only.
    """
    messages = [*success_logs, *error_logs]
    lines = [f"> `{command}`", "```", *messages, "```"]
    if not messages:
        # An empty transcript still leaves one blank line inside the fence.
        lines.insert(2, "")
    return "\n".join(lines)
