from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

from github import Auth, Github

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommentRequest:
    """Parameters of a single "create issue comment" call."""

    owner: str
    repo: str
    issue_number: int
    body: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


class CommentPoster(Protocol):
    def create_comment(self, request: CommentRequest) -> None: ...


def github_client_factory(token: str | None) -> Github:
    # An unauthenticated client still constructs; the API call fails later.
    if token:
        return Github(auth=Auth.Token(token))
    return Github()


def get_issue(client: Github, repo_name: str, issue_number: int):
    return client.get_repo(repo_name).get_issue(issue_number)


class GithubCommentPoster:
    """Posts comments through a PyGithub client.

    Issues and pull requests share the issue comment endpoint, so the same
    call works for both. Exactly one POST is sent per comment.
    """

    def __init__(self, client: Github):
        self._client = client

    def create_comment(self, request: CommentRequest) -> None:
        url = f"/repos/{quote(request.owner)}/{quote(request.repo)}/issues/{request.issue_number}/comments"
        logger.debug("Posting comment on %s#%d", request.full_name, request.issue_number)
        self._client.requester.requestJsonAndCheck("POST", url, input={"body": request.body})
