"""Tests for the CLI entry point and commands."""

import subprocess
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner
from github import GithubException

from actionbot_cli.cli import main
from actionbot_cli.runner import run_and_exit
from actionbot_core.config import ContextConfig, Source
from actionbot_core.context import Context
from actionbot_core.gh.comments import CommentRequest


@pytest.fixture(autouse=True)
def _ambient_env(monkeypatch, tmp_path):
    for var in ("GITHUB_TOKEN", "GITHUB_REPOSITORY", "GITHUB_ACTOR", "GITHUB_ACTIONS"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("ACTIONBOT_CONFIG", str(tmp_path / "missing.yml"))


def _patch_token(mocker, token="tok"):
    """Provide GITHUB_TOKEN and keep the gh CLI out of the tests."""
    if token:
        mocker.patch.dict("os.environ", {"GITHUB_TOKEN": token})
    mocker.patch("actionbot_cli.auth.gh_cli_token", return_value=None)


def _patch_common(mocker, token="tok"):
    """Patch token resolution and the issue lookup used by the label commands."""
    _patch_token(mocker, token)
    issue = MagicMock()
    mock_get_issue = mocker.patch("actionbot_cli.commands.label.get_issue", return_value=issue)
    return issue, mock_get_issue


class TestLabelCommand:
    def test_adds_label_and_reports_success(self, mocker):
        issue, mock_get_issue = _patch_common(mocker)

        result = CliRunner().invoke(main, ["--source", "CLI", "label", "bug", "--repo", "owner/repo", "--issue", "7"])

        assert result.exit_code == 0
        issue.add_to_labels.assert_called_once_with("bug")
        assert mock_get_issue.call_args.args[1:] == ("owner/repo", 7)
        assert "🟢 SUCCESS: added label 'bug' to #7" in result.output

    def test_repo_can_be_given_on_the_group(self, mocker):
        issue, mock_get_issue = _patch_common(mocker)

        result = CliRunner().invoke(main, ["--source", "CLI", "--repo", "owner/repo", "label", "bug", "--issue", "7"])

        assert result.exit_code == 0
        assert mock_get_issue.call_args.args[1] == "owner/repo"

    def test_missing_issue_exits_with_status_one(self, mocker):
        issue, _ = _patch_common(mocker)

        result = CliRunner().invoke(main, ["--source", "CLI", "label", "bug", "--repo", "owner/repo"])

        assert result.exit_code == 1
        assert "option [issue] is required" in result.output
        issue.add_to_labels.assert_not_called()

    def test_github_failure_is_logged_not_raised(self, mocker):
        issue, _ = _patch_common(mocker)
        issue.add_to_labels.side_effect = GithubException(404, {"message": "Not Found"}, None)

        result = CliRunner().invoke(main, ["--source", "CLI", "label", "bug", "--repo", "owner/repo", "--issue", "7"])

        assert result.exit_code == 0
        assert "🔴 ERROR: failed to add label 'bug' to #7" in result.output
        assert "SUCCESS" not in result.output

    def test_unlabel_removes_label(self, mocker):
        issue, _ = _patch_common(mocker)

        result = CliRunner().invoke(main, ["--source", "CLI", "unlabel", "bug", "--repo", "owner/repo", "--issue", "7"])

        assert result.exit_code == 0
        issue.remove_from_labels.assert_called_once_with("bug")
        assert "removed label 'bug' from #7" in result.output


class TestAutomatedSource:
    def test_posts_summary_comment_before_exit(self, mocker, monkeypatch):
        _patch_common(mocker)
        monkeypatch.setenv("GITHUB_REPOSITORY", "org/repo")
        monkeypatch.setenv("GITHUB_ACTOR", "octocat")
        monkeypatch.setattr("sys.argv", ["actionbot", "label", "bug", "--issue", "42"])
        mock_poster_cls = mocker.patch("actionbot_core.context.GithubCommentPoster")

        result = CliRunner().invoke(main, ["--source", "GHA", "label", "bug", "--issue", "42"])

        assert result.exit_code == 0
        poster = mock_poster_cls.return_value
        poster.create_comment.assert_called_once()
        request = poster.create_comment.call_args.args[0]
        assert request.owner == "org"
        assert request.repo == "repo"
        assert request.issue_number == 42
        assert request.body == "> `actionbot label bug --issue 42`\n```\nadded label 'bug' to #42\n```"

    def test_summary_failure_turns_exit_status_to_one(self, mocker, monkeypatch):
        _patch_common(mocker)
        monkeypatch.setenv("GITHUB_REPOSITORY", "org/repo")
        mock_poster_cls = mocker.patch("actionbot_core.context.GithubCommentPoster")
        mock_poster_cls.return_value.create_comment.side_effect = GithubException(403, {"message": "Forbidden"}, None)

        result = CliRunner().invoke(main, ["--source", "GHA", "label", "bug", "--issue", "42"])

        assert result.exit_code == 1
        assert "could not post summary comment" in result.output

    def test_interactive_source_never_posts(self, mocker):
        _patch_common(mocker)
        mock_poster_cls = mocker.patch("actionbot_core.context.GithubCommentPoster")

        CliRunner().invoke(main, ["--source", "CLI", "label", "bug", "--repo", "owner/repo", "--issue", "7"])

        mock_poster_cls.return_value.create_comment.assert_not_called()


class TestCommentCommand:
    def test_posts_comment_through_poster(self, mocker):
        _patch_token(mocker)
        mock_poster_cls = mocker.patch("actionbot_core.context.GithubCommentPoster")

        result = CliRunner().invoke(
            main, ["--source", "CLI", "comment", "hello world", "--repo", "owner/repo", "--issue", "3"]
        )

        assert result.exit_code == 0
        mock_poster_cls.return_value.create_comment.assert_called_once_with(
            CommentRequest(owner="owner", repo="repo", issue_number=3, body="hello world")
        )
        assert "commented on owner/repo#3" in result.output

    def test_missing_token_is_reported(self, mocker):
        _patch_token(mocker, token=None)
        mocker.patch("actionbot_core.context.GithubCommentPoster")

        result = CliRunner().invoke(main, ["--source", "CLI", "comment", "hi", "--repo", "owner/repo", "--issue", "3"])

        assert "GITHUB_TOKEN is not set" in result.output


class TestRunAndExit:
    def _context(self):
        context = Context(Source.INTERACTIVE, config=ContextConfig(github_token="tok"))
        context.process_options(MagicMock(params={}, parent=None), raw_args=["actionbot", "noop"])
        return context

    def test_exits_zero_after_body(self):
        context = self._context()

        async def body():
            return None

        with pytest.raises(SystemExit) as exc:
            run_and_exit(context, body)
        assert exc.value.code == 0

    def test_unexpected_error_is_recorded_and_exits_one(self):
        context = self._context()

        async def body():
            raise RuntimeError("boom")

        with pytest.raises(SystemExit) as exc:
            run_and_exit(context, body)
        assert exc.value.code == 1
        assert context.error_logs == ("unexpected error: boom",)



class TestAutomatedWithoutRepository:
    def test_subcommand_repo_cannot_replace_github_repository(self, mocker):
        _patch_token(mocker)
        mock_poster_cls = mocker.patch("actionbot_core.context.GithubCommentPoster")

        result = CliRunner().invoke(main, ["--source", "GHA", "comment", "hi", "--repo", "a/b", "--issue", "1"])

        assert result.exit_code == 1
        assert not isinstance(result.exception, AttributeError)
        assert "option [repo] is required" in result.output
        mock_poster_cls.return_value.create_comment.assert_not_called()


class TestResolveContextConfig:
    def test_token_from_config_skips_gh(self, mocker):
        from actionbot_cli.auth import resolve_context_config

        run = mocker.patch("actionbot_cli.auth.subprocess.run")
        config = resolve_context_config({"github_token": "env-token", "repo": "org/repo"}, Source.INTERACTIVE)

        assert config == ContextConfig(github_token="env-token", repository="org/repo", actor="UNKNOWN")
        run.assert_not_called()

    def test_interactive_falls_back_to_gh_session(self, mocker):
        from actionbot_cli.auth import resolve_context_config

        mocker.patch("actionbot_cli.auth.subprocess.run", return_value=MagicMock(returncode=0, stdout="gh-token\n"))
        config = resolve_context_config({"github_token": None}, Source.INTERACTIVE)

        assert config.github_token == "gh-token"

    def test_automated_never_uses_gh_session(self, mocker):
        from actionbot_cli.auth import resolve_context_config

        run = mocker.patch("actionbot_cli.auth.subprocess.run")
        config = resolve_context_config({"github_token": None, "github_actor": "octocat"}, Source.AUTOMATED)

        assert config.github_token is None
        assert config.actor == "octocat"
        run.assert_not_called()

    def test_missing_gh_leaves_token_unset(self, mocker):
        from actionbot_cli.auth import resolve_context_config

        mocker.patch("actionbot_cli.auth.subprocess.run", side_effect=FileNotFoundError)
        assert resolve_context_config({}, Source.INTERACTIVE).github_token is None


class TestGhCliToken:
    @pytest.mark.parametrize(
        "outcome",
        [
            {"side_effect": subprocess.TimeoutExpired(cmd="gh", timeout=5)},
            {"return_value": MagicMock(returncode=1, stdout="")},
            {"return_value": MagicMock(returncode=0, stdout="   ")},
        ],
    )
    def test_unusable_session_yields_none(self, mocker, outcome):
        from actionbot_cli.auth import gh_cli_token

        mocker.patch("actionbot_cli.auth.subprocess.run", **outcome)
        assert gh_cli_token() is None
