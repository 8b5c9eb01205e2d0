"""Tests for the command-line interface"""
from unittest.mock import patch

import pytest

from git_worktree_keeper.cli.args import parse_args
from git_worktree_keeper.cli.main import main
from git_worktree_keeper.exceptions import ExecutionError


class TestParseArgs:
    """Test argument parsing."""

    def test_clean_defaults(self):
        args = parse_args(["clean"])
        assert args.command == "clean"
        assert args.dry_run is False
        assert args.stale_days == 30

    def test_clean_flags(self):
        args = parse_args(["clean", "--dry-run", "--stale-days", "14"])
        assert args.dry_run is True
        assert args.stale_days == 14

    def test_stale_days_must_be_positive(self):
        with pytest.raises(SystemExit):
            parse_args(["clean", "--stale-days", "0"])

    def test_verbose_before_or_after_subcommand(self):
        assert parse_args(["-v", "clean"]).verbose is True
        assert parse_args(["clean", "-v"]).verbose is True
        assert not hasattr(parse_args(["clean"]), "verbose")

    def test_add(self):
        args = parse_args(["add", "topic", "/tmp/trees", "--append-branch"])
        assert (args.branch, args.path, args.append_branch) == ("topic", "/tmp/trees", True)

    def test_pr(self):
        args = parse_args(["pr", "42"])
        assert args.number == 42
        assert args.path is None

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestMain:
    """Test dispatch and error handling of the entry point."""

    @pytest.fixture
    def mock_keeper(self):
        with patch("git_worktree_keeper.cli.main.WorktreeKeeper") as keeper_class, \
                patch("git_worktree_keeper.cli.main.setup_logging"):
            yield keeper_class

    def test_clean_passes_config(self, mock_keeper):
        assert main(["clean", "--dry-run", "--stale-days", "10"]) == 0

        config = mock_keeper.call_args.args[1]
        assert config.dry_run is True
        assert config.stale_days == 10
        mock_keeper.return_value.clean.assert_called_once_with()
        mock_keeper.return_value.close.assert_called_once()

    def test_list(self, mock_keeper):
        assert main(["list"]) == 0
        mock_keeper.return_value.show.assert_called_once_with()

    def test_add(self, mock_keeper):
        assert main(["add", "topic"]) == 0
        mock_keeper.return_value.add_worktree.assert_called_once_with("topic", None, False)

    def test_pr(self, mock_keeper):
        assert main(["pr", "7", "/trees", "--append-branch"]) == 0
        mock_keeper.return_value.checkout_pr.assert_called_once_with(7, "/trees", True)

    def test_error_is_reported(self, mock_keeper, capsys):
        mock_keeper.return_value.clean.side_effect = ExecutionError(
            "worktree_info", "failed to get worktree info: git not found"
        )

        assert main(["clean"]) == 1

        assert "Error:" in capsys.readouterr().out
        mock_keeper.return_value.close.assert_called_once()

    def test_keyboard_interrupt(self, mock_keeper, capsys):
        mock_keeper.return_value.clean.side_effect = KeyboardInterrupt

        assert main(["clean"]) == 1

        assert "Operation cancelled by user" in capsys.readouterr().out
