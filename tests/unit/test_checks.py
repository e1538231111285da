"""Tests for sugarjar.checks module."""

from unittest.mock import MagicMock

import pytest

from sugarjar.checks import CheckEngine, decide_lint_action
from sugarjar.command_executor import CommandExecutor, CommandResult, CommandValidationError
from sugarjar.config import RepoConfig, UserConfig
from sugarjar.constants import CheckOutcome, LintDecision
from sugarjar.context import RunContext


def _result(exit_code: int = 0, stdout: str = "") -> CommandResult:
    return CommandResult(
        command=["check"],
        exit_code=exit_code,
        stdout=stdout,
        stderr="",
        duration_ms=1,
        success=exit_code == 0,
    )


@pytest.fixture
def executor() -> MagicMock:
    executor = MagicMock(spec=CommandExecutor)
    executor.find_executable.side_effect = lambda cmd: f"/fake/repo/{cmd.split()[0]}"
    executor.execute.return_value = _result()
    return executor


def _engine(
    mock_git: MagicMock,
    executor: MagicMock,
    repo_config: RepoConfig | None = None,
    answers: list[str] | None = None,
    max_corrections: int = 10,
) -> CheckEngine:
    ctx = RunContext(
        git=mock_git,
        repo_config=repo_config or RepoConfig(),
        user_config=UserConfig(max_lint_corrections=max_corrections),
    )
    prompt = MagicMock(side_effect=answers or [])
    return CheckEngine(ctx, prompt=prompt, on_correction=MagicMock(), executor=executor)


class TestDecideLintAction:
    """Tests for decide_lint_action."""

    @pytest.mark.parametrize(
        ("answer", "expected"),
        [
            ("q", LintDecision.QUIT),
            ("quit\n", LintDecision.QUIT),
            ("a", LintDecision.AMEND),
            ("  amend", LintDecision.AMEND),
            ("", LintDecision.REPROMPT),
            ("x", LintDecision.REPROMPT),
            ("Q", LintDecision.REPROMPT),
        ],
    )
    def test_decisions(self, answer: str, expected: LintDecision) -> None:
        assert decide_lint_action(answer) == expected


class TestResolve:
    """Tests for check-list resolution."""

    def test_static_list(self, mock_git: MagicMock, executor: MagicMock) -> None:
        engine = _engine(mock_git, executor, RepoConfig(lint=["scripts/a", "scripts/b"]))

        checklist = engine.resolve("lint")

        assert checklist.ok is True
        assert checklist.checks == ["scripts/a", "scripts/b"]
        executor.execute.assert_not_called()

    def test_list_command_output_parsed(self, mock_git: MagicMock, executor: MagicMock) -> None:
        executor.execute.return_value = _result(stdout="scripts/one\n\n  scripts/two --fast\n")
        engine = _engine(mock_git, executor, RepoConfig(unit_list_cmd="scripts/list"))

        checklist = engine.resolve("unit")

        assert checklist.checks == ["scripts/one", "scripts/two --fast"]

    def test_list_command_preferred_over_static(self, mock_git: MagicMock, executor: MagicMock) -> None:
        executor.execute.return_value = _result(stdout="from-cmd\n")
        engine = _engine(mock_git, executor, RepoConfig(lint=["static"], lint_list_cmd="scripts/list"))

        assert engine.resolve("lint").checks == ["from-cmd"]

    def test_resolved_once_per_invocation(self, mock_git: MagicMock, executor: MagicMock) -> None:
        executor.execute.return_value = _result(stdout="scripts/one\n")
        engine = _engine(mock_git, executor, RepoConfig(lint_list_cmd="scripts/list"))

        engine.resolve("lint")
        engine.resolve("lint")

        executor.execute.assert_called_once_with("scripts/list", executable="/fake/repo/scripts/list")

    def test_missing_list_command(self, mock_git: MagicMock, executor: MagicMock) -> None:
        executor.find_executable.side_effect = None
        executor.find_executable.return_value = None
        engine = _engine(mock_git, executor, RepoConfig(lint_list_cmd="scripts/missing"))

        checklist = engine.resolve("lint")

        assert checklist.ok is False
        executor.execute.assert_not_called()

    def test_failing_list_command(self, mock_git: MagicMock, executor: MagicMock) -> None:
        executor.execute.return_value = _result(exit_code=2, stdout="check-that-must-not-run\n")
        engine = _engine(mock_git, executor, RepoConfig(lint_list_cmd="scripts/list"))

        checklist = engine.resolve("lint")

        assert checklist.ok is False
        assert checklist.checks == []


class TestRunType:
    """Tests for running every check of a type."""

    def test_empty_list_passes_without_subprocess(self, mock_git: MagicMock, executor: MagicMock) -> None:
        engine = _engine(mock_git, executor)

        report = engine.run_type("lint")

        assert report.passed is True
        assert report.results == []
        executor.execute.assert_not_called()

    def test_list_command_failure_runs_no_check(self, mock_git: MagicMock, executor: MagicMock) -> None:
        executor.execute.return_value = _result(exit_code=1, stdout="scripts/check\n")
        engine = _engine(mock_git, executor, RepoConfig(unit_list_cmd="scripts/list"))

        report = engine.run_type("unit")

        assert report.passed is False
        assert report.resolution_failed is True
        executor.execute.assert_called_once_with("scripts/list", executable="/fake/repo/scripts/list")

    def test_stops_at_first_failure(self, mock_git: MagicMock, executor: MagicMock) -> None:
        executor.execute.side_effect = [_result(), _result(exit_code=1), _result()]
        engine = _engine(mock_git, executor, RepoConfig(unit=["a", "b", "c"]))

        report = engine.run_type("unit")

        assert report.passed is False
        assert [r.outcome for r in report.results] == [CheckOutcome.PASS, CheckOutcome.FAIL]
        assert executor.execute.call_count == 2

    def test_all_pass(self, mock_git: MagicMock, executor: MagicMock) -> None:
        engine = _engine(mock_git, executor, RepoConfig(unit=["a", "b"]))

        assert engine.run("unit") is True
        assert executor.execute.call_count == 2

    def test_runs_the_resolved_executable(self, mock_git: MagicMock, executor: MagicMock) -> None:
        executor.find_executable.side_effect = None
        executor.find_executable.return_value = "/usr/local/bin/lint.sh"
        engine = _engine(mock_git, executor, RepoConfig(unit=["lint.sh --all"]))

        report = engine.run_type("unit")

        assert report.passed is True
        executor.find_executable.assert_called_once_with("lint.sh --all")
        executor.execute.assert_called_once_with("lint.sh --all", executable="/usr/local/bin/lint.sh")

    def test_missing_check_executable(self, mock_git: MagicMock, executor: MagicMock) -> None:
        executor.find_executable.side_effect = None
        executor.find_executable.return_value = None
        engine = _engine(mock_git, executor, RepoConfig(unit=["scripts/gone"]))

        report = engine.run_type("unit")

        assert report.passed is False
        assert report.results[0].outcome == CheckOutcome.NOT_FOUND
        executor.execute.assert_not_called()

    def test_unparseable_check_fails(self, mock_git: MagicMock, executor: MagicMock) -> None:
        executor.execute.side_effect = CommandValidationError("Failed to parse command")
        engine = _engine(mock_git, executor, RepoConfig(unit=["scripts/x 'unclosed"]))

        assert engine.run("unit") is False

    def test_unit_checks_ignore_dirty_tree(self, mock_git: MagicMock, executor: MagicMock) -> None:
        mock_git.is_dirty.return_value = True
        engine = _engine(mock_git, executor, RepoConfig(unit=["scripts/test"]))

        assert engine.run("unit") is True
        engine.prompt.assert_not_called()


class TestLintCorrection:
    """Tests for the lint auto-correction loop."""

    def test_amend_reruns_same_check_once(self, mock_git: MagicMock, executor: MagicMock) -> None:
        mock_git.is_dirty.side_effect = [True, False]
        engine = _engine(mock_git, executor, RepoConfig(lint=["scripts/fix"]), answers=["a"])

        result = engine.run_check("lint", "scripts/fix")

        assert result.outcome == CheckOutcome.PASS
        assert result.attempts == 2
        assert result.corrections == 1
        assert result.history == [CheckOutcome.CORRECTED, CheckOutcome.PASS]
        assert executor.execute.call_count == 2
        mock_git.amend.assert_called_once_with("-a")

    def test_quit_leaves_changes_unstaged(self, mock_git: MagicMock, executor: MagicMock) -> None:
        mock_git.is_dirty.return_value = True
        mock_git.diff.return_value = "-bad\n+good\n"
        engine = _engine(mock_git, executor, RepoConfig(lint=["scripts/fix", "scripts/other"]), answers=["q"])

        report = engine.run_type("lint")

        assert report.passed is False
        assert report.results[0].outcome == CheckOutcome.ABORTED
        assert report.results[0].diff == "-bad\n+good\n"
        mock_git.amend.assert_not_called()
        executor.execute.assert_called_once_with("scripts/fix", executable="/fake/repo/scripts/fix")

    def test_diff_shown_before_asking(self, mock_git: MagicMock, executor: MagicMock) -> None:
        mock_git.is_dirty.return_value = True
        mock_git.diff.return_value = "the diff"
        engine = _engine(mock_git, executor, answers=["q"])

        engine.run_check("lint", "scripts/fix")

        engine.on_correction.assert_called_once_with("scripts/fix", "the diff")

    def test_reprompts_until_understood(self, mock_git: MagicMock, executor: MagicMock) -> None:
        mock_git.is_dirty.return_value = True
        engine = _engine(mock_git, executor, answers=["", "what", "q"])

        result = engine.run_check("lint", "scripts/fix")

        assert result.outcome == CheckOutcome.ABORTED
        assert engine.prompt.call_count == 3

    def test_correction_limit(self, mock_git: MagicMock, executor: MagicMock) -> None:
        mock_git.is_dirty.return_value = True
        engine = _engine(mock_git, executor, answers=["a", "a", "a"], max_corrections=2)

        result = engine.run_check("lint", "scripts/flapping")

        assert result.outcome == CheckOutcome.CORRECTION_LIMIT
        assert result.corrections == 2
        assert result.attempts == 3
        assert mock_git.amend.call_count == 2

    def test_dirty_check_applies_before_exit_code(self, mock_git: MagicMock, executor: MagicMock) -> None:
        """A linter that fixes files and exits non-zero still offers the amend."""
        mock_git.is_dirty.side_effect = [True, False]
        executor.execute.side_effect = [_result(exit_code=1), _result()]
        engine = _engine(mock_git, executor, answers=["a"])

        result = engine.run_check("lint", "scripts/fix")

        assert result.outcome == CheckOutcome.PASS


class TestRunPrepush:
    """Tests for pre-push checks."""

    def test_runs_types_in_order(self, mock_git: MagicMock, executor: MagicMock) -> None:
        engine = _engine(
            mock_git, executor, RepoConfig(lint=["l"], unit=["u"], on_push=["lint", "unit"])
        )

        report = engine.run_prepush()

        assert report.passed is True
        assert [r.check_type for r in report.reports] == ["lint", "unit"]
        assert [c.args[0] for c in executor.execute.call_args_list] == ["l", "u"]

    def test_stops_at_first_failing_type(self, mock_git: MagicMock, executor: MagicMock) -> None:
        executor.execute.return_value = _result(exit_code=1)
        engine = _engine(
            mock_git, executor, RepoConfig(lint=["l"], unit=["u"], on_push=["lint", "unit"])
        )

        report = engine.run_prepush()

        assert report.passed is False
        assert report.failed_type == "lint"
        executor.execute.assert_called_once_with("l", executable="/fake/repo/l")

    def test_nothing_configured(self, mock_git: MagicMock, executor: MagicMock) -> None:
        engine = _engine(mock_git, executor)

        assert engine.run_prepush().passed is True
