"""Check execution for SugarJar (lint, unit and any configured type).

A check type resolves to an ordered list of command strings, either from
a ``<type>_list_cmd`` that prints one check per line or from a static
``<type>`` list in the repository config. Checks run in order from the
repository root and the first failure stops the run.

Linters may fix what they find. When a ``lint`` check leaves the working
tree modified, the user decides whether to quit and inspect or to amend
the fixes into the current commit and run that same check again.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import click
from rich.markup import escape
from rich.prompt import Prompt as RichPrompt

from sugarjar.command_executor import CommandExecutor, CommandResult, CommandValidationError, short_name
from sugarjar.constants import LINT_CHECK_TYPE, CheckOutcome, LintDecision
from sugarjar.context import RunContext
from sugarjar.logging import get_logger

logger = get_logger("checks")

LINT_PROMPT = (
    "\nWould you like to\n\t[q]uit and inspect\n\t[a]mend the "
    "changes to the current commit and re-run\n"
)

Prompt = Callable[[str], str]
CorrectionHandler = Callable[[str, str], None]


def decide_lint_action(answer: str) -> LintDecision:
    """Map a user's answer to the lint-correction prompt to a decision.

    Args:
        answer: Raw input line

    Returns:
        QUIT for answers starting with ``q``, AMEND for ``a``, else REPROMPT
    """
    answer = answer.strip()
    if answer.startswith("q"):
        return LintDecision.QUIT
    if answer.startswith("a"):
        return LintDecision.AMEND
    return LintDecision.REPROMPT


def terminal_prompt(text: str) -> str:
    """Read one line of input from the terminal."""
    return RichPrompt.ask(f"{escape(text)}  >", default="", show_default=False)


def echo_diff(check: str, diff: str) -> None:
    """Show the changes a linter made."""
    click.echo(diff)


@dataclass
class CheckList:
    """Resolved checks of one type."""

    check_type: str
    checks: list[str] = field(default_factory=list)
    ok: bool = True
    error: str | None = None


@dataclass
class CheckResult:
    """Outcome of one checklist entry, including lint re-runs."""

    check: str
    outcome: CheckOutcome
    attempts: int = 1
    corrections: int = 0
    command_result: CommandResult | None = None
    diff: str = ""
    history: list[CheckOutcome] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.outcome == CheckOutcome.PASS

    def finish(self, outcome: CheckOutcome) -> CheckResult:
        """Record the final outcome of the entry and return self."""
        self.outcome = outcome
        self.history.append(outcome)
        return self


@dataclass
class CheckRunReport:
    """Outcome of running every check of one type."""

    check_type: str
    passed: bool
    resolution_failed: bool = False
    error: str | None = None
    results: list[CheckResult] = field(default_factory=list)


@dataclass
class PrepushReport:
    """Outcome of the configured pre-push check types."""

    passed: bool
    failed_type: str | None = None
    reports: list[CheckRunReport] = field(default_factory=list)


class CheckEngine:
    """Resolve and run checks of a type inside the repository root.

    A check program is found relative to the repository root first and then
    on PATH, so a bare name such as ``lint.sh`` only counts as missing when
    neither location has it. Checks run without a shell.
    """

    def __init__(
        self,
        ctx: RunContext,
        prompt: Prompt | None = None,
        on_correction: CorrectionHandler | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        """Initialize check engine.

        Args:
            ctx: Per-invocation context (holds the check-list cache)
            prompt: Source of answers to the lint-correction question
            on_correction: Called with (check, diff) before asking
            executor: Command executor (defaults to one rooted at the repo)
        """
        self.ctx = ctx
        self.git = ctx.git
        self.prompt = prompt or terminal_prompt
        self.on_correction = on_correction or echo_diff
        self.executor = executor or CommandExecutor(working_dir=self.git.repo_path)
        self.max_corrections = ctx.user_config.max_lint_corrections

    def _checks_from_command(self, check_type: str, cmd: str) -> CheckList:
        short = short_name(cmd)
        executable = self.executor.find_executable(cmd)
        if not executable:
            logger.error(f"Configured {check_type}_list_cmd {short} does not exist!")
            return CheckList(check_type, ok=False, error=f"{short} not found")

        try:
            result = self.executor.execute(cmd, executable=executable)
        except CommandValidationError as e:
            logger.error(f"{check_type}_list_cmd ({cmd}) is invalid: {e}")
            return CheckList(check_type, ok=False, error=str(e))

        if not result.success:
            logger.error(f"{check_type}_list_cmd ({cmd}) failed: {result.format_for_exception()}")
            return CheckList(check_type, ok=False, error=result.format_for_exception())

        checks = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        logger.debug(f"Found {check_type}s: {checks}")
        return CheckList(check_type, checks)

    def resolve(self, check_type: str) -> CheckList:
        """Resolve the checks of a type, at most once per invocation.

        Args:
            check_type: Check type name (e.g. ``lint``)

        Returns:
            CheckList; ``ok`` is False if the list command was missing or failed
        """
        cached = self.ctx.check_cache.get(check_type)
        if cached is not None:
            return cached

        cmd = self.ctx.repo_config.list_cmd_for(check_type)
        if cmd:
            checklist = self._checks_from_command(check_type, cmd)
        else:
            checks = self.ctx.repo_config.checks_for(check_type)
            logger.debug(f"[{check_type}]: using listed checks: {checks}")
            checklist = CheckList(check_type, checks)

        self.ctx.check_cache[check_type] = checklist
        return checklist

    def _ask(self) -> LintDecision:
        while True:
            decision = decide_lint_action(self.prompt(LINT_PROMPT))
            if decision != LintDecision.REPROMPT:
                return decision

    def run_check(self, check_type: str, check: str) -> CheckResult:
        """Run one checklist entry.

        For lint checks that modify the tree, asks the user and, on amend,
        commits the fixes and restarts this same entry. An entry may be
        amended at most ``max_lint_corrections`` times.

        Args:
            check_type: Type the check belongs to
            check: Command string

        Returns:
            CheckResult for the entry
        """
        short = short_name(check)
        outcome = CheckResult(check, CheckOutcome.PASS, attempts=0)
        while True:
            logger.debug(f"Running {check_type} {check}")
            executable = self.executor.find_executable(check)
            if not executable:
                logger.error(f"Configured {check_type} {short} does not exist!")
                return outcome.finish(CheckOutcome.NOT_FOUND)

            outcome.attempts += 1
            try:
                outcome.command_result = self.executor.execute(check, executable=executable)
            except CommandValidationError as e:
                logger.error(f"[{check_type}] {short}: {e}")
                return outcome.finish(CheckOutcome.FAIL)

            if check_type == LINT_CHECK_TYPE and self.git.is_dirty():
                outcome.diff = self.git.diff()
                logger.info(f"[{check_type}] {short}: Corrected")
                if outcome.corrections >= self.max_corrections:
                    logger.error(
                        f"[{check_type}] {short} still modifying the repo after "
                        f"{outcome.corrections} amends, giving up"
                    )
                    return outcome.finish(CheckOutcome.CORRECTION_LIMIT)

                logger.warning("The linter modified the repo. Here's the diff:\n")
                self.on_correction(check, outcome.diff)

                if self._ask() == LintDecision.QUIT:
                    logger.info("Exiting at user request.")
                    return outcome.finish(CheckOutcome.ABORTED)

                self.git.amend("-a")
                outcome.corrections += 1
                outcome.history.append(CheckOutcome.CORRECTED)
                continue

            result = outcome.command_result
            if not result.success:
                logger.info(
                    f"[{check_type}] {short} failed, output follows "
                    f"(see debug for more)\n{result.stdout}"
                )
                logger.debug(result.format_for_exception())
                return outcome.finish(CheckOutcome.FAIL)

            logger.info(f"[{check_type}] {short}: OK")
            return outcome.finish(CheckOutcome.PASS)

    def run_type(self, check_type: str) -> CheckRunReport:
        """Run every check of a type, stopping at the first failure.

        Args:
            check_type: Check type name

        Returns:
            CheckRunReport; ``resolution_failed`` marks list-command failures
        """
        checklist = self.resolve(check_type)
        if not checklist.ok:
            return CheckRunReport(check_type, False, resolution_failed=True, error=checklist.error)

        report = CheckRunReport(check_type, True)
        for check in checklist.checks:
            result = self.run_check(check_type, check)
            report.results.append(result)
            if not result.passed:
                report.passed = False
                break
        return report

    def run(self, check_type: str) -> bool:
        """Run the checks of a type; True only if all of them passed."""
        return self.run_type(check_type).passed

    def run_prepush(self) -> PrepushReport:
        """Run the check types configured under ``on_push``, in order.

        Returns:
            PrepushReport naming the first failing type, if any
        """
        report = PrepushReport(passed=True)
        for check_type in self.ctx.repo_config.on_push:
            logger.debug(f"Running on_push check type {check_type}")
            type_report = self.run_type(check_type)
            report.reports.append(type_report)
            if not type_report.passed:
                logger.info(f"[prepush]: {check_type} failed.")
                report.passed = False
                report.failed_type = check_type
                break
        return report
