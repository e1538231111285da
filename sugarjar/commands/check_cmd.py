"""SugarJar check commands - run the repository's lint and unit checks."""

import click

from sugarjar.checks import CheckEngine
from sugarjar.commands._utils import console, fatal_on_error, run_context
from sugarjar.constants import LINT_CHECK_TYPE, UNIT_CHECK_TYPE


def run_checks(ctx: click.Context, check_type: str) -> None:
    """Run one check type and exit 1 unless every check passed."""
    engine = CheckEngine(run_context(ctx))
    report = engine.run_type(check_type)
    if report.resolution_failed:
        console.print(f"[red]Could not determine {check_type} checks[/red]")
    if not report.passed:
        raise SystemExit(1)


@click.command()
@click.pass_context
@fatal_on_error
def lint(ctx: click.Context) -> None:
    """Run the repository's linters."""
    run_checks(ctx, LINT_CHECK_TYPE)


@click.command()
@click.pass_context
@fatal_on_error
def unit(ctx: click.Context) -> None:
    """Run the repository's unit tests."""
    run_checks(ctx, UNIT_CHECK_TYPE)
