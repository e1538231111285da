"""SugarJar rebase commands - keep branches on top of their upstream."""

import click
from rich.markup import escape

from sugarjar.commands._utils import console, die, fatal_on_error, indent, run_context
from sugarjar.rebase import RebaseCoordinator


@click.command()
@click.pass_context
@fatal_on_error
def up(ctx: click.Context) -> None:
    """Rebase the current branch onto the branch it tracks."""
    result = RebaseCoordinator(run_context(ctx)).rebase_onto_tracked()
    if not result.succeeded:
        die(
            f"{result.branch}: Failed to rebase on {result.base}. Leaving the repo as-is. "
            "You can get out of this with a `git rebase --abort`. Output from failed "
            f"rebase is: \nSTDOUT:\n{indent(result.stdout)}\nSTDERR:\n{indent(result.stderr)}"
        )
    console.print(f"[green]{escape(result.branch)}[/green] rebased on {escape(result.base)}")


@click.command()
@click.pass_context
@fatal_on_error
def upall(ctx: click.Context) -> None:
    """Rebase every non-main branch onto the branch it tracks."""
    for result in RebaseCoordinator(run_context(ctx)).rebase_all_onto_tracked():
        branch = escape(result.branch)
        if result.succeeded:
            console.print(f"[green]{branch}[/green] rebased on [green]{escape(result.base)}[/green]")
        else:
            console.print(
                f"[red]{branch}[/red] failed rebase. Reverting attempt and moving to "
                "next branch. Try `sj up` manually on that branch."
            )
