"""SugarJar branch commands - create, reap and inspect branches."""

import click
from rich.markup import escape

from sugarjar.commands._utils import console, die, fatal_on_error, run_context
from sugarjar.logging import get_logger
from sugarjar.safety import BranchCleaner

logger = get_logger("branch")


@click.command()
@click.argument("name")
@click.argument("base", required=False)
@click.pass_context
@fatal_on_error
def feature(ctx: click.Context, name: str, base: str | None) -> None:
    """Create feature branch NAME based on BASE (default: upstream main)."""
    run_ctx = run_context(ctx)
    git = run_ctx.git
    logger.debug(f"Feature: {name}, {base}")
    if name in git.all_branches():
        die(f"{name} already exists!")

    base = base or run_ctx.most_main()
    remote = base.split("/", 1)[0]
    if "/" in base and remote in git.remotes():
        git.fetch(remote)
    git.checkout(name, create=True, start_point=base)
    console.print(f"Created feature branch [green]{escape(name)}[/green] based on [green]{escape(base)}[/green]")


@click.command()
@click.argument("name", required=False)
@click.pass_context
@fatal_on_error
def bclean(ctx: click.Context, name: str | None) -> None:
    """Delete branch NAME (default: current) if it is fully merged upstream."""
    run_ctx = run_context(ctx)
    name = name or run_ctx.current_branch()
    result = BranchCleaner(run_ctx).clean(name)
    if result.reaped:
        console.print(f"{escape(name)}: [green]reaped[/green]")
        return
    die(
        f"Cannot clean {name}! there are unmerged commits; "
        f"use 'git branch -D {name}' to forcefully delete it."
    )


@click.command()
@click.pass_context
@fatal_on_error
def bcleanall(ctx: click.Context) -> None:
    """Delete every branch that is fully merged upstream."""
    run_ctx = run_context(ctx)
    for result in BranchCleaner(run_ctx).clean_all():
        if result.reaped:
            console.print(f"{escape(result.branch)}: [green]reaped[/green]")
        else:
            console.print(f"{escape(result.branch)}: skipped")
            logger.debug(
                f"There are unmerged commits; use 'git branch -D {result.branch}' "
                "to forcefully delete it"
            )


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
@fatal_on_error
def co(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Run git checkout with ARGS."""
    result = run_context(ctx).git.checkout_args(*args)
    click.echo(result.stderr + result.stdout.rstrip())


@click.command()
@click.pass_context
@fatal_on_error
def br(ctx: click.Context) -> None:
    """List branches with their latest commit."""
    click.echo(run_context(ctx).git.branch_verbose().rstrip())


@click.command()
@click.pass_context
@fatal_on_error
def binfo(ctx: click.Context) -> None:
    """Show the commits on this branch that are not on its tracked branch."""
    run_ctx = run_context(ctx)
    click.echo(run_ctx.git.log_graph(f"{run_ctx.tracked_branch()}..").rstrip())


@click.command()
@click.pass_context
@fatal_on_error
def smartlog(ctx: click.Context) -> None:
    """Show the commits on all branches that are not on upstream main."""
    run_ctx = run_context(ctx)
    click.echo(run_ctx.git.log_graph("--branches", f"{run_ctx.most_main()}..").rstrip())
