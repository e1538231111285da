"""SugarJar commit commands - amend the current commit."""

import subprocess

import click

from sugarjar.commands._utils import fatal_on_error, run_context

_PASSTHROUGH = {"ignore_unknown_options": True, "allow_extra_args": True}


@click.command(context_settings=_PASSTHROUGH)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
@fatal_on_error
def amend(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Amend the current commit, opening an editor for the message."""
    run_ctx = run_context(ctx)
    # The editor needs the real terminal, so no output capture here
    result = subprocess.run(["git", "-C", str(run_ctx.git.repo_path), "commit", "--amend", *args])
    raise SystemExit(result.returncode)


@click.command(context_settings=_PASSTHROUGH)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
@fatal_on_error
def qamend(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Amend the current commit, keeping its message."""
    click.echo(run_context(ctx).git.amend(*args).stdout)
