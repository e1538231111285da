"""SugarJar push commands - push after the pre-push checks pass."""

import click
from rich.markup import escape
from rich.prompt import Prompt

from sugarjar.checks import CheckEngine
from sugarjar.commands._utils import console, die, ensure_clean, fatal_on_error, run_context
from sugarjar.context import RunContext
from sugarjar.logging import get_logger

logger = get_logger("push")


def prepush_allows(run_ctx: RunContext, engine: CheckEngine | None = None) -> bool:
    """Run the pre-push checks and decide whether pushing may continue.

    Failures are overridden when ``ignore_prerun_failure`` is set.

    Returns:
        True if the push should go ahead
    """
    engine = engine or CheckEngine(run_ctx)
    report = engine.run_prepush()
    if report.passed:
        return True
    if run_ctx.user_config.ignore_prerun_failure:
        console.print(
            "[yellow]Pre-push checks failed, but --ignore-prerun-failure was "
            "specified, so carrying on anyway[/yellow]"
        )
        return True
    return False


def do_push(ctx: click.Context, remote: str | None, branch: str | None, force: bool) -> None:
    """Push ``branch`` to ``remote`` after the dirty-tree and pre-push gates."""
    run_ctx = run_context(ctx)
    remote = remote or "origin"
    branch = branch or run_ctx.current_branch()

    ensure_clean(run_ctx, "push")
    if not prepush_allows(run_ctx):
        die("Pre-push checks failed. Not pushing.")

    result = run_ctx.git.push(remote, branch, force_with_lease=force)
    click.echo(result.stderr.rstrip())


@click.command()
@click.argument("remote", required=False)
@click.argument("branch", required=False)
@click.pass_context
@fatal_on_error
def smartpush(ctx: click.Context, remote: str | None, branch: str | None) -> None:
    """Run pre-push checks, then push BRANCH (default: current) to REMOTE (default: origin)."""
    do_push(ctx, remote, branch, force=False)


@click.command()
@click.argument("remote", required=False)
@click.argument("branch", required=False)
@click.pass_context
@fatal_on_error
def forcepush(ctx: click.Context, remote: str | None, branch: str | None) -> None:
    """Like smartpush, but with --force-with-lease."""
    do_push(ctx, remote, branch, force=True)


@click.command()
@click.pass_context
@fatal_on_error
def pullsuggestions(ctx: click.Context) -> None:
    """Merge changes others pushed to origin's copy of this branch."""
    run_ctx = run_context(ctx)
    ensure_clean(run_ctx, "merge suggestions")

    src = f"origin/{run_ctx.current_branch()}"
    run_ctx.git.fetch("origin")
    diff = run_ctx.git.diff(src)
    if not diff:
        return

    console.print(f"Will merge the following suggestions:\n\n{escape(diff)}")
    while True:
        answer = Prompt.ask("\nAre you sure? \\[y/n]", default="", show_default=False).strip()
        if answer in ("y", "Y"):
            run_ctx.git.merge_ff(src)
            break
        if answer in ("n", "N") or answer.lower().startswith("q"):
            console.print("Not merging at user request...")
            break
        console.print(f"Didn't understand '{escape(answer)}'.")
