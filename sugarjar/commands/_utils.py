"""Shared utilities for SugarJar CLI commands."""

import functools
from collections.abc import Callable
from typing import Any, NoReturn, TypeVar

import click
from rich.console import Console
from rich.markup import escape

from sugarjar.config import UserConfig
from sugarjar.context import RunContext
from sugarjar.exceptions import SugarJarError
from sugarjar.logging import get_logger, set_command_context
from sugarjar.repo_setup import apply_repo_setup

console = Console(highlight=False)
logger = get_logger("commands")

F = TypeVar("F", bound=Callable[..., Any])


def user_config(ctx: click.Context) -> UserConfig:
    """The user configuration loaded by the CLI group."""
    obj = ctx.find_root().obj or {}
    return obj.get("config") or UserConfig()


def run_context(ctx: click.Context, setup: bool = True) -> RunContext:
    """Create the per-invocation context for the current repository.

    Args:
        ctx: Click context of the running command
        setup: Apply per-repository git settings (hub host, commit template)

    Returns:
        RunContext bound to the repository containing the working directory
    """
    set_command_context(command=ctx.info_name)
    run_ctx = RunContext.create(user_config(ctx))
    if setup:
        apply_repo_setup(run_ctx)
    return run_ctx


def die(message: str) -> NoReturn:
    """Print a fatal error and exit with status 1."""
    console.print(f"[bold red]FATAL:[/bold red] {escape(message)}")
    raise SystemExit(1)


def indent(text: str) -> str:
    """Indent each line of captured command output with a tab."""
    return "".join(f"\t{line}" for line in text.splitlines(keepends=True))


def ensure_clean(run_ctx: RunContext, action: str) -> None:
    """Refuse to continue on a dirty tree unless ``ignore_dirty`` is set."""
    if not run_ctx.git.is_dirty():
        return
    if run_ctx.user_config.ignore_dirty:
        console.print(
            "[yellow]Your repo is dirty, but --ignore-dirty was specified, so "
            "carrying on anyway.[/yellow]"
        )
        return
    die(f"Your repo is dirty, so I am not going to {action}. Please commit or amend first.")


def fatal_on_error(func: F) -> F:
    """Turn SugarJar errors raised by a command into a fatal exit."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except SugarJarError as e:
            logger.debug(f"Command failed: {e}", exc_info=True)
            die(e.message)

    return wrapper  # type: ignore[return-value]
