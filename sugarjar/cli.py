"""SugarJar command-line interface."""

import click

from sugarjar import __version__
from sugarjar.commands import (
    amend,
    bclean,
    bcleanall,
    binfo,
    br,
    co,
    feature,
    forcepush,
    lint,
    pullsuggestions,
    qamend,
    smartclone,
    smartlog,
    smartpullrequest,
    smartpush,
    unit,
    up,
    upall,
    version,
)
from sugarjar.commands._utils import console, die
from sugarjar.config import UserConfig
from sugarjar.exceptions import ConfigurationError
from sugarjar.logging import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="sugarjar")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"], case_sensitive=False),
    default=None,
    help="Logging verbosity",
)
@click.option("--color/--no-color", default=None, help="Colourise output")
@click.option("--github-user", default=None, help="Your GitHub username")
@click.option("--github-host", default=None, help="GitHub Enterprise host")
@click.option("--github-cli", type=click.Choice(["gh", "hub"]), default=None, help="Hosting CLI to drive")
@click.option("--ignore-dirty", is_flag=True, help="Carry on even if the repo is dirty")
@click.option(
    "--ignore-prerun-failure",
    is_flag=True,
    help="Push even if the pre-push checks fail",
)
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: str | None,
    color: bool | None,
    github_user: str | None,
    github_host: str | None,
    github_cli: str | None,
    ignore_dirty: bool,
    ignore_prerun_failure: bool,
) -> None:
    """SugarJar - helpers for a feature-branch git workflow."""
    ctx.ensure_object(dict)

    overrides = {
        "log_level": log_level.lower() if log_level else None,
        "color": color,
        "github_user": github_user,
        "github_host": github_host,
        "github_cli": github_cli,
        "ignore_dirty": ignore_dirty or None,
        "ignore_prerun_failure": ignore_prerun_failure or None,
    }
    try:
        config = UserConfig.load(overrides=overrides)
    except ConfigurationError as e:
        die(f"{e.message}: {e.details}" if e.details else e.message)

    setup_logging(level=config.log_level, log_dir=config.log_dir, color=config.color)
    if not config.color:
        console.no_color = True
    ctx.obj["config"] = config


# Register implemented commands
cli.add_command(amend)
cli.add_command(bclean)
cli.add_command(bcleanall)
cli.add_command(binfo)
cli.add_command(br)
cli.add_command(co)
cli.add_command(feature)
cli.add_command(forcepush)
cli.add_command(forcepush, name="fpush")
cli.add_command(lint)
cli.add_command(pullsuggestions)
cli.add_command(pullsuggestions, name="ps")
cli.add_command(qamend)
cli.add_command(qamend, name="amendq")
cli.add_command(smartclone)
cli.add_command(smartclone, name="sclone")
cli.add_command(smartlog)
cli.add_command(smartlog, name="sl")
cli.add_command(smartpullrequest)
cli.add_command(smartpullrequest, name="spr")
cli.add_command(smartpullrequest, name="smartpr")
cli.add_command(smartpush)
cli.add_command(smartpush, name="spush")
cli.add_command(unit)
cli.add_command(up)
cli.add_command(upall)
cli.add_command(version)


def main() -> None:
    cli(prog_name="sj")


if __name__ == "__main__":
    main()
