"""SugarJar hosting commands - clone with forks and open pull requests."""

from pathlib import Path

import click

from sugarjar import __version__
from sugarjar.commands._utils import console, die, fatal_on_error, run_context, user_config
from sugarjar.config import UserConfig
from sugarjar.git.base import run_git
from sugarjar.git.ops import GitOps
from sugarjar.hosting import HostingCLI, canonicalize_repo, extract_org, forked_repo, repo_name
from sugarjar.logging import get_logger

logger = get_logger("hosting_cmd")

REMOTES_CONFIGURED = 'Remotes "origin" and "upstream" configured.'


def hosting_cli(config: UserConfig) -> HostingCLI:
    return HostingCLI(config.hosting_flavor, config.github_host)


def setup_fork(config: UserConfig, repo: str, directory: Path) -> None:
    """Fork a freshly cloned repository with hub and arrange its remotes.

    The clone's ``origin`` becomes ``upstream`` and the user's fork becomes
    ``origin``. Repositories the user owns are left alone.
    """
    org = extract_org(repo)
    logger.debug(f"Comparing org {org} to ghuser {config.github_user}")
    if org == config.github_user:
        console.print('Cloned forked or self-owned repo. Not creating "upstream".')
        return

    result = hosting_cli(config).fork(remote_name="origin", cwd=directory)
    if result.returncode == 0:
        console.print(f"Forked {repo_name(repo)} to {config.github_user}")
        return

    if "SAML enforcement" in (result.stdout or ""):
        die(
            "Forking the repo failed because the repo requires SAML "
            f"authentication. Full output:\n\n\t{result.stdout}"
        )

    # hub fails when the fork already exists; assume that and wire it up
    console.print(f"Fork ({config.github_user}/{repo_name(repo)}) detected.")
    git = GitOps(directory)
    git._run("remote", "rename", "origin", "upstream")
    git._run("remote", "add", "origin", forked_repo(repo, config.github_user or "", config.github_host))


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("repo")
@click.argument("directory", required=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
@fatal_on_error
def smartclone(ctx: click.Context, repo: str, directory: str | None, args: tuple[str, ...]) -> None:
    """Clone REPO, forking it and configuring origin and upstream remotes."""
    config = user_config(ctx)
    directory = directory or repo_name(repo)
    console.print(f"Cloning {repo_name(repo)}...")

    cli = hosting_cli(config)
    if cli.is_gh:
        cli.fork_clone(canonicalize_repo(repo, config.github_host), directory, *args)
    else:
        run_git("clone", canonicalize_repo(repo, config.github_host), directory, *args)
        if config.github_host:
            GitOps(directory).set_config("hub.host", config.github_host)
        setup_fork(config, repo, Path(directory))
    console.print(REMOTES_CONFIGURED)


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
@fatal_on_error
def smartpullrequest(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Open a pull request for the current branch."""
    run_ctx = run_context(ctx)
    if run_ctx.git.is_dirty():
        die(
            "Your repo is dirty, so I am not going to create a pull request. "
            "You should commit or amend and push it to your remote first."
        )
    raise SystemExit(hosting_cli(run_ctx.user_config).pull_request(*args))


@click.command()
@click.pass_context
@fatal_on_error
def version(ctx: click.Context) -> None:
    """Show the versions of sugarjar, the hosting CLI and git."""
    config = user_config(ctx)
    click.echo(f"sugarjar version {__version__}")
    cli = hosting_cli(config)
    click.echo(cli.version())
    # hub already prints the git version
    if cli.is_gh:
        click.echo(run_git("version").stdout.strip())
