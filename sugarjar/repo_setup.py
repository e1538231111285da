"""Per-repository git settings applied when a command starts."""

from pathlib import Path

from sugarjar.context import RunContext
from sugarjar.exceptions import ConfigurationError
from sugarjar.logging import get_logger

logger = get_logger("repo_setup")


def set_hub_host(ctx: RunContext) -> None:
    """Point ``hub`` at the configured GitHub host for this repository.

    An existing local ``hub.host`` is never overwritten: it was most likely
    set here on purpose.
    """
    config = ctx.user_config
    if config.github_cli != "hub" or not config.github_host:
        return

    current = ctx.git.get_config("hub.host")
    if current is None:
        logger.info(f"Setting repo hub.host = {config.github_host}")
        ctx.git.set_config("hub.host", config.github_host)
    elif current == config.github_host:
        logger.debug("Repo hub.host already set correctly")
    else:
        logger.debug(
            f"Not overwriting repo hub.host. Already set to {current}. "
            f"To change it, run `git config --local --add hub.host {config.github_host}`"
        )


def set_commit_template(ctx: RunContext) -> None:
    """Configure the commit template named by the repository config.

    Raises:
        ConfigurationError: If the template file does not exist
    """
    template = ctx.repo_config.commit_template
    if not template:
        return

    realpath = Path(template) if template.startswith("/") else ctx.git.repo_path / template
    if not realpath.exists():
        raise ConfigurationError(
            f"Repo config specifies {template} as the commit template, "
            "but that file does not exist."
        )

    current = ctx.git.get_config("commit.template")
    if current == template:
        logger.debug("Commit template already set correctly")
        return
    if current is not None:
        logger.warning(f"Updating repo-specific commit template from {current} to {template}")

    logger.debug(f"Setting repo-specific commit template to {template} per sugarjar repo config.")
    ctx.git.set_config("commit.template", template)


def apply_repo_setup(ctx: RunContext) -> None:
    """Apply every per-repository setting."""
    set_hub_host(ctx)
    set_commit_template(ctx)
