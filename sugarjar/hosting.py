"""Code-hosting CLI backend (``gh`` or ``hub``) and repository URL helpers."""

import os
import shutil
import subprocess
from pathlib import Path

from sugarjar.constants import HostingFlavor
from sugarjar.exceptions import HostingCLIError
from sugarjar.logging import get_logger

logger = get_logger("hosting")

DEFAULT_HOST = "github.com"


def extract_org(repo: str) -> str:
    """Get the owning organisation or user from a repo URL or short name."""
    if repo.startswith("http"):
        return Path(repo).parent.name
    if repo.startswith("git@"):
        return repo.split(":")[1].split("/")[0]
    return repo.split("/")[0]


def canonicalize_repo(repo: str, host: str | None = None) -> str:
    """Turn an ``org/repo`` short name into an SSH URL.

    Fully-qualified URLs are returned unchanged. SSH is preferred over
    https because https prompts for credentials.
    """
    if repo.startswith(("http", "git@")):
        return repo
    canonical = f"git@{host or DEFAULT_HOST}:{repo}.git"
    logger.debug(f"canonicalized {repo} to {canonical}")
    return canonical


def forked_repo(repo: str, username: str, host: str | None = None) -> str:
    """SSH URL of ``username``'s fork of ``repo``."""
    name = Path(repo).name
    if not repo.startswith(("http", "git@")):
        name = f"{name}.git"
    return f"git@{host or DEFAULT_HOST}:{username}/{name}"


def repo_name(repo: str) -> str:
    """Repository name without a ``.git`` suffix."""
    name = Path(repo).name
    return name[: -len(".git")] if name.endswith(".git") else name


class HostingCLI:
    """Runs ``gh`` or ``hub`` subcommands."""

    def __init__(self, flavor: HostingFlavor = HostingFlavor.GH, host: str | None = None) -> None:
        """Initialize the hosting CLI wrapper.

        Args:
            flavor: Which CLI to drive
            host: GitHub Enterprise host, exported as GITHUB_HOST for hub
        """
        self.flavor = flavor
        self.host = host

    @property
    def is_gh(self) -> bool:
        return self.flavor == HostingFlavor.GH

    @property
    def is_hub(self) -> bool:
        return self.flavor == HostingFlavor.HUB

    def executable(self) -> str:
        """Locate the CLI binary.

        Raises:
            HostingCLIError: If it is not installed
        """
        path = shutil.which(self.flavor.value)
        if path is None:
            raise HostingCLIError(f"Could not find {self.flavor.value} in PATH")
        return path

    def _env(self) -> dict[str, str]:
        env = os.environ.copy()
        if self.host:
            env["GITHUB_HOST"] = self.host
        return env

    def run(
        self,
        *args: str,
        check: bool = True,
        capture: bool = True,
        cwd: str | Path | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run a CLI subcommand.

        Args:
            *args: Subcommand and arguments
            check: Raise HostingCLIError on non-zero exit
            capture: Capture output (False for interactive commands)
            cwd: Working directory

        Returns:
            Completed process result
        """
        cmd = [self.executable(), *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        result = subprocess.run(cmd, capture_output=capture, text=True, cwd=cwd, env=self._env())
        if check and result.returncode != 0:
            raise HostingCLIError(
                f"{self.flavor.value} {' '.join(args)} failed",
                command=" ".join(cmd),
                exit_code=result.returncode,
                stdout=result.stdout or "",
                stderr=result.stderr or "",
            )
        return result

    def fork_clone(self, repo: str, directory: str, *args: str) -> None:
        """Fork if needed, clone, and name the remotes origin and upstream (gh only)."""
        self.run("repo", "fork", "--clone", repo, directory, *args, capture=False)

    def fork(self, remote_name: str = "origin", cwd: str | Path | None = None) -> subprocess.CompletedProcess[str]:
        """Fork the repository in ``cwd``; failure is returned, not raised."""
        return self.run("repo", "fork", f"--remote-name={remote_name}", check=False, cwd=cwd)

    def pull_request(self, *args: str) -> int:
        """Open a pull request interactively.

        Returns:
            Exit code of the CLI
        """
        if self.is_gh:
            cmd = ("pr", "create", *args)
        else:
            cmd = ("pull-request", *args)
        logger.debug(f"Running: {self.flavor.value} {' '.join(cmd)}")
        return self.run(*cmd, check=False, capture=False).returncode

    def version(self) -> str:
        return self.run("version").stdout.strip()
