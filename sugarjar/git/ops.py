"""GitOps -- the git operations SugarJar's workflows are built from."""

import subprocess
from pathlib import Path

from sugarjar.git.base import GitRunner
from sugarjar.git.parsers import CherryEntry, parse_cherry, parse_ref_list, parse_remote_list
from sugarjar.logging import get_logger

logger = get_logger("git.ops")


class GitOps(GitRunner):
    """Git operations for branch management, rebasing and inspection.

    Methods whose failure is an expected outcome (rebase, squash merge,
    tracking lookup) return the completed process and leave the decision
    to the caller. Everything else raises GitError on failure.
    """

    def __init__(self, repo_path: str | Path = ".") -> None:
        """Initialize git operations.

        Args:
            repo_path: Any path inside the git repository
        """
        super().__init__(repo_path)

    def all_branches(self) -> list[str]:
        """List local branch names.

        Returns:
            Branch names in git's sort order
        """
        result = self._run("branch", "--format", "%(refname)")
        return parse_ref_list(result.stdout)

    def remotes(self) -> list[str]:
        """List configured remote names."""
        result = self._run("remote")
        return parse_remote_list(result.stdout)

    def tracking_ref(self, branch: str | None = None) -> subprocess.CompletedProcess[str]:
        """Look up the upstream tracking ref of a branch (default: current).

        Returns:
            Completed process; stdout holds ``<remote>/<branch>`` on success
        """
        return self._run(
            "rev-parse", "--abbrev-ref", "--symbolic-full-name", f"{branch or ''}@{{u}}", check=False
        )

    def fetch(self, remote: str) -> None:
        """Fetch from a remote.

        Args:
            remote: Remote name
        """
        self._run("fetch", remote)
        logger.debug(f"Fetched {remote}")

    def checkout(self, ref: str, create: bool = False, start_point: str | None = None) -> None:
        """Checkout a branch, optionally creating it.

        Args:
            ref: Branch name or commit
            create: Create ``ref`` as a new branch
            start_point: Where a created branch starts
        """
        args = ["checkout"]
        if create:
            args.append("-b")
        args.append(ref)
        if start_point:
            args.append(start_point)
        self._run(*args)
        logger.debug(f"Checked out {ref}")

    def checkout_args(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run ``git checkout`` with arbitrary user arguments."""
        return self._run("checkout", *args)

    def delete_branch(self, branch: str, force: bool = False) -> None:
        """Delete a branch.

        Args:
            branch: Branch name to delete
            force: Force delete even if not merged
        """
        flag = "-D" if force else "-d"
        self._run("branch", flag, branch)
        logger.debug(f"Deleted branch {branch}")

    def cherry(self, upstream: str, head: str) -> list[CherryEntry]:
        """Classify commits on ``head`` by whether ``upstream`` has them.

        Args:
            upstream: Ref to compare against
            head: Branch whose commits are classified

        Returns:
            Parsed ``git cherry -v`` entries
        """
        result = self._run("cherry", "-v", upstream, head)
        return parse_cherry(result.stdout)

    def merge_squash(self, branch: str) -> subprocess.CompletedProcess[str]:
        """Squash-merge a branch into the index without committing."""
        return self._run("merge", "--squash", branch, check=False)

    def abort_merge(self) -> None:
        """Abort an in-progress merge."""
        self._run("merge", "--abort", check=False)

    def staged_diff(self) -> str:
        """Get the diff of staged changes."""
        return self._run("diff", "--staged").stdout

    def diff(self, *args: str) -> str:
        """Get the diff of unstaged changes, or against the given refs."""
        return self._run("diff", *args).stdout

    def rebase(self, onto: str) -> subprocess.CompletedProcess[str]:
        """Rebase the current branch onto another ref.

        A conflicting rebase is left in progress for the caller.

        Args:
            onto: Ref to rebase onto

        Returns:
            Completed process of the rebase
        """
        result = self._run("rebase", onto, check=False)
        if result.returncode == 0:
            logger.debug(f"Rebased onto {onto}")
        return result

    def abort_rebase(self) -> None:
        """Abort an in-progress rebase."""
        self._run("rebase", "--abort", check=False)
        logger.debug("Aborted rebase")

    def reset_hard(self, ref: str) -> None:
        """Reset index and working tree to ``ref``."""
        self._run("reset", "--hard", ref)

    def amend(self, *args: str, no_edit: bool = True) -> subprocess.CompletedProcess[str]:
        """Amend the current commit.

        Args:
            *args: Extra ``git commit`` arguments (for example ``-a``)
            no_edit: Keep the existing commit message
        """
        cmd = ["commit", "--amend"]
        if no_edit:
            cmd.append("--no-edit")
        return self._run(*cmd, *args)

    def push(self, remote: str, branch: str, force_with_lease: bool = False) -> subprocess.CompletedProcess[str]:
        """Push a branch to a remote.

        Args:
            remote: Remote name
            branch: Branch to push
            force_with_lease: Overwrite the remote branch if unchanged since fetch
        """
        args = ["push", remote, branch]
        if force_with_lease:
            args.append("--force-with-lease")
        result = self._run(*args)
        logger.debug(f"Pushed {branch} to {remote}")
        return result

    def merge_ff(self, ref: str) -> subprocess.CompletedProcess[str]:
        """Fast-forward merge ``ref`` into the current branch."""
        return self._run("merge", "--ff", ref)

    def get_config(self, key: str, local: bool = True) -> str | None:
        """Read a git config value.

        Returns:
            The value, or None if unset
        """
        args = ["config"]
        if local:
            args.append("--local")
        result = self._run(*args, "--get", key, check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def set_config(self, key: str, value: str) -> None:
        """Set a repository-local git config value."""
        self._run("config", "--local", key, value)

    def log_graph(self, *revisions: str) -> str:
        """Render a decorated one-line log graph for the given revisions."""
        result = self._run("log", "--graph", "--oneline", "--decorate", "--boundary", *revisions)
        return result.stdout

    def branch_verbose(self) -> str:
        """Render ``git branch -v``."""
        return self._run("branch", "-v").stdout

    def version(self) -> str:
        """Get the git version string."""
        return self._run("version").stdout.strip()
