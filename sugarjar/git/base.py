"""GitRunner base class -- low-level git command execution."""

import subprocess
from pathlib import Path

from sugarjar.exceptions import GitError, NotInRepositoryError
from sugarjar.git.parsers import branch_from_ref
from sugarjar.logging import get_logger

logger = get_logger("git.base")


def find_repo_root(start: str | Path = ".") -> Path | None:
    """Walk up from ``start`` to the directory containing ``.git``.

    A ``.git`` file (worktree or submodule) counts as well as a directory.

    Args:
        start: Directory to start from

    Returns:
        Repository root, or None when not inside a repository
    """
    path = Path(start).resolve()
    for candidate in (path, *path.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


class GitRunner:
    """Low-level git command runner bound to one repository.

    Provides the subprocess execution layer and the basic read-only
    queries (current_branch, is_dirty). Higher-level operations live in
    GitOps which inherits this class.
    """

    def __init__(self, repo_path: str | Path = ".") -> None:
        """Initialize git runner.

        Args:
            repo_path: Any path inside the git repository

        Raises:
            NotInRepositoryError: If the path is not inside a git repository
        """
        root = find_repo_root(repo_path)
        if root is None:
            raise NotInRepositoryError(
                "sugarjar must be run from inside a git repo",
                details={"path": str(Path(repo_path).resolve())},
            )
        self.repo_path = root

    def _run(
        self,
        *args: str,
        check: bool = True,
        capture: bool = True,
        timeout: int | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run a git command.

        Args:
            *args: Git command arguments
            check: Whether to raise on non-zero exit
            capture: Whether to capture output
            timeout: Timeout in seconds, None to wait indefinitely

        Returns:
            Completed process result

        Raises:
            GitError: If the command fails (when check=True) or times out
        """
        cmd = ["git", "-C", str(self.repo_path), *args]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=capture,
                text=True,
                check=check,
                timeout=timeout,
            )
            return result
        except subprocess.TimeoutExpired as e:
            raise GitError(
                f"Git command timed out after {timeout}s: {' '.join(args)}",
                command=" ".join(cmd),
                exit_code=-1,
            ) from e
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"Git command failed: {e.stderr.strip() if e.stderr else str(e)}",
                command=" ".join(cmd),
                exit_code=e.returncode,
                stdout=e.stdout or "",
                stderr=e.stderr or "",
            ) from e

    def current_branch(self) -> str:
        """Get the current branch name from the symbolic HEAD ref.

        Returns:
            Current branch name

        Raises:
            GitError: If HEAD is detached
        """
        result = self._run("symbolic-ref", "HEAD")
        return branch_from_ref(result.stdout.strip())

    def has_uncommitted_changes(self) -> bool:
        """Check for staged or unstaged changes to tracked files."""
        result = self._run("status", "--porcelain", "--untracked-files=no")
        return bool(result.stdout.strip())

    def is_dirty(self) -> bool:
        """Check whether tracked files have unstaged modifications.

        Returns:
            True if ``git diff --quiet`` reports differences
        """
        result = self._run("diff", "--quiet", check=False)
        return result.returncode != 0


def run_git(*args: str, cwd: str | Path | None = None) -> subprocess.CompletedProcess[str]:
    """Run a git command that does not need an existing repository (clone).

    Raises:
        GitError: If the command fails
    """
    cmd = ["git", *args]
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        return subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as e:
        raise GitError(
            f"Git command failed: {e.stderr.strip() if e.stderr else str(e)}",
            command=" ".join(cmd),
            exit_code=e.returncode,
            stdout=e.stdout or "",
            stderr=e.stderr or "",
        ) from e
