"""Per-invocation state shared by the branch, rebase and check components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sugarjar.config import RepoConfig, UserConfig
from sugarjar.constants import MAIN_BRANCHES, PREFERRED_REMOTES
from sugarjar.exceptions import UpstreamResolutionError
from sugarjar.git.ops import GitOps
from sugarjar.logging import get_logger

if TYPE_CHECKING:
    from sugarjar.checks import CheckList

logger = get_logger("context")

_UNRESOLVED = object()


def choose_upstream(remotes: list[str]) -> str | None:
    """Pick the remote to treat as upstream.

    One remote is used as-is; among several, ``upstream`` wins over
    ``origin``. A repository without remotes has no upstream.

    Args:
        remotes: Configured remote names

    Returns:
        Chosen remote name, or None if there are no remotes

    Raises:
        UpstreamResolutionError: If several remotes exist and none is preferred
    """
    if not remotes:
        return None
    if len(remotes) == 1:
        return remotes[0]
    for preferred in PREFERRED_REMOTES:
        if preferred in remotes:
            return preferred
    raise UpstreamResolutionError('Could not determine "upstream" remote to use', remotes)


@dataclass
class RunContext:
    """State for one command invocation.

    Created when a command starts and discarded when it ends. Caches the
    resolved upstream remote and the resolved check lists so neither is
    computed twice within one run.
    """

    git: GitOps
    repo_config: RepoConfig = field(default_factory=RepoConfig)
    user_config: UserConfig = field(default_factory=UserConfig)
    check_cache: dict[str, CheckList] = field(default_factory=dict)
    _upstream: object = field(default=_UNRESOLVED, repr=False)

    @classmethod
    def create(cls, user_config: UserConfig | None = None, repo_path: str = ".") -> RunContext:
        """Build a context for the repository containing ``repo_path``."""
        git = GitOps(repo_path)
        return cls(
            git=git,
            repo_config=RepoConfig.load(git.repo_path),
            user_config=user_config or UserConfig(),
        )

    @property
    def upstream(self) -> str | None:
        """The upstream remote, resolved once per invocation."""
        if self._upstream is _UNRESOLVED:
            remotes = self.git.remotes()
            logger.debug(f"remotes is {remotes}")
            self._upstream = choose_upstream(remotes)
        return self._upstream  # type: ignore[return-value]

    def fetch_upstream(self) -> None:
        """Fetch the upstream remote, if there is one."""
        remote = self.upstream
        if remote:
            self.git.fetch(remote)

    def current_branch(self) -> str:
        return self.git.current_branch()

    def main_branch(self) -> str:
        """``main`` if such a local branch exists, else ``master``."""
        return "main" if "main" in self.git.all_branches() else "master"

    def most_main(self) -> str:
        """The main branch on the upstream remote (or locally without one)."""
        remote = self.upstream
        main = self.main_branch()
        return f"{remote}/{main}" if remote else main

    def tracked_branch(self, branch: str | None = None) -> str:
        """A branch's tracking ref (default: current), falling back to most-main."""
        result = self.git.tracking_ref(branch)
        if result.returncode != 0:
            return self.most_main()
        return result.stdout.strip()

    def checkout_main_branch(self) -> None:
        self.git.checkout(self.main_branch())

    @staticmethod
    def is_main_branch(branch: str) -> bool:
        return branch in MAIN_BRANCHES

    def tracks_push_target(self, branch: str, base: str) -> bool:
        """True if a non-main ``branch`` tracks ``<remote>/<branch>``.

        That is usually where the user pushes to rather than pulls from,
        so rebasing onto it does nothing useful.
        """
        if self.is_main_branch(branch):
            return False
        return base in {f"{remote}/{branch}" for remote in self.git.remotes()}
