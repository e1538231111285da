"""Branch-safety analysis and safe branch deletion.

A branch is safe to delete when all of its content is already reachable
from its tracked branch. Two strategies are tried in order:

1. ``git cherry``: every commit on the branch has a patch-equivalent
   commit upstream. Cheap, and sufficient after rebase- or ff-merges.
2. Squash merge: the branch is squash-merged onto a scratch branch
   created at the tracked branch; an empty staged diff proves the content
   is already there. Needed after the host squash-merged a pull request,
   which cherry cannot see.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from sugarjar.constants import SafetyStrategy, scratch_branch_name
from sugarjar.context import RunContext
from sugarjar.exceptions import GitError, OutputParseError, ProtectedBranchError
from sugarjar.git.ops import GitOps
from sugarjar.logging import get_logger
from sugarjar.rebase import RebaseCoordinator

logger = get_logger("safety")


@dataclass
class SafetyReport:
    """Verdict of a branch-safety analysis."""

    branch: str
    safe: bool
    strategy: SafetyStrategy | None
    tracked: str
    detail: str = ""


@dataclass
class CleanResult:
    """Outcome of trying to delete one branch."""

    branch: str
    reaped: bool
    report: SafetyReport | None = None


@contextmanager
def scratch_branch(git: GitOps, base: str, return_to: str) -> Iterator[str]:
    """Check out a temporary branch at ``base`` for the duration of a block.

    On exit, on every path, any unfinished merge is aborted and the index
    and working tree are reset. Then the previous branch is checked out
    again and the scratch branch is deleted.

    Args:
        git: Git operations for the repository
        base: Ref the scratch branch starts at
        return_to: Branch to check out afterwards

    Yields:
        Name of the scratch branch
    """
    name = scratch_branch_name()
    git.checkout(name, create=True, start_point=base)
    try:
        yield name
    finally:
        git.abort_merge()
        git.reset_hard(base)
        git.checkout(return_to)
        git.delete_branch(name, force=True)


class BranchSafetyAnalyzer:
    """Decides whether a branch can be deleted without losing work."""

    def __init__(self, ctx: RunContext) -> None:
        self.ctx = ctx
        self.git = ctx.git

    def base_for(self, branch: str) -> str:
        """Ref whose content ``branch`` must be contained in.

        A branch tracking its own push destination would trivially look
        merged, so such branches are compared against most-main instead.
        """
        tracked = self.ctx.tracked_branch(branch)
        if self.ctx.tracks_push_target(branch, tracked):
            logger.debug(f"{branch} tracks {tracked}, comparing against {self.ctx.most_main()}")
            return self.ctx.most_main()
        return tracked

    def is_safe_to_delete(self, branch: str) -> bool:
        """Return True only if all of ``branch``'s content is upstream."""
        return self.analyze(branch).safe

    def analyze(self, branch: str) -> SafetyReport:
        """Run the cherry check, then the squash check if needed.

        Failures of the underlying git commands yield an unsafe verdict
        rather than an exception.

        Args:
            branch: Local branch name

        Returns:
            SafetyReport naming the deciding strategy
        """
        tracked = self.base_for(branch)
        try:
            entries = self.git.cherry(tracked, branch)
        except (GitError, OutputParseError) as e:
            logger.debug(f"cherry comparison of {branch} against {tracked} failed: {e}")
            return SafetyReport(branch, False, SafetyStrategy.CHERRY, tracked, str(e))

        unmerged = [entry for entry in entries if entry.unmerged]
        if not unmerged:
            logger.debug(f"cherry-pick shows branch {branch} obviously safe to delete")
            return SafetyReport(branch, True, SafetyStrategy.CHERRY, tracked)

        logger.debug(f"{len(unmerged)} commits on {branch} not found by cherry, trying squash merge")
        try:
            return self._squash_check(branch, tracked)
        except GitError as e:
            logger.debug(f"squash-merge check of {branch} failed: {e}")
            return SafetyReport(branch, False, SafetyStrategy.SQUASH, tracked, str(e))

    def _squash_check(self, branch: str, tracked: str) -> SafetyReport:
        if self.git.has_uncommitted_changes():
            return SafetyReport(
                branch, False, SafetyStrategy.SQUASH, tracked,
                "working tree has uncommitted changes",
            )

        with scratch_branch(self.git, tracked, self.git.current_branch()):
            merge = self.git.merge_squash(branch)
            if merge.returncode != 0:
                logger.debug(
                    "Failed to merge changes into current main. This means we could "
                    "not figure out if this is merged or not. Check manually and use "
                    f"'git branch -D {branch}' if it is safe to do so."
                )
                return SafetyReport(
                    branch, False, SafetyStrategy.SQUASH, tracked,
                    "squash merge conflicted; merge state is indeterminate",
                )
            diff = self.git.staged_diff()

        logger.debug(f"Squash-merged diff: {diff}")
        if diff.strip():
            logger.debug("After squash-merging, this branch is NOT fully merged to main")
            return SafetyReport(branch, False, SafetyStrategy.SQUASH, tracked, "squash merge is not empty")
        logger.debug("After squash-merging, this branch appears safe to delete")
        return SafetyReport(branch, True, SafetyStrategy.SQUASH, tracked)


class BranchCleaner:
    """Deletes branches after proving they hold no unmerged work."""

    def __init__(
        self,
        ctx: RunContext,
        analyzer: BranchSafetyAnalyzer | None = None,
        coordinator: RebaseCoordinator | None = None,
    ) -> None:
        self.ctx = ctx
        self.git = ctx.git
        self.analyzer = analyzer or BranchSafetyAnalyzer(ctx)
        self.coordinator = coordinator or RebaseCoordinator(ctx)

    def clean(self, branch: str) -> CleanResult:
        """Delete ``branch`` if it is safe to do so.

        Main branches are refused before any analysis happens.

        Args:
            branch: Local branch name

        Returns:
            CleanResult; ``reaped`` is False when unmerged work may exist

        Raises:
            ProtectedBranchError: If ``branch`` is a main branch
        """
        if self.ctx.is_main_branch(branch):
            raise ProtectedBranchError(branch)

        logger.debug("Fetch relevant remote...")
        self.ctx.fetch_upstream()
        report = self.analyzer.analyze(branch)
        if not report.safe:
            return CleanResult(branch, False, report)

        logger.debug("branch deemed safe to delete...")
        self.ctx.checkout_main_branch()
        self.git.delete_branch(branch, force=True)
        result = self.coordinator.rebase_onto_tracked()
        if not result.succeeded:
            logger.warning(f"Could not rebase {result.branch} on {result.base}; aborting that rebase")
            self.git.abort_rebase()
        return CleanResult(branch, True, report)

    def clean_all(self) -> list[CleanResult]:
        """Try to delete every non-main branch.

        Afterwards the branch that was checked out at the start is checked
        out again, or the main branch if that one was deleted.

        Returns:
            One CleanResult per non-main branch
        """
        start = self.git.current_branch()
        results = []
        for branch in self.git.all_branches():
            if self.ctx.is_main_branch(branch):
                logger.debug(f"Skipping {branch}")
                continue
            results.append(self.clean(branch))

        if start in self.git.all_branches():
            self.git.checkout(start)
        else:
            self.ctx.checkout_main_branch()
        return results
