"""Rebasing branches onto the branch they track."""

from __future__ import annotations

from dataclasses import dataclass

from sugarjar.context import RunContext
from sugarjar.logging import get_logger

logger = get_logger("rebase")


@dataclass
class RebaseResult:
    """Outcome of rebasing one branch."""

    branch: str
    base: str
    succeeded: bool
    stdout: str = ""
    stderr: str = ""
    tracks_push_target: bool = False


class RebaseCoordinator:
    """Computes a branch's base, fetches its remote and rebases onto it."""

    def __init__(self, ctx: RunContext) -> None:
        self.ctx = ctx
        self.git = ctx.git

    def _fetch_for(self, base: str) -> None:
        remote = base.split("/", 1)[0] if "/" in base else None
        if remote and remote in self.git.remotes():
            self.git.fetch(remote)
        else:
            self.ctx.fetch_upstream()

    def rebase_onto_tracked(self, branch: str | None = None) -> RebaseResult:
        """Rebase a branch (default: the current one) onto its tracked branch.

        A conflicting rebase is left in progress so the user can resolve
        it; the captured output is returned for display.

        Args:
            branch: Branch to rebase, checked out first if not current

        Returns:
            RebaseResult with the base used and the rebase output
        """
        current = self.git.current_branch()
        if branch and branch != current:
            self.git.checkout(branch)
            current = branch

        base = self.ctx.tracked_branch()
        logger.debug(f"Fetching remote for {base}")
        self._fetch_for(base)

        own_target = self.ctx.tracks_push_target(current, base)
        if own_target:
            logger.warning(
                f"This branch is tracking {base}, which is probably your downstream "
                "(where you push _to_) as opposed to your upstream (where you pull "
                "_from_). This means that rebasing on it probably does nothing. You "
                'probably want to do a "git branch -u upstream".'
            )

        logger.debug(f"Rebasing {current} onto {base}")
        proc = self.git.rebase(base)
        return RebaseResult(
            branch=current,
            base=base,
            succeeded=proc.returncode == 0,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            tracks_push_target=own_target,
        )

    def rebase_all_onto_tracked(self) -> list[RebaseResult]:
        """Rebase every non-main branch onto its tracked branch.

        A failed rebase is aborted so the batch can move on; the failure
        is reported in that branch's result. The starting branch is
        checked out again at the end (or the main branch if it is gone).

        Returns:
            One RebaseResult per non-main branch
        """
        start = self.git.current_branch()
        results = []
        for branch in self.git.all_branches():
            if self.ctx.is_main_branch(branch):
                continue
            self.git.checkout(branch)
            result = self.rebase_onto_tracked()
            if not result.succeeded:
                logger.debug(f"{branch} failed rebase, aborting")
                self.git.abort_rebase()
            results.append(result)

        if start in self.git.all_branches():
            self.git.checkout(start)
        else:
            self.ctx.checkout_main_branch()
        return results
