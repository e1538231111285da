"""Parsers for the line-oriented git output SugarJar consumes.

Each parser accepts the raw stdout of one git command and either returns
structured values or raises OutputParseError naming the offending line.
"""

import re
from dataclasses import dataclass

from sugarjar.exceptions import OutputParseError

_CHERRY_LINE = re.compile(r"^(?P<sigil>[+-]) (?P<sha>[0-9a-f]{4,64})(?: (?P<subject>.*))?$")
_REMOTE_NAME = re.compile(r"^[^\s]+$")


@dataclass(frozen=True)
class CherryEntry:
    """One commit from ``git cherry -v`` output."""

    sha: str
    subject: str
    upstream: bool

    @property
    def unmerged(self) -> bool:
        """True if no equivalent change exists upstream."""
        return not self.upstream


def _lines(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


def branch_from_ref(ref: str) -> str:
    """Derive a branch name from a fully-qualified ref.

    Drops the first two path segments, so ``refs/heads/feature/x`` becomes
    ``feature/x``.

    Args:
        ref: Fully-qualified reference

    Returns:
        Branch name

    Raises:
        OutputParseError: If the ref has fewer than three segments
    """
    parts = ref.strip().split("/")
    if len(parts) < 3 or not all(parts):
        raise OutputParseError(f"Not a fully-qualified ref: {ref!r}", line=ref, grammar="ref")
    return "/".join(parts[2:])


def parse_ref_list(output: str) -> list[str]:
    """Parse ``git branch --format %(refname)`` output into branch names."""
    return [branch_from_ref(line) for line in _lines(output)]


def parse_remote_list(output: str) -> list[str]:
    """Parse ``git remote`` output into remote names."""
    remotes = []
    for line in _lines(output):
        if not _REMOTE_NAME.match(line):
            raise OutputParseError(f"Invalid remote name: {line!r}", line=line, grammar="remote")
        remotes.append(line)
    return remotes


def parse_cherry(output: str) -> list[CherryEntry]:
    """Parse ``git cherry -v`` output.

    Lines are ``<sigil> <sha> <subject>`` where ``-`` marks a commit whose
    change already exists upstream and ``+`` one that does not.

    Args:
        output: Raw stdout of ``git cherry -v``

    Returns:
        One CherryEntry per commit, in output order

    Raises:
        OutputParseError: If any line does not match the grammar
    """
    entries = []
    for line in _lines(output):
        match = _CHERRY_LINE.match(line)
        if not match:
            raise OutputParseError(f"Unexpected cherry output: {line!r}", line=line, grammar="cherry")
        entries.append(
            CherryEntry(
                sha=match.group("sha"),
                subject=match.group("subject") or "",
                upstream=match.group("sigil") == "-",
            )
        )
    return entries
