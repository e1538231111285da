"""SugarJar git package -- structured git operations.

Re-exports core classes for convenient access:
    from sugarjar.git import GitOps, GitRunner
"""

from sugarjar.git.base import GitRunner, find_repo_root, run_git
from sugarjar.git.ops import GitOps
from sugarjar.git.parsers import (
    CherryEntry,
    branch_from_ref,
    parse_cherry,
    parse_ref_list,
    parse_remote_list,
)

__all__ = [
    "GitRunner",
    "GitOps",
    "find_repo_root",
    "run_git",
    "CherryEntry",
    "branch_from_ref",
    "parse_cherry",
    "parse_ref_list",
    "parse_remote_list",
]
