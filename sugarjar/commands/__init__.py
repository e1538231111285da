"""SugarJar CLI commands."""

from sugarjar.commands.branch_cmd import bclean, bcleanall, binfo, br, co, feature, smartlog
from sugarjar.commands.check_cmd import lint, unit
from sugarjar.commands.commit_cmd import amend, qamend
from sugarjar.commands.hosting_cmd import smartclone, smartpullrequest, version
from sugarjar.commands.push_cmd import forcepush, pullsuggestions, smartpush
from sugarjar.commands.rebase_cmd import up, upall

__all__ = [
    "amend",
    "bclean",
    "bcleanall",
    "binfo",
    "br",
    "co",
    "feature",
    "forcepush",
    "lint",
    "pullsuggestions",
    "qamend",
    "smartclone",
    "smartlog",
    "smartpullrequest",
    "smartpush",
    "unit",
    "up",
    "upall",
    "version",
]
