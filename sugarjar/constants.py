"""SugarJar constants and enumerations."""

import os
from enum import Enum
from pathlib import Path

# Trunk branches: never deleted, never batch-rebased
MAIN_BRANCHES: frozenset[str] = frozenset({"main", "master"})

# Preferred remote names, in order, when more than one remote exists
PREFERRED_REMOTES: tuple[str, ...] = ("upstream", "origin")

SCRATCH_BRANCH_PREFIX = "_sugar_jar"

LINT_CHECK_TYPE = "lint"
UNIT_CHECK_TYPE = "unit"

DEFAULT_MAX_LINT_CORRECTIONS = 10

# Configuration file locations
SYSTEM_CONFIG_PATH = Path("/etc/sugarjar/config.yaml")
USER_CONFIG_PATH = Path(
    os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config"))
) / "sugarjar" / "config.yaml"
REPO_CONFIG_FILE = ".sugarjar.yaml"


def scratch_branch_name(pid: int | None = None) -> str:
    """Name of the temporary branch used for squash-merge analysis."""
    return f"{SCRATCH_BRANCH_PREFIX}.{os.getpid() if pid is None else pid}"


class HostingFlavor(Enum):
    """Supported code-hosting CLIs."""

    GH = "gh"
    HUB = "hub"


class CheckOutcome(Enum):
    """Outcome of a single check execution."""

    PASS = "pass"
    FAIL = "fail"
    NOT_FOUND = "not_found"
    CORRECTED = "corrected"
    ABORTED = "aborted"
    CORRECTION_LIMIT = "correction_limit"


class LintDecision(Enum):
    """User decision after a linter modified the working tree."""

    QUIT = "quit"
    AMEND = "amend"
    REPROMPT = "reprompt"


class SafetyStrategy(Enum):
    """Which strategy decided a branch-safety verdict."""

    CHERRY = "cherry"
    SQUASH = "squash"
