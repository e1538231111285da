"""SugarJar - git and GitHub workflow helper.

Keeps feature branches rebased, reaps merged branches and gates pushes on
lint and unit checks.
"""

__version__ = "2.0.0"
__author__ = "SugarJar Team"

from sugarjar.constants import MAIN_BRANCHES, CheckOutcome, LintDecision
from sugarjar.exceptions import SugarJarError

__all__ = [
    "__version__",
    "MAIN_BRANCHES",
    "CheckOutcome",
    "LintDecision",
    "SugarJarError",
]
