"""Tests for sugarjar.hosting module."""

import subprocess
from unittest.mock import patch

import pytest

from sugarjar.constants import HostingFlavor
from sugarjar.exceptions import HostingCLIError
from sugarjar.hosting import HostingCLI, canonicalize_repo, extract_org, forked_repo, repo_name


class TestRepoHelpers:
    """Tests for repository URL helpers."""

    @pytest.mark.parametrize(
        ("repo", "org"),
        [
            ("jaymzh/sugarjar", "jaymzh"),
            ("git@github.com:jaymzh/sugarjar.git", "jaymzh"),
            ("https://github.com/jaymzh/sugarjar.git", "jaymzh"),
        ],
    )
    def test_extract_org(self, repo: str, org: str) -> None:
        assert extract_org(repo) == org

    def test_canonicalize_short_name(self) -> None:
        assert canonicalize_repo("org/proj") == "git@github.com:org/proj.git"

    def test_canonicalize_uses_host(self) -> None:
        assert canonicalize_repo("org/proj", "ghe.corp.com") == "git@ghe.corp.com:org/proj.git"

    def test_canonicalize_leaves_urls_alone(self) -> None:
        url = "https://github.com/org/proj.git"

        assert canonicalize_repo(url) == url

    def test_forked_repo(self) -> None:
        assert forked_repo("org/proj", "me") == "git@github.com:me/proj.git"
        assert forked_repo("git@github.com:org/proj.git", "me", "ghe.corp.com") == "git@ghe.corp.com:me/proj.git"

    @pytest.mark.parametrize("repo", ["org/proj", "git@github.com:org/proj.git", "https://x.com/org/proj"])
    def test_repo_name(self, repo: str) -> None:
        assert repo_name(repo) == "proj"


class TestHostingCLI:
    """Tests for HostingCLI."""

    def test_missing_binary(self) -> None:
        with patch("sugarjar.hosting.shutil.which", return_value=None):
            with pytest.raises(HostingCLIError, match="Could not find hub"):
                HostingCLI(HostingFlavor.HUB).executable()

    def test_run_exports_github_host(self) -> None:
        cli = HostingCLI(HostingFlavor.HUB, host="ghe.corp.com")
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")

        with (
            patch("sugarjar.hosting.shutil.which", return_value="/usr/bin/hub"),
            patch("sugarjar.hosting.subprocess.run", return_value=completed) as run,
        ):
            cli.run("version")

        assert run.call_args.args[0] == ["/usr/bin/hub", "version"]
        assert run.call_args.kwargs["env"]["GITHUB_HOST"] == "ghe.corp.com"

    def test_run_failure_raises(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="nope")

        with (
            patch("sugarjar.hosting.shutil.which", return_value="/usr/bin/gh"),
            patch("sugarjar.hosting.subprocess.run", return_value=completed),
        ):
            with pytest.raises(HostingCLIError) as exc_info:
                HostingCLI().run("repo", "view")

        assert exc_info.value.stderr == "nope"

    @pytest.mark.parametrize(
        ("flavor", "expected"),
        [
            (HostingFlavor.GH, ["/bin/cli", "pr", "create", "--draft"]),
            (HostingFlavor.HUB, ["/bin/cli", "pull-request", "--draft"]),
        ],
    )
    def test_pull_request_command(self, flavor: HostingFlavor, expected: list[str]) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=3)

        with (
            patch("sugarjar.hosting.shutil.which", return_value="/bin/cli"),
            patch("sugarjar.hosting.subprocess.run", return_value=completed) as run,
        ):
            code = HostingCLI(flavor).pull_request("--draft")

        assert code == 3
        assert run.call_args.args[0] == expected
        assert run.call_args.kwargs["capture_output"] is False

    def test_fork_failure_returned(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=1, stdout="exists", stderr="")

        with (
            patch("sugarjar.hosting.shutil.which", return_value="/bin/hub"),
            patch("sugarjar.hosting.subprocess.run", return_value=completed) as run,
        ):
            result = HostingCLI(HostingFlavor.HUB).fork(remote_name="origin")

        assert result.returncode == 1
        assert run.call_args.args[0] == ["/bin/hub", "repo", "fork", "--remote-name=origin"]
