"""Pytest configuration and fixtures for SugarJar tests."""

import os
import subprocess
from collections.abc import Generator
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from sugarjar.config import RepoConfig, UserConfig
from sugarjar.context import RunContext
from sugarjar.git.ops import GitOps


def _run_git(*args: str, cwd: Path | None = None) -> str:
    """Run git command safely without shell=True."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def _commit_file(repo: Path, name: str, content: str, message: str) -> None:
    (repo / name).write_text(content)
    _run_git("add", name, cwd=repo)
    _run_git("commit", "-q", "-m", message, cwd=repo)


@pytest.fixture(autouse=True)
def _isolate_user_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own sugarjar config files out of every test."""
    config_dir = tmp_path_factory.mktemp("sugarjar-config")
    monkeypatch.setattr("sugarjar.config.SYSTEM_CONFIG_PATH", config_dir / "system.yaml")
    monkeypatch.setattr("sugarjar.config.USER_CONFIG_PATH", config_dir / "user.yaml")


@pytest.fixture
def tmp_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository.

    Yields:
        Path to the temporary repository
    """
    orig_dir = os.getcwd()
    repo = tmp_path / "repo"
    repo.mkdir()
    os.chdir(repo)

    _run_git("init", "-q", "-b", "main", cwd=repo)
    _run_git("config", "user.email", "test@test.com", cwd=repo)
    _run_git("config", "user.name", "Test", cwd=repo)

    _commit_file(repo, "README.md", "# Test Repo\n", "Initial commit")

    yield repo

    os.chdir(orig_dir)


@pytest.fixture
def remote_repo(tmp_repo: Path) -> Path:
    """Give ``tmp_repo`` a bare ``origin`` remote with ``main`` pushed and tracked.

    Returns:
        Path to the bare remote
    """
    bare = tmp_repo.parent / "origin.git"
    _run_git("init", "-q", "--bare", "-b", "main", str(bare))
    _run_git("remote", "add", "origin", str(bare), cwd=tmp_repo)
    _run_git("push", "-q", "-u", "origin", "main", cwd=tmp_repo)
    return bare


@pytest.fixture
def run_ctx(tmp_repo: Path) -> RunContext:
    """RunContext bound to ``tmp_repo``."""
    return RunContext.create(UserConfig(), repo_path=str(tmp_repo))


@pytest.fixture
def mock_git() -> MagicMock:
    """GitOps double rooted at a fake path.

    Returns:
        MagicMock standing in for GitOps
    """
    git = MagicMock(spec=GitOps)
    git.repo_path = Path("/fake/repo")
    git.remotes.return_value = ["origin"]
    git.all_branches.return_value = ["main"]
    git.current_branch.return_value = "main"
    git.is_dirty.return_value = False
    git.has_uncommitted_changes.return_value = False
    return git


@pytest.fixture
def mock_ctx(mock_git: MagicMock) -> RunContext:
    """RunContext around ``mock_git`` with default configuration."""
    return RunContext(git=mock_git, repo_config=RepoConfig(), user_config=UserConfig())
