import shutil
import subprocess
from pathlib import Path

import pytest

requires_git = pytest.mark.skipif(shutil.which('git') is None, reason="git not installed")


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(['git', *args], cwd=repo, capture_output=True, text=True, check=True)
    return result.stdout


@pytest.fixture
def git_repo(tmp_path) -> Path:
    """Fresh repository with one initial commit."""
    if shutil.which('git') is None:
        pytest.skip("git not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, 'init', '-q')
    git(repo, 'config', 'user.name', 'Test User')
    git(repo, 'config', 'user.email', 'test@example.com')
    git(repo, 'config', 'commit.gpgsign', 'false')
    (repo / "README.md").write_text("# Project\n")
    git(repo, 'add', 'README.md')
    git(repo, 'commit', '-q', '-m', 'chore: initial commit')
    return repo


@pytest.fixture
def staged_repo(git_repo) -> Path:
    """Repository with a staged modification to app.py."""
    (git_repo / "app.py").write_text("def parse(text):\n    return text.split()\n")
    git(git_repo, 'add', 'app.py')
    return git_repo
