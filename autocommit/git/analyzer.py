"""Git Analyzer - Read staged changes and create commits."""

import os
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from autocommit import AutoCommitError


class GitError(AutoCommitError):
    """Raised when git operations fail."""
    pass


def is_git_repo(cwd: Optional[Path] = None) -> bool:
    """True if cwd is inside a git work tree. Any failure counts as no.

    Inside .git/ itself git answers "false" with exit status 0.
    """
    try:
        result = subprocess.run(
            ['git', 'rev-parse', '--is-inside-work-tree'],
            cwd=cwd,
            capture_output=True,
            text=True,
            errors='replace',
        )
    except OSError:
        return False
    return result.returncode == 0 and result.stdout.strip() == 'true'


class GitAnalyzer:
    """Runs the git commands the workflow needs, always as argument lists."""

    DIFF_FILE_PREFIX = ".auto-commit-diff-"

    def __init__(self, cwd: Optional[Path] = None):
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()

    def _run_git(self, *args: str, error_prefix: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                cwd=self.cwd,
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace'
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or e.stdout or '').strip() or f"git {args[0]} exited with status {e.returncode}"
            raise GitError(f"{error_prefix}: {detail}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    @contextmanager
    def staged_diff_file(self) -> Iterator[Path]:
        """Yield a fresh, uniquely named file path; the file is removed on exit."""
        fd, name = tempfile.mkstemp(prefix=self.DIFF_FILE_PREFIX, suffix='.patch', dir=self.cwd)
        os.close(fd)
        path = Path(name)
        try:
            yield path
        finally:
            path.unlink(missing_ok=True)

    def get_staged_diff(self, context_lines: Optional[int] = None) -> str:
        """Return the staged diff text.

        With context_lines set, git writes a unified diff with that many
        context lines to a temporary file, which is read back and removed.
        """
        if context_lines is None:
            return self._run_git('diff', '--cached', error_prefix="Failed to get git diff")

        with self.staged_diff_file() as path:
            self._run_git(
                'diff', '--cached', f'--unified={context_lines}', f'--output={path}',
                error_prefix="Failed to get git diff",
            )
            return path.read_text(encoding='utf-8', errors='replace')

    def commit(self, message: str) -> str:
        """Commit the staged changes with message as a single argument."""
        return self._run_git('commit', '-m', message, error_prefix="Failed to commit")
