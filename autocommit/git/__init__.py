"""Git Operations Package"""

from autocommit.git.analyzer import GitAnalyzer, GitError, is_git_repo

__all__ = [
    "GitAnalyzer",
    "GitError",
    "is_git_repo",
]
