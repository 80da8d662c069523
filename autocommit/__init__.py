"""
Auto Commit

Proposes a conventional commit message for the staged changes using the
OpenAI chat-completion API, and commits with it on confirmation.
"""

__version__ = "1.0.0"

# Commit types the model may choose from
# Used by: prompts/builder.py, cli/args.py (argparse), output (colors)
COMMIT_TYPES = {
    'feat': 'A new feature or capability',
    'fix': 'A bug fix',
    'docs': 'Documentation only changes',
    'style': 'Formatting, whitespace, no code change',
    'refactor': 'Code restructuring without behavior change',
    'test': 'Adding or updating tests',
    'chore': 'Maintenance tasks, dependencies, tooling',
}

COMMIT_TYPE_NAMES = list(COMMIT_TYPES.keys())


class AutoCommitError(Exception):
    """Base class for errors that end a run with a printed message."""
    pass
