"""CLI Utility Functions"""

import os
import shlex
import subprocess
import sys
import tempfile
from pathlib import Path

from autocommit import AutoCommitError

AFFIRMATIVE = {'y', 'yes'}


def ask(prompt: str) -> str | None:
    """Read one line from stdin. None on EOF or Ctrl+C."""
    try:
        return input(prompt).strip().lower()
    except (KeyboardInterrupt, EOFError):
        print()
        return None


def confirm(prompt: str) -> bool:
    """Explicit y/yes required; anything else is a no."""
    return ask(prompt) in AFFIRMATIVE


# Tried in order; the first one that exists wins
CLIPBOARD_COMMANDS = {
    'win32': [['clip']],
    'darwin': [['pbcopy']],
}
LINUX_CLIPBOARD_COMMANDS = [
    ['xclip', '-selection', 'clipboard'],
    ['xsel', '--clipboard', '--input'],
    ['wl-copy'],
]


class EditorError(AutoCommitError):
    """Raised when the message editor cannot be run."""
    pass


def copy_to_clipboard(text: str) -> tuple[bool, str]:
    """Pipe text into the platform clipboard tool. Returns (success, failure_reason)."""
    commands = CLIPBOARD_COMMANDS.get(sys.platform, LINUX_CLIPBOARD_COMMANDS)
    for command in commands:
        try:
            subprocess.run(command, input=text.encode('utf-8'), check=True)
            return True, ""
        except FileNotFoundError:
            continue
        except (subprocess.CalledProcessError, OSError) as e:
            return False, f"{command[0]} failed: {e}"

    names = ", ".join(command[0] for command in commands)
    return False, f"No clipboard tool found (tried {names})"


def editor_command() -> list[str]:
    """$VISUAL or $EDITOR split into argv, so 'code --wait' works."""
    editor = os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if not editor or not editor.strip():
        return ['notepad'] if sys.platform == 'win32' else ['vi']
    return shlex.split(editor, posix=sys.platform != 'win32')


def edit_message(message: str) -> str | None:
    """Let the user edit message. Returns the edited text, or None if left empty.

    Raises EditorError when the editor is missing or exits non-zero.
    """
    command = editor_command()
    fd, name = tempfile.mkstemp(prefix='AUTO_COMMIT_EDITMSG-', suffix='.gitcommit')
    path = Path(name)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(message)
        try:
            subprocess.run([*command, str(path)], check=True)
        except FileNotFoundError:
            raise EditorError(f"Editor not found: {command[0]}")
        except subprocess.CalledProcessError as e:
            raise EditorError(f"Editor '{' '.join(command)}' exited with status {e.returncode}")
        edited = path.read_text(encoding='utf-8').strip()
        return edited or None
    finally:
        path.unlink(missing_ok=True)
