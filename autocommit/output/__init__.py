"""Terminal output: ANSI styling, status lines and the progress spinner."""

import os
import re
import sys
import threading

RESET = '\033[0m'
BOLD = '\033[1m'
GRAY = '\033[90m'
RED = '\033[31m'
GREEN = '\033[32m'
YELLOW = '\033[33m'
CYAN = '\033[36m'
MAGENTA = '\033[35m'


def _supports_color() -> bool:
    """NO_COLOR and FORCE_COLOR win; otherwise color only on a terminal."""
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    return hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()


def _supports_unicode() -> bool:
    try:
        '✓─⠋'.encode(sys.stdout.encoding or 'utf-8')
        return True
    except (UnicodeEncodeError, LookupError):
        return False


COLORS_ENABLED = _supports_color()
UNICODE_ENABLED = _supports_unicode()

CHECK = '✓' if UNICODE_ENABLED else '[OK]'
CROSS = '✗' if UNICODE_ENABLED else '[X]'
RULE = '─' if UNICODE_ENABLED else '-'


def _style(text: str, *codes: str) -> str:
    if not COLORS_ENABLED:
        return text
    return f"{''.join(codes)}{text}{RESET}"


def success(text: str) -> str:
    return _style(text, GREEN)


def warning(text: str) -> str:
    return _style(text, YELLOW)


def info(text: str) -> str:
    return _style(text, CYAN)


def dim(text: str) -> str:
    return _style(text, GRAY)


def bold(text: str) -> str:
    return _style(text, BOLD)


def print_error(message: str) -> None:
    print(_style(f"{CROSS} {message}", RED), file=sys.stderr)


def print_debug(message: str) -> None:
    """Gray diagnostic line on stderr, keeps piped stdout clean."""
    print(dim(message), file=sys.stderr)


# Types without an entry are left uncolored
COMMIT_TYPE_COLORS = {
    'feat': GREEN,
    'fix': RED,
    'refactor': YELLOW,
    'docs': CYAN,
    'test': MAGENTA,
}

_SUBJECT_PREFIX = re.compile(r'^(\w+)(\([^)]*\))?!?:')


def colorize_commit_type(message: str) -> str:
    """Color the `type(scope):` prefix of the subject line."""
    subject, sep, body = message.partition('\n')
    match = _SUBJECT_PREFIX.match(subject)
    if not match or match.group(1) not in COMMIT_TYPE_COLORS:
        return message
    prefix = match.group(0)
    styled = _style(prefix, BOLD, COMMIT_TYPE_COLORS[match.group(1)])
    return styled + subject[len(prefix):] + sep + body


class Spinner:
    """Animated spinner shown while a request is pending. Use as context manager.

    The frame counter lives in the drawing thread; leaving the context stops
    and joins the thread and clears the line, whether or not the body raised.
    """
    FRAMES_UNICODE = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
    FRAMES_ASCII = ['-', '\\', '|', '/']
    INTERVAL = 0.08

    def __init__(self, label: str = "", stream=None):
        self.label = label
        self._stream = stream or sys.stdout
        self._thread = None
        self._stop_event = threading.Event()
        self._frames = self.FRAMES_UNICODE if UNICODE_ENABLED else self.FRAMES_ASCII

    @property
    def active(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _enabled(self) -> bool:
        return hasattr(self._stream, 'isatty') and self._stream.isatty()

    def _spin(self):
        idx = 0
        while not self._stop_event.is_set():
            frame = self._frames[idx % len(self._frames)]
            self._stream.write(f'\r\033[K{frame} {self.label}')
            self._stream.flush()
            idx += 1
            self._stop_event.wait(self.INTERVAL)

    def __enter__(self):
        if self._enabled():
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *args):
        self._stop_event.set()
        if self._thread:
            self._thread.join()
            self._thread = None
        if self._enabled():
            self._stream.write('\r\033[K')
            self._stream.flush()


__all__ = [
    "COLORS_ENABLED", "UNICODE_ENABLED", "CHECK", "CROSS", "RULE",
    "success", "warning", "info", "dim", "bold",
    "print_error", "print_debug",
    "colorize_commit_type", "COMMIT_TYPE_COLORS", "Spinner",
]
