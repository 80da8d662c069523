"""CLI Argument Parsing"""

import argparse
import argcomplete

from autocommit import COMMIT_TYPE_NAMES, __version__


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return number


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='auto-commit',
        description='Propose a commit message for the staged changes and commit with it',
        epilog='Example: git add -p && auto-commit'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    # Generation options
    parser.add_argument('-m', '--model', type=str, metavar='MODEL', help='Model name (default: gpt-4o-mini)')
    parser.add_argument('--max-tokens', type=_positive_int, metavar='N', help='Max tokens in the generated message')
    parser.add_argument('-t', '--type', type=str, choices=COMMIT_TYPE_NAMES, help='Force commit type')
    parser.add_argument('--hint', type=str, metavar='TEXT', help='Add context: --hint "fixing the login bug"')
    parser.add_argument('--no-body', action='store_true', help='Generate subject line only, no bullet points')

    # Diff options
    parser.add_argument('-U', '--unified', type=_non_negative_int, metavar='N',
                        help='Send a unified diff with N lines of context (written through a temp file)')

    # Output options
    parser.add_argument('-n', '--no-commit', action='store_true', help='Print the message only, do not commit')
    parser.add_argument('-c', '--copy', action='store_true', help='Copy the message to the clipboard')
    parser.add_argument('--verbose', action='store_true', help='Show debug info (tokens, timings)')

    # Config
    parser.add_argument('--display-config', action='store_true', help='Show current configuration')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
