"""CLI Main Entry Point"""

import os
import sys
import time

from autocommit import AutoCommitError
from autocommit.config import Config, load_config, resolve_api_key
from autocommit.git import GitAnalyzer, is_git_repo
from autocommit.llm import LLMError, OpenAIClient, estimate_cost
from autocommit.prompts import PromptBuilder, PromptConfig
from autocommit.output import (
    success, warning, dim, bold, print_error, print_debug,
    CHECK, RULE, Spinner, colorize_commit_type,
)

from autocommit.cli.args import parse_args
from autocommit.cli.commands import display_config
from autocommit.cli.utils import EditorError, ask, confirm, copy_to_clipboard, edit_message


def _env_timeout() -> float | None:
    raw = os.environ.get('AUTO_COMMIT_TIMEOUT')
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        value = 0
    if value <= 0:
        print(f"Config warning: Invalid AUTO_COMMIT_TIMEOUT '{raw}', ignoring", file=sys.stderr)
        return None
    return value


def _build_config(args) -> Config:
    """Resolve the API key and merge settings.

    Precedence: CLI args > environment variables > config file
    """
    api_key, source = resolve_api_key()
    print_debug(source)

    return load_config().with_overrides(
        api_key=api_key,
        model=args.model or os.environ.get('AUTO_COMMIT_MODEL'),
        max_tokens=args.max_tokens,
        timeout=_env_timeout(),
        include_body=False if args.no_body else None,
        context_lines=args.unified,
    )


def _check_cost(diff: str, config: Config, verbose: bool) -> bool:
    """Estimate input cost; above the threshold the user has to say yes."""
    estimate = estimate_cost(diff, config.model)
    print_debug(f"Estimated cost: ${estimate.cost:.6f}")
    if verbose:
        print_debug(f"  Diff: {estimate.tokens} tokens ({len(diff)} chars)")

    if not estimate.exceeds(config.cost_threshold):
        return True

    print(warning(f"Git diff will cost you ${config.cost_threshold:.2f} or more."))
    return confirm("Do you want to continue? (y/n) ")


def _generate_message(client, messages, timings):
    """Run generation with spinner and return response."""
    t_gen = time.time()
    with Spinner("Generating commit message..."):
        response = client.generate(messages)
    timings['generate'] = time.time() - t_gen
    return response


def _display_message(message):
    """Display commit message with horizontal rules and colored type."""
    colored = colorize_commit_type(message)
    lines = colored.split('\n')
    # Use raw message for width calculation (no ANSI codes)
    raw_lines = message.split('\n')
    width = max((len(line) for line in raw_lines), default=40)
    print(f"\n{dim(RULE * width)}")
    print(bold(lines[0]))
    for line in lines[1:]:
        print(line)
    print(dim(RULE * width))


def _copy_and_report(message):
    """Copy message to clipboard and print result."""
    copied, reason = copy_to_clipboard(message)
    if copied:
        print(f"{success(CHECK)} Copied to clipboard!")
    else:
        print(f"{warning('!')} Could not copy to clipboard{': ' + reason if reason else ''}")


def _print_verbose_stats(response, timings):
    print_debug(f"  Response: {response.tokens_used} tokens ({response.model})")
    print_debug(f"  Timings: git={timings['git']:.2f}s, generate={timings.get('generate', 0):.2f}s")


def _confirm_commit(message):
    """Ask before committing.

    Returns:
        str | None: message to commit (possibly edited), or None to cancel
    """
    answer = ask(f"\n{dim('Commit with this message? [Y/n/e] ')}")
    if answer is None:
        return None
    if answer in ('', 'y', 'yes'):
        return message
    if answer == 'e':
        try:
            edited = edit_message(message)
        except EditorError as e:
            print_error(str(e))
            return None
        if edited is None:
            print(dim("Edited message is empty."))
        return edited
    return None


def _generate_commit_flow(args) -> int:
    """Main workflow: repo check, key, diff, cost, generate, commit.

    Returns:
        int: Exit code
    """
    is_pipe = not sys.stdout.isatty()

    if not is_git_repo():
        print_error("Not in a git repository.")
        return 1

    config = _build_config(args)

    timings = {}
    t0 = time.time()
    analyzer = GitAnalyzer()
    diff = analyzer.get_staged_diff(config.context_lines)
    timings['git'] = time.time() - t0
    print_debug(f"Got git diff with length: {len(diff)}")

    if not diff.strip():
        print("No changes to commit. Did you forget to `git add`?")
        return 0

    if not _check_cost(diff, config, args.verbose):
        print("Aborting.")
        return 0

    prompt_config = PromptConfig(
        hint=args.hint,
        forced_type=args.type,
        include_body=config.include_body,
        max_subject_length=config.max_subject_length,
    )
    messages = PromptBuilder().build(diff, prompt_config)

    client = OpenAIClient(config)
    response = _generate_message(client, messages, timings)
    message = response.content
    if not message:
        raise LLMError("API returned an empty commit message")

    if args.verbose:
        _print_verbose_stats(response, timings)

    # Pipe mode: output raw message and exit
    if is_pipe and args.no_commit:
        print(message)
        return 0

    _display_message(message)
    if args.copy:
        _copy_and_report(message)

    if args.no_commit:
        return 0

    final_message = _confirm_commit(message)
    if not final_message:
        print(dim("Commit cancelled."))
        return 0

    analyzer.commit(final_message)
    print_debug("Committed with message:")
    print(final_message)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)

    if args.display_config:
        return display_config()

    try:
        return _generate_commit_flow(args)
    except AutoCommitError as e:
        print_error(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print()
        print(dim("Cancelled."))
        return 130
