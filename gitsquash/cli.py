"""Command line interface for the git squash tool."""

from typing import List, Optional
import argparse
import logging
import os
import re
import sys

from . import __version__
from .core.config import SquashConfig
from .core.history import CommitSequence
from .core.types import GitSquashError, InsufficientCommitsError, SquashPreview, SquashResult
from .git.operations import GitOperations
from .tool import SquashTool

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def positive_int(value: str) -> int:
    """argparse type for strictly positive integers."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='gitsquash',
        description='Interactive tool to squash any selection of recent git commits',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                       # Interactive squash of last 10 commits
  %(prog)s -n 5                  # Show only last 5 commits
  %(prog)s -m "feat: xyz"        # Squash with preset commit message
  %(prog)s --dry-run             # Preview squash operation

Environment Variables:
  GITSQUASH_VERBOSE   Set to enable debug logging
        """
    )

    parser.add_argument(
        '-n', '--number',
        type=positive_int,
        default=10,
        help='Number of recent commits to show (default: %(default)s)',
        metavar='COUNT'
    )

    parser.add_argument(
        '-m', '--message',
        help='Preset commit message (skips the prompt)',
        metavar='MESSAGE'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what commits would be squashed without actually squashing'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def parse_selection(text: str, count: int) -> List[int]:
    """Turn input like "1,3 5-7" into sorted, distinct zero-based indexes.

    Raises:
        ValueError: for anything that is not a number or range within 1..count
    """
    indexes = set()
    for token in re.split(r'[,\s]+', text.strip()):
        if not token:
            continue
        match = re.fullmatch(r'(\d+)(?:-(\d+))?', token)
        if not match:
            raise ValueError(f"'{token}' is not a number or range")
        start = int(match.group(1))
        end = int(match.group(2) or start)
        if start > end:
            start, end = end, start
        if start < 1 or end > count:
            raise ValueError(f"'{token}' is outside 1-{count}")
        indexes.update(range(start - 1, end))
    return sorted(indexes)


def display_commits(sequence: CommitSequence) -> None:
    """List commits with the numbers used for selection."""
    print()
    for number, commit in enumerate(sequence, 1):
        print(f"{number:>3}) {commit.short_hash} - {commit.date} - {commit.subject}")


def select_commits(sequence: CommitSequence, min_selection: int = 2) -> List[str]:
    """Ask the user which commits to squash; returns their hashes."""
    display_commits(sequence)
    while True:
        response = input("\nSelect commits to squash (e.g. 1,3 or 2-4): ")
        try:
            indexes = parse_selection(response, len(sequence))
        except ValueError as e:
            print(f"Invalid selection: {e}")
            continue
        if len(indexes) < min_selection:
            print(f"Please select at least {min_selection} commits to squash")
            continue
        return [sequence[i].hash for i in indexes]


def get_commit_message(preset: Optional[str] = None) -> str:
    """Return the preset message or prompt until a non-empty one is given."""
    if preset:
        return preset

    while True:
        message = input("Enter the new commit message: ")
        if message.strip():
            return message
        print("Commit message cannot be empty")


def display_preview(preview: SquashPreview) -> None:
    """Display the dry-run projection to the user."""
    print("\n" + "=" * 80)
    print("DRY RUN - SQUASH PREVIEW")
    print("=" * 80)

    print("\nCurrent commits:")
    for entry in preview.before:
        marker = "*" if entry.selected else " "
        print(f"  {marker} {entry.short_hash:<7} {entry.subject}")

    print("\nAfter squash:")
    for entry in preview.after:
        marker = "+" if entry.is_new else " "
        print(f"  {marker} {entry.short_hash:<7} {entry.subject}")

    print("\nDetails:")
    print(f"  - {preview.commit_count} commits will be squashed into one ({preview.path.value} path)")
    print(f"  - New commit message: \"{preview.message}\"")
    if preview.uncommitted_changes > 0:
        print(f"  - {preview.uncommitted_changes} uncommitted changes will be preserved")


def display_result(result: SquashResult) -> None:
    print(f"\nSuccessfully squashed {result.squashed_count} commits into {result.new_hash[:7]}")
    if result.replayed:
        print(f"Preserved {len(result.replayed)} commits on top of the squashed commit")


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    parsed_args = parser.parse_args(args)

    env_verbose = bool(os.environ.get('GITSQUASH_VERBOSE', ""))
    setup_logging(parsed_args.verbose or env_verbose)

    try:
        config = SquashConfig.from_cli_args(parsed_args)
        logger.debug("Configuration: %s", config)

        git_ops = GitOperations()
        tool = SquashTool(git_ops, config)

        sequence = tool.fetch_commits()
        hashes = select_commits(sequence, config.min_selection)
        selection = tool.select(hashes, sequence)
        message = get_commit_message(parsed_args.message)

        logger.info("Squashing commits...")
        outcome = tool.squash(selection, message, dry_run=parsed_args.dry_run)
        if isinstance(outcome, SquashPreview):
            display_preview(outcome)
        else:
            display_result(outcome)
        return 0

    except InsufficientCommitsError as e:
        print(str(e))
        return 0

    except GitSquashError as e:
        logger.error("Git squash error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 1

    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
