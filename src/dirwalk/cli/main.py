"""Command-line interface for dirwalk.

This module provides the ``dirwalk`` command, which walks a directory tree and prints
the entries that pass the selected flags, glob patterns and exclusion rules, either
as a list of paths or as a rendered tree.

Signal Handling Notes:
    - SIGPIPE: recorded when the reading end of a pipe closes (e.g. ``| head``) on
      Unix-like systems; the walk stops at the next entry.
    - SIGINT: recorded on Ctrl+C; the walk stops at the next entry.

Exit Codes:
    0: Successful completion
    1: Runtime error during execution (including errors in part of the tree)
    2: Command-line syntax error
    3: The directory to walk does not exist or cannot be opened
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (SIGPIPE) on Unix-like systems

Example:
    $ dirwalk -r -f "*.py" src
    $ dirwalk --tree -e .gitignore .
"""

import os
import sys
from collections.abc import Mapping
from typing import Dict, Optional

from dirwalk.cli.argparser import create_parser, flags_from_args, validate_args
from dirwalk.cli.safe_writer import SafeWriter
from dirwalk.cli.signal_handler import setup_signal_handling, signal_handler
from dirwalk.exceptions import PathDoesNotExistError
from dirwalk.exclusion_rules.base_rules import BaseExclusionRules
from dirwalk.exclusion_rules.composite_rules import CompositeExclusionRules
from dirwalk.exclusion_rules.git_rules import GitIgnoreExclusionRules
from dirwalk.exclusion_rules.size_rules import SizeExclusionRules
from dirwalk.paths import path_tidy
from dirwalk.types import ItemType
from dirwalk.walker.walk_tree import WalkTree
from dirwalk.walker.walker import walk


def format_counts(counts: Mapping[str, int]) -> str:
    """Format the counts into a human-readable string.

    Example:
        >>> print(format_counts({"directories": 2, "files": 5}))
        Directories: 2
        Files: 5
    """
    return "\n".join([f"Directories: {counts['directories']}", f"Files: {counts['files']}"])


def format_entry(path: str, item_type: ItemType, show_type: bool) -> str:
    """Format one walk entry for list output.

    Example:
        >>> format_entry("src/main.py", ItemType.FILE, show_type=True)
        'f src/main.py'
    """
    if not show_type:
        return path
    return f"{'d' if item_type is ItemType.DIRECTORY else 'f'} {path}"


def build_exclusion_rules(
    pattern_rules: GitIgnoreExclusionRules, max_file_size: Optional[str]
) -> Optional[BaseExclusionRules]:
    """Combine the pattern rules gathered from the command line with a size limit.

    Returns None when no rule of any kind was given.
    """
    rules = []
    if max_file_size is not None:
        rules.append(SizeExclusionRules(max_file_size))
    if pattern_rules.has_rules():
        rules.append(pattern_rules)

    if not rules:
        return None
    if len(rules) == 1:
        return rules[0]
    return CompositeExclusionRules(rules)


def main() -> None:
    """Entry point for the ``dirwalk`` command.

    Exit codes:
        0: Successful completion
        1: Runtime error during execution
        2: Command-line syntax error
        3: The directory to walk does not exist or cannot be opened
        130: Interrupted by SIGINT (Ctrl+C)
        141: Broken pipe (SIGPIPE) on Unix-like systems
    """
    setup_signal_handling()
    walk_root: Optional[str] = None

    try:
        pattern_rules = GitIgnoreExclusionRules()
        parser = create_parser(pattern_rules)
        args = parser.parse_args()
        validate_args(args)
        walk_root = path_tidy(os.fspath(args.directory))

        exclusion_rules = build_exclusion_rules(pattern_rules, args.max_file_size)
        flags = flags_from_args(args)
        output_file = args.output if args.output else sys.stdout.fileno()
        counts: Dict[str, int] = {"directories": 0, "files": 0}

        with SafeWriter(output_file, terminator="\0" if args.null else "\n") as safe_writer:
            try:
                if args.tree:
                    tree = WalkTree(
                        args.directory,
                        flags,
                        dir_pattern=args.dir_pattern,
                        file_pattern=args.file_pattern,
                        exclusion_rules=exclusion_rules,
                    )
                    for line in tree.stream_tree_representation():
                        safe_writer.write_record(line)
                    counts = {"directories": tree.directory_count, "files": tree.file_count}
                else:

                    def emit(path: str, item_type: ItemType, totals: Dict[str, int]) -> bool:
                        if signal_handler.interrupted():
                            return True
                        totals["directories" if item_type is ItemType.DIRECTORY else "files"] += 1
                        safe_writer.write_record(format_entry(path, item_type, args.show_type))
                        return False

                    walk(
                        args.directory,
                        emit,
                        flags,
                        args.dir_pattern,
                        args.file_pattern,
                        counts,
                        exclusion_rules=exclusion_rules,
                    )

                if args.summary in ("stdout", "file"):
                    safe_writer.write("\n" + format_counts(counts) + "\n")
                elif args.summary == "stderr":
                    print(format_counts(counts), file=sys.stderr)

            except BrokenPipeError:
                pass  # SafeWriter closes the output in the context manager

    except PathDoesNotExistError as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        # Only a root that cannot be opened is reported as missing.
        sys.exit(3 if e.path == walk_root else 1)
    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    exit_code = signal_handler.exit_code()
    if exit_code is not None:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
