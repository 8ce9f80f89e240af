"""Command-line argument parsing for dirwalk."""

import argparse
import os
from pathlib import Path
from typing import Any, List, Optional, Sequence, Type, Union

from dirwalk import __version__
from dirwalk.exclusion_rules.base_rules import BaseExclusionRules
from dirwalk.walker.flags import WalkFlags


def create_exclusion_action(exclusion_rules: BaseExclusionRules) -> Type[argparse.Action]:
    """Create an argparse action that feeds -e/-i values into ``exclusion_rules``.

    Rules are added while the command line is parsed, so their order on the command
    line is the order in which they apply (later negations override earlier rules).
    """

    class ExclusionRulesAction(argparse.Action):
        def __init__(self, option_strings: List[str], dest: str, **kwargs: Any) -> None:
            super().__init__(option_strings, dest, **kwargs)

        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return

            if option_string in ("-e", "--exclude"):
                if isinstance(values, (str, os.PathLike)):
                    exclusion_rules.load_rules(values)
                else:
                    exclusion_rules.load_rules(Path(str(values)))
            else:
                exclusion_rules.add_rule(str(values))

            recorded = getattr(namespace, self.dest, None) or []
            recorded.append(values)
            setattr(namespace, self.dest, recorded)

    return ExclusionRulesAction


def create_parser(exclusion_rules: BaseExclusionRules) -> argparse.ArgumentParser:
    """Create the dirwalk argument parser.

    Args:
        exclusion_rules: Rules object populated by -e/--exclude and -i/--ignore.
    """
    description = """
    dirwalk: list the entries of a directory tree, filtered by flags and glob patterns.

    Paths are printed one per line in the order the file system lists them. Directory
    patterns are matched against the path below DIRECTORY and must match every
    directory on the way down; file patterns are matched against the file name only.

    Glob syntax: ? (one character), * (any run within a segment), ** (any number of
    whole segments), [a-z] / [!a-z] (character sets) and {a,b} (literal alternatives).
    """

    epilog = """
    Examples:
      # Everything below src, paths relative to src
      dirwalk -r src

      # Python files only, skipping hidden directories
      dirwalk -f "*.py" --only-files --ignore-dot-directories .

      # Top-level directories starting with src, children before parents
      dirwalk -d "src*" --only-directories --depth-first .

      # Respect .gitignore and skip files over 1MB
      dirwalk -e .gitignore --max-file-size 1MB .

      # Render a tree instead of a list
      dirwalk --tree -f "*.{c,h}" project

      # Feed another program safely
      dirwalk -0 --only-files . | xargs -0 wc -l
    """

    parser = argparse.ArgumentParser(
        prog="dirwalk",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"dirwalk {__version__}", help="Show the version and exit"
    )

    ExclusionAction = create_exclusion_action(exclusion_rules)

    parser.add_argument("directory", type=Path, help="The directory to walk.")
    parser.add_argument(
        "-d",
        "--dir-pattern",
        metavar="PATTERN",
        help="Glob every reported or descended directory must match, relative to DIRECTORY.",
    )
    parser.add_argument(
        "-f",
        "--file-pattern",
        metavar="PATTERN",
        help="Glob matched against file names.",
    )
    parser.add_argument(
        "--depth-first",
        action="store_true",
        help="Report directories after their contents.",
    )
    parser.add_argument(
        "--single-directory",
        action="store_true",
        help="Only list DIRECTORY itself, do not descend.",
    )
    only = parser.add_mutually_exclusive_group()
    only.add_argument("--only-directories", action="store_true", help="Report directories only.")
    only.add_argument("--only-files", action="store_true", help="Report files only.")
    parser.add_argument(
        "--ignore-dot-directories",
        action="store_true",
        help="Skip directories whose name starts with a dot.",
    )
    parser.add_argument(
        "--ignore-dot-files",
        action="store_true",
        help="Skip files whose name starts with a dot.",
    )
    parser.add_argument(
        "-r",
        "--relative",
        action="store_true",
        help="Print paths relative to DIRECTORY.",
    )
    parser.add_argument(
        "--slash",
        choices=["forward", "back", "platform"],
        default="platform",
        help="Path separator used in printed paths (default: platform).",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        type=Path,
        metavar="FILE",
        action=ExclusionAction,
        help="Exclude entries matching the .gitignore-style rules in FILE. Can be repeated.",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        metavar="PATTERN",
        action=ExclusionAction,
        help="Exclude entries matching a .gitignore-style PATTERN. Can be repeated.",
    )
    parser.add_argument(
        "--max-file-size",
        metavar="SIZE",
        help="Exclude files larger than SIZE (e.g. 500KB, 10MB, 1GiB).",
    )
    parser.add_argument(
        "--tree",
        action="store_true",
        help="Render the result as a tree instead of a list of paths.",
    )
    parser.add_argument(
        "-t",
        "--show-type",
        action="store_true",
        help="Prefix each path with 'd' for directories or 'f' for files.",
    )
    parser.add_argument(
        "-0",
        "--null",
        action="store_true",
        help="Terminate paths with NUL instead of newline.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Output file path. If not specified, output is written to stdout.",
    )
    parser.add_argument(
        "-s",
        "--summary",
        metavar="DEST",
        choices=["stderr", "stdout", "file"],
        help="Print a summary report. Valid destinations: stderr, stdout, file (requires -o)",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Checks argparse cannot express.

    Raises:
        ValueError: If the arguments are inconsistent.
    """
    if args.summary == "file" and not args.output:
        raise ValueError("--summary=file requires -o/--output to be specified")
    if args.tree and (args.null or args.show_type):
        raise ValueError("--tree cannot be combined with -0/--null or -t/--show-type")


def flags_from_args(args: argparse.Namespace) -> WalkFlags:
    """Translate parsed options into :class:`WalkFlags`."""
    flags = WalkFlags.NONE
    for option, flag in (
        ("depth_first", WalkFlags.DEPTH_FIRST),
        ("single_directory", WalkFlags.SINGLE_DIRECTORY),
        ("only_directories", WalkFlags.ONLY_DIRECTORIES),
        ("only_files", WalkFlags.ONLY_FILES),
        ("ignore_dot_directories", WalkFlags.IGNORE_DOT_DIRECTORIES),
        ("ignore_dot_files", WalkFlags.IGNORE_DOT_FILES),
        ("relative", WalkFlags.ROOT_RELATIVE_PATHS),
    ):
        if getattr(args, option):
            flags |= flag

    if args.slash == "forward":
        flags |= WalkFlags.PATHS_SLASH_FORWARD
    elif args.slash == "back":
        flags |= WalkFlags.PATHS_SLASH_BACK
    return flags
