"""
Command-line interface for alsversions.

Usage:
    alsversions -c <file.als>
    alsversions -d <file.als>
    alsversions -m <branch>
    alsversions -s | -u | -l | -h
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from alstools.alsversions.config import AlsConfig
from alstools.alsversions.console import Console
from alstools.alsversions.log import setup_logger
from alstools.alsversions.project import Project
from alstools.alsversions.types import Err


USAGE = """\
usage: alsversions <subcommand>

Available subcommands are:
   -c        + filename to compress file.
   -d        + filename to decompress gzip'd file.
   -m        + branchname to merge with master branch.
   -s        sets up a project folder to be used with git.
   -u        update git repo, if git repo no setup then setup.
   -l        lists project files and whether they are compressed.
   -h        shows this message.
   -v        with any subcommand, shows the git commands being run.
"""


class UsageError(Exception):
    """Command line could not be parsed."""


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(prog="alsversions", add_help=False)
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("-c", dest="compress", metavar="FILE")
    group.add_argument("-d", dest="decompress", metavar="FILE")
    group.add_argument("-m", dest="merge", metavar="BRANCH")
    group.add_argument("-s", dest="setup", action="store_true")
    group.add_argument("-u", dest="update", action="store_true")
    group.add_argument("-l", dest="list", action="store_true")
    group.add_argument("-h", dest="help", action="store_true")
    parser.add_argument("-v", dest="verbose", action="store_true")
    return parser


def cmd_list(project: Project) -> int:
    """Handle the list command."""
    console = project.console
    marker = "yes" if project.is_repository() else "no"
    console.say(f"Git repository: {marker}")

    tracked = project.tracked_files()
    if not tracked:
        console.say(f"No {project.config.extension} files found in {project.directory}")
        return 0

    for entry in tracked:
        console.say(f"{entry.path.name}: {entry.state.label}")
    return 0


def run(args: argparse.Namespace, project: Project) -> int:
    """Dispatch a parsed command line to the project."""
    say = project.console.say

    if args.list:
        return cmd_list(project)

    if args.compress is not None:
        say(f"Compressing {args.compress}")
        say("---")
        result = project.compress(Path(args.compress))
    elif args.decompress is not None:
        say(f"Decompressing {args.decompress}")
        say("---")
        result = project.decompress(Path(args.decompress))
    elif args.merge is not None:
        say(f"You have requested to merge {args.merge} with the "
            f"{project.config.master_branch} branch.")
        say("---")
        result = project.merge(args.merge)
    elif args.update:
        say("You have requested to update the git repo.")
        say("---")
        result = project.update()
    else:
        say("Setting up git repo.")
        say("---")
        result = project.setup()

    if isinstance(result, Err):
        say(f"Error: {result.message}")
        return 1
    return 0


def main(
    argv: Optional[Sequence[str]] = None,
    console: Optional[Console] = None,
    directory: Optional[Path] = None,
) -> int:
    """Main entry point."""
    console = console or Console()
    parser = build_parser()

    try:
        args = parser.parse_args(sys.argv[1:] if argv is None else list(argv))
    except UsageError as e:
        console.say(str(e))
        console.say(USAGE)
        return 1

    if args.help:
        console.say(USAGE)
        return 1

    setup_logger(verbose=args.verbose)
    project = Project(
        directory or Path.cwd(),
        config=AlsConfig.from_env(),
        console=console,
    )

    try:
        return run(args, project)
    except (KeyboardInterrupt, EOFError):
        console.say("\nOperation cancelled by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
