"""Argument parsing functionality for wsfocus."""

import argparse


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="wsfocus",
        description=(
            "Install a single workspace and its dependencies, as if the "
            "specified workspaces (and all other workspaces they depend on) "
            "were the only ones in the project."
        ),
        add_help=True,
    )

    parser.add_argument("workspaces",
                        help="Workspaces to focus on. Defaults to the workspace of the current directory.",
                        nargs="*",
                        default=[])
    parser.add_argument("--json",
                        dest="JSON",
                        help="Format the output as an NDJSON stream",
                        action="store_true")
    parser.add_argument("--production",
                        dest="PRODUCTION",
                        help="Only install regular dependencies by omitting dev dependencies",
                        action="store_true")
    parser.add_argument("-A", "--all",
                        dest="ALL",
                        help="Install the entire project",
                        action="store_true")
    parser.add_argument("--cwd",
                        dest="CWD",
                        help="Run as if started in this directory",
                        action="store",
                        type=str,
                        default=None)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Exits with status 2 when workspaces are combined with --all.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.ALL and args.workspaces:
        parser.error("Cannot specify workspaces when using the --all flag")
    return args
