"""Argument parsing functionality for serverpin."""

import argparse
from typing import List, Optional


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-w", "--workspace",
                        dest="WORKSPACE",
                        help="Workspace directory holding .serverpin.yml (default: current directory)",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to the global settings file (YAML)",
                        action="store",
                        type=str)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="serverpin",
        description=(
            "serverpin - Java runtime selection and server upgrade advisor"
        ),
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", required=True)

    java_home = subparsers.add_parser("java-home",
                                      help="Print the Java installation used to launch the server")
    _add_common_options(java_home)
    java_home.add_argument("--java-home",
                           dest="JAVA_HOME",
                           help="Explicit Java home; overrides the javaHome setting",
                           action="store",
                           type=str)

    check = subparsers.add_parser("check",
                                  help="Check whether a newer server version should be offered")
    _add_common_options(check)
    check.add_argument("--apply",
                       dest="APPLY",
                       help="Write the recommended version to settings",
                       action="store_true")
    check.add_argument("--index-url",
                       dest="INDEX_URL",
                       help="Snapshot directory listing URL",
                       action="store",
                       type=str)
    check.add_argument("--timeout",
                       dest="TIMEOUT",
                       help="Timeout in seconds for the snapshot listing request",
                       action="store",
                       type=float)

    snapshots = subparsers.add_parser("snapshots",
                                      help="List published snapshot versions, newest first")
    _add_common_options(snapshots)
    snapshots.add_argument("-n", "--limit",
                           dest="LIMIT",
                           help="Only print the N newest versions",
                           action="store",
                           type=int)
    snapshots.add_argument("--index-url",
                           dest="INDEX_URL",
                           help="Snapshot directory listing URL",
                           action="store",
                           type=str)
    snapshots.add_argument("--timeout",
                           dest="TIMEOUT",
                           help="Timeout in seconds for the snapshot listing request",
                           action="store",
                           type=float)

    compare = subparsers.add_parser("compare",
                                    help="Compare two server versions (prints -1, 0 or 1)")
    _add_common_options(compare)
    compare.add_argument("LEFT", help="First version")
    compare.add_argument("RIGHT", help="Second version")

    return parser.parse_args(argv)
