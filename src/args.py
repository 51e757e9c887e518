"""Argument parsing functionality for pkgdesc."""

import argparse
from typing import Optional, Sequence

from constants import Constants


def find_fileno(argv: Sequence[str], flag: Optional[str] = None) -> Optional[int]:
    """Return the descriptor number following ``flag`` in ``argv``.

    None when the flag is absent, last, or not followed by an integer.
    """
    flag = flag or Constants.FILENO_FLAG
    argv = list(argv)
    try:
        idx = argv.index(flag)
    except ValueError:
        return None
    if idx + 1 >= len(argv):
        return None
    try:
        return int(argv[idx + 1])
    except ValueError:
        return None


def find_config_path(argv: Optional[Sequence[str]] = None) -> Optional[str]:
    """Return the ``-c/--config`` value without parsing the rest of ``argv``.

    The config is read before the full parser is built because it may rename
    the descriptor flag.
    """
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("-c", "--config", dest="CONFIG", action="store", type=str)
    known, _ = parser.parse_known_args(argv)
    return known.CONFIG


def parse_args(argv: Optional[Sequence[str]] = None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="pkgdesc",
        description="pkgdesc - evaluate a package manifest and emit its description",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", required=True)

    dump = subparsers.add_parser(
        "dump",
        help="Evaluate a manifest script and emit its JSON document",
    )
    dump.add_argument("manifest",
                      help=f"Path to the manifest script (default: {Constants.MANIFEST_FILE})",
                      nargs="?",
                      default=Constants.MANIFEST_FILE)
    dump.add_argument(Constants.FILENO_FLAG,
                      dest="FILENO",
                      help="Inherited file descriptor to deliver the document to at exit",
                      action="store",
                      type=int)
    dump.add_argument("-o", "--output",
                      dest="OUTPUT",
                      help="Write the document to this file instead of stdout",
                      action="store",
                      type=str)
    dump.add_argument("--indent",
                      dest="INDENT",
                      help="Pretty-print stdout/file output with this indentation",
                      action="store",
                      type=int)
    dump.add_argument("--loglevel",
                      dest="LOG_LEVEL",
                      help="Set the logging level",
                      action="store",
                      type=str,
                      choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    dump.add_argument("--logfile",
                      dest="LOG_FILE",
                      help="Log output file",
                      action="store",
                      type=str)
    dump.add_argument("-c", "--config",
                      dest="CONFIG",
                      help="Path to configuration file (YAML or YML)",
                      action="store",
                      type=str)

    return parser.parse_args(argv)
