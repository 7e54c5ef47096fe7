import argparse
from pathlib import Path
from typing import Optional, Sequence, Tuple

from wikiview.configs import USER_CONFIG_FILE, get_config

__all__ = ["build_parser", "parse_cli"]


def build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser used by the wikiview entry point."""
    parser = argparse.ArgumentParser(description="View MediaWiki markup files.")
    parser.add_argument(
        "filename",
        nargs="?",
        help="MediaWiki file to open, or - to read from stdin",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="store_true",
        help="show version and exit",
    )
    parser.add_argument(
        "--browser-mode",
        action="store_true",
        help="hand links and context menus to the shell like an embedding browser",
    )
    parser.add_argument(
        "--mime-type",
        default="text/mediawiki",
        help="MIME type announced when reading from stdin (default text/mediawiki)",
    )
    parser.add_argument(
        "--config",
        dest="config",
        default=USER_CONFIG_FILE,
        help=f"config file or yaml format string (default {USER_CONFIG_FILE})",
    )
    parser.add_argument(
        "--case-sensitive",
        dest="case_sensitive",
        action="store_true",
        help="match case when searching",
        default=argparse.SUPPRESS,
    )
    parser.add_argument(
        "--logger-level",
        dest="logger_level",
        choices=["debug", "info", "warning", "error", "critical"],
        default=argparse.SUPPRESS,
        help="logger level",
    )
    return parser


def parse_cli(
    argv: Optional[Sequence[str]] = None,
) -> Tuple[dict, argparse.Namespace, bool]:
    """Parse arguments and return ``(config, args, version_requested)``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.version:
        return {}, args, True

    config_from_args = {}
    if hasattr(args, "case_sensitive"):
        config_from_args["search"] = {"case_sensitive": args.case_sensitive}
    if hasattr(args, "logger_level"):
        config_from_args["logging"] = {"level": args.logger_level}

    config_file_or_yaml = args.config
    if config_file_or_yaml == USER_CONFIG_FILE and not Path(USER_CONFIG_FILE).exists():
        config_file_or_yaml = None
    config = get_config(config_file_or_yaml, config_from_args)
    return config, args, False
