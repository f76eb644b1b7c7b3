"""CLI entry point for tagsearch."""

import argparse
import logging
import os
import sys
from typing import Any, Dict, List, NoReturn, Optional, TextIO

from .. import __version__
from ..config import ConfigurationError, load_config
from ..errors import FileDiscoveryError, OutputTerminated
from ..models.config import ExtractionStrategy, TagsearchConfig
from ..models.filter_query import FilterQuery
from ..tools.fs_walker import FSWalker
from ..tools.tag_filter import Filter
from . import commands


logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tagsearch",
        description="search for, and/or summarise, tags in plaintext files",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "keywords",
        nargs="*",
        help="Keywords to filter by (prefix with ! for negative-match)",
    )
    parser.add_argument(
        "--not",
        dest="not_keywords",
        action="append",
        default=[],
        metavar="KEYWORD",
        help="Keywords to inverse filter (i.e. ignore matching files)",
    )
    parser.add_argument("-l", "--list", action="store_true", help="List all tags for files matching keywords")
    parser.add_argument("--long", action="store_true", help="Long list (e.g. tall) all tags for files matching keywords")
    parser.add_argument("-o", "--or-filter", action="store_true", help="Filter using ANY, rather than ALL keywords")
    parser.add_argument("-u", "--untagged", action="store_true", help="Show untagged files")
    parser.add_argument("-c", "--count", action="store_true", help="Show count of tags")
    parser.add_argument("--similar-tags", action="store_true", help="Show similar tags")
    parser.add_argument("-t", "--tree", action="store_true", help="Show tags of matching files as a tree")
    parser.add_argument("-f", "--fuzzy", action="store_true", help="Fuzzy-match tags")
    parser.add_argument("-v", "--vim", action="store_true", help="Output format suitable for vim quickfix")
    parser.add_argument(
        "-r",
        "--root",
        dest="roots",
        action="append",
        metavar="DIR",
        help="Directory to search (repeatable, default: configured roots)",
    )
    parser.add_argument("--config", metavar="PATH", help="Configuration file")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in ExtractionStrategy],
        help="Tag extraction strategy",
    )
    parser.add_argument("--workers", type=int, metavar="N", help="Number of worker threads")
    parser.add_argument("--verbose", action="store_true", help="Log progress information")
    parser.add_argument("--debug", action="store_true", help="Log debugging information")
    return parser


def configure_logging(args: argparse.Namespace) -> None:
    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def option_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect the settings given on the command line, shaped like a settings file."""
    overrides: Dict[str, Any] = {}
    if args.roots:
        overrides['roots'] = args.roots
    if args.strategy:
        overrides.setdefault('extraction', {})['strategy'] = args.strategy
    if args.workers is not None:
        overrides.setdefault('limits', {})['max_workers'] = args.workers
    if args.long:
        overrides.setdefault('output', {})['long_list'] = True
    if args.vim:
        overrides.setdefault('output', {})['vim'] = True
    return overrides


def resolve_config(args: argparse.Namespace) -> TagsearchConfig:
    """
    Load configuration with command-line overrides applied.

    Raises:
        ConfigurationError: If the settings file or an override is invalid
    """
    result = load_config(args.config, overrides=option_overrides(args))
    for warning in result.warnings:
        logger.info(warning)
    return result.config


def run(argv: Optional[List[str]] = None, stdout: Optional[TextIO] = None) -> int:
    """
    Run the CLI.
    
    Args:
        argv: Command-line arguments (sys.argv[1:] if None)
        stdout: Stream to write results to (sys.stdout if None)
        
    Returns:
        Process exit code
    """
    args = create_parser().parse_args(argv)
    configure_logging(args)
    stream = stdout or sys.stdout
    
    try:
        config = resolve_config(args)
    except ConfigurationError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    try:
        files = FSWalker(config).find_files()
    except FileDiscoveryError as e:
        print(f"Error getting files: {e}", file=sys.stderr)
        return 1
    
    query = FilterQuery.from_keywords(
        args.keywords,
        not_keywords=args.not_keywords,
        or_filter=args.or_filter,
        fuzzy=args.fuzzy,
    )
    f = Filter.from_config(query, config)
    scan = f.scan(files)
    
    try:
        if args.untagged:
            commands.display_untagged(f, scan, stream, config.output.vim)
        elif args.similar_tags:
            commands.display_similar_tags(f, scan, stream)
        elif args.count:
            commands.display_tag_count(f, scan, stream)
        elif args.tree:
            commands.display_tree(f, scan, stream)
        elif args.list or args.long or not args.keywords:
            commands.display_tags(f, scan, stream, config.output.long_list)
        else:
            commands.display_files_matching_query(f, scan, stream, config.output.vim)
    except OutputTerminated:
        logger.debug("Output closed early, stopping")
        if stream is sys.stdout:
            # Stop the interpreter from flushing into the closed pipe at exit
            devnull = os.open(os.devnull, os.O_WRONLY)
            os.dup2(devnull, sys.stdout.fileno())
    
    return 0


def main() -> NoReturn:
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
