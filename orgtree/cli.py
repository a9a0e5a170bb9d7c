"""
CLI (Command Line Interface).

Convert a timetable CSV export into an organisational unit tree:

    orgtree --input events.csv --output tree.json

Steps (strictly in this order):
1. read every CSV record
2. build the tree
3. print the tree to the console
4. write the tree as JSON

Diagnostics go to stderr through logging, the tree listing goes to stdout.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from orgtree.builder import build_tree, count_nodes
from orgtree.render import print_tree, write_tree
from orgtree.source import read_records

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """
    Route log records to stderr through rich.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser.
    """
    parser = argparse.ArgumentParser(
        prog="orgtree",
        description="Convert a timetable CSV export into an organisational unit tree.",
        epilog="example: orgtree --input events.csv --output tree.json",
    )
    parser.add_argument("--input", "-i", type=Path, required=True, help="The path where the CSV file can be read")
    parser.add_argument(
        "--output", "-o", type=Path, required=True, help="The path where the JSON file should be written to"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--quiet", "-q", action="store_true", help="Do not print the tree to the console")
    return parser


def run(input_path: Path, output_path: Path, quiet: bool = False) -> int:
    """
    Run the whole conversion. Returns the process exit code.
    """
    try:
        records = read_records(input_path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Could not read %s: %s", input_path, exc)
        return 1

    tree = build_tree(records)
    logger.info("Built tree with %d nodes", count_nodes(tree))

    if not quiet:
        print_tree(tree)

    if not write_tree(tree, output_path):
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, runs the conversion
    and exits via SystemExit with a return code.
    """
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)
    raise SystemExit(run(args.input, args.output, quiet=args.quiet))
