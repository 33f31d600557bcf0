"""Main CLI entry point for the markup-tree command-line tool.

Wires the codec to files and standard streams:

- ``to-tree``: markup -> JSON tree
- ``to-markup``: JSON tree -> markup
- ``roundtrip``: markup -> tree -> markup
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from markup_tree import __version__
from markup_tree.api import MarkupTreeCodec
from markup_tree.shared.config import CodecConfig, ConfigError
from markup_tree.shared.logging import get_logger
from markup_tree.shared.result import DiagnosticSeverity
from markup_tree.tree import TreeShapeError

STDIN_MARKER = "-"
QUIET_SEVERITIES = (DiagnosticSeverity.DEBUG, DiagnosticSeverity.INFO)

logger = get_logger(__name__, None, "cli")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="markup-tree",
        description="Convert markup to a JSON tree and back"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON codec configuration file"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    to_tree_parser = subparsers.add_parser("to-tree", help="Convert markup to a JSON tree")
    to_tree_parser.add_argument("input", help="Markup file, or - for stdin")
    to_tree_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    to_tree_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)"
    )

    to_markup_parser = subparsers.add_parser(
        "to-markup", help="Convert a JSON tree to markup"
    )
    to_markup_parser.add_argument("input", help="JSON file, or - for stdin")
    to_markup_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    to_markup_parser.add_argument(
        "--compact",
        action="store_true",
        help="Do not put every tag on its own line"
    )
    to_markup_parser.add_argument(
        "--no-declaration",
        action="store_true",
        help="Omit the XML declaration line"
    )
    to_markup_parser.add_argument(
        "--lenient",
        action="store_true",
        help="Skip malformed tree entries instead of failing"
    )

    roundtrip_parser = subparsers.add_parser(
        "roundtrip", help="Parse markup and serialize it again"
    )
    roundtrip_parser.add_argument("input", help="Markup file, or - for stdin")
    roundtrip_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    return parser


def load_config(config_path: Optional[Path]) -> CodecConfig:
    """Load the codec configuration file, or the defaults when none is given."""
    if config_path is None:
        return CodecConfig()
    return CodecConfig.from_json(config_path.read_text(encoding="utf-8"))


def read_input(source: str) -> str:
    """Read the whole input file, or stdin for ``-``."""
    if source == STDIN_MARKER:
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def write_output(text: str, output: Optional[Path]) -> None:
    if output is None:
        print(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    print(f"Output written to {output}", file=sys.stderr)


def cmd_to_tree(args: argparse.Namespace, config: CodecConfig) -> int:
    """Handle to-tree command."""
    codec = MarkupTreeCodec(config)
    result = codec.parse_document(read_input(args.input))

    for diagnostic in result.diagnostics:
        log = logger.info if diagnostic.severity in QUIET_SEVERITIES else logger.warning
        log(diagnostic.message, extra={"input": args.input})

    write_output(
        json.dumps(result.tree, indent=args.indent, ensure_ascii=False),
        args.output
    )
    return 0


def cmd_to_markup(args: argparse.Namespace, config: CodecConfig) -> int:
    """Handle to-markup command."""
    overrides = {}
    if args.compact:
        overrides["serializer__pretty_print"] = False
    if args.no_declaration:
        overrides["serializer__include_declaration"] = False
    if args.lenient:
        overrides["serializer__strict"] = False
    if overrides:
        config = config.override(**overrides)

    tree = json.loads(read_input(args.input))
    markup = MarkupTreeCodec(config).serialize(tree)
    if not markup:
        print("Error: tree has no root element", file=sys.stderr)
        return 1

    write_output(markup, args.output)
    return 0


def cmd_roundtrip(args: argparse.Namespace, config: CodecConfig) -> int:
    """Handle roundtrip command."""
    codec = MarkupTreeCodec(config)
    write_output(codec.round_trip(read_input(args.input)), args.output)
    return 0


COMMANDS = {
    "to-tree": cmd_to_tree,
    "to-markup": cmd_to_markup,
    "roundtrip": cmd_roundtrip,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        config = load_config(args.config)
        return COMMANDS[args.command](args, config)

    except (OSError, UnicodeDecodeError, ConfigError, TreeShapeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except json.JSONDecodeError as e:
        print(f"Error: input is not valid JSON: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
