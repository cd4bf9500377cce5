"""Main CLI entry point for the xml-compare command-line tool.

Provides subcommands for streaming comparison, canonical comparison and
basic file inspection.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from xml_compare import __version__
from xml_compare.api import XMLComparator
from xml_compare.shared.config import ComparatorConfig, ConfigError
from xml_compare.shared.errors import XMLCompareError
from xml_compare.shared.logging import configure_logging, get_logger
from xml_compare.shared.result import ComparisonResult, FileInfo

EXIT_MATCH = 0
EXIT_DIFFERENT = 1
EXIT_FAILURE = 2

# Differences shown on the console before eliding the rest
MAX_CONSOLE_DIFFERENCES = 20


def load_config(config_path: Optional[Path]) -> ComparatorConfig:
    """Load comparator configuration from a JSON file, or use defaults.

    Raises:
        ConfigError: If the file cannot be read or holds invalid settings
    """
    if config_path is None:
        return ComparatorConfig()
    try:
        return ComparatorConfig.from_json(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}") from e


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-compare",
        description="Compare XML documents in document order or ignoring sibling order"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
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

    # Stream command
    stream_parser = subparsers.add_parser(
        "stream", help="Order-sensitive comparison with bounded memory"
    )
    stream_parser.add_argument("file_a", type=Path, help="First XML file")
    stream_parser.add_argument("file_b", type=Path, help="Second XML file")
    stream_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Write a numbered difference report here when differences exist"
    )
    stream_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Console output format (default: text)"
    )

    # Canonical command
    canonical_parser = subparsers.add_parser(
        "canonical", help="Structural comparison ignoring sibling order"
    )
    canonical_parser.add_argument("file_a", type=Path, help="First XML file")
    canonical_parser.add_argument("file_b", type=Path, help="Second XML file")
    canonical_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Console output format (default: text)"
    )

    # Info command
    info_parser = subparsers.add_parser("info", help="Show basic facts about XML files")
    info_parser.add_argument("paths", nargs="+", type=Path, help="XML files to inspect")
    info_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Console output format (default: text)"
    )

    return parser


def format_streaming_result(
    result: ComparisonResult,
    format_type: str,
    output_path: Optional[Path] = None,
) -> str:
    """Format a streaming comparison result for the console."""
    if format_type == "json":
        data = result.to_dict()
        data["report_path"] = str(output_path) if output_path and result.differences else None
        return json.dumps(data, indent=2)

    lines = [
        f"Files match: {'YES' if result.files_match else 'NO'}",
        f"Elements compared: {result.element_count}",
        f"Differences found: {result.difference_count}",
        f"Duration: {result.elapsed_ms}ms",
    ]
    if result.differences:
        lines.append("")
        for index, record in enumerate(result.differences[:MAX_CONSOLE_DIFFERENCES], start=1):
            lines.append(f"{index}. {record.message}")
        remaining = result.difference_count - MAX_CONSOLE_DIFFERENCES
        if remaining > 0:
            lines.append(f"... and {remaining} more differences")
    if output_path and result.differences:
        lines.append("")
        lines.append(f"Report written to {output_path}")
    return "\n".join(lines)


def format_file_infos(infos: List[FileInfo], format_type: str) -> str:
    """Format file analysis results for the console."""
    if format_type == "json":
        return json.dumps([info.to_dict() for info in infos], indent=2)

    lines = []
    for info in infos:
        status = "✓" if info.valid_xml else "✗"
        lines.append(f"{status} {info.path}")
        if info.valid_xml:
            lines.append(
                f"   Root: {info.root_element}, Elements: {info.element_count}, "
                f"Depth: {info.max_depth}, Size: {info.size_bytes} bytes"
            )
            lines.append(f"   Version: {info.version}, Encoding: {info.encoding}")
        else:
            lines.append(f"   Error: {info.error_message}")
    return "\n".join(lines)


def cmd_stream(args: argparse.Namespace, comparator: XMLComparator) -> int:
    """Handle stream command."""
    result = comparator.compare_streaming(args.file_a, args.file_b, args.output)
    print(format_streaming_result(result, args.format, args.output))
    return EXIT_MATCH if result.files_match else EXIT_DIFFERENT


def cmd_canonical(args: argparse.Namespace, comparator: XMLComparator) -> int:
    """Handle canonical command."""
    files_match = comparator.compare_canonical(args.file_a, args.file_b)
    if args.format == "json":
        data: Dict[str, Any] = {
            "file_a": str(args.file_a),
            "file_b": str(args.file_b),
            "files_match": files_match,
        }
        print(json.dumps(data, indent=2))
    else:
        print(f"Files match: {'YES' if files_match else 'NO'}")
    return EXIT_MATCH if files_match else EXIT_DIFFERENT


def cmd_info(args: argparse.Namespace, comparator: XMLComparator) -> int:
    """Handle info command."""
    infos = [comparator.analyze(path) for path in args.paths]
    print(format_file_infos(infos, args.format))
    return EXIT_MATCH if all(info.valid_xml for info in infos) else EXIT_DIFFERENT


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_FAILURE

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.global_.logging_level)

    logger = get_logger(__name__, None, "cli")
    comparator = XMLComparator(config)
    handlers = {
        "stream": cmd_stream,
        "canonical": cmd_canonical,
        "info": cmd_info,
    }

    try:
        return handlers[args.command](args, comparator)
    except XMLCompareError as e:
        logger.debug("Command failed", extra={"command": args.command}, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
