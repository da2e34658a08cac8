"""Main CLI entry point for the ultra-robust-csv command-line tool.

Provides dialect conversion, structural statistics, and canonical-form checks
for CSV files.
"""

import argparse
import json
import logging
import re
import sys
import time
from contextlib import nullcontext
from pathlib import Path
from typing import Any, BinaryIO, ContextManager, Dict, List, Optional, TextIO

from ultra_robust_csv import __version__
from ultra_robust_csv.character import select_encoding
from ultra_robust_csv.serialization import CSVWriter
from ultra_robust_csv.shared import (
    ConfigError,
    CSVConfig,
    StreamingConfig,
    get_logger,
)
from ultra_robust_csv.tokenization import CSVTokenizer

# Path argument naming standard input/output
STDIO_PATH = "-"

_ESCAPES = {"\\t": "\t", "\\n": "\n", "\\r": "\r", "\\\\": "\\"}
_ESCAPE_PATTERN = re.compile(r"\\[tnr\\]")


def unescape(value: str) -> str:
    """Expand ``\\t``, ``\\n``, ``\\r`` and ``\\\\`` typed on a shell."""
    return _ESCAPE_PATTERN.sub(lambda match: _ESCAPES[match.group(0)], value)


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.input_options = CSVConfig.rfc4180()
        self.output_options = CSVConfig.rfc4180()
        self.encoding: Optional[str] = None
        self.output_format = "text"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file holds an object with optional ``input`` and ``output`` option
        objects, an ``encoding`` name and an output ``format``.

        Raises:
            ConfigError: If the file cannot be read or is not a JSON object
        """
        config = cls()
        try:
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not load config file {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a JSON object")

        if "input" in data:
            config.input_options = CSVConfig.from_dict(data["input"])
        if "output" in data:
            config.output_options = CSVConfig.from_dict(data["output"])
        config.encoding = data.get("encoding", config.encoding)
        config.output_format = data.get("format", config.output_format)
        return config


class CSVProcessor:
    """Core CSV processing logic for CLI operations."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.logger = get_logger(__name__, None, "cli_processor")

    def _tokenizer(self) -> CSVTokenizer:
        return CSVTokenizer(
            self.config.input_options,
            streaming=StreamingConfig(encoding=self.config.encoding),
        )

    def convert(
        self,
        input_path: str,
        output_path: Optional[str] = None,
        stdout: Optional[TextIO] = None,
    ) -> Dict[str, Any]:
        """Re-serialize a CSV file with the output options.

        Rows are streamed: one row is held in memory at a time. Without an
        output path the CSV goes to ``stdout`` (default: ``sys.stdout``).
        """
        start_time = time.time()
        tokenizer = self._tokenizer()
        writer = CSVWriter(self.config.output_options)
        try:
            with _open_input(input_path) as source:
                tokenizer.parse(source)
                if output_path is None or output_path == STDIO_PATH:
                    written = writer.sink(stdout or sys.stdout).write_rows(tokenizer)
                else:
                    with open(output_path, "w", encoding="utf-8", newline="") as target:
                        written = writer.sink(target).write_rows(tokenizer)
        except (OSError, UnicodeDecodeError, LookupError) as e:
            return self._failure(input_path, e)

        return {
            "file": input_path,
            "success": True,
            "output": output_path or STDIO_PATH,
            "rows": writer.statistics.rows,
            "characters_written": written,
            "processing_time_ms": (time.time() - start_time) * 1000,
        }

    def stats(self, path: str) -> Dict[str, Any]:
        """Collect row, column and terminator statistics for one file."""
        start_time = time.time()
        tokenizer = self._tokenizer()
        try:
            with _open_input(path) as source:
                for _ in tokenizer.parse(source):
                    pass
        except (OSError, UnicodeDecodeError, LookupError) as e:
            return self._failure(path, e)

        result = {"file": path, "success": True}
        result.update(tokenizer.statistics.to_dict())
        result["processing_time_ms"] = (time.time() - start_time) * 1000
        return result

    def check(self, path: str) -> Dict[str, Any]:
        """Report whether re-serializing a file's rows reproduces it exactly.

        The same options are used for reading and writing, so a file is
        canonical when its quoting is minimal (or total, with ``quote_all``)
        and every row, the last included, ends with the configured newline.
        """
        try:
            with _open_input(path) as source:
                raw = source.read()
            selected = select_encoding(raw, self.config.encoding)
            text = raw[selected.bom_length:].decode(selected.encoding)
        except (OSError, UnicodeDecodeError, LookupError) as e:
            return self._failure(path, e)

        rows = self._tokenizer().parse(text).rows()
        rewritten = CSVWriter(self.config.input_options).write(rows)
        canonical = rewritten == text

        result: Dict[str, Any] = {
            "file": path,
            "success": True,
            "canonical": canonical,
            "rows": len(rows),
        }
        if not canonical:
            result["first_difference"] = _first_difference(text, rewritten)
        return result

    def _failure(self, path: str, error: Exception) -> Dict[str, Any]:
        self.logger.error(
            "Failed to process file",
            extra={"file": path, "error": str(error)},
            exc_info=False,
        )
        return {"file": path, "success": False, "error": str(error)}


def _open_input(path: str) -> ContextManager[BinaryIO]:
    if path == STDIO_PATH:
        # Leave stdin open when the with-block exits
        return nullcontext(sys.stdin.buffer)
    return open(path, "rb")


def _first_difference(left: str, right: str) -> int:
    for index, (a, b) in enumerate(zip(left, right)):
        if a != b:
            return index
    return min(len(left), len(right))


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="ultra-robust-csv",
        description="RFC 4180 CSV conversion, statistics and canonical-form checks"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Convert command
    convert_parser = subparsers.add_parser(
        "convert", help="Rewrite a CSV file with different options"
    )
    convert_parser.add_argument(
        "input",
        help="CSV file to read ('-' for standard input)"
    )
    convert_parser.add_argument(
        "--output", "-o",
        help="Output file (default: stdout)"
    )
    convert_parser.add_argument("--in-separator", help="Input column separator")
    convert_parser.add_argument("--in-quote", help="Input quote character")
    convert_parser.add_argument("--out-separator", help="Output column separator")
    convert_parser.add_argument("--out-quote", help="Output quote character")
    convert_parser.add_argument(
        "--out-newline",
        help="Output row terminator, e.g. '\\n' (default: '\\r\\n')"
    )
    convert_parser.add_argument(
        "--quote-all",
        action="store_true",
        help="Quote every output column"
    )
    _add_common_arguments(convert_parser)

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Show CSV structure statistics")
    stats_parser.add_argument(
        "paths",
        nargs="+",
        help="CSV files to analyze"
    )
    stats_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default=None,
        help="Output format (default: text)"
    )
    stats_parser.add_argument("--in-separator", help="Input column separator")
    stats_parser.add_argument("--in-quote", help="Input quote character")
    _add_common_arguments(stats_parser)

    # Check command
    check_parser = subparsers.add_parser(
        "check", help="Check whether CSV files are in canonical form"
    )
    check_parser.add_argument(
        "paths",
        nargs="+",
        help="CSV files to check"
    )
    check_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default=None,
        help="Output format (default: text)"
    )
    check_parser.add_argument("--in-separator", help="Column separator")
    check_parser.add_argument("--in-quote", help="Quote character")
    _add_common_arguments(check_parser)

    # Global options
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

    return parser


def _add_common_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    subparser.add_argument(
        "--encoding", "-e",
        help="Input encoding (default: byte order mark, then utf-8)"
    )


def load_config(args: argparse.Namespace) -> CLIConfig:
    """Build the CLI configuration from ``--config`` and command-line flags.

    Flags given on the command line override values from the config file.
    """
    config = CLIConfig.from_file(args.config) if args.config else CLIConfig()

    input_overrides = _collect(args, in_separator="separator", in_quote="quote")
    if input_overrides:
        config.input_options = config.input_options.override(**input_overrides)

    output_overrides = _collect(
        args,
        out_separator="separator",
        out_quote="quote",
        out_newline="newline",
    )
    if getattr(args, "quote_all", False):
        output_overrides["quote_all"] = True
    if output_overrides:
        config.output_options = config.output_options.override(**output_overrides)

    if args.encoding:
        config.encoding = args.encoding
    if getattr(args, "format", None):
        config.output_format = args.format
    return config


def _collect(args: argparse.Namespace, **names: str) -> Dict[str, Any]:
    collected = {}
    for attribute, option in names.items():
        value = getattr(args, attribute, None)
        if value is not None:
            collected[option] = unescape(value)
    return collected


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format processing results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if not results:
        return "No results to display."

    lines = []
    for result in results:
        status = "✓" if result.get("success", False) and result.get("canonical", True) else "✗"
        lines.append(f"{status} {result['file']}")

        if not result.get("success", False):
            lines.append(f"   Error: {result.get('error', '')}")
        elif "canonical" in result:
            if result["canonical"]:
                lines.append(f"   Canonical ({result['rows']} rows)")
            else:
                lines.append(
                    f"   Not canonical: first difference at character "
                    f"{result['first_difference']}"
                )
        else:
            lines.append(
                f"   Rows: {result['rows']} ({result['empty_rows']} empty), "
                f"Columns: {result['min_columns'] or 0}-{result['max_columns']}, "
                f"Average: {result['average_columns']:.1f}"
            )
            terminators = ", ".join(
                f"{name}={count}" for name, count in result["terminators"].items()
            )
            lines.append(f"   Terminators: {terminators}")
            if result["unterminated_final_row"]:
                lines.append("   Final row has no terminator")

    return "\n".join(lines)


def cmd_convert(args: argparse.Namespace, output: TextIO) -> int:
    """Handle convert command."""
    config = load_config(args)
    processor = CSVProcessor(config)
    result = processor.convert(args.input, args.output, output)

    if not result["success"]:
        print(f"Failed to convert {args.input}: {result['error']}", file=sys.stderr)
        return 1
    if args.output:
        print(
            f"Wrote {result['rows']} rows to {args.output}",
            file=sys.stderr,
        )
    return 0


def cmd_stats(args: argparse.Namespace, output: TextIO) -> int:
    """Handle stats command."""
    config = load_config(args)
    processor = CSVProcessor(config)
    results = [processor.stats(path) for path in args.paths]

    print(format_results(results, config.output_format), file=output)

    successful = sum(1 for r in results if r.get("success", False))
    return 0 if successful == len(results) else 1


def cmd_check(args: argparse.Namespace, output: TextIO) -> int:
    """Handle check command."""
    config = load_config(args)
    processor = CSVProcessor(config)
    results = [processor.check(path) for path in args.paths]

    print(format_results(results, config.output_format), file=output)

    passed = sum(
        1 for r in results if r.get("success", False) and r.get("canonical", False)
    )
    return 0 if passed == len(results) else 1


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

    # Route to appropriate command handler
    try:
        if args.command == "convert":
            return cmd_convert(args, sys.stdout)
        elif args.command == "stats":
            return cmd_stats(args, sys.stdout)
        elif args.command == "check":
            return cmd_check(args, sys.stdout)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
