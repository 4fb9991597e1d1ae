"""Command-line interface for Complexity Analyzer."""

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .complexity_analysis import BatchResult, ComplexityAnalyzer, create_default_registry
from .complexity_analysis.discovery import find_source_files
from .config import AnalyzerConfig

# Configure logging - default to WARNING to reduce verbosity
logging.basicConfig(
    level=logging.WARNING, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_config(args: argparse.Namespace) -> AnalyzerConfig:
    """Combine the config file (or environment) with command-line overrides."""
    if args.config:
        with open(args.config, encoding="utf-8") as f:
            config = AnalyzerConfig.from_dict(json.load(f))
    else:
        config = AnalyzerConfig.from_env()

    overrides = {}
    if args.include_tests:
        overrides["include_tests"] = True
    if args.include_node_modules:
        overrides["include_node_modules"] = True
    if args.max_file_size is not None:
        overrides["max_file_size"] = args.max_file_size
    if args.timeout_ms is not None:
        overrides["timeout_ms"] = args.timeout_ms
    if args.max_concurrency is not None:
        overrides["max_concurrency"] = args.max_concurrency
    if args.ignore:
        overrides["ignore_patterns"] = list(config.ignore_patterns) + args.ignore
    if args.no_gitignore:
        overrides["use_gitignore"] = False

    cyclomatic = config.cyclomatic
    if args.no_case:
        cyclomatic = dataclasses.replace(cyclomatic, count_case_statements=False)
    if args.no_logical:
        cyclomatic = dataclasses.replace(cyclomatic, count_logical_operators=False)
    if args.no_ternary:
        cyclomatic = dataclasses.replace(cyclomatic, count_ternary=False)
    overrides["cyclomatic"] = cyclomatic

    return dataclasses.replace(config, **overrides)


def format_summary(batch: BatchResult) -> str:
    """Render a short plain-text summary of a batch."""
    report = batch.report
    lines = [
        f"Files: {report.analyzed_files} analyzed, {report.error_files} failed "
        f"({report.total_files} total)",
    ]
    if report.languages:
        languages = ", ".join(f"{name}={count}" for name, count in sorted(report.languages.items()))
        lines.append(f"Languages: {languages}")
    lines.append(f"Lines: {report.total_lines}")
    lines.append(
        f"Cyclomatic: avg {report.cyclomatic.avg}, max {report.cyclomatic.max}, "
        f"total {report.cyclomatic.total}"
    )
    lines.append(
        f"Cognitive: avg {report.cognitive.avg}, max {report.cognitive.max}, "
        f"total {report.cognitive.total}"
    )
    lines.append(f"Functions: {report.total_functions}, Classes: {report.total_classes}")

    if report.most_complex_function:
        ref = report.most_complex_function
        lines.append(
            f"Most complex function: {ref.name} ({ref.file_path}:{ref.line_start}) "
            f"cyclomatic {ref.cyclomatic}"
        )
    if report.most_complex_class:
        ref = report.most_complex_class
        lines.append(
            f"Most complex class: {ref.name} ({ref.file_path}:{ref.line_start}) "
            f"cyclomatic {ref.cyclomatic}"
        )

    failures = [result for result in batch.results if not result.success]
    if failures:
        lines.append("Errors:")
        for result in failures:
            lines.append(f"  {result.path}: {result.error.kind.value}: {result.error.message}")

    return "\n".join(lines)


async def run_analysis(paths: List[str], config: AnalyzerConfig) -> BatchResult:
    """Analyze files and directories given on the command line."""
    registry = create_default_registry()
    analyzer = ComplexityAnalyzer(config, registry)

    files: List[str] = []
    for path in paths:
        if Path(path).is_dir():
            files.extend(await asyncio.to_thread(find_source_files, path, config, registry))
        else:
            files.append(path)

    return await analyzer.analyze_files(files)


def cli(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for Complexity Analyzer.

    Returns:
        Exit code: 0 when at least one file was analyzed or nothing was
        found, 1 when every file failed
    """
    parser = argparse.ArgumentParser(
        prog="complexity-analyzer",
        description="Estimate cyclomatic, cognitive and nesting complexity of source files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyze a project directory
  complexity-analyzer src/

  # Analyze single files and print JSON
  complexity-analyzer --json Main.java app.ts

  # Use a config file with camelCase option names
  complexity-analyzer --config complexity.json src/
        """,
    )
    parser.add_argument("paths", nargs="+", help="Files or directories to analyze")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("--config", default=None, help="JSON config file (includeTests, maxFileSize, ...)")
    parser.add_argument("--include-tests", action="store_true", help="Include test files and directories")
    parser.add_argument("--include-node-modules", action="store_true", help="Descend into node_modules")
    parser.add_argument("--max-file-size", type=int, default=None, help="Skip files larger than this many bytes")
    parser.add_argument("--timeout-ms", type=int, default=None, help="Per-file timeout in milliseconds")
    parser.add_argument("--max-concurrency", type=int, default=None, help="Files analyzed at once")
    parser.add_argument(
        "--ignore", action="append", default=[], metavar="PATTERN",
        help="Gitignore-style pattern to skip (repeatable)",
    )
    parser.add_argument("--no-gitignore", action="store_true", help="Do not read the root .gitignore")
    parser.add_argument("--no-case", action="store_true", help="Do not count case labels")
    parser.add_argument("--no-logical", action="store_true", help="Do not count && and ||")
    parser.add_argument("--no-ternary", action="store_true", help="Do not count ternary operators")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.WARNING)

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        parser.error(f"Invalid configuration: {e}")

    try:
        batch = asyncio.run(run_analysis(args.paths, config))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    if args.json:
        print(json.dumps(batch.to_dict(), indent=2))
    else:
        print(format_summary(batch))

    report = batch.report
    return 1 if report.total_files and not report.analyzed_files else 0


def main() -> None:
    sys.exit(cli())


if __name__ == "__main__":
    main()
