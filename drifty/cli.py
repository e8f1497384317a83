"""CLI entrypoints for drifty commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from .config import CONFIG_FILENAME, REPORT_FORMATS, ConfigError, load_config
from .errors import DriftError
from .logging import configure_logging
from .models import DocumentWarning, Status
from .orchestrator import CheckSummary, Orchestrator
from .report import EMPTY_MESSAGE, render
from .selection import prompt_selection

HELP_TEXT = """drifty - Watch for documentation drift

Usage:

  drifty init <doc-file>
      Initializes the doc file with an empty driftwatcher table.

  drifty add <doc-file> <file-to-watch>
      Adds a file to watch to the doc file's frontmatter and computes its
      initial hash.

  drifty check [<filename>] [--all]
      Checks all documentation in the current directory (recursively) and
      checks if there are any updates. Provides an interactive update system.
      Optionally specify a specific file or directory to check.

  drifty report [<path>] [--format json|yaml|plaintext]
      Reports status of all tracked files. Useful for CI.

  drifty validate [<path>]
      Verifies that all driftwatcher YAML front matter is valid, including
      file paths.

  drifty help
      Show this help message."""


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_target_argument(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument("target", nargs="?", default=None, help=help_text)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drifty",
        description="Watch for documentation drift.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=CONFIG_FILENAME,
        help=f"Path to the configuration file (defaults to ./{CONFIG_FILENAME}).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command")

    init_parser = subparsers.add_parser(
        "init",
        help="Initialize a markdown file with empty driftwatcher frontmatter.",
    )
    _add_verbose_option(init_parser, suppress_default=True)
    init_parser.add_argument("doc_file", help="The documentation file to initialize.")

    add_parser = subparsers.add_parser(
        "add",
        help="Add a file or pattern to watch in a documentation file.",
    )
    _add_verbose_option(add_parser, suppress_default=True)
    add_parser.add_argument("doc_file", help="The documentation file to update.")
    add_parser.add_argument(
        "watch_pattern",
        help="The file, directory, or glob pattern to watch ($ROOT/ anchors it at the project root).",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Check all documentation for drift (interactive).",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_target_argument(
        check_parser, "Specific file or directory to check (defaults to current directory)."
    )
    check_parser.add_argument(
        "--all",
        dest="accept_all",
        action="store_true",
        help="Accept every drifted entry without prompting.",
    )

    report_parser = subparsers.add_parser(
        "report",
        help="Report status of all tracked files.",
    )
    _add_verbose_option(report_parser, suppress_default=True)
    _add_target_argument(
        report_parser, "Specific file or directory to report on (defaults to current directory)."
    )
    report_parser.add_argument(
        "-f",
        "--format",
        choices=REPORT_FORMATS,
        default=None,
        help="Output format (defaults to report.format from the config, else plaintext).",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate all driftwatcher frontmatter.",
    )
    _add_verbose_option(validate_parser, suppress_default=True)
    _add_target_argument(
        validate_parser, "Specific file or directory to validate (defaults to current directory)."
    )

    subparsers.add_parser("help", help="Show this help message.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for drifty commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command in (None, "help"):
        print(HELP_TEXT)
        return

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    orchestrator = Orchestrator(config)

    try:
        if args.command == "init":
            _run_init(orchestrator, args)
        elif args.command == "add":
            _run_add(orchestrator, args)
        elif args.command == "check":
            _run_check(orchestrator, args)
        elif args.command == "report":
            _run_report(orchestrator, args, parser, default_format=config.report.format)
        elif args.command == "validate":
            _run_validate(orchestrator, args, parser)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (DriftError, FileNotFoundError) as exc:
        parser.exit(1, f"Error: {exc}\n")


def _run_init(orchestrator: Orchestrator, args: argparse.Namespace) -> None:
    outcome = orchestrator.run_init(args.doc_file)
    if outcome.action == "unchanged":
        print(f"driftwatcher already initialized in {outcome.path}")
    elif outcome.action == "promoted":
        print(f"Added driftwatcher to existing frontmatter in {outcome.path}")
    else:
        print(f"Initialized driftwatcher in {outcome.path}")


def _run_add(orchestrator: Orchestrator, args: argparse.Namespace) -> None:
    outcome = orchestrator.run_add(args.doc_file, args.watch_pattern)
    print(
        f"Added '{outcome.pattern}' to {outcome.path} "
        f"({outcome.match_count} file(s), hash: {outcome.digest[:12]}...)"
    )


def _run_check(orchestrator: Orchestrator, args: argparse.Namespace) -> None:
    summary = orchestrator.run_check(args.target)
    _print_problems(summary)

    drifted = summary.drifted
    current = summary.with_status(Status.CURRENT)
    missing = summary.with_status(Status.MISSING)
    print(f"\nFound {len(current)} current, {len(drifted)} drifted, {len(missing)} missing")

    warnings: List[DocumentWarning] = list(summary.warnings)
    if not drifted:
        if current:
            print("All documentation is up-to-date!")
    else:
        if args.accept_all:
            selected = list(range(len(drifted)))
        elif not _is_interactive():
            print("Not running interactively; rerun with --all to accept every drifted entry.")
            selected = []
        else:
            labels = [f"{result.doc_path}: {result.pattern}" for result in drifted]
            print()
            selected = prompt_selection(labels)

        if not selected:
            print("No entries selected.")
        else:
            outcome = orchestrator.apply_updates(drifted[index] for index in selected)
            warnings.extend(outcome.warnings)
            print(f"Updated {outcome.updated} entries.")

    _print_warnings(warnings)


def _run_report(
    orchestrator: Orchestrator,
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
    *,
    default_format: str,
) -> None:
    summary = orchestrator.run_report(args.target)
    output = render(summary.reports, args.format or default_format)
    print(output.rstrip("\n"))
    for warning in summary.warnings:
        print(f"Warning: {warning.doc_path}: {warning.message}", file=sys.stderr)
    if summary.has_problems:
        parser.exit(1)


def _run_validate(
    orchestrator: Orchestrator, args: argparse.Namespace, parser: argparse.ArgumentParser
) -> None:
    summary = orchestrator.run_validate(args.target)
    for issue in summary.issues:
        print(f"{issue.doc_path}: {issue.message}", file=sys.stderr)

    if summary.checked == 0 and summary.valid:
        print(EMPTY_MESSAGE)
        return
    if not summary.valid:
        parser.exit(1)
    print(f"All driftwatcher entries are valid ({summary.checked} file(s) checked).")


def _is_interactive() -> bool:
    return sys.stdin.isatty()


def _print_problems(summary: CheckSummary) -> None:
    for result in summary.with_status(Status.MISSING):
        print(f"MISSING: {result.doc_path} -> {result.pattern}", file=sys.stderr)
    for result in summary.with_status(Status.INVALID):
        print(f"INVALID: {result.doc_path} -> {result.pattern} (no hash)", file=sys.stderr)


def _print_warnings(warnings: List[DocumentWarning]) -> None:
    if not warnings:
        return
    print("\nWarning: The following files had errors:", file=sys.stderr)
    for warning in warnings:
        print(f"  {warning.doc_path}: {warning.message}", file=sys.stderr)


if __name__ == "__main__":
    main(sys.argv[1:])
