"""Command-line entry point for the Java code reviewer."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List

from .config import load_config, load_project_config
from .engine import ReviewEngine
from .errors import ReviewError
from .logs import configure_logging
from .report import REPORT_FORMATS, create_report, render, write_report
from .result import Category, ScanResult, format_summary_table
from . import tools


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="java-code-review",
        description="Heuristic code review for Java / Spring Boot projects",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (defaults to $CODE_REVIEW_LOG_LEVEL or INFO).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    scan = commands.add_parser("scan", help="Review a Maven or Gradle project.")
    scan.add_argument("project_path", help="Root directory of the project to review.")
    scan.add_argument(
        "--include",
        dest="include_patterns",
        action="append",
        default=[],
        help="Glob pattern of files to review (repeatable).",
    )
    scan.add_argument(
        "--exclude",
        dest="exclude_patterns",
        action="append",
        default=[],
        help="Glob pattern of files to skip (repeatable).",
    )
    scan.add_argument(
        "--category",
        "-c",
        dest="categories",
        action="append",
        choices=[category.value for category in Category],
        default=[],
        help="Review category to run (repeatable, defaults to all).",
    )
    scan.add_argument(
        "--format",
        choices=REPORT_FORMATS,
        default="json",
        help="Report format (defaults to json).",
    )
    scan.add_argument(
        "--out",
        "--output",
        dest="output_path",
        type=str,
        default=None,
        help="Path to write the report (e.g., artifacts/review.json).",
    )
    scan.add_argument(
        "--config",
        default=None,
        help="Review configuration file (defaults to <project>/.code-review.yml).",
    )

    report = commands.add_parser("report", help="Merge saved scan results into one report.")
    report.add_argument("results", nargs="+", help="JSON scan results written by 'scan --format json'.")
    report.add_argument("--format", choices=REPORT_FORMATS, default="markdown")
    report.add_argument("--out", "--output", dest="output_path", required=True)
    report.add_argument("--project-name", default=None)

    commands.add_parser("serve", help="Run the MCP server over stdio.")
    return parser


def write_output(result: ScanResult, project_path: Path, output_path: str | None, report_format: str) -> None:
    print(format_summary_table(result))

    if report_format == "json":
        payload = json.dumps(result.to_dict(), indent=2)
    else:
        payload = render(create_report([result], project_name=project_path.resolve().name), report_format)

    if output_path:
        write_report(payload, output_path)
        print(f"\nReport written to {output_path}")
    else:
        print(f"\n{report_format.upper()} Report")
        print(payload)


def run_scan(args: argparse.Namespace) -> int:
    project_path = Path(args.project_path)
    try:
        config = load_config(Path(args.config)) if args.config else load_project_config(project_path)
    except ReviewError as exc:
        raise SystemExit(str(exc)) from exc
    configure_logging(args.log_level or config.log_level)

    engine = ReviewEngine(config=config)
    result = engine.scan_project(
        project_path,
        include_patterns=args.include_patterns or None,
        exclude_patterns=args.exclude_patterns or None,
        categories=args.categories or None,
    )
    if not result.success:
        raise SystemExit(result.message)
    try:
        write_output(result, project_path, args.output_path, args.format)
    except ReviewError as exc:
        raise SystemExit(str(exc)) from exc
    return result.exit_code()


def run_report(args: argparse.Namespace) -> int:
    configure_logging(args.log_level)
    results = []
    for name in args.results:
        try:
            results.append(json.loads(Path(name).read_text(encoding="utf-8")))
        except (OSError, ValueError) as exc:
            raise SystemExit(f"Failed to load scan result {name}: {exc}") from exc

    outcome = tools.generate_report(results, args.format, args.output_path, project_name=args.project_name)
    if not outcome["success"]:
        raise SystemExit(outcome["error"])
    print(f"{outcome['message']} (quality score {outcome['qualityScore']})")
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "scan":
        return run_scan(args)
    if args.command == "report":
        return run_report(args)

    from .server import main as serve

    serve(args.log_level)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
