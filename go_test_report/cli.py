"""CLI entry point for turning `go test -v` output into a JSON report."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from go_test_report.config import ParserConfig
from go_test_report.models.report import Outcome, PackageReport
from go_test_report.package_parser import parse_package_output

STATUS_SYMBOLS = {
    "passed": "✅",
    "failed": "❌",
    "skipped": "⏭️",
    "panicked": "❗",
}

SUCCESSFUL_OUTCOMES = frozenset(
    {
        Outcome.PASSED,
        Outcome.NO_GO_FILES,
        Outcome.NO_TEST_FILES,
        Outcome.NO_TEST_FUNCTIONS,
    }
)


def log_report_summary(log: logging.Logger, report: PackageReport) -> None:
    """Log a formatted summary of a package report."""
    log.info("=" * 80)
    log.info(
        "Package %s: %s (%.3fs)",
        report.package_name or "<unknown>",
        report.outcome.value if report.outcome else "unknown",
        report.elapsed_seconds,
    )
    log.info("=" * 80)

    for result in report.test_results:
        status = display_status(result.passed, result.skipped, result.error)
        log.info(
            "%s %s: %s (%.2fs)",
            STATUS_SYMBOLS[status],
            result.name,
            status,
            result.elapsed_seconds,
        )
        if result.file:
            log.info("  At: %s:%d", result.file, result.line)

    if report.coverage_percent < 0:
        log.warning("Coverage summary could not be parsed")
    elif report.coverage_percent:
        log.info("Coverage: %.1f%%", report.coverage_percent)
    if report.error:
        log.error("Package panicked before any test ran")


def display_status(passed: bool, skipped: bool, error: str) -> str:
    """Collapse a result's flags into one display status."""
    if error:
        return "panicked"
    if skipped:
        return "skipped"
    return "passed" if passed else "failed"


def format_output(report: PackageReport) -> dict[str, Any]:
    """Format a package report for JSON output."""
    return {
        "total": len(report.test_results),
        "passed": report.passed_count,
        "failed": report.failed_count,
        "skipped": report.skipped_count,
        "panicked": report.panicked_count,
        "report": report.model_dump(mode="json"),
    }


def read_output(input_path: Path | None) -> str:
    """Read captured test output from a file, or stdin for None and '-'."""
    if input_path is None or str(input_path) == "-":
        return sys.stdin.buffer.read().decode("utf-8", errors="replace")
    return input_path.read_text(encoding="utf-8", errors="replace")


def load_config(config_json: str, package_name: str = "") -> ParserConfig:
    """Build parser configuration from a JSON object string.

    Raises:
        json.JSONDecodeError: If the string is not valid JSON
        ValidationError: If the JSON does not describe a valid configuration

    """
    config_dict = json.loads(config_json) if config_json.strip() else {}
    config = ParserConfig.model_validate(config_dict)
    if package_name:
        config = config.model_copy(update={"default_package_name": package_name})
    return config


def run(
    input_path: Path | None,
    config_json: str = "",
    package_name: str = "",
) -> int:
    """Parse captured output, print the report and return the exit code."""
    log = logging.getLogger("go_test_report")

    try:
        config = load_config(config_json, package_name)
    except (json.JSONDecodeError, ValidationError) as e:
        log.error("Invalid parser configuration: %s", e)
        return 2

    try:
        raw_output = read_output(input_path)
    except OSError as e:
        log.error("Cannot read test output: %s", e)
        return 2

    log.info("Parsing %d line(s) of test output", raw_output.count("\n") + 1)
    report = parse_package_output(raw_output, config)

    log_report_summary(log, report)
    print(json.dumps(format_output(report), indent=2))

    return 0 if report.outcome in SUCCESSFUL_OUTCOMES else 1


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Convert `go test -v` output for one package into JSON"
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="File with the captured output (default: read stdin)",
    )
    parser.add_argument(
        "--package",
        default="",
        help="Package name to report when the output does not name one",
    )
    parser.add_argument(
        "--config",
        default="",
        help="JSON configuration for the parser",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log classification details",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    sys.exit(
        run(
            input_path=args.input,
            config_json=args.config,
            package_name=args.package,
        )
    )


if __name__ == "__main__":  # pragma: no cover
    main()
