"""Assemble a package report from the raw output of `go test -v`.

Parsing runs in two passes. The first walks the output once, routing each
line to the test that owns it, to the package metadata, or to a
package-scope buffer, and stops early when the output shows that no test
could run. The second finalizes every registered test. When no test ran at
all, the package-scope buffer is scanned for a panic that aborted the run.
"""

import logging
from dataclasses import dataclass, field

from go_test_report import lines
from go_test_report.config import ParserConfig
from go_test_report.models.record import TestRecord
from go_test_report.models.report import Outcome, PackageReport, TestResult
from go_test_report.registry import TestRegistry
from go_test_report.test_parser import parse_test_output

log = logging.getLogger(__name__)

# Checked in this order, first match wins
TERMINAL_CONDITIONS = (
    (lines.no_go_files, Outcome.NO_GO_FILES),
    (lines.build_failed, Outcome.BUILD_FAILURE),
    (lines.no_test_files, Outcome.NO_TEST_FILES),
    (lines.no_test_functions, Outcome.NO_TEST_FUNCTIONS),
)


@dataclass(kw_only=True)
class _PackageState:
    """Package-level fields accumulated while parsing."""

    outcome: Outcome | None = None
    package_name: str = ""
    elapsed_seconds: float = 0.0
    coverage_percent: float = 0.0
    build_output: str = ""
    error: str = ""
    # Output printed outside any test, e.g. from init()
    package_lines: list[str] = field(default_factory=list)


def parse_package_output(
    raw_output: str, config: ParserConfig | None = None
) -> PackageReport:
    """Parse the combined output of one package's test run.

    Never raises for malformed output: every input yields a report.

    Args:
        raw_output: Captured stdout and stderr of `go test -v`
        config: Parser settings, defaults when omitted

    Returns:
        Report with package metadata and one result per test, in the
        order the tests started

    """
    config = config or ParserConfig()
    raw = raw_output.strip()
    state = _PackageState(package_name=config.default_package_name)
    registry = TestRegistry()

    _separate_tests_and_metadata(raw, state, registry, config)
    test_results = _parse_each_test(registry, state)
    _recover_from_init_panic(registry, state)

    log.debug(
        "Parsed package %r: outcome=%s tests=%d",
        state.package_name,
        state.outcome,
        len(test_results),
    )
    return PackageReport(
        outcome=state.outcome,
        package_name=state.package_name,
        elapsed_seconds=state.elapsed_seconds,
        coverage_percent=state.coverage_percent,
        build_output=state.build_output,
        error=state.error,
        test_results=test_results,
    )


def _separate_tests_and_metadata(
    raw: str,
    state: _PackageState,
    registry: TestRegistry,
    config: ParserConfig,
) -> None:
    """Run the classification pass, stopping at the first terminal line."""
    active: TestRecord | None = None

    for line in raw.split("\n"):
        if (outcome := _terminal_outcome(line)) is not None:
            log.debug("Terminal condition %r at line: %s", outcome.value, line)
            state.outcome = outcome
            state.build_output = raw
            return
        active = _process_test_output(line, active, state, registry, config)


def _terminal_outcome(line: str) -> Outcome | None:
    for predicate, outcome in TERMINAL_CONDITIONS:
        if predicate(line):
            return outcome
    return None


def _process_test_output(
    line: str,
    active: TestRecord | None,
    state: _PackageState,
    registry: TestRegistry,
    config: ParserConfig,
) -> TestRecord | None:
    """Route one line and return the test that owns the lines that follow."""
    if lines.is_test_start(line):
        return _register_test(lines.extract_test_name(line), registry)

    if lines.is_test_resume(line):
        if (resumed := registry.get(lines.extract_test_name(line))) is not None:
            return resumed

    elif lines.is_test_result(line):
        if (record := registry.get(lines.extract_test_name(line))) is not None:
            _record_test_metadata(line, record, config)
            return active
        log.warning("Result for a test that never started: %s", line)

    elif lines.is_package_report(line):
        _record_package_metadata(line, state, config)
        return active

    _save_line_for_parsing_later(line, active, state)
    return active


def _register_test(name: str, registry: TestRegistry) -> TestRecord:
    if (existing := registry.get(name)) is not None:
        # Repeated runs (-count=N) print the same name again
        log.debug("Test %s started again, reusing its record", name)
        return existing
    return registry.register(name)


def _record_test_metadata(
    line: str, record: TestRecord, config: ParserConfig
) -> None:
    status = lines.result_status(line)
    record.passed = status != "FAIL"
    record.skipped = status == "SKIP"
    record.elapsed_seconds = lines.parse_test_duration(
        line, config.test_duration_precision
    )


def _record_package_metadata(
    line: str, state: _PackageState, config: ParserConfig
) -> None:
    if lines.package_failed(line):
        _record_testing_outcome(line, Outcome.FAILED, state, config)
    elif lines.package_passed(line):
        _record_testing_outcome(line, Outcome.PASSED, state, config)
    elif lines.is_coverage_summary(line):
        _record_coverage_summary(line, state)


def _record_testing_outcome(
    line: str, outcome: Outcome, state: _PackageState, config: ParserConfig
) -> None:
    """Record a `ok  \\t<pkg>\\t<elapsed>` or `FAIL\\t<pkg>\\t<elapsed>` line."""
    state.outcome = outcome
    fields = line.split("\t")
    if len(fields) > 1:
        state.package_name = fields[1].strip()
    if len(fields) > 2:
        state.elapsed_seconds = lines.parse_duration_seconds(
            fields[2], config.package_duration_precision
        )
    # Newer toolchains append coverage to the same line
    for extra in fields[3:]:
        if lines.is_coverage_summary(extra.strip()):
            _record_coverage_summary(extra.strip(), state)


def _record_coverage_summary(line: str, state: _PackageState) -> None:
    value = lines.extract_coverage_text(line)
    if not lines.is_coverage_value(value):
        log.warning("Unparsable coverage summary: %s", line)
        state.coverage_percent = -1
        return
    state.coverage_percent = float(value)


def _save_line_for_parsing_later(
    line: str, active: TestRecord | None, state: _PackageState
) -> None:
    line = lines.strip_indent(line)
    if active is None:
        state.package_lines.append(line)
    else:
        active.raw_lines.append(line)


def _parse_each_test(
    registry: TestRegistry, state: _PackageState
) -> list[TestResult]:
    """Finalize every registered test, in registration order."""
    results: list[TestResult] = []
    for record in registry:
        result = parse_test_output(record)
        if result.error:
            log.warning("Test %s panicked", result.name)
            state.outcome = Outcome.PANICKED
        record.raw_lines.clear()
        results.append(result)
    return results


def _recover_from_init_panic(registry: TestRegistry, state: _PackageState) -> None:
    """Detect a panic that stopped the package before any test started."""
    if len(registry) > 0 or not state.package_lines:
        return

    for line in state.package_lines:
        if lines.is_panic(line):
            log.warning("Package panicked before any test ran")
            state.outcome = Outcome.PANICKED
            state.error = "\n".join(state.package_lines)
            break
