"""Classify single lines of `go test -v` output and pull fields out of them.

Every function here looks at one line in isolation. Deciding what a line
means in context (which test owns it, whether parsing stops) is the job of
the package parser.
"""

import re

PANIC_MARKER = "panic: "
COVERAGE_PREFIX = "coverage: "

_TEST_START = re.compile(r"^=== RUN:? (?P<name>.+)$")
_TEST_RESUME = re.compile(r"^=== (?:CONT|PAUSE|NAME):? (?P<name>.+)$")
_TEST_RESULT = re.compile(r"^\s*--- (?P<status>PASS|FAIL|SKIP): (?P<name>\S+)")
_TRAILING_PARENS = re.compile(r"\((?P<inner>[^()]*)\)\s*$")
_INDENT = re.compile(r"^(?:\t|    )")
_COVERAGE_VALUE = re.compile(r"^[0-9]+(?:\.[0-9]+)?$")

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_UNIT = "(?:ns|us|µs|μs|ms|s|m|h)"
_NUMBER = r"(?:\d+(?:\.\d*)?|\.\d+)"
_DURATION = re.compile(rf"^[-+]?(?:{_NUMBER}{_UNIT})+$")
_DURATION_PART = re.compile(rf"({_NUMBER})({_UNIT})")


def no_go_files(line: str) -> bool:
    """Check if the package directory holds no buildable Go source."""
    if line.startswith("no Go files in "):
        return True
    return line.startswith("can't load package: ") and (
        ": no buildable Go source files in " in line or ": no Go " in line
    )


def build_failed(line: str) -> bool:
    """Check if the line reports a compilation or setup failure."""
    return (
        line.startswith("# ")
        or "cannot find package" in line
        or (line.startswith("can't load package: ") and ": no Go " not in line)
        or (
            ": found packages " in line
            and ".go) and " in line
            and ".go) in " in line
        )
        or (
            line.startswith("FAIL\t")
            and line.endswith(("[build failed]", "[setup failed]"))
        )
    )


def no_test_files(line: str) -> bool:
    """Check if the package has no `_test.go` files."""
    return line.startswith("?") and "[no test files]" in line


def no_test_functions(line: str) -> bool:
    """Check if the package has test files but nothing matched to run."""
    return line == "testing: warning: no tests to run" or line.endswith(
        "[no tests to run]"
    )


def is_test_start(line: str) -> bool:
    return _TEST_START.match(line) is not None


def is_test_resume(line: str) -> bool:
    """Check for the markers parallel tests print when output switches owner."""
    return _TEST_RESUME.match(line) is not None


def is_test_result(line: str) -> bool:
    return _TEST_RESULT.match(line) is not None


def is_package_report(line: str) -> bool:
    return (
        line.startswith(("FAIL", "exit status", "PASS"))
        or is_coverage_summary(line)
        or package_passed(line)
    )


def package_failed(line: str) -> bool:
    return line.startswith("FAIL\t")


def package_passed(line: str) -> bool:
    return line.startswith("ok  \t")


def is_coverage_summary(line: str) -> bool:
    return line.startswith(COVERAGE_PREFIX) and "% of statements" in line


def is_panic(line: str) -> bool:
    return line.startswith(PANIC_MARKER)


def extract_test_name(line: str) -> str:
    """Extract the test name from a start, resume or result line.

    Raises:
        ValueError: If the line is none of those

    """
    for pattern in (_TEST_START, _TEST_RESUME, _TEST_RESULT):
        if match := pattern.match(line):
            return match.group("name").strip()
    raise ValueError(f"Not a test line: {line!r}")


def result_status(line: str) -> str:
    """Return PASS, FAIL or SKIP for a test result line."""
    if match := _TEST_RESULT.match(line):
        return match.group("status")
    raise ValueError(f"Not a test result line: {line!r}")


def parse_test_duration(line: str, precision: int) -> float:
    """Parse the duration a result line reports, e.g. `--- PASS: TestA (0.01s)`."""
    if match := _TRAILING_PARENS.search(line):
        return parse_duration_seconds(match.group("inner"), precision)
    return 0.0


def parse_duration_seconds(raw: str, precision: int) -> float:
    """Parse Go duration text into seconds rounded to ``precision`` places.

    Accepts Go's `time.Duration` format (``0.012s``, ``1m2.5s``, ``150ms``)
    and bare numbers, which are taken as seconds. Anything else, such as
    ``(cached)``, yields ``0.0``.
    """
    text = raw.strip()
    if not _DURATION.match(text):
        text += "s"
        if not _DURATION.match(text):
            return 0.0

    seconds = sum(
        float(value) * _DURATION_UNITS[unit]
        for value, unit in _DURATION_PART.findall(text)
    )
    if text.startswith("-"):
        seconds = -seconds
    return round(seconds, precision)


def extract_coverage_text(line: str) -> str:
    """Return the text between the coverage prefix and the percent sign."""
    start = line.find(COVERAGE_PREFIX)
    start = 0 if start < 0 else start + len(COVERAGE_PREFIX)
    end = line.find("%", start)
    return line[start:] if end < 0 else line[start:end]


def strip_indent(line: str) -> str:
    """Remove one level of indentation (a tab or four spaces)."""
    return _INDENT.sub("", line, count=1)


def is_coverage_value(text: str) -> bool:
    """Check if coverage text is a plain decimal such as ``81.5``."""
    return _COVERAGE_VALUE.match(text) is not None
