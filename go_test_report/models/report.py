"""Models for the structured result of a `go test` run of one package."""

from collections.abc import Sequence
from enum import StrEnum

from pydantic import Field

from go_test_report.models.base import Model


class Outcome(StrEnum):
    """Package-level outcome of a test run."""

    NO_GO_FILES = "no go code"
    BUILD_FAILURE = "build failure"
    NO_TEST_FILES = "no test files"
    NO_TEST_FUNCTIONS = "no test functions"
    PASSED = "passed"
    FAILED = "failed"
    PANICKED = "panicked"


class TestResult(Model):
    """Finalized result of a single test function."""

    __test__ = False

    name: str = Field(..., description="Test name as printed by `=== RUN`")
    passed: bool = Field(default=True, description="False only for `--- FAIL`")
    skipped: bool = Field(default=False, description="True for `--- SKIP`")
    elapsed_seconds: float = Field(default=0.0, description="Reported duration")
    file: str = Field(default="", description="File of the failure or panic")
    line: int = Field(default=0, description="Line of the failure or panic")
    output: str = Field(default="", description="Output logged before a failure")
    message: str = Field(default="", description="Failure text reported by the test")
    error: str = Field(default="", description="Panic text, empty unless panicked")


class PackageReport(Model):
    """Everything learned from the output of one package's test run."""

    outcome: Outcome | None = Field(
        default=None, description="Package outcome (None when nothing decided it)"
    )
    package_name: str = Field(default="", description="Import path of the package")
    elapsed_seconds: float = Field(default=0.0, description="Package run duration")
    coverage_percent: float = Field(
        default=0.0, description="Statement coverage (-1 when unparsable)"
    )
    build_output: str = Field(
        default="", description="Raw output, set only when no test could run"
    )
    error: str = Field(
        default="", description="Package-scope panic output when no test ran"
    )
    test_results: Sequence[TestResult] = Field(
        default_factory=list, description="Test results in first-seen order"
    )

    @property
    def passed_count(self) -> int:
        return sum(1 for r in self.test_results if r.passed and not r.skipped)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.test_results if not r.passed)

    @property
    def skipped_count(self) -> int:
        return sum(1 for r in self.test_results if r.skipped)

    @property
    def panicked_count(self) -> int:
        return sum(1 for r in self.test_results if r.error)
