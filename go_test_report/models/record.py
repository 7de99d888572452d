"""Working record for a test while its package output is being parsed."""

from dataclasses import dataclass, field


@dataclass(kw_only=True)
class TestRecord:
    """Mutable per-test state collected during the classification pass.

    Only the package parser holds on to these; callers receive the
    finalized ``TestResult`` instead.
    """

    __test__ = False

    name: str
    passed: bool = True
    skipped: bool = False
    elapsed_seconds: float = 0.0
    raw_lines: list[str] = field(default_factory=list)
