"""Exceptions raised by go_test_report."""


class GoTestReportError(Exception):
    """Base class for go_test_report errors."""


class DuplicateTestError(GoTestReportError):
    """Raised when a test name is registered twice in one parse."""
