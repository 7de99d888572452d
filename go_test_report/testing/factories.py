"""Test factories for generating report data."""

from polyfactory import Use
from polyfactory.factories import DataclassFactory
from polyfactory.factories.pydantic_factory import ModelFactory

from go_test_report.models.record import TestRecord
from go_test_report.models.report import PackageReport, TestResult


class TestRecordFactory(DataclassFactory[TestRecord]):
    """Factory for TestRecord."""

    __model__ = TestRecord

    raw_lines = Use(list[str])


class TestResultFactory(ModelFactory[TestResult]):
    """Factory for a passing TestResult."""

    passed = True
    skipped = False
    file = ""
    line = 0
    message = ""
    error = ""


class PackageReportFactory(ModelFactory[PackageReport]):
    """Factory for PackageReport."""

    build_output = ""
    error = ""
    test_results = Use(list[TestResult])
