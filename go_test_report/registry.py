"""Ordered, name-keyed collection of the tests seen in one package's output."""

from collections.abc import Iterator
from dataclasses import dataclass, field

from go_test_report.errors import DuplicateTestError
from go_test_report.models.record import TestRecord


@dataclass(kw_only=True)
class TestRegistry:
    """Tests in the order their start marker was first seen.

    Later lines refer to tests by name, so records are looked up here rather
    than recreated. Names are unique within a registry.
    """

    __test__ = False

    _records: dict[str, TestRecord] = field(default_factory=dict)

    def register(self, name: str) -> TestRecord:
        """Create and store a record for a newly started test.

        Raises:
            DuplicateTestError: If a test with this name is already registered

        """
        if name in self._records:
            raise DuplicateTestError(f"Test '{name}' is already registered")
        record = TestRecord(name=name)
        self._records[name] = record
        return record

    def get(self, name: str) -> TestRecord | None:
        return self._records.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __iter__(self) -> Iterator[TestRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)
