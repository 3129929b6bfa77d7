"""Exceptions raised at the store boundary.

The aggregation and reporting functions never raise for well-formed
records; everything here describes failures to obtain those records.
"""

from __future__ import annotations


class FinanceTrackerError(Exception):
    """Base class for all finance tracker errors."""


class StoreError(FinanceTrackerError):
    """The transaction/category/budget store could not return data."""


class SeedFileError(StoreError):
    """A JSON seed file is missing or is not valid JSON."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load seed file {path}: {reason}")


class RecordError(StoreError):
    """A store row could not be converted into a record."""

    def __init__(self, kind: str, payload: dict, reason: str):
        self.kind = kind
        self.payload = payload
        self.reason = reason
        super().__init__(f"Invalid {kind} record {payload.get('id', '?')!r}: {reason}")
