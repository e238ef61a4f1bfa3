"""Unit tests for store results and cause extraction."""

import sqlite3

import pytest
from sqlalchemy.exc import OperationalError

from src.catalog.core.result import (
    Ok,
    StoreError,
    StoreFault,
    most_specific_cause,
)


class TestStoreResult:

    def test_ok_unwrap(self):
        assert Ok([1, 2]).unwrap() == [1, 2]

    def test_fault_unwrap_raises(self):
        fault = StoreFault(operation="list_all", cause="database is locked")

        with pytest.raises(StoreError, match="list_all failed: database is locked") as info:
            fault.unwrap()

        assert info.value.fault is fault


class TestMostSpecificCause:

    def test_plain_exception(self):
        assert most_specific_cause(ValueError("boom")) == "boom"

    def test_follows_dbapi_orig(self):
        exc = OperationalError("SELECT 1", {}, sqlite3.OperationalError("disk I/O error"))
        assert most_specific_cause(exc) == "disk I/O error"

    def test_follows_cause_chain(self):
        try:
            try:
                raise ConnectionError("connection refused")
            except ConnectionError as inner:
                raise RuntimeError("query failed") from inner
        except RuntimeError as outer:
            assert most_specific_cause(outer) == "connection refused"

    def test_empty_message_uses_type_name(self):
        assert most_specific_cause(TimeoutError()) == "TimeoutError"
