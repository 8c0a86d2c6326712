"""Unit tests for structured query construction."""

from __future__ import annotations

import pytest

from docwire import EncodeError, build_structured_query, encode_filter_value
from docwire.codec.query import filter_operator


class TestFilterOperator:
    """Test operator mapping."""

    def test_equal(self) -> None:
        assert filter_operator("==") == "EQUAL"

    def test_not_equal(self) -> None:
        assert filter_operator("!=") == "NOT_EQUAL"

    @pytest.mark.parametrize("op", [">", "<=", "in", "", "EQUAL"])
    def test_fallback_to_equal(self, op: str) -> None:
        """Test unrecognized operators fall back to EQUAL."""
        assert filter_operator(op) == "EQUAL"


class TestEncodeFilterValue:
    """Test scalar-only filter value encoding."""

    def test_scalars(self) -> None:
        """Test each supported scalar type."""
        assert encode_filter_value("teacher").to_wire() == {"stringValue": "teacher"}
        assert encode_filter_value(5).to_wire() == {"integerValue": "5"}
        assert encode_filter_value(5.0).to_wire() == {"integerValue": "5"}
        assert encode_filter_value(0.5).to_wire() == {"doubleValue": 0.5}
        assert encode_filter_value(True).to_wire() == {"booleanValue": True}

    @pytest.mark.parametrize("value", [None, [1], {"a": 1}, (1, 2)])
    def test_non_scalars_rejected(self, value: object) -> None:
        """Test that null, arrays and maps are not filter values."""
        with pytest.raises(EncodeError, match="Filter values must be"):
            encode_filter_value(value)


class TestBuildStructuredQuery:
    """Test the runQuery request body."""

    def test_equality_query(self) -> None:
        """Test the exact wire shape of an equality query."""
        assert build_structured_query("users", "role", "==", "teacher") == {
            "structuredQuery": {
                "from": [{"collectionId": "users"}],
                "where": {
                    "fieldFilter": {
                        "field": {"fieldPath": "role"},
                        "op": "EQUAL",
                        "value": {"stringValue": "teacher"},
                    }
                },
            }
        }

    def test_inequality_query(self) -> None:
        """Test a NOT_EQUAL query on a boolean."""
        query = build_structured_query("quizzes", "published", "!=", False)
        field_filter = query["structuredQuery"]["where"]["fieldFilter"]
        assert field_filter["op"] == "NOT_EQUAL"
        assert field_filter["value"] == {"booleanValue": False}

    def test_rejects_non_scalar(self) -> None:
        """Test that building a query with a list value fails."""
        with pytest.raises(EncodeError):
            build_structured_query("quizzes", "tags", "==", ["math"])
