"""
Canonical JSON Unit Tests
Tests for reserves/schemas/canonical.py

These tests ensure client entries serialize identically across runs.
"""
import math
from decimal import Decimal
from enum import Enum

import pytest
from pydantic import BaseModel

from reserves.schemas import (
    SerializationError,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    encode_canonical,
    ensure_acyclic,
)


class Side(str, Enum):
    """Sample enum for testing."""
    LEFT = "left"
    RIGHT = "right"


class Holding(BaseModel):
    """Sample model for testing."""
    token: str
    amount: float


class TestDumpsCanonical:
    """Tests for dumps_canonical()."""

    def test_client_entry_encoding(self):
        entry = {"Client 1": [("Token 1", 5), ("Token 2", 0.5)]}

        assert dumps_canonical(entry) == '{"Client 1":[["Token 1",5],["Token 2",0.5]]}'

    def test_keys_sorted(self):
        assert dumps_canonical({"b": 2, "a": 1}) == '{"a":1,"b":2}'

    def test_insertion_order_irrelevant(self):
        first = {"z": [1, 2], "a": {"y": 1, "b": 2}}
        second = {"a": {"b": 2, "y": 1}, "z": [1, 2]}

        assert dumps_canonical(first) == dumps_canonical(second)

    def test_tuples_and_lists_equivalent(self):
        assert dumps_canonical({"c": [("T", 1)]}) == dumps_canonical({"c": [["T", 1]]})

    def test_list_order_preserved(self):
        assert dumps_canonical([3, 1, 2]) == "[3,1,2]"

    def test_unicode_not_escaped(self):
        assert dumps_canonical({"Clïent": []}) == '{"Clïent":[]}'

    def test_decimal_exact_string(self):
        value = Decimal("0.000000000000000001")

        assert dumps_canonical([value]) == '["0.000000000000000001"]'

    def test_decimal_never_scientific(self):
        assert dumps_canonical([Decimal("1E-18")]) == '["0.000000000000000001"]'
        assert dumps_canonical([Decimal("1E+3")]) == '["1000"]'

    @pytest.mark.parametrize(
        "first, second",
        [
            (Decimal("1E-18"), Decimal("0.000000000000000001")),
            (Decimal("1.50"), Decimal("1.5")),
            (Decimal("0.000"), Decimal("-0")),
        ],
    )
    def test_equal_decimals_encode_identically(self, first, second):
        assert dumps_canonical({"c": [("T", first)]}) == dumps_canonical({"c": [("T", second)]})


    def test_large_int_exact(self):
        value = 10 ** 40 + 1

        assert dumps_canonical([value]) == f"[{value}]"

    def test_encode_canonical_is_utf8(self):
        assert encode_canonical({"é": 1}) == '{"é":1}'.encode("utf-8")

    def test_enum_and_model(self):
        assert dumps_canonical([Side.LEFT]) == '["left"]'
        assert dumps_canonical(Holding(token="T", amount=1.5)) == '{"amount":1.5,"token":"T"}'


class TestSerializationFailures:
    """Values with no canonical form raise SerializationError."""

    def test_self_referencing_dict(self):
        circular: dict = {}
        circular["self"] = circular

        with pytest.raises(SerializationError, match="Circular"):
            dumps_canonical(circular)

    def test_self_referencing_list(self):
        records: list = []
        records.append(records)

        with pytest.raises(SerializationError):
            dumps_canonical({"Client 1": records})

    def test_serialization_error_is_type_error(self):
        circular: list = []
        circular.append(circular)

        with pytest.raises(TypeError):
            dumps_canonical(circular)

    def test_shared_reference_is_not_a_cycle(self):
        shared = ["Token 1", 5]

        assert dumps_canonical([shared, shared]) == '[["Token 1",5],["Token 1",5]]'

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_float(self, value):
        with pytest.raises(SerializationError, match="Non-finite"):
            dumps_canonical({"Client 1": [("Token 1", value)]})

    def test_non_finite_decimal(self):
        with pytest.raises(SerializationError):
            dumps_canonical([Decimal("NaN")])

    def test_unsupported_type(self):
        with pytest.raises(SerializationError, match="set"):
            canonicalize_value({"a": {1, 2}})

    def test_non_string_key(self):
        with pytest.raises(SerializationError):
            dumps_canonical({1: "x"})

    def test_error_carries_code(self):
        circular: dict = {}
        circular["self"] = circular

        with pytest.raises(SerializationError) as exc_info:
            dumps_canonical(circular)

        assert exc_info.value.code == "SERIALIZATION_ERROR"
        assert exc_info.value.to_error_model().code == "SERIALIZATION_ERROR"


class TestCanonicalEquals:
    """Tests for canonical_equals()."""

    def test_equal(self):
        assert canonical_equals({"a": 1, "b": 2}, {"b": 2, "a": 1})

    def test_not_equal(self):
        assert not canonical_equals({"a": 1}, {"a": 2})

    def test_unserializable_is_not_equal(self):
        circular: dict = {}
        circular["self"] = circular

        assert not canonical_equals(circular, {})


class TestEnsureAcyclic:
    """Tests for ensure_acyclic()."""

    def test_plain_entry_passes(self):
        ensure_acyclic({"Client 1": [("Token 1", 5)]})

    def test_shared_reference_passes(self):
        shared = ["Token 1", 5]

        ensure_acyclic([shared, shared])

    def test_nested_cycle(self):
        inner: list = []
        outer = {"Client 1": [inner]}
        inner.append(outer)

        with pytest.raises(SerializationError, match="Circular"):
            ensure_acyclic(outer)
