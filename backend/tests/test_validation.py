# Overview: Unit tests for payload allowlists and value coercion.

from decimal import Decimal

import pytest
from ventaspro.validation import (
    MAX_NAME_LENGTH,
    PayloadPolicy,
    ValidationError,
    cents_to_decimal,
    coerce_int,
    coerce_money_cents,
    coerce_name,
    coerce_optional_text,
    coerce_payment_method,
    validate_payload,
)


POLICY = PayloadPolicy(writable_fields={"name", "price", "stock"}, required_on_create={"name", "price"})


class TestValidatePayload:

    def test_create_requires_fields(self):
        with pytest.raises(ValidationError, match="Missing required fields: price"):
            validate_payload(payload={"name": "X"}, policy=POLICY, partial=False)

    def test_partial_skips_required(self):
        assert validate_payload(payload={"stock": 1}, policy=POLICY, partial=True) == {"stock": 1}

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError, match="Field not allowed: deleted"):
            validate_payload(payload={"name": "X", "price": 1, "deleted": True}, policy=POLICY, partial=False)

    @pytest.mark.parametrize("payload", [[1, 2], "text", 5])
    def test_non_object_rejected(self, payload):
        with pytest.raises(ValidationError):
            validate_payload(payload=payload, policy=POLICY, partial=True)

    def test_missing_body_treated_as_empty(self):
        assert validate_payload(payload=None, policy=POLICY, partial=True) == {}


class TestCoerceInt:

    @pytest.mark.parametrize("value, expected", [(3, 3), ("42", 42), (" 7 ", 7), (0, 0)])
    def test_accepts(self, value, expected):
        assert coerce_int(value, "qty") == expected

    @pytest.mark.parametrize("value", [True, 1.0, "1.5", "1e3", "", "abc", None, [1]])
    def test_rejects(self, value):
        with pytest.raises(ValidationError):
            coerce_int(value, "qty")

    def test_minimum(self):
        with pytest.raises(ValidationError, match="qty must be >= 1"):
            coerce_int(0, "qty", minimum=1)


class TestCoerceMoney:

    @pytest.mark.parametrize("value, cents", [
        (10, 1000),
        (0.1, 10),
        ("2.50", 250),
        (Decimal("3.335"), 334),
        ("0", 0),
        ("0.004", 0),
        ("0.005", 1),
    ])
    def test_accepts(self, value, cents):
        assert coerce_money_cents(value, "price") == cents

    @pytest.mark.parametrize("value", [
        None, True, "", "  ", "abc", -0.01, "-5", float("inf"), float("nan"), "NaN", {"v": 1}, "10000000",
    ])
    def test_rejects(self, value):
        with pytest.raises(ValidationError):
            coerce_money_cents(value, "price")


class TestText:

    def test_name_is_trimmed(self):
        assert coerce_name("  Cafe  ") == "Cafe"

    @pytest.mark.parametrize("value", [None, "", "   ", 12, "x" * (MAX_NAME_LENGTH + 1)])
    def test_bad_names(self, value):
        with pytest.raises(ValidationError):
            coerce_name(value)

    def test_optional_text(self):
        assert coerce_optional_text(None, "reason") is None
        assert coerce_optional_text("   ", "reason") is None
        assert coerce_optional_text(" roto ", "reason") == "roto"
        with pytest.raises(ValidationError):
            coerce_optional_text(3, "reason")

    def test_optional_text_max_length(self):
        assert coerce_optional_text("abc", "reason", max_length=3) == "abc"
        with pytest.raises(ValidationError, match="reason exceeds max length 3"):
            coerce_optional_text("abcd", "reason", max_length=3)


def test_payment_methods():
    assert coerce_payment_method("cash") == "cash"
    assert coerce_payment_method("transfer") == "transfer"
    with pytest.raises(ValidationError):
        coerce_payment_method("card")


def test_cents_to_decimal():
    assert cents_to_decimal(None) is None
    assert cents_to_decimal(1050) == 10.5
    assert cents_to_decimal(0) == 0.0
