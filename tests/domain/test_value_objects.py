"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from carconf.domain.exceptions import ValidationError
from carconf.domain.model.value_objects import Money, Violation


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "EUR"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_from_int(self):
        assert Money.of(10).amount == Decimal("10")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(1.5)

    def test_addition(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "EUR") + Money(Decimal("5"), "USD")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "€15.00"
        assert str(Money.of("9.5")) == "€9.50"


# ── Violation ────────────────────────────────────────────────────────────────


class TestViolation:

    def test_ok_is_reachable_with_empty_reason(self):
        ok = Violation.ok()
        assert ok.reachable is True
        assert ok.reason == ""

    def test_because_is_unreachable(self):
        v = Violation.because("nope")
        assert v.reachable is False
        assert str(v) == "nope"

    def test_equal_by_value(self):
        assert Violation.because("x") == Violation.because("x")
