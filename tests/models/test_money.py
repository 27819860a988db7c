from decimal import Decimal

import pytest

from models.money import CENTS, EPSILON, Money


def test_float_input_does_not_carry_binary_artifacts():
    """0.1 + 0.2 is exactly 0.3 once amounts are Money."""
    assert Money(0.1) + Money(0.2) == Money("0.3")
    assert Money(0.1).amount == Decimal("0.1")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("19.99", Decimal("19.99")),
        (" 5.00 ", Decimal("5.00")),
        (7, Decimal("7")),
        (Decimal("1.005"), Decimal("1.005")),
    ],
)
def test_construction_from_supported_types(raw, expected):
    assert Money(raw).amount == expected


def test_invalid_inputs_rejected():
    with pytest.raises(ValueError):
        Money("twelve")
    with pytest.raises(ValueError):
        Money("NaN")
    with pytest.raises(TypeError):
        Money(True)
    with pytest.raises(TypeError):
        Money([1])


def test_line_total_multiplies_by_integer_quantity():
    assert Money("10.00") * 2 == Money("20.00")
    assert 3 * Money("0.10") == Money("0.30")
    with pytest.raises(TypeError):
        Money("1.00") * 1.5


def test_builtin_sum_starts_from_zero():
    amounts = [Money("0.10")] * 10
    assert sum(amounts) == Money("1.00")
    assert sum([], Money.zero()).is_zero()


def test_subtraction_negation_and_abs():
    diff = Money("20.00") - Money("70.00")
    assert diff == Money("-50.00")
    assert abs(diff) == Money("50.00")
    assert -Money("1") == Money("-1")


def test_division_by_count_and_ratio():
    assert Money("100.00") / 3 == Money(Decimal("100.00") / 3)
    assert Money("20.00") / Money("80.00") == Decimal("0.25")
    with pytest.raises(ZeroDivisionError):
        Money("1.00") / 0
    with pytest.raises(ZeroDivisionError):
        Money("1.00") / Money.zero()


def test_ordering_is_exact():
    assert Money("9.99") < Money("10.00")
    assert Money("10.00") >= Money("10")
    assert max(Money("1"), Money("3"), Money("2")) == Money("3")


def test_is_close_uses_one_cent_tolerance():
    assert EPSILON == CENTS
    assert Money("70.00").is_close(Money("70.004"))
    assert Money("70.00").is_close(Money("69.991"))
    assert not Money("70.00").is_close(Money("70.01"))
    assert not Money("20.00").is_close(Money("70.00"))
    assert Money("1.00").is_close(Money("1.04"), epsilon=Decimal("0.05"))


def test_quantized_rounds_half_up():
    assert Money("2.675").quantized().amount == Decimal("2.68")
    assert Money("2.665").quantized().amount == Decimal("2.67")
    assert Money("33.3333").to_float() == 33.33
    assert str(Money("5")) == "5.00"


def test_money_is_hashable_and_immutable():
    assert len({Money("1.0"), Money("1.00")}) == 1
    with pytest.raises(AttributeError):
        Money("1").amount = Decimal("2")
